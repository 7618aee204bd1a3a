#
# src/caserunner/__init__.py
#
"""
caserunner: runs the test methods of a single test case.

Test methods are discovered by name, expanded over their data providers,
wrapped in set_up/tear_down and reported to listeners.
"""
from .annotations import data_provider, throws
from .case import TestCase
from .environment import RunContext
from .exceptions import AssertionFailure, CaserunnerError, DataProviderError, TestCaseError
from .listeners import CallbackListener, LoggingListener

__all__ = [
    "AssertionFailure",
    "CallbackListener",
    "CaserunnerError",
    "DataProviderError",
    "LoggingListener",
    "RunContext",
    "TestCase",
    "TestCaseError",
    "data_provider",
    "throws",
]

# 🔼⚙️
