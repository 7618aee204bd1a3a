#
# src/caserunner/telemetry/__init__.py
#
"""
Logging setup for caserunner.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️
