#
# config/__init__.py
#
"""
Configuration handling sub-package for caserunner.

Exports the loading functions and configuration models.
"""

from .loader import load_config, load_optional_config
from .models import CaserunnerConfig, GlobalConfig, RunnerConfig

__all__ = [
    "CaserunnerConfig",
    "GlobalConfig",
    "RunnerConfig",
    "load_config",
    "load_optional_config",
]

# 🔼⚙️
