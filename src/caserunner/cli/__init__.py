#
# src/caserunner/cli/__init__.py
#
"""
Command line interface for caserunner.
"""
