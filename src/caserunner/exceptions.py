# src/caserunner/exceptions.py

"""
Custom exceptions for caserunner.
"""


class CaserunnerError(Exception):
    """Base class for all caserunner errors."""

    pass


class ConfigurationError(CaserunnerError):
    """Raised when the configuration file is missing, unreadable or invalid."""

    pass


class TestCaseError(CaserunnerError):
    """
    A declaration error: the test case is misconfigured in a way that is
    detectable before any hook runs (non-public method, malformed @throws,
    missing @dataProvider, unknown method name, ...).
    """

    __test__ = False


class DataProviderError(TestCaseError):
    """Raised for invalid data provider declarations or unreadable data files."""

    def __init__(self, message: str, path: str | None = None, details: Exception | None = None):
        self.path = path
        self.details = details
        super().__init__(message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class AssertionFailure(AssertionError):
    """
    An assertion or expectation mismatch.

    ``orig_message`` keeps the first message; ``message`` may be rewritten
    later (the executor appends the failing method and its arguments).
    """

    def __init__(self, message: str, expected=None, actual=None):
        self.orig_message = message
        self.message = message
        self.expected = expected
        self.actual = actual
        super().__init__(message)

    def set_message(self, message: str) -> None:
        self.message = message
        self.args = (message,)

    def __str__(self) -> str:
        return self.message


# 🔼⚙️
