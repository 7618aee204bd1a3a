#
# src/caserunner/listeners.py
#
"""
Test case listeners.

A listener is any object that implements some of the handler names in
:data:`EVENTS`; the test case calls each implemented handler with the case
itself as the first argument. Handlers a listener does not provide (or
leaves as ``None``) are skipped.
"""

from collections.abc import Callable
from typing import Any

import structlog
from attrs import define, field

from caserunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("listeners")

EVENTS = (
    "on_before_run_test",
    "on_before_set_up",
    "on_after_set_up",
    "on_before_tear_down",
    "on_after_tear_down",
    "on_test_fail",
    "on_test_pass",
    "on_after_run_test",
)

Handler = Callable[..., Any] | None


@define(slots=True)
class CallbackListener:
    """A listener built from optional callbacks, one slot per event."""

    on_before_run_test: Handler = field(default=None)
    on_before_set_up: Handler = field(default=None)
    on_after_set_up: Handler = field(default=None)
    on_before_tear_down: Handler = field(default=None)
    on_after_tear_down: Handler = field(default=None)
    on_test_fail: Handler = field(default=None)
    on_test_pass: Handler = field(default=None)
    on_after_run_test: Handler = field(default=None)


class LoggingListener:
    """Reports test case lifecycle events through structlog."""

    def __init__(self, logger: StructLogger | None = None):
        self._log = logger or log

    def on_before_run_test(self, case, method: str) -> None:
        self._log.debug("Running test method", case=type(case).__name__, method=method, emoji_key="run")

    def on_before_set_up(self, case, method: str, params) -> None:
        self._log.debug("Setting up", case=type(case).__name__, method=method)

    def on_after_tear_down(self, case, method: str, params) -> None:
        self._log.debug("Torn down", case=type(case).__name__, method=method)

    def on_test_pass(self, case, method: str, params) -> None:
        self._log.info("Test passed", case=type(case).__name__, method=method, params=params, emoji_key="pass")

    def on_test_fail(self, case, method: str, params, error: BaseException) -> None:
        self._log.error(
            "Test failed",
            case=type(case).__name__,
            method=method,
            params=params,
            error=str(error),
            error_type=type(error).__name__,
            emoji_key="fail",
        )

    def on_after_run_test(self, case, method: str) -> None:
        self._log.debug("Finished test method", case=type(case).__name__, method=method)


# 🔼⚙️
