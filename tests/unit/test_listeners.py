#
# tests/unit/test_listeners.py
#
"""
Tests for listener broadcasting and the bundled listeners.
"""

import logging
from unittest.mock import MagicMock

import pytest
import structlog
from structlog.testing import LogCapture

from caserunner import CallbackListener, LoggingListener, TestCase
from caserunner.listeners import EVENTS


class SimpleCase(TestCase):
    def testOk(self):
        pass

    def testBroken(self):
        raise ValueError("broken")


class PartialListener:
    """Implements a single handler."""

    def __init__(self):
        self.passed = []

    def on_test_pass(self, case, method, params):
        self.passed.append(method)


class TestBroadcast:
    """Test TestCase.on_event."""

    def test_listeners_without_handler_are_skipped(self) -> None:
        case = SimpleCase()
        partial = PartialListener()
        case.add_listener(object())
        case.add_listener(partial)

        case.run("testOk", argv=["prog"])

        assert partial.passed == ["testOk"]

    def test_case_is_passed_first(self) -> None:
        received = []
        case = SimpleCase()
        case.add_listener(CallbackListener(on_before_run_test=lambda *args: received.append(args)))

        case.run_test("testOk")

        assert received == [(case, "testOk")]

    def test_callback_slots(self) -> None:
        seen = []
        listener = CallbackListener(
            on_test_pass=lambda case, method, params: seen.append(("pass", method)),
            on_test_fail=lambda case, method, params, error: seen.append(("fail", method, str(error))),
        )
        case = SimpleCase()
        case.add_listener(listener)

        case.run_test("testOk")
        with pytest.raises(ValueError):
            case.run_test("testBroken")

        assert seen == [("pass", "testOk"), ("fail", "testBroken", "broken")]

    def test_callback_listener_defaults_to_empty_slots(self) -> None:
        listener = CallbackListener()
        assert all(getattr(listener, name) is None for name in EVENTS)

    def test_handler_errors_propagate(self) -> None:
        def explode(*args):
            raise RuntimeError("listener bug")

        case = SimpleCase()
        case.add_listener(CallbackListener(on_before_run_test=explode))

        with pytest.raises(RuntimeError, match="listener bug"):
            case.run_test("testOk")

    def test_same_listener_added_twice_is_called_twice(self) -> None:
        case = SimpleCase()
        listener = PartialListener()
        case.add_listener(listener)
        case.add_listener(listener)

        case.run_test("testOk")

        assert listener.passed == ["testOk", "testOk"]


class TestLoggingListener:
    """Test structured logging of lifecycle events."""

    @pytest.fixture
    def captured(self) -> tuple[LogCapture, structlog.typing.FilteringBoundLogger]:
        capture = LogCapture()
        logger = structlog.wrap_logger(
            structlog.ReturnLogger(),
            processors=[capture],
            wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        )
        return capture, logger

    def test_logs_pass_and_fail(self, captured) -> None:
        capture, logger = captured
        case = SimpleCase()
        case.add_listener(LoggingListener(logger))

        case.run_test("testOk")
        with pytest.raises(ValueError):
            case.run_test("testBroken")

        passed = [entry for entry in capture.entries if entry["event"] == "Test passed"]
        failed = [entry for entry in capture.entries if entry["event"] == "Test failed"]

        assert passed == [
            {
                "event": "Test passed",
                "case": "SimpleCase",
                "method": "testOk",
                "params": (),
                "emoji_key": "pass",
                "log_level": "info",
            }
        ]
        assert failed[0]["log_level"] == "error"
        assert failed[0]["error"] == "broken"
        assert failed[0]["error_type"] == "ValueError"

    def test_lifecycle_events_are_debug(self, captured) -> None:
        capture, logger = captured
        case = SimpleCase()
        case.add_listener(LoggingListener(logger))

        case.run_test("testOk")

        debug_events = [entry["event"] for entry in capture.entries if entry["log_level"] == "debug"]
        assert debug_events == ["Running test method", "Setting up", "Torn down", "Finished test method"]


def test_mock_listener_receives_pass_sequence() -> None:
    listener = MagicMock(spec=CallbackListener)
    case = SimpleCase()
    case.add_listener(listener)

    case.run_test("testOk")

    listener.on_before_run_test.assert_called_once_with(case, "testOk")
    listener.on_test_pass.assert_called_once_with(case, "testOk", ())
    listener.on_after_run_test.assert_called_once_with(case, "testOk")
    listener.on_test_fail.assert_not_called()
