import logging

import pytest
import structlog

from caserunner.listeners import EVENTS


@pytest.fixture(autouse=True)
def quiet_structlog():
    """Keep module loggers off stdout; tests that need logs capture them explicitly."""
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


class RecordingListener:
    """Records every event as a tuple of (event, method, *extra)."""

    def __init__(self):
        self.events: list[tuple] = []

    def __getattr__(self, name):
        if name not in EVENTS:
            raise AttributeError(name)

        def handler(case, method, *args):
            self.events.append((name, method, *args))

        return handler

    def names(self) -> list[str]:
        return [event[0] for event in self.events]


@pytest.fixture
def recorder() -> RecordingListener:
    return RecordingListener()
