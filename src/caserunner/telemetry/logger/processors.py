# src/caserunner/telemetry/logger/processors.py

"""
Custom structlog processors for caserunner log output.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

LOG_EMOJIS = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
    "run": "▶️",
    "pass": "✅",
    "fail": "🚫",
    "data": "📄",
    "config": "⚙️",
    "general": "➡️",
}

# Keys used only to steer processors; never rendered.
INTERNAL_KEYS = ("emoji_key",)


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefix the event with an emoji chosen by ``emoji_key`` or by log level."""
    emoji_key: Any = event_dict.get("emoji_key")
    if emoji_key is None:
        emoji_key = logging.getLevelName(event_dict.get("level", method_name).upper())
    emoji = LOG_EMOJIS.get(emoji_key, LOG_EMOJIS["general"])
    event = event_dict.get("event")
    if isinstance(event, str) and not event.startswith(emoji):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Drop processor-only keys before rendering."""
    for key in INTERNAL_KEYS:
        event_dict.pop(key, None)
    return event_dict


# 🔼⚙️
