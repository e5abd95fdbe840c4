"""Public interface for the cronspan package: cron expressions expanded into timestamps."""

from __future__ import annotations

from .api import expand_cron, expand_global_window, expand_per_entry_window
from .common import DayMatchMode, DayMatchPolicy
from .cron import CronExpression, CronSchedule, FieldKind, explain_field, parse_cron
from .errors import (
    CronspanError,
    InvalidConfigurationError,
    InvalidWindowError,
    MalformedFieldError,
    ResultLimitExceededError,
    WindowTooLargeError,
)
from .expander import BatchResult, EntryResult, TimestampExpander, TriggerInstant
from .settings import CronspanSettings
from .window import EntryWindow, GlobalWindow, ScheduleEntry

__all__ = [
    "BatchResult",
    "CronExpression",
    "CronSchedule",
    "CronspanError",
    "CronspanSettings",
    "DayMatchMode",
    "DayMatchPolicy",
    "EntryResult",
    "EntryWindow",
    "FieldKind",
    "GlobalWindow",
    "InvalidConfigurationError",
    "InvalidWindowError",
    "MalformedFieldError",
    "ResultLimitExceededError",
    "ScheduleEntry",
    "TimestampExpander",
    "TriggerInstant",
    "WindowTooLargeError",
    "expand_cron",
    "expand_global_window",
    "expand_per_entry_window",
    "explain_field",
    "parse_cron",
]
