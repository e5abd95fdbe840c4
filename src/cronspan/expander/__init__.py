"""Timestamp expansion of cron expressions over windows."""

from .expander import TimestampExpander
from .results import BatchResult, EntryResult, TriggerInstant

__all__ = ["BatchResult", "EntryResult", "TimestampExpander", "TriggerInstant"]
