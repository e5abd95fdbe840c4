"""Public entrypoints for expanding cron expressions into trigger instants."""

from __future__ import annotations

__all__ = ["expand_cron", "expand_global_window", "expand_per_entry_window"]

from typing import TYPE_CHECKING, Any

from cronspan.expander.expander import TimestampExpander
from cronspan.window.window import GlobalWindow, ScheduleEntry

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from cronspan.common import DayMatchPolicy
    from cronspan.cron.expression import CronExpression
    from cronspan.expander.results import BatchResult, TriggerInstant
    from cronspan.settings import CronspanSettings
    from cronspan.window.window import WindowProtocol


def expand_global_window(
    cron_expressions: Iterable[str],
    start_date: date,
    days_forward: int,
    day_match_mode: DayMatchPolicy | str | None = None,
    *,
    settings: CronspanSettings | None = None,
) -> BatchResult:
    """Expand every expression over the whole days ``start_date .. start_date + days_forward``.

    Duplicate expressions are expanded once. Instants carry no key.

    :param cron_expressions: Raw cron expressions.
    :param start_date: First day of the window.
    :param days_forward: Number of days after *start_date* to include (``0`` = one day).
    :param day_match_mode: ``vixie`` (default), ``contains``, ``union`` or ``intersect``.
    :param settings: Optional settings; loaded from env vars and defaults when omitted.
    :returns: Per-expression results; malformed expressions do not abort the batch.
    :raises InvalidConfigurationError: If *day_match_mode* is not recognised.
    :raises InvalidWindowError: If *days_forward* is negative.
    :raises WindowTooLargeError: If *days_forward* exceeds ``max_date_range``.
    """
    expander = TimestampExpander(settings)
    window = GlobalWindow(start_date, days_forward)
    window.validate(expander.settings.max_date_range)
    unique = dict.fromkeys(cron_expressions)
    return expander.expand_batch(((cron, window) for cron in unique), day_match_mode)


def expand_per_entry_window(
    entries: Iterable[ScheduleEntry | tuple[Any, ...]],
    max_date_range: int | None = None,
    day_match_mode: DayMatchPolicy | str | None = None,
    *,
    settings: CronspanSettings | None = None,
) -> BatchResult:
    """Expand each entry's cron over its own inclusive ``[start_at, end_at]`` window.

    Duplicate entries are expanded once. Instants are keyed by the entry id, so
    identical ``(id, cron, timestamp)`` triples collapse.

    :param entries: :class:`ScheduleEntry` values or ``(cron, start_at, end_at[, id])`` tuples.
    :param max_date_range: Maximum window span in days (default 1095).
    :param day_match_mode: ``vixie`` (default), ``contains``, ``union`` or ``intersect``.
    :param settings: Optional settings; loaded from env vars and defaults when omitted.
    :returns: Per-entry results; window and cron errors are isolated per entry.
    :raises InvalidConfigurationError: If *day_match_mode* or *max_date_range* is invalid.
    """
    if max_date_range is None:
        expander = TimestampExpander(settings)
    else:
        expander = TimestampExpander(settings, max_date_range=max_date_range)
    unique = dict.fromkeys(ScheduleEntry.coerce(entry) for entry in entries)
    return expander.expand_batch(((entry.cron, entry.window) for entry in unique), day_match_mode)


def expand_cron(
    cron: CronExpression | str,
    window: WindowProtocol,
    day_match_mode: DayMatchPolicy | str | None = None,
    *,
    settings: CronspanSettings | None = None,
) -> frozenset[TriggerInstant]:
    """Expand a single expression over *window*, raising on any error."""
    return TimestampExpander(settings).expand(cron, window, day_match_mode)
