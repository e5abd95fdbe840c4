"""Window strategies bounding a cron expansion.

Cron patterns are periodic and unbounded, so every expansion runs inside a
window. Two interchangeable strategies exist:

* :class:`GlobalWindow` -- whole days from ``start_date`` through
  ``start_date + days_forward``, shared by every expression of a batch.
* :class:`EntryWindow` -- a per-expression ``[start_at, end_at]`` pair at
  timestamp precision, optionally tagged with a caller supplied id.

Both bounds are inclusive for both strategies.
"""

from __future__ import annotations

__all__ = [
    "AbstractWindow",
    "EntryWindow",
    "GlobalWindow",
    "ScheduleEntry",
    "WindowProtocol",
]

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from cronspan.errors import InvalidWindowError, WindowTooLargeError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from cronspan.cron_types import CronText, EntryId


@runtime_checkable
class WindowProtocol(Protocol):
    """Public interface for window strategies."""

    @property
    def key(self) -> EntryId | None:
        """Return the identifier attached to produced instants, if any."""

    @property
    def span_days(self) -> int:
        """Return the number of whole days between the first and last candidate date."""

    def validate(self, max_date_range: int) -> None:
        """Ensure the window is non-empty and not larger than *max_date_range* days.

        :raises InvalidWindowError: If the window is empty or reversed.
        :raises WindowTooLargeError: If the span exceeds *max_date_range*.
        """

    def candidate_dates(self) -> Iterator[date]:
        """Yield every calendar date the window touches, in order."""

    def contains(self, moment: datetime) -> bool:
        """Return ``True`` when *moment* lies inside the window."""


class AbstractWindow(WindowProtocol, ABC):
    """Base helper providing validation and date enumeration."""

    @property
    @abstractmethod
    def first_date(self) -> date:
        """Return the first candidate date."""

    @property
    @abstractmethod
    def last_date(self) -> date:
        """Return the last candidate date (inclusive)."""

    @abstractmethod
    def _check_order(self) -> None:
        """Raise :class:`InvalidWindowError` when the window is empty or reversed."""

    def validate(self, max_date_range: int) -> None:
        """Check ordering first, then the span against *max_date_range*."""
        self._check_order()
        if self.span_days > max_date_range:
            msg = (
                f"Window of {self.span_days} days exceeds the maximum of {max_date_range} days. "
                f"Narrow the window or raise `max_date_range`."
            )
            raise WindowTooLargeError(msg)

    def candidate_dates(self) -> Iterator[date]:
        """Yield dates from :attr:`first_date` through :attr:`last_date`."""
        current = self.first_date
        last = self.last_date
        while current <= last:
            yield current
            current += timedelta(days=1)


@dataclass(frozen=True, slots=True)
class GlobalWindow(AbstractWindow):
    """Whole days from *start_date* through ``start_date + days_forward``.

    ``days_forward=0`` covers the single day *start_date*, so ``days_forward=60``
    enumerates 61 days. A generator of ``days_forward`` rows that starts at
    *start_date* covers one day fewer and nothing at all for ``0``; pass
    ``days_forward - 1`` to reproduce a positive count of that form.
    """

    start_date: date
    days_forward: int

    @property
    def key(self) -> EntryId | None:
        """Global windows do not tag instants."""
        return None

    @property
    def first_date(self) -> date:
        """Return *start_date*, truncated to a date when a datetime was given."""
        if isinstance(self.start_date, datetime):
            return self.start_date.date()
        return self.start_date

    @property
    def last_date(self) -> date:
        """Return ``start_date + days_forward``."""
        return self.first_date + timedelta(days=self.days_forward)

    @property
    def span_days(self) -> int:
        """Return *days_forward*."""
        return self.days_forward

    def _check_order(self) -> None:
        if not isinstance(self.start_date, date):
            msg = f"start_date must be a date, got {self.start_date!r}"
            raise InvalidWindowError(msg)
        if isinstance(self.days_forward, bool) or not isinstance(self.days_forward, int):
            msg = f"days_forward must be an integer, got {self.days_forward!r}"
            raise InvalidWindowError(msg)
        if self.days_forward < 0:
            msg = f"days_forward must not be negative, got {self.days_forward}"
            raise InvalidWindowError(msg)

    def contains(self, moment: datetime) -> bool:
        """Return ``True`` when the date of *moment* is within the covered days."""
        return self.first_date <= moment.date() <= self.last_date


@dataclass(frozen=True, slots=True)
class EntryWindow(AbstractWindow):
    """Inclusive ``[start_at, end_at]`` window at timestamp precision.

    Plain dates are promoted to midnight; timezone-aware datetimes are
    converted to naive UTC, the single reference timezone of all output.
    """

    start_at: datetime | date
    end_at: datetime | date
    id: EntryId | None = None

    @property
    def key(self) -> EntryId | None:
        """Return the caller supplied id."""
        return self.id

    @property
    def lower_bound(self) -> datetime:
        """Return *start_at* as a naive UTC datetime."""
        return _as_naive_utc(self.start_at, "start_at")

    @property
    def upper_bound(self) -> datetime:
        """Return *end_at* as a naive UTC datetime."""
        return _as_naive_utc(self.end_at, "end_at")

    @property
    def first_date(self) -> date:
        """Return the date of :attr:`lower_bound`."""
        return self.lower_bound.date()

    @property
    def last_date(self) -> date:
        """Return the date of :attr:`upper_bound`."""
        return self.upper_bound.date()

    @property
    def span_days(self) -> int:
        """Return whole days between the start and end dates."""
        return (self.last_date - self.first_date).days

    def _check_order(self) -> None:
        if self.lower_bound >= self.upper_bound:
            msg = f"start_at ({self.start_at!r}) must be earlier than end_at ({self.end_at!r})"
            raise InvalidWindowError(msg)

    def contains(self, moment: datetime) -> bool:
        """Return ``True`` when ``start_at <= moment <= end_at``."""
        return self.lower_bound <= moment <= self.upper_bound


@dataclass(frozen=True, slots=True)
class ScheduleEntry:
    """One input row of a per-entry expansion: a cron with its own window."""

    cron: CronText
    start_at: datetime | date
    end_at: datetime | date
    id: EntryId | None = None

    @property
    def window(self) -> EntryWindow:
        """Return the :class:`EntryWindow` described by this entry."""
        return EntryWindow(self.start_at, self.end_at, self.id)

    @classmethod
    def coerce(cls, value: ScheduleEntry | tuple[Any, ...]) -> ScheduleEntry:
        """Accept a :class:`ScheduleEntry` or a ``(cron, start_at, end_at[, id])`` tuple.

        :raises TypeError: If *value* has neither shape.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, tuple) and len(value) in (3, 4):
            return cls(*value)
        msg = f"Expected ScheduleEntry or (cron, start_at, end_at[, id]) tuple, got {value!r}"
        raise TypeError(msg)


def _as_naive_utc(value: datetime | date, name: str) -> datetime:
    """Normalise a window bound to a naive datetime in UTC."""
    match value:
        case datetime() if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        case datetime():
            return value
        case date():
            return datetime.combine(value, time.min)
        case _:
            msg = f"{name} must be a date or datetime, got {value!r}"
            raise InvalidWindowError(msg)
