"""Result containers produced by the timestamp expander."""

from __future__ import annotations

__all__ = ["BatchResult", "EntryResult", "TriggerInstant"]

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cronspan.cron_types import CronText, EntryId
    from cronspan.errors import CronspanError
    from cronspan.window.window import WindowProtocol


@dataclass(frozen=True, slots=True)
class TriggerInstant:
    """A single instant at which a cron expression fires.

    :param cron: Original text of the cron expression.
    :param trigger_at: Naive UTC timestamp, always at second 0.
    :param key: Window identifier for per-entry expansions, ``None`` otherwise.
    """

    cron: CronText
    trigger_at: datetime
    key: EntryId | None = None


@dataclass(frozen=True, slots=True)
class EntryResult:
    """Outcome of expanding one ``(cron, window)`` pair: instants or an error."""

    cron: CronText
    window: WindowProtocol
    instants: frozenset[TriggerInstant] = frozenset()
    error: CronspanError | None = None

    @property
    def ok(self) -> bool:
        """Return ``True`` when the entry expanded without error."""
        return self.error is None


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Per-entry outcomes of a batch expansion, in input order."""

    results: tuple[EntryResult, ...]

    @property
    def instants(self) -> frozenset[TriggerInstant]:
        """Return the deduplicated union of instants of all successful entries."""
        return frozenset().union(*(result.instants for result in self.results))

    @property
    def failures(self) -> tuple[EntryResult, ...]:
        """Return the entries that failed, in input order."""
        return tuple(result for result in self.results if not result.ok)

    @property
    def ok(self) -> bool:
        """Return ``True`` when no entry failed."""
        return not self.failures

    def sorted_instants(self) -> list[TriggerInstant]:
        """Return :attr:`instants` ordered by timestamp, then cron, then key."""
        return sorted(self.instants, key=lambda i: (i.trigger_at, i.cron, "" if i.key is None else str(i.key)))

    def raise_for_errors(self) -> None:
        """Raise the error of the first failed entry, if any."""
        for result in self.results:
            if result.error is not None:
                raise result.error
