"""Timestamp expander: the orchestrator turning cron expressions into instants."""

from __future__ import annotations

__all__ = ["TimestampExpander"]

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from itertools import product
from typing import TYPE_CHECKING

from cronspan.context import initialize_day_match_resolver, initialize_settings
from cronspan.cron.day_filter import day_matches, month_matches, valid_days_of_month
from cronspan.cron.expression import CronExpression
from cronspan.errors import CronspanError, ResultLimitExceededError
from cronspan.expander.results import BatchResult, EntryResult, TriggerInstant
from cronspan.logging import WithLogger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from cronspan.common import DayMatchMode, DayMatchPolicy
    from cronspan.cron.day_match import DayMatchResolverProtocol
    from cronspan.cron.expression import CronSchedule
    from cronspan.cron_types import ValueSet
    from cronspan.py_compatibility import Unpack
    from cronspan.settings import CronspanSettings, CronspanSettingsKwargs
    from cronspan.window.window import WindowProtocol


class TimestampExpander(WithLogger):
    """Enumerate the instants at which cron expressions fire inside a window.

    The expander is stateless apart from its settings, so one instance can be
    shared between threads. Each expansion:

    1. validates the window (before any parsing);
    2. parses the expression and resolves its day match mode once;
    3. walks candidate dates, keeping those whose month matches and whose
       day passes the day filter (impossible days such as Feb 30 are dropped);
    4. fans surviving dates out over matched hours x minutes at second 0;
    5. keeps only timestamps the window contains.
    """

    def __init__(
        self,
        settings: CronspanSettings | None = None,
        **overrides: Unpack[CronspanSettingsKwargs],
    ) -> None:
        """Initialise the expander.

        :param settings: Base settings; loaded from env vars and defaults when omitted.
        :param overrides: Keyword overrides applied on top of *settings*.
        """
        if settings is None:
            settings = initialize_settings(**overrides)
        elif overrides:
            settings = settings.replace(**overrides)
        self._settings = settings

    @property
    def settings(self) -> CronspanSettings:
        """Return the effective settings."""
        return self._settings

    def iter_instants(
        self,
        cron: CronExpression | str,
        window: WindowProtocol,
        day_match_mode: DayMatchPolicy | str | None = None,
    ) -> Iterator[TriggerInstant]:
        """Lazily yield the instants of *cron* inside *window*.

        Validation happens eagerly; only the timestamp production is lazy.

        :param cron: Expression or its raw text.
        :param window: Global or per-entry window.
        :param day_match_mode: Policy override; defaults to the settings value.
        :raises InvalidConfigurationError: If *day_match_mode* is not recognised.
        :raises InvalidWindowError: If the window is empty or reversed.
        :raises WindowTooLargeError: If the window exceeds ``max_date_range``.
        :raises MalformedFieldError: If *cron* cannot be parsed.
        """
        resolver = self._resolver(day_match_mode)
        window.validate(self._settings.max_date_range)
        expression = cron if isinstance(cron, CronExpression) else CronExpression.parse(cron)
        schedule = expression.schedule
        mode = resolver.resolve(expression)
        return self._generate(expression, schedule, mode, window)

    def expand(
        self,
        cron: CronExpression | str,
        window: WindowProtocol,
        day_match_mode: DayMatchPolicy | str | None = None,
    ) -> frozenset[TriggerInstant]:
        """Return the set of instants of *cron* inside *window*.

        Raises the same errors as :meth:`iter_instants`, plus
        :class:`ResultLimitExceededError` when ``max_results`` is exceeded.
        """
        instants = frozenset(self.iter_instants(cron, window, day_match_mode))
        self._logger.debug("Expanded %r into %d instants over %r", str(cron), len(instants), window)
        return instants

    def expand_batch(
        self,
        entries: Iterable[tuple[CronExpression | str, WindowProtocol]],
        day_match_mode: DayMatchPolicy | str | None = None,
    ) -> BatchResult:
        """Expand many ``(cron, window)`` pairs, isolating per-entry failures.

        Entries run on a thread pool when ``settings.workers > 1``; results are
        always reported in input order.

        :raises InvalidConfigurationError: If *day_match_mode* is not recognised.
        """
        resolver = self._resolver(day_match_mode)
        pairs = list(entries)

        def run(pair: tuple[CronExpression | str, WindowProtocol]) -> EntryResult:
            return self._expand_entry(pair[0], pair[1], resolver)

        if self._settings.workers > 1 and len(pairs) > 1:
            with ThreadPoolExecutor(max_workers=self._settings.workers) as pool:
                results = tuple(pool.map(run, pairs))
        else:
            results = tuple(run(pair) for pair in pairs)

        failed = sum(1 for result in results if not result.ok)
        if failed:
            self._logger.warning("%d of %d cron entries failed to expand", failed, len(results))
        return BatchResult(results)

    def _expand_entry(
        self,
        cron: CronExpression | str,
        window: WindowProtocol,
        resolver: DayMatchResolverProtocol,
    ) -> EntryResult:
        try:
            instants = self.expand(cron, window, resolver.policy)
        except CronspanError as exc:
            self._logger.warning("Skipping cron %r over %r: %s", str(cron), window, exc)
            return EntryResult(cron=str(cron), window=window, error=exc)
        return EntryResult(cron=str(cron), window=window, instants=instants)

    def _resolver(self, day_match_mode: DayMatchPolicy | str | None) -> DayMatchResolverProtocol:
        policy = self._settings.day_match_mode if day_match_mode is None else day_match_mode
        return initialize_day_match_resolver(policy)

    def _generate(
        self,
        expression: CronExpression,
        schedule: CronSchedule,
        mode: DayMatchMode,
        window: WindowProtocol,
    ) -> Iterator[TriggerInstant]:
        times = list(product(sorted(schedule.hour), sorted(schedule.minute)))
        limit = self._settings.max_results
        produced = 0
        current_month: tuple[int, int] | None = None
        month_days: ValueSet = frozenset()

        for day in window.candidate_dates():
            if not month_matches(day, schedule.month):
                continue
            if current_month != (day.year, day.month):
                current_month = (day.year, day.month)
                month_days = valid_days_of_month(schedule.dom, day.year, day.month)
            if not day_matches(day, month_days, schedule.dow, mode):
                continue

            for hour, minute in times:
                moment = datetime(day.year, day.month, day.day, hour, minute)
                if not window.contains(moment):
                    continue
                produced += 1
                if limit is not None and produced > limit:
                    msg = (
                        f"Cron {expression.text!r} produced more than {limit} instants. "
                        f"Narrow the window or raise `max_results`."
                    )
                    raise ResultLimitExceededError(msg)
                yield TriggerInstant(expression.text, moment, window.key)
