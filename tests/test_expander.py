"""Tests for the timestamp expander."""

from __future__ import annotations

from datetime import date, datetime, timedelta
import logging

import pytest

from cronspan.common import DayMatchMode
from cronspan.cron.day_filter import cron_weekday
from cronspan.cron.day_match import resolve_day_match_mode
from cronspan.cron.expression import CronSchedule, parse_cron
from cronspan.errors import (
    InvalidConfigurationError,
    InvalidWindowError,
    MalformedFieldError,
    ResultLimitExceededError,
    WindowTooLargeError,
)
from cronspan.expander.expander import TimestampExpander
from cronspan.expander.results import TriggerInstant
from cronspan.settings import CronspanSettings
from cronspan.window.window import EntryWindow, GlobalWindow


@pytest.fixture
def expander() -> TimestampExpander:
    """Expander with default settings, independent of the environment."""
    return TimestampExpander(CronspanSettings(**CronspanSettings.from_defaults()))


def _timestamps(instants: frozenset[TriggerInstant]) -> list[datetime]:
    return sorted(instant.trigger_at for instant in instants)


def _fires(moment: datetime, schedule: CronSchedule, mode: DayMatchMode) -> bool:
    """Check a single minute against the cron definition, independent of the expander."""
    dom_match = moment.day in schedule.dom
    dow_match = cron_weekday(moment.date()) in schedule.dow
    day_ok = dom_match or dow_match if mode is DayMatchMode.Union else dom_match and dow_match
    return (
        moment.minute in schedule.minute
        and moment.hour in schedule.hour
        and moment.month in schedule.month
        and day_ok
    )


def test_daily_job_over_three_days(expander: TimestampExpander) -> None:
    """``0 9 * * *`` fires once on each day of an inclusive window."""
    instants = expander.expand("0 9 * * *", GlobalWindow(date(2024, 1, 1), 2), "vixie")

    assert _timestamps(instants) == [
        datetime(2024, 1, 1, 9, 0),
        datetime(2024, 1, 2, 9, 0),
        datetime(2024, 1, 3, 9, 0),
    ]
    assert {instant.cron for instant in instants} == {"0 9 * * *"}
    assert {instant.key for instant in instants} == {None}


def test_new_year_fires_regardless_of_weekday(expander: TimestampExpander) -> None:
    """``0 0 1 1 *`` fires on every Jan 1 inside a window spanning two Januarys."""
    instants = expander.expand("0 0 1 1 *", GlobalWindow(date(2023, 12, 1), 400))

    assert _timestamps(instants) == [datetime(2024, 1, 1), datetime(2025, 1, 1)]


def test_union_fires_on_day_of_month_alone(expander: TimestampExpander) -> None:
    """2024-02-15 is a Thursday; union still fires on the 15th."""
    window = GlobalWindow(date(2024, 2, 15), 0)

    assert _timestamps(expander.expand("0 12 15 * MON", window, "union")) == [datetime(2024, 2, 15, 12, 0)]


def test_intersect_requires_both_day_fields(expander: TimestampExpander) -> None:
    """Intersect fires on the 15th only when it is a Monday (2024-01-15 and 2024-04-15)."""
    window = GlobalWindow(date(2024, 1, 1), 180)

    assert _timestamps(expander.expand("0 12 15 * MON", window, "intersect")) == [
        datetime(2024, 1, 15, 12, 0),
        datetime(2024, 4, 15, 12, 0),
    ]
    assert expander.expand("0 12 15 * MON", GlobalWindow(date(2024, 2, 15), 0), "intersect") == frozenset()


def test_impossible_date_never_fires(expander: TimestampExpander) -> None:
    """February 30 does not exist in any year."""
    assert expander.expand("0 0 30 2 *", GlobalWindow(date(2024, 1, 1), 1095)) == frozenset()


def test_leap_day_fires_only_in_leap_years(expander: TimestampExpander) -> None:
    """``29 2`` only materialises when February has 29 days."""
    instants = expander.expand("0 0 29 2 *", GlobalWindow(date(2023, 1, 1), 1000))

    assert _timestamps(instants) == [datetime(2024, 2, 29)]


def test_short_months_drop_day_31_but_union_keeps_weekday(expander: TimestampExpander) -> None:
    """In union mode a day missing from the month can still fire through day of week."""
    window = GlobalWindow(date(2024, 4, 1), 29)
    instants = expander.expand("0 0 31 * SUN", window, "union")

    # April 2024 has no 31st; its Sundays are the 7th, 14th, 21st and 28th.
    assert [moment.day for moment in _timestamps(instants)] == [7, 14, 21, 28]


def test_entry_window_bounds_are_inclusive(expander: TimestampExpander) -> None:
    """Both ends of a per-entry window are kept at minute precision."""
    window = EntryWindow(datetime(2024, 1, 1, 0, 0), datetime(2024, 1, 1, 0, 30), id="ten-minutely")
    instants = expander.expand("*/10 * * * *", window)

    assert _timestamps(instants) == [
        datetime(2024, 1, 1, 0, 0),
        datetime(2024, 1, 1, 0, 10),
        datetime(2024, 1, 1, 0, 20),
        datetime(2024, 1, 1, 0, 30),
    ]
    assert {instant.key for instant in instants} == {"ten-minutely"}


def test_entry_window_respects_sub_day_start(expander: TimestampExpander) -> None:
    """Timestamps before ``start_at`` on the first day are discarded."""
    window = EntryWindow(datetime(2024, 1, 1, 9, 1), datetime(2024, 1, 3, 8, 59))

    assert _timestamps(expander.expand("0 9 * * *", window)) == [datetime(2024, 1, 2, 9, 0)]


def test_timestamps_are_at_second_zero(expander: TimestampExpander) -> None:
    """Every produced timestamp has zero seconds and microseconds."""
    instants = expander.expand("*/7 */5 * * *", GlobalWindow(date(2024, 1, 1), 1))

    assert instants
    assert all(i.trigger_at.second == 0 and i.trigger_at.microsecond == 0 for i in instants)


@pytest.mark.parametrize(
    ("cron", "mode"),
    [
        pytest.param("*/20 9-11 * * *", DayMatchMode.Intersect, id="every-day"),
        pytest.param("0,30 0 1,15,31 * MON,FRI", DayMatchMode.Union, id="union-days"),
        pytest.param("0,30 0 1,15,31 * MON,FRI", DayMatchMode.Intersect, id="intersect-days"),
        pytest.param("15 */6 */2 JAN-MAR SUN,SAT", DayMatchMode.Intersect, id="names-and-steps"),
        pytest.param("5/15 22-23 28-31 2 *", DayMatchMode.Union, id="end-of-february"),
    ],
)
def test_expansion_is_sound_and_complete(expander: TimestampExpander, cron: str, mode: DayMatchMode) -> None:
    """Expansion equals a minute-by-minute brute force over the window."""
    window = GlobalWindow(date(2024, 1, 26), 40)
    instants = expander.expand(cron, window, mode.value)

    schedule = parse_cron(cron)
    moment = datetime(2024, 1, 26)
    brute_force = []
    while moment < datetime(2024, 3, 7):
        if _fires(moment, schedule, mode):
            brute_force.append(moment)
        moment += timedelta(minutes=1)

    assert brute_force
    assert _timestamps(instants) == brute_force


def test_expansion_is_idempotent(expander: TimestampExpander) -> None:
    """Repeating an expansion yields an identical set."""
    window = GlobalWindow(date(2024, 1, 1), 60)
    cron = "*/15 8-17 * * MON-FRI"

    assert expander.expand(cron, window) == expander.expand(cron, window)


@pytest.mark.parametrize("cron", ["0 12 15 * MON", "0 0 1,* * 5", "30 6 */10 JAN,JUL 0-2", "0 0 * * *"])
def test_union_is_superset_of_intersect(expander: TimestampExpander, cron: str) -> None:
    """Whatever both day fields accept is also accepted by either of them."""
    window = GlobalWindow(date(2024, 1, 1), 365)

    assert expander.expand(cron, window, "intersect") <= expander.expand(cron, window, "union")


def test_vixie_and_contains_diverge_on_inner_wildcard(expander: TimestampExpander) -> None:
    """``1,*`` is restricted under vixie but unrestricted under contains."""
    window = GlobalWindow(date(2024, 1, 1), 6)

    assert resolve_day_match_mode("0 0 1,* * MON", "vixie") is DayMatchMode.Union
    assert len(expander.expand("0 0 1,* * MON", window, "vixie")) == 7
    assert _timestamps(expander.expand("0 0 1,* * MON", window, "contains")) == [datetime(2024, 1, 1)]


def test_mode_defaults_to_settings(expander: TimestampExpander) -> None:
    """Without an explicit mode the settings policy is used."""
    union_expander = TimestampExpander(expander.settings, day_match_mode="union")
    window = GlobalWindow(date(2024, 2, 15), 0)

    assert expander.expand("0 12 15 * MON", window) == union_expander.expand("0 12 15 * MON", window)
    assert union_expander.expand("0 12 15 * 2", window) != frozenset()
    assert TimestampExpander(expander.settings, day_match_mode="intersect").expand("0 12 15 * 2", window) == (
        frozenset()
    )


def test_invalid_window_fails_before_parsing(expander: TimestampExpander) -> None:
    """Window errors surface even when the expression is also malformed."""
    with pytest.raises(InvalidWindowError):
        expander.expand("not a cron", GlobalWindow(date(2024, 1, 1), -1))
    with pytest.raises(WindowTooLargeError):
        expander.expand("not a cron", GlobalWindow(date(2024, 1, 1), 5000))


def test_unknown_mode_is_rejected(expander: TimestampExpander) -> None:
    """Only the four known policy values are accepted."""
    with pytest.raises(InvalidConfigurationError):
        expander.expand("0 0 * * *", GlobalWindow(date(2024, 1, 1), 1), "sometimes")


def test_iter_instants_validates_eagerly_and_streams(expander: TimestampExpander) -> None:
    """Errors are raised on call; timestamps are produced lazily."""
    with pytest.raises(MalformedFieldError):
        expander.iter_instants("61 * * * *", GlobalWindow(date(2024, 1, 1), 1))

    stream = expander.iter_instants("* * * * *", GlobalWindow(date(2024, 1, 1), 1095))
    first = next(stream)

    assert first == TriggerInstant("* * * * *", datetime(2024, 1, 1, 0, 0))


def test_max_results_caps_single_expansion() -> None:
    """Crossing ``max_results`` aborts the expansion."""
    limited = TimestampExpander(CronspanSettings(**CronspanSettings.from_defaults()), max_results=60)

    assert len(limited.expand("* 0 * * *", GlobalWindow(date(2024, 1, 1), 0))) == 60
    with pytest.raises(ResultLimitExceededError, match="more than 60 instants"):
        limited.expand("* 0-1 * * *", GlobalWindow(date(2024, 1, 1), 0))


def test_expand_batch_isolates_failures(
    expander: TimestampExpander, caplog: pytest.LogCaptureFixture
) -> None:
    """A malformed entry is reported without aborting the other entries."""
    window = GlobalWindow(date(2024, 1, 1), 0)
    with caplog.at_level(logging.WARNING, logger="TimestampExpander"):
        batch = expander.expand_batch([("0 9 * * *", window), ("0 25 * * *", window), ("30 9 * * *", window)])

    assert [result.ok for result in batch.results] == [True, False, True]
    assert isinstance(batch.failures[0].error, MalformedFieldError)
    assert batch.failures[0].cron == "0 25 * * *"
    assert _timestamps(batch.instants) == [datetime(2024, 1, 1, 9, 0), datetime(2024, 1, 1, 9, 30)]
    assert "1 of 3 cron entries failed to expand" in caplog.text
    with pytest.raises(MalformedFieldError):
        batch.raise_for_errors()


def test_expand_batch_with_workers_matches_sequential(expander: TimestampExpander) -> None:
    """Thread pool fan-out yields the same ordered results."""
    window = GlobalWindow(date(2024, 1, 1), 31)
    entries = [(f"{minute} */4 * * *", window) for minute in range(0, 60, 7)]
    threaded = TimestampExpander(expander.settings, workers=4)

    sequential_batch = expander.expand_batch(entries)
    threaded_batch = threaded.expand_batch(entries)

    assert threaded_batch == sequential_batch
    assert [result.cron for result in threaded_batch.results] == [cron for cron, _ in entries]


def test_expand_batch_rejects_unknown_mode_up_front(expander: TimestampExpander) -> None:
    """Configuration errors are not isolated per entry."""
    with pytest.raises(InvalidConfigurationError):
        expander.expand_batch([("0 0 * * *", GlobalWindow(date(2024, 1, 1), 0))], "either")


def test_sorted_instants_orders_by_timestamp(expander: TimestampExpander) -> None:
    """Callers needing order sort explicitly."""
    window = GlobalWindow(date(2024, 1, 1), 1)
    batch = expander.expand_batch([("0 12 * * *", window), ("0 6 * * *", window)])

    assert [(i.trigger_at.day, i.trigger_at.hour) for i in batch.sorted_instants()] == [
        (1, 6),
        (1, 12),
        (2, 6),
        (2, 12),
    ]
