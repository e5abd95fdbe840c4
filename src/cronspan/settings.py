"""Settings for cron expansion and useful functionality to work with them."""

from __future__ import annotations

import dataclasses
import os
from typing import Any, TypedDict

from cronspan.common import DEFAULT_MAX_DATE_RANGE, DayMatchPolicy
from cronspan.errors import InvalidConfigurationError
from cronspan.py_compatibility import NotRequired, Unpack
from cronspan.utils import coerce_enum

ENV_PREFIX = "CRONSPAN"


class CronspanSettingsKwargs(TypedDict):
    """Kwargs accepted by :meth:`CronspanSettings.load`."""

    day_match_mode: NotRequired[DayMatchPolicy | str]
    max_date_range: NotRequired[int]
    max_results: NotRequired[int | None]
    workers: NotRequired[int]


@dataclasses.dataclass
class CronspanSettings:
    """Strongly typed configuration holder for the timestamp expander."""

    day_match_mode: DayMatchPolicy
    max_date_range: int
    max_results: int | None
    workers: int

    def __post_init__(self) -> None:
        """Coerce the day match policy and reject non-positive limits."""
        self.day_match_mode = coerce_enum(
            self.day_match_mode, DayMatchPolicy, name="day_match_mode"
        )
        _ensure_positive("max_date_range", self.max_date_range)
        _ensure_positive("workers", self.workers)
        if self.max_results is not None:
            _ensure_positive("max_results", self.max_results)

    @classmethod
    def from_defaults(cls) -> dict[str, Any]:
        """Return the canonical default values for all settings fields."""
        return {
            "day_match_mode": DayMatchPolicy.Vixie,
            "max_date_range": DEFAULT_MAX_DATE_RANGE,
            "max_results": None,
            "workers": 1,
        }

    @classmethod
    def load(cls, **settings: Unpack[CronspanSettingsKwargs]) -> CronspanSettings:
        """Load settings from keyword overrides, env vars, and defaults (in that order).

        :param settings: Keyword arguments that override both environment variables and defaults.
        :returns: A fully instantiated :class:`CronspanSettings` object.
        :raises InvalidConfigurationError: If any resulting value is invalid.
        """
        final_settings = cls.from_defaults()
        final_settings.update(cls.from_envs())
        final_settings.update(settings)
        return cls(**final_settings)

    def replace(self, **settings: Unpack[CronspanSettingsKwargs]) -> CronspanSettings:
        """Return a copy of the settings with keyword overrides applied and validated."""
        return dataclasses.replace(self, **settings)

    def as_dict(self) -> dict[str, Any]:
        """Return specified settings as a plain dictionary for serialisation."""
        return dataclasses.asdict(self)

    @classmethod
    def from_envs(cls) -> dict[str, Any]:
        """Return settings overridden via ``CRONSPAN_*`` environment variables."""
        coercers: dict[str, Any] = {
            "day_match_mode": lambda v: coerce_enum(v, DayMatchPolicy, name="day_match_mode"),
            "max_date_range": int,
            "max_results": _to_optional_int,
            "workers": int,
        }

        to_return: dict[str, Any] = {}
        for field in dataclasses.fields(cls):
            env_var = f"{ENV_PREFIX}_{field.name.upper()}"
            if env_var not in os.environ:
                continue
            raw_value = os.environ[env_var]
            try:
                to_return[field.name] = coercers[field.name](raw_value)
            except ValueError as exc:
                msg = f"{raw_value!r} is not a valid value for {field.name!r}"
                raise InvalidConfigurationError(msg) from exc
        return to_return


def _to_optional_int(value: str) -> int | None:
    if value.strip().lower() in {"", "none"}:
        return None
    return int(value)


def _ensure_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"{name!r} must be a positive integer, got {value!r}"
        raise InvalidConfigurationError(msg)
