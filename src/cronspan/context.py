"""Resolve user configuration into concrete runtime objects."""

from __future__ import annotations

__all__ = ["initialize_day_match_resolver", "initialize_settings"]

from typing import TYPE_CHECKING

from cronspan.common import DayMatchPolicy
from cronspan.cron.day_match import KNOWN_DAY_MATCH_RESOLVERS, DayMatchResolverProtocol
from cronspan.errors import CronspanApplicationError
from cronspan.settings import CronspanSettings
from cronspan.utils import coerce_enum

if TYPE_CHECKING:
    from cronspan.py_compatibility import Unpack
    from cronspan.settings import CronspanSettingsKwargs


def initialize_settings(**settings: Unpack[CronspanSettingsKwargs]) -> CronspanSettings:
    """Load settings from keyword overrides, ``CRONSPAN_*`` env vars and defaults."""
    return CronspanSettings.load(**settings)


def initialize_day_match_resolver(policy: DayMatchPolicy | str) -> DayMatchResolverProtocol:
    """Instantiate the resolver registered for *policy*.

    :param policy: Enum member or one of ``vixie``, ``contains``, ``union``, ``intersect``.
    :raises InvalidConfigurationError: If *policy* is not a known value.
    :raises CronspanApplicationError: If a known policy lacks a registered resolver.
    """
    resolved = coerce_enum(policy, DayMatchPolicy, name="day_match_mode")
    if resolved not in KNOWN_DAY_MATCH_RESOLVERS:
        msg = (
            f"Found unregistered type: {resolved!r}. "
            f"If you are developer, ensure you register it here. "
            f"If you are library user, please issue the error to development team."
        )
        raise CronspanApplicationError(msg)
    return KNOWN_DAY_MATCH_RESOLVERS[resolved]()
