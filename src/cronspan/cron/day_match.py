"""Resolution of the day-of-month / day-of-week combination mode.

Cron implementations disagree on whether a date must match both day fields or
either of them. The traditional (Vixie) behaviour keys the decision off whether
a day field *starts* with ``*``; see https://crontab.guru/cron-bug.html.
"""

from __future__ import annotations

__all__ = [
    "KNOWN_DAY_MATCH_RESOLVERS",
    "AbstractDayMatchResolver",
    "ContainsDayMatchResolver",
    "DayMatchResolverProtocol",
    "FixedIntersectDayMatchResolver",
    "FixedUnionDayMatchResolver",
    "VixieDayMatchResolver",
    "resolve_day_match_mode",
]

from abc import ABC, abstractmethod
from typing import ClassVar, Protocol, runtime_checkable

from cronspan.common import DayMatchMode, DayMatchPolicy
from cronspan.cron.expression import CronExpression
from cronspan.utils import coerce_enum, make_specific_register_func

KNOWN_DAY_MATCH_RESOLVERS: dict[DayMatchPolicy, type[DayMatchResolverProtocol]] = {}
_register = make_specific_register_func(KNOWN_DAY_MATCH_RESOLVERS)

WILDCARD = "*"


@runtime_checkable
class DayMatchResolverProtocol(Protocol):
    """Interface for day match resolvers."""

    policy: ClassVar[DayMatchPolicy]

    def resolve(self, cron: CronExpression) -> DayMatchMode:
        """Return the day match mode for *cron*, looking only at its raw text."""


class AbstractDayMatchResolver(DayMatchResolverProtocol, ABC):
    """Base class for resolvers deciding on the wildcard placement in the day fields."""

    @abstractmethod
    def is_unrestricted(self, field_text: str) -> bool:
        """Return ``True`` when *field_text* counts as a wildcard day field."""

    def resolve(self, cron: CronExpression) -> DayMatchMode:
        """Intersect when either day field is unrestricted, otherwise union."""
        if self.is_unrestricted(cron.day_of_month) or self.is_unrestricted(cron.day_of_week):
            return DayMatchMode.Intersect
        return DayMatchMode.Union


@_register(DayMatchPolicy.Vixie)
class VixieDayMatchResolver(AbstractDayMatchResolver):
    """Check only the first character of each day field (``1,*`` is not a wildcard)."""

    policy = DayMatchPolicy.Vixie

    def is_unrestricted(self, field_text: str) -> bool:
        """Return ``True`` when *field_text* starts with ``*``."""
        return field_text.startswith(WILDCARD)


@_register(DayMatchPolicy.Contains)
class ContainsDayMatchResolver(AbstractDayMatchResolver):
    """Treat a ``*`` anywhere in a day field as a wildcard."""

    policy = DayMatchPolicy.Contains

    def is_unrestricted(self, field_text: str) -> bool:
        """Return ``True`` when *field_text* contains ``*``."""
        return WILDCARD in field_text


@_register(DayMatchPolicy.Union)
class FixedUnionDayMatchResolver:
    """Always union, regardless of the expression."""

    policy = DayMatchPolicy.Union

    def resolve(self, cron: CronExpression) -> DayMatchMode:  # noqa: ARG002
        """Return :attr:`DayMatchMode.Union`."""
        return DayMatchMode.Union


@_register(DayMatchPolicy.Intersect)
class FixedIntersectDayMatchResolver:
    """Always intersect, regardless of the expression."""

    policy = DayMatchPolicy.Intersect

    def resolve(self, cron: CronExpression) -> DayMatchMode:  # noqa: ARG002
        """Return :attr:`DayMatchMode.Intersect`."""
        return DayMatchMode.Intersect


def resolve_day_match_mode(
    cron: CronExpression | str, policy: DayMatchPolicy | str = DayMatchPolicy.Vixie
) -> DayMatchMode:
    """Classify *cron* as union or intersect under *policy*.

    :param cron: Expression (or its raw text) to classify.
    :param policy: One of ``vixie``, ``contains``, ``union`` or ``intersect``.
    :raises InvalidConfigurationError: If *policy* is not recognised.
    :raises MalformedFieldError: If *cron* is text without exactly five fields.
    """
    resolved_policy = coerce_enum(policy, DayMatchPolicy, name="day_match_mode")
    if isinstance(cron, str):
        cron = CronExpression.parse(cron)
    return KNOWN_DAY_MATCH_RESOLVERS[resolved_policy]().resolve(cron)
