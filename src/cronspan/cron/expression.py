"""Cron expression value types.

This module provides the immutable :class:`CronExpression` holding the raw text
of the five standard fields, and :func:`parse_cron` which expands an expression
into an explicit :class:`CronSchedule` of integer values.
"""

from __future__ import annotations

__all__ = ["CronExpression", "CronSchedule", "parse_cron"]

from dataclasses import dataclass, field
from functools import cached_property
from typing import NamedTuple

from cronspan.common import EXPECTED_FIELD_COUNT
from cronspan.cron.expander import expand_field
from cronspan.cron.field_parser import FieldKind, FieldSubentry, parse_field
from cronspan.cron_types import ValueSet
from cronspan.errors import MalformedFieldError


class CronSchedule(NamedTuple):
    """Structured representation of the five cron fields.

    Each attribute contains the set of integer values matched by the
    corresponding field of the raw cron expression.
    """

    minute: ValueSet
    hour: ValueSet
    day_of_month: ValueSet
    month: ValueSet
    day_of_week: ValueSet

    @property
    def dom(self) -> ValueSet:
        """Alias for ``day_of_month`` property."""
        return self.day_of_month

    @property
    def dow(self) -> ValueSet:
        """Alias for ``day_of_week`` property."""
        return self.day_of_week


@dataclass(frozen=True)
class CronExpression:
    """Raw five-field cron expression.

    Identity is the original text: two expressions that match the same
    instants (``*/1`` and ``*``) are still different expressions.
    """

    text: str
    minute: str = field(compare=False)
    hour: str = field(compare=False)
    day_of_month: str = field(compare=False)
    month: str = field(compare=False)
    day_of_week: str = field(compare=False)

    @classmethod
    def parse(cls, text: str) -> CronExpression:
        """Split *text* into its five fields.

        :raises MalformedFieldError: If *text* is not a string or does not have exactly five fields.
        """
        if not isinstance(text, str):
            msg = f"{text!r} is not valid cron expression: expected a string."
            raise MalformedFieldError(msg, field=repr(text), expression=repr(text))
        parts = text.split()
        if len(parts) != EXPECTED_FIELD_COUNT:
            msg = f"{text!r} is not valid cron expression: expected {EXPECTED_FIELD_COUNT} fields, got {len(parts)}."
            raise MalformedFieldError(msg, field=text, expression=text)
        minute, hour, day_of_month, month, day_of_week = parts
        return cls(text, minute, hour, day_of_month, month, day_of_week)

    def __str__(self) -> str:
        return self.text

    def field_text(self, kind: FieldKind) -> str:
        """Return the raw text of the field identified by *kind*."""
        return str(getattr(self, kind.value))

    def subentries(self, kind: FieldKind) -> tuple[FieldSubentry, ...]:
        """Return the parsed subentries of the field identified by *kind*."""
        return parse_field(self.field_text(kind), kind, expression=self.text)

    @cached_property
    def schedule(self) -> CronSchedule:
        """Return the expanded values of all five fields.

        :raises MalformedFieldError: If any field cannot be parsed.
        """
        return CronSchedule(
            *(expand_field(self.subentries(kind), kind) for kind in FieldKind)
        )


def parse_cron(expression: str | CronExpression) -> CronSchedule:
    """Parse a cron expression into explicit field values.

    The parser expects the traditional five-field format: minute, hour,
    day of month, month, and day of week. Each field supports single
    values, ranges, steps (``*/n``, ``n/m``, ``n-m/s``), comma-separated
    lists, and month/day names.

    :param expression: Raw cron expression using space-separated fields.
    :returns: A :class:`CronSchedule` with the matched integer values per field.
    :raises MalformedFieldError: If the expression has invalid syntax or values.
    """
    if isinstance(expression, str):
        expression = CronExpression.parse(expression)
    return expression.schedule
