"""Cron field parser.

Turns the text of one cron field into an ordered tuple of
:class:`FieldSubentry` values. Wildcards are substituted with the field's full
domain range and month/day names are resolved to numerals before any range or
step parsing happens, so every subentry is an ordinary ``start-end/step``
triple by the time it leaves this module.
"""

from __future__ import annotations

__all__ = ["FIELD_DOMAINS", "FieldDomain", "FieldKind", "FieldSubentry", "parse_field"]

from dataclasses import dataclass, field
from typing import Final

from cronspan.errors import MalformedFieldError
from cronspan.py_compatibility import StrEnum

DAY_NAME_TO_INDEX: Final[dict[str, int]] = {
    "SUN": 0,
    "MON": 1,
    "TUE": 2,
    "WED": 3,
    "THU": 4,
    "FRI": 5,
    "SAT": 6,
}
MONTH_NAME_TO_INDEX: Final[dict[str, int]] = {
    "JAN": 1,
    "FEB": 2,
    "MAR": 3,
    "APR": 4,
    "MAY": 5,
    "JUN": 6,
    "JUL": 7,
    "AUG": 8,
    "SEP": 9,
    "OCT": 10,
    "NOV": 11,
    "DEC": 12,
}


class FieldKind(StrEnum):
    """The five positional cron fields, in expression order."""

    Minute = "minute"
    Hour = "hour"
    DayOfMonth = "day_of_month"
    Month = "month"
    DayOfWeek = "day_of_week"


@dataclass(frozen=True, slots=True)
class FieldDomain:
    """Value domain of a cron field.

    :param minimum: Smallest canonical value.
    :param maximum: Largest canonical value, used for ``*`` and open-ended steps.
    :param names: Case-insensitive names accepted in place of numerals.
    :param aliases: Extra accepted values and the canonical value each folds to.
    """

    minimum: int
    maximum: int
    names: dict[str, int] = field(default_factory=dict)
    aliases: dict[int, int] = field(default_factory=dict)

    @property
    def star_range(self) -> str:
        """Return the ``min-max`` text a bare ``*`` is replaced with."""
        return f"{self.minimum}-{self.maximum}"

    @property
    def accepted_maximum(self) -> int:
        """Return the largest value accepted while parsing, aliases included."""
        return max(self.maximum, *self.aliases) if self.aliases else self.maximum

    def fold(self, value: int) -> int:
        """Return the canonical value for *value* (``7`` -> ``0`` for day of week)."""
        return self.aliases.get(value, value)


FIELD_DOMAINS: Final[dict[FieldKind, FieldDomain]] = {
    FieldKind.Minute: FieldDomain(0, 59),
    FieldKind.Hour: FieldDomain(0, 23),
    FieldKind.DayOfMonth: FieldDomain(1, 31),
    FieldKind.Month: FieldDomain(1, 12, names=MONTH_NAME_TO_INDEX),
    FieldKind.DayOfWeek: FieldDomain(0, 6, names=DAY_NAME_TO_INDEX, aliases={7: 0}),
}


@dataclass(frozen=True, slots=True)
class FieldSubentry:
    """One comma-separated unit of a field, after wildcard and name substitution.

    ``text`` keeps the substituted token for diagnostics and does not take part
    in equality, so ``*/1`` and ``0-59`` yield equal subentries.
    """

    range_start: int
    range_end: int
    step: int = 1
    text: str = field(default="", compare=False)


def parse_field(field_text: str, kind: FieldKind, *, expression: str = "") -> tuple[FieldSubentry, ...]:
    """Parse a single cron field into its subentries, in comma order.

    :param field_text: Raw text of the field, e.g. ``"*/15"`` or ``"MON-FRI,SUN"``.
    :param kind: Which of the five cron fields *field_text* belongs to.
    :param expression: Full cron expression, only used to enrich error messages.
    :returns: Subentries with bounds inside the field domain and ``step >= 1``.
    :raises MalformedFieldError: If any token is not a valid value, range or step.
    """
    domain = FIELD_DOMAINS[kind]
    if not field_text:
        raise _malformed_field(field_text, kind, expression, "field is empty")

    entry = field_text.replace("*", domain.star_range)
    return tuple(
        _parse_subentry(token, domain, kind, field_text, expression) for token in entry.split(",")
    )


def _parse_subentry(
    token: str, domain: FieldDomain, kind: FieldKind, field_text: str, expression: str
) -> FieldSubentry:
    """Interpret a single comma-separated token."""
    if not token:
        raise _malformed_field(field_text, kind, expression, "empty list item")

    range_spec, has_step, step_spec = token.partition("/")
    if "/" in step_spec:
        raise _malformed_field(field_text, kind, expression, f"{token!r} has more than one step")
    step = _parse_step(step_spec, token, kind, field_text, expression)

    start_spec, has_end, end_spec = range_spec.partition("-")
    if "-" in end_spec:
        raise _malformed_field(field_text, kind, expression, f"{token!r} is not a valid range")

    raw_start = _parse_value(start_spec, domain, kind, field_text, expression)
    # a leading alias is folded first, so "7-1" on day of week reads as "0-1"
    start = domain.fold(raw_start)
    if has_end:
        end = _parse_value(end_spec, domain, kind, field_text, expression)
        if end == raw_start:
            end = start
    elif has_step:
        # "5/15" runs from 5 up to the domain maximum
        end = domain.maximum
    else:
        end = start

    if start > end:
        raise _malformed_field(field_text, kind, expression, f"{token!r} is a descending range")

    return FieldSubentry(range_start=start, range_end=end, step=step, text=token)


def _parse_step(step_spec: str, token: str, kind: FieldKind, field_text: str, expression: str) -> int:
    if not step_spec:
        return 1
    if not _is_plain_int(step_spec):
        raise _malformed_field(field_text, kind, expression, f"{token!r} has a non-numeric step")
    step = int(step_spec)
    if step < 1:
        raise _malformed_field(field_text, kind, expression, f"{token!r} has a zero step")
    return step


def _parse_value(
    value_spec: str, domain: FieldDomain, kind: FieldKind, field_text: str, expression: str
) -> int:
    upper = value_spec.upper()
    if upper in domain.names:
        value = domain.names[upper]
    elif _is_plain_int(value_spec):
        value = int(value_spec)
    else:
        raise _malformed_field(field_text, kind, expression, f"{value_spec!r} is not a valid value")

    if not domain.minimum <= value <= domain.accepted_maximum:
        reason = f"{value} is outside {domain.minimum}-{domain.accepted_maximum}"
        raise _malformed_field(field_text, kind, expression, reason)
    return value


def _is_plain_int(text: str) -> bool:
    return text.isascii() and text.isdigit()


def _malformed_field(field_text: str, kind: FieldKind, expression: str, reason: str) -> MalformedFieldError:
    """Build a standardised :class:`MalformedFieldError` for invalid field input."""
    msg = f"{field_text!r} is not a valid {kind} field: {reason}."
    if expression:
        msg = f"{msg} Cron expression: {expression!r}."
    return MalformedFieldError(msg, field=field_text, expression=expression)
