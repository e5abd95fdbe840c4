"""Materialise the concrete values matched by parsed cron field subentries."""

from __future__ import annotations

__all__ = ["expand_field", "expand_subentry", "explain_field"]

from collections import defaultdict
from typing import TYPE_CHECKING

from cronspan.cron.field_parser import FIELD_DOMAINS, FieldKind, FieldSubentry, parse_field

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cronspan.cron_types import ValueSet


def expand_subentry(subentry: FieldSubentry, kind: FieldKind) -> ValueSet:
    """Return every domain value matched by *subentry*.

    A value ``v`` matches when ``range_start <= v <= range_end`` and
    ``(v - range_start) % step == 0``. Alias values are folded to their
    canonical form, so a day-of-week range ending in ``7`` yields ``0``.
    """
    domain = FIELD_DOMAINS[kind]
    values = range(subentry.range_start, subentry.range_end + 1, subentry.step)
    return frozenset(domain.fold(value) for value in values)


def expand_field(subentries: Iterable[FieldSubentry], kind: FieldKind) -> ValueSet:
    """Union the values of all *subentries*; comma lists are inclusive-or."""
    result: set[int] = set()
    for subentry in subentries:
        result.update(expand_subentry(subentry, kind))
    return frozenset(result)


def explain_field(field_text: str, kind: FieldKind) -> dict[int, tuple[str, ...]]:
    """Map each matched value of *field_text* to the subentry tokens that matched it.

    Tokens are reported after wildcard substitution and in comma order, which
    makes it easy to see why a value is (or is not) part of a schedule::

        >>> explain_field("*/15,5-45/10", FieldKind.Minute)[15]
        ('0-59/15', '5-45/10')

    :raises MalformedFieldError: If *field_text* cannot be parsed.
    """
    matches: defaultdict[int, list[str]] = defaultdict(list)
    for subentry in parse_field(field_text, kind):
        for value in sorted(expand_subentry(subentry, kind)):
            matches[value].append(subentry.text)
    return {value: tuple(matches[value]) for value in sorted(matches)}
