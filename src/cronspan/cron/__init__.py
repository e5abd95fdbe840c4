"""Parsing, expansion and day matching of five-field cron expressions."""

from __future__ import annotations

from .day_filter import day_matches, month_matches, valid_days_of_month
from .day_match import KNOWN_DAY_MATCH_RESOLVERS, resolve_day_match_mode
from .expander import expand_field, expand_subentry, explain_field
from .expression import CronExpression, CronSchedule, parse_cron
from .field_parser import FieldKind, FieldSubentry, parse_field

__all__ = [
    "KNOWN_DAY_MATCH_RESOLVERS",
    "CronExpression",
    "CronSchedule",
    "FieldKind",
    "FieldSubentry",
    "day_matches",
    "expand_field",
    "expand_subentry",
    "explain_field",
    "month_matches",
    "parse_cron",
    "parse_field",
    "resolve_day_match_mode",
    "valid_days_of_month",
]
