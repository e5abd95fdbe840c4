"""Some common constants and enums which may be used in any modules."""

from __future__ import annotations

from typing import Final

from cronspan.py_compatibility import StrEnum

EXPECTED_FIELD_COUNT: Final[int] = 5
DEFAULT_MAX_DATE_RANGE: Final[int] = 1095  # 365 * 3


class DayMatchPolicy(StrEnum):
    """Enum of known policies deciding how day-of-month and day-of-week are combined."""

    Vixie = "vixie"
    """Intersect when either day field starts with ``*``, otherwise union."""
    Contains = "contains"
    """Intersect when either day field contains ``*`` anywhere, otherwise union."""
    Union = "union"
    """Always union."""
    Intersect = "intersect"
    """Always intersect."""


class DayMatchMode(StrEnum):
    """Enum of resolved day matching modes for a single expression."""

    Union = "union"
    """Date matches when day-of-month OR day-of-week matches."""
    Intersect = "intersect"
    """Date matches only when day-of-month AND day-of-week match."""
