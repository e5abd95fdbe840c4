"""Collection of generic types and type aliases for cronspan."""

__all__ = ["CronText", "EntryId", "TImplementation", "TStrEnum", "ValueSet"]

from typing import TypeAlias, TypeVar

from cronspan.py_compatibility import StrEnum

TStrEnum = TypeVar("TStrEnum", bound=StrEnum)
TImplementation = TypeVar("TImplementation")
CronText: TypeAlias = str
EntryId: TypeAlias = str
ValueSet: TypeAlias = frozenset[int]
