"""Utility functions accessible from everywhere in the application."""

__all__ = ["coerce_enum", "make_specific_register_func", "register_implementation"]

from collections.abc import Callable

from cronspan.cron_types import TImplementation, TStrEnum
from cronspan.errors import InvalidConfigurationError


def register_implementation(
    registry: dict[TStrEnum, TImplementation], key: TStrEnum
) -> Callable[[TImplementation], TImplementation]:
    """Return a decorator that registers a class under *key* inside *registry*."""

    def wrapper(item: TImplementation) -> TImplementation:
        registry[key] = item
        return item

    return wrapper


def make_specific_register_func(
    registry_map: dict[TStrEnum, TImplementation],
) -> Callable[[TStrEnum], Callable[[TImplementation], TImplementation]]:
    """Build a helper that mirrors :func:`register_implementation` for a given map."""

    def _register(enum_key: TStrEnum) -> Callable[[TImplementation], TImplementation]:
        return register_implementation(registry_map, enum_key)

    return _register


def coerce_enum(value: TStrEnum | str, enum_cls: type[TStrEnum], *, name: str) -> TStrEnum:
    """Return *value* as a member of *enum_cls*.

    :param value: Enum member or its exact string value.
    :param enum_cls: Target enum class.
    :param name: Setting name used in the error message.
    :raises InvalidConfigurationError: If *value* is not a known member value.
    """
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(repr(member.value) for member in enum_cls)
        msg = f"{value!r} is not a valid value for {name!r}; expected one of {allowed}"
        raise InvalidConfigurationError(msg) from exc
