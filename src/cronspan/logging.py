"""Logging helpers shared by cronspan components."""

from __future__ import annotations

__all__ = ["DEFAULT_LOG_FORMAT", "WithLogger", "configure_logging"]

import logging
from typing import ClassVar, Final

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class WithLogger:
    """Mixin providing a class-named logger through the ``_logger`` attribute."""

    _logger_instance: ClassVar[logging.Logger | None] = None

    @classmethod
    def _get_logger(cls) -> logging.Logger:
        """Return (and cache on the class) the logger named after the class."""
        cached = cls.__dict__.get("_logger_instance")
        if cached is None:
            cached = logging.getLogger(cls.__name__)
            cls._logger_instance = cached
        return cached

    @property
    def _logger(self) -> logging.Logger:
        return self._get_logger()


def configure_logging(level: int | str = logging.INFO, fmt: str = DEFAULT_LOG_FORMAT) -> None:
    """Configure the root logger with a stream handler and *fmt*.

    :param level: Numeric level or a level name such as ``"DEBUG"``.
    :param fmt: Format string applied to the handler.
    :raises ValueError: If *level* is a string that is not a logging level name.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            msg = f"{level!r} is not a valid logging level name"
            raise ValueError(msg)
        level = resolved

    root_logger = logging.getLogger()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
