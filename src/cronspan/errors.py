"""Module containing cronspan-related errors."""


class CronspanError(Exception):
    """Base class for all cronspan-related errors."""


class MalformedFieldError(CronspanError, ValueError):
    """Raised when a cron field token is not a valid list, range or step construct.

    :param message: Human readable description of the problem.
    :param field: Raw text of the offending cron field.
    :param expression: Full cron expression the field belongs to, when known.
    """

    def __init__(self, message: str, *, field: str = "", expression: str = "") -> None:
        self.field = field
        self.expression = expression
        super().__init__(message)


class InvalidWindowError(CronspanError, ValueError):
    """Raised when a window is empty or reversed (start >= end, negative ``days_forward``)."""


class WindowTooLargeError(InvalidWindowError):
    """Raised when a window spans more days than the configured ``max_date_range``."""


class InvalidConfigurationError(CronspanError, ValueError):
    """Raised when a configuration value (e.g. ``day_match_mode``) is not recognised."""


class ResultLimitExceededError(CronspanError):
    """Raised when a single expansion produces more instants than ``max_results`` allows."""


class CronspanApplicationError(CronspanError, AssertionError):
    """Raised when a cronspan development error occurred.

    Used for future-proofing of some functions to ensure code is working as expected during the development phase.
    """
