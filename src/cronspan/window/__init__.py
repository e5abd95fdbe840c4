"""Window strategies bounding cron expansions."""

from .window import AbstractWindow, EntryWindow, GlobalWindow, ScheduleEntry, WindowProtocol

__all__ = ["AbstractWindow", "EntryWindow", "GlobalWindow", "ScheduleEntry", "WindowProtocol"]
