"""Storage for vault events."""

from .repository import EventRepository

__all__ = ["EventRepository"]
