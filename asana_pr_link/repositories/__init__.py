"""Task tracker implementations."""

from .asana import AsanaTaskTracker
from .memory import InMemoryTaskTracker

__all__ = [
    "AsanaTaskTracker",
    "InMemoryTaskTracker",
]
