"""ShelfAI - in-memory library state for a personal book collection."""

from .errors import (
    BookNotFoundError,
    ConfigurationError,
    InvalidBookError,
    InvalidTransitionError,
    LibraryError,
)
from .library import Library
from .models import Book, LendingStatus, ReadingGoal, TimeFrame, UserStats
from .settings import AppSettings, ColorScheme

__version__ = "0.1.0"

__all__ = [
    "AppSettings",
    "Book",
    "BookNotFoundError",
    "ColorScheme",
    "ConfigurationError",
    "InvalidBookError",
    "InvalidTransitionError",
    "LendingStatus",
    "Library",
    "LibraryError",
    "ReadingGoal",
    "TimeFrame",
    "UserStats",
]
