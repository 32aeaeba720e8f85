"""Data model for the ShelfAI library core.

Defines the ``Book`` dataclass, the lending status enum, the reading goal
and the derived user statistics used throughout the application.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

COVER_URL_TEMPLATE = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"


class LendingStatus(str, Enum):
    """Borrow/hold state of a book. Exactly one value per book."""

    AVAILABLE = "available"
    CHECKED_OUT = "checked_out"
    OVERDUE = "overdue"
    RESERVED = "reserved"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class TimeFrame(str, Enum):
    """Period a reading goal is counted over."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


@dataclass
class Book:
    """A book in the catalogue together with the user's state for it.

    Fields are grouped into immutable catalogue metadata and the mutable
    per-user state that the library commands change.

    Attributes
    ----------
    book_id : str
        Stable unique identifier.
    title : str
        Main title of the book.
    authors : list of str
        Author names, in credit order.
    publisher : str or None
        Publisher name.
    published_date : str or None
        Publication date as supplied by the source (year or ISO date).
    description : str or None
        Book description or synopsis.
    page_count : int or None
        Total number of pages.
    categories : list of str
        Category names; the first one is the primary category.
    average_rating : float or None
        Community average rating on a 0-5 scale.
    cover_id : str or None
        Open Library cover identifier.
    is_read : bool
        Whether the user has finished the book.
    is_in_library : bool
        Whether the book is in the user's own library.
    reading_progress : float
        Fraction read, in ``[0, 1]``.
    last_read_date : datetime or None
        Time of the most recent progress update.
    status : LendingStatus
        Current lending status.
    due_date : datetime or None
        Due date; only set while checked out or overdue.
    notes : str
        Free-text notes.
    user_rating : int or None
        The user's own rating, 1 to 5.
    date_added : datetime
        When the book was added to the library.
    """

    # Catalogue metadata
    book_id: str
    title: str
    authors: list[str] = field(default_factory=list)
    publisher: Optional[str] = None
    published_date: Optional[str] = None
    description: Optional[str] = None
    page_count: Optional[int] = None
    categories: list[str] = field(default_factory=list)
    average_rating: Optional[float] = None
    cover_id: Optional[str] = None

    # Per-user state
    is_read: bool = False
    is_in_library: bool = False
    reading_progress: float = 0.0
    last_read_date: Optional[datetime] = None
    status: LendingStatus = LendingStatus.AVAILABLE
    due_date: Optional[datetime] = None
    notes: str = ""
    user_rating: Optional[int] = None
    date_added: datetime = field(default_factory=datetime.now)

    @property
    def author(self) -> str:
        """Return the author names joined with commas."""
        return ", ".join(self.authors)

    @property
    def genre(self) -> str:
        """Return the primary category, or ``"Unknown"`` when uncategorised."""
        return self.categories[0] if self.categories else "Unknown"

    @property
    def rating(self) -> float:
        return self.average_rating if self.average_rating is not None else 0.0

    @property
    def cover_url(self) -> Optional[str]:
        """Return the Open Library cover URL, or ``None`` without a cover id."""
        if not self.cover_id:
            return None
        return COVER_URL_TEMPLATE.format(cover_id=self.cover_id)

    @property
    def published_year(self) -> str:
        """Return the publication year when the date starts with one.

        Returns
        -------
        str
            The four-digit year, the raw date string when it does not start
            with a year, or ``"Unknown"`` when no date is set.
        """
        if not self.published_date:
            return "Unknown"
        prefix = self.published_date[:4]
        if prefix.isdigit():
            return prefix
        return self.published_date

    def days_until_due(self, now: datetime) -> Optional[int]:
        """Return calendar days from *now* until the due date.

        Negative values mean the due date has passed. ``None`` when the book
        has no due date.
        """
        if self.due_date is None:
            return None
        return (self.due_date.date() - now.date()).days

    def display_title(self, max_length: int = 50) -> str:
        """Return title truncated with ellipsis if needed."""
        if len(self.title) <= max_length:
            return self.title
        return self.title[: max_length - 3] + "..."

    def display_authors(self, max_length: int = 30) -> str:
        """Return authors truncated with ellipsis if needed."""
        author = self.author
        if len(author) <= max_length:
            return author
        return author[: max_length - 3] + "..."


@dataclass
class ReadingGoal:
    """Number of books the user wants to finish in a time frame.

    Attributes
    ----------
    target : int
        Books to finish.
    current : int
        Books finished so far.
    time_frame : TimeFrame
        Period the goal covers.
    """

    target: int = 10
    current: int = 0
    time_frame: TimeFrame = TimeFrame.MONTHLY

    @property
    def progress(self) -> float:
        """Return ``current / target``, or ``0.0`` for a non-positive target."""
        if self.target <= 0:
            return 0.0
        return self.current / self.target


NO_FAVORITE_GENRE = "None"


@dataclass
class UserStats:
    """Reading statistics derived from the catalogue.

    Attributes
    ----------
    total_books_read : int
        Number of books marked read.
    pages_read : int
        Sum of page counts over read books.
    favorite_genre : str
        Most common primary category among read books, or
        ``NO_FAVORITE_GENRE`` when nothing has been read.
    reading_streak : int
        Consecutive days with reading activity.
    last_reading_date : datetime or None
        Most recent reading activity across the catalogue.
    """

    total_books_read: int = 0
    pages_read: int = 0
    favorite_genre: str = NO_FAVORITE_GENRE
    reading_streak: int = 0
    last_reading_date: Optional[datetime] = None
