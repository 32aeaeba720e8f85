"""Reading progress, completion and statistics.

Progress mutators update a single book and report whether it crossed into
completion, so the caller can count it towards the reading goal exactly once.
``recompute_stats`` and ``check_reading_streak`` are pure.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .models import NO_FAVORITE_GENRE, Book, UserStats

logger = logging.getLogger(__name__)

STARTED_PROGRESS = 0.1


def _clamp(progress: float) -> float:
    clamped = min(1.0, max(0.0, float(progress)))
    if clamped != progress:
        logger.debug("Progress %r clamped to %r", progress, clamped)
    return clamped


def update_progress(book: Book, progress: float, now: datetime) -> bool:
    """Record reading progress for *book*.

    Values outside ``[0, 1]`` are clamped. Reaching ``1`` marks the book as
    read.

    Parameters
    ----------
    book : Book
        The book to update.
    progress : float
        Fraction read.
    now : datetime
        Time of the reading activity.

    Returns
    -------
    bool
        ``True`` only when this call moved an unread, unfinished book to
        finished. Books already read or complete return ``False``.
    """
    progress = _clamp(progress)
    was_finished = book.is_read or book.reading_progress >= 1
    book.reading_progress = progress
    book.last_read_date = now
    if progress >= 1:
        book.is_read = True
        return not was_finished
    return False


def toggle_read(book: Book, now: datetime) -> bool:
    """Flip the read flag of *book*.

    Marking a book read sets its progress to complete. Marking it unread
    resets the progress so a finished progress never sits on an unread book.

    Returns
    -------
    bool
        ``True`` when the book became read.
    """
    book.is_read = not book.is_read
    if book.is_read:
        book.reading_progress = 1.0
        book.last_read_date = now
        return True
    book.reading_progress = 0.0
    return False


def mark_currently_reading(book: Book, now: datetime) -> bool:
    """Start an unstarted, unread book. Other books are left alone."""
    if book.is_read or book.reading_progress > 0:
        return False
    book.reading_progress = STARTED_PROGRESS
    book.last_read_date = now
    return True


def _favorite_genre(read: list[Book]) -> str:
    if not read:
        return NO_FAVORITE_GENRE
    # Counter preserves first-seen order, so most_common breaks ties by it
    counts = Counter(b.genre for b in read)
    return counts.most_common(1)[0][0]


def recompute_stats(books: Iterable[Book], reading_streak: int = 0) -> UserStats:
    """Derive user statistics from the catalogue.

    Parameters
    ----------
    books : iterable of Book
        The full catalogue.
    reading_streak : int, optional
        Current streak to carry into the result. The streak is not derivable
        from the catalogue alone.

    Returns
    -------
    UserStats
        Fresh statistics.
    """
    books = list(books)
    read = [b for b in books if b.is_read]
    dates = [b.last_read_date for b in books if b.last_read_date is not None]
    return UserStats(
        total_books_read=len(read),
        pages_read=sum(b.page_count or 0 for b in read),
        favorite_genre=_favorite_genre(read),
        reading_streak=reading_streak,
        last_reading_date=max(dates) if dates else None,
    )


def check_reading_streak(
    streak: int, last_reading_date: Optional[datetime], now: datetime
) -> int:
    """Return the streak after a new session starts at *now*.

    The streak is kept when the last reading happened today, extended by one
    when it happened yesterday and reset otherwise.
    """
    if last_reading_date is None:
        return 0
    today = now.date()
    last_day = last_reading_date.date()
    if last_day == today:
        return streak
    if last_day == today - timedelta(days=1):
        return streak + 1
    return 0
