"""Library facade: the single entry point into the ShelfAI core.

A ``Library`` owns the catalogue, the reading goal, the settings, the
derived statistics, the recently viewed list and the current
recommendations. Every command locates its book, mutates it through the
lending or progress component, recomputes what depends on the change and
returns a detached snapshot. Queries also return snapshots, so callers can
never change library state except through the commands.
"""

import copy
import logging
import uuid
from datetime import datetime
from typing import Callable, Iterable, Optional

from . import catalog, lending, progress, recommend
from .activity_log import ActivityEntry, make_entry
from .catalog import Catalog
from .errors import BookNotFoundError, ConfigurationError, InvalidBookError
from .models import Book, ReadingGoal, TimeFrame, UserStats
from .settings import (
    MAX_FONT_SIZE,
    MIN_FONT_SIZE,
    AppSettings,
    ColorScheme,
    font_size_in_range,
)

logger = logging.getLogger(__name__)

RECENTLY_VIEWED_LIMIT = 5
MIN_GOAL_TARGET = 1
MAX_GOAL_TARGET = 100

ActivitySink = Callable[[ActivityEntry], None]


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _snapshot(book: Book) -> Book:
    return copy.deepcopy(book)


def _snapshots(books: Iterable[Book]) -> list[Book]:
    return [copy.deepcopy(b) for b in books]


class Library:
    """In-memory library state for one user session.

    Construct one instance per session and pass it to the presentation
    layer. The instance is not thread-safe: a command mutates and then
    recomputes in several steps, so concurrent callers must serialise their
    calls.

    Parameters
    ----------
    books : iterable of Book, optional
        Initial catalogue. The library keeps its own copies.
    reading_goal : ReadingGoal, optional
        Initial goal, by default 10 books a month.
    settings : AppSettings, optional
        Initial settings, by default ``AppSettings()``.
    reading_streak : int, optional
        Streak carried over from the previous session. It is checked once
        against the latest reading date when the library is created.
    clock : callable, optional
        Returns the current time. Defaults to ``datetime.now``.
    activity_sink : callable, optional
        Receives an ``ActivityEntry`` for every applied change.
    source : str, optional
        Source name recorded in activity entries, by default ``"core"``.
    """

    def __init__(
        self,
        books: Optional[Iterable[Book]] = None,
        *,
        reading_goal: Optional[ReadingGoal] = None,
        settings: Optional[AppSettings] = None,
        reading_streak: int = 0,
        clock: Callable[[], datetime] = datetime.now,
        activity_sink: Optional[ActivitySink] = None,
        source: str = "core",
    ) -> None:
        self._catalog = Catalog(_snapshots(books or ()))
        self._goal = copy.copy(reading_goal) if reading_goal else ReadingGoal()
        self._settings = copy.copy(settings) if settings else AppSettings()
        self._clock = clock
        self._activity_sink = activity_sink
        self._source = source

        self._recently_viewed: list[str] = []
        self._focal_id: Optional[str] = None
        self._home: list[Book] = []
        self._recommendations: list[Book] = []

        now = self._clock()
        lending.recompute_overdue(self._catalog, now)
        stats = progress.recompute_stats(self._catalog, reading_streak)
        stats.reading_streak = progress.check_reading_streak(
            reading_streak, stats.last_reading_date, now
        )
        self._stats = stats
        self._refresh_home()

    # ------------------------------------------------------------------
    # Internal helpers

    def _locate(self, book_id: str) -> Book:
        book = self._catalog.get(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    def _record(
        self, action: str, book: Optional[Book], now: datetime, **details
    ) -> None:
        if self._activity_sink is None:
            return
        self._activity_sink(
            make_entry(
                action,
                self._source,
                book_id=book.book_id if book else None,
                title=book.title if book else None,
                timestamp=now,
                **details,
            )
        )

    def _recompute_stats(self) -> None:
        self._stats = progress.recompute_stats(
            self._catalog, self._stats.reading_streak
        )

    def _refresh_home(self) -> None:
        self._home = recommend.home_recommendations(self._catalog)
        if self._focal_id is None:
            self._recommendations = list(self._home)

    def _focus(self, book: Book) -> None:
        self._focal_id = book.book_id
        self._recommendations = recommend.related_recommendations(self._catalog, book)

    def _refresh_focus(self) -> None:
        focal = self._catalog.get(self._focal_id) if self._focal_id else None
        if focal is None:
            self._focal_id = None
            self._recommendations = list(self._home)
        else:
            self._focus(focal)

    # ------------------------------------------------------------------
    # Lending commands

    def borrow(self, book_id: str) -> Book:
        """Check out an available book for 14 days and add it to the library.

        Borrowing a book that is not available leaves it unchanged.
        """
        book = self._locate(book_id)
        now = self._clock()
        if lending.borrow(book, now):
            self._record("borrow", book, now, due_date=book.due_date.isoformat())
            self._recompute_stats()
            self._refresh_home()
            self._focus(book)
        return _snapshot(book)

    def return_book(self, book_id: str) -> Book:
        book = self._locate(book_id)
        now = self._clock()
        if lending.return_book(book, now):
            self._record("return", book, now)
            self._recompute_stats()
        return _snapshot(book)

    def renew(self, book_id: str) -> Book:
        """Extend a checked-out book's due date to 14 days from now."""
        book = self._locate(book_id)
        now = self._clock()
        if lending.renew(book, now):
            self._record("renew", book, now, due_date=book.due_date.isoformat())
            self._recompute_stats()
        return _snapshot(book)

    def reserve(self, book_id: str) -> Book:
        book = self._locate(book_id)
        now = self._clock()
        if lending.reserve(book, now):
            self._record("reserve", book, now)
            self._recompute_stats()
        return _snapshot(book)

    def cancel_reservation(self, book_id: str) -> Book:
        book = self._locate(book_id)
        now = self._clock()
        if lending.cancel_reservation(book, now):
            self._record("cancel_reservation", book, now)
            self._recompute_stats()
        return _snapshot(book)

    def refresh_overdue(self) -> list[Book]:
        """Move checked-out books past their due date to overdue.

        Idempotent. Every query runs it first so due-date views are current.

        Returns
        -------
        list of Book
            Snapshots of the books that became overdue.
        """
        now = self._clock()
        changed = lending.recompute_overdue(self._catalog, now)
        for book in changed:
            self._record("overdue", book, now)
        if changed:
            self._recompute_stats()
        return _snapshots(changed)

    # ------------------------------------------------------------------
    # Reading commands

    def update_progress(self, book_id: str, value: float) -> Book:
        """Record reading progress for a book.

        Values outside ``[0, 1]`` are clamped. Reaching ``1`` marks the book
        as read and counts it towards the reading goal, once per completion.
        """
        book = self._locate(book_id)
        now = self._clock()
        completed = progress.update_progress(book, value, now)
        if completed:
            self._goal.current += 1
        self._record(
            "update_progress",
            book,
            now,
            progress=book.reading_progress,
            completed=completed,
        )
        self._recompute_stats()
        return _snapshot(book)

    def toggle_read_status(self, book_id: str) -> Book:
        """Flip a book between read and unread.

        Marking a book read counts it towards the reading goal and shows
        recommendations related to it.
        """
        book = self._locate(book_id)
        now = self._clock()
        became_read = progress.toggle_read(book, now)
        if became_read:
            self._goal.current += 1
            self._focus(book)
        self._record("toggle_read", book, now, is_read=book.is_read)
        self._recompute_stats()
        return _snapshot(book)

    def mark_currently_reading(self, book_id: str) -> Book:
        """Start reading an unstarted book."""
        book = self._locate(book_id)
        now = self._clock()
        if progress.mark_currently_reading(book, now):
            self._record("start_reading", book, now)
            self._recompute_stats()
        return _snapshot(book)

    # ------------------------------------------------------------------
    # Catalogue commands

    def toggle_library_membership(self, book_id: str) -> Book:
        """Add a book to, or remove it from, the user's library.

        Adding stamps ``date_added``. Both directions recompute the home and
        related recommendations.
        """
        book = self._locate(book_id)
        now = self._clock()
        book.is_in_library = not book.is_in_library
        if book.is_in_library:
            book.date_added = now
        self._record("toggle_library", book, now, is_in_library=book.is_in_library)
        self._recompute_stats()
        self._refresh_home()
        self._focus(book)
        return _snapshot(book)

    def add_manual_book(
        self,
        title: str,
        author: str,
        page_count: int,
        genre: str,
        cover_id: Optional[str] = None,
    ) -> Book:
        """Add a book entered by hand to the library.

        Parameters
        ----------
        title : str
            Book title.
        author : str
            Single author name.
        page_count : int
            Total number of pages. Must be positive.
        genre : str
            Primary category.
        cover_id : str, optional
            Cover identifier, e.g. from an ISBN lookup.

        Returns
        -------
        Book
            Snapshot of the new book, which gets a fresh random id.

        Raises
        ------
        InvalidBookError
            If title, author or genre is blank, or *page_count* is not a
            positive integer.
        """
        title, author, genre = title.strip(), author.strip(), genre.strip()
        if not (title and author and genre):
            raise InvalidBookError("Title, author and genre are required")
        if not _is_int(page_count) or page_count <= 0:
            raise InvalidBookError(f"Invalid page count: {page_count!r}")

        now = self._clock()
        book = Book(
            book_id=str(uuid.uuid4()),
            title=title,
            authors=[author],
            page_count=page_count,
            categories=[genre],
            cover_id=cover_id or None,
            is_in_library=True,
            date_added=now,
        )
        self._catalog.upsert(book)
        logger.debug("Added %s (%s)", book.book_id, book.title)
        self._record("add_book", book, now, genre=genre, page_count=page_count)
        self._recompute_stats()
        self._refresh_home()
        return _snapshot(book)

    def remove_book(self, book_id: str) -> Book:
        """Remove a book from the catalogue and return its last snapshot."""
        book = self._locate(book_id)
        now = self._clock()
        self._catalog.remove(book_id)
        logger.debug("Removed %s (%s)", book_id, book.title)
        if book_id in self._recently_viewed:
            self._recently_viewed.remove(book_id)
        self._record("remove_book", book, now)
        self._recompute_stats()
        self._refresh_home()
        self._refresh_focus()
        return _snapshot(book)

    def update_notes(self, book_id: str, notes: str) -> Book:
        book = self._locate(book_id)
        now = self._clock()
        book.notes = notes
        self._record("update_notes", book, now)
        self._recompute_stats()
        return _snapshot(book)

    def update_user_rating(self, book_id: str, rating: Optional[int]) -> Book:
        """Set the user's own 1-5 rating for a book, or clear it with ``None``.

        Raises
        ------
        InvalidBookError
            If *rating* is not ``None`` or an integer from 1 to 5.
        """
        book = self._locate(book_id)
        if rating is not None and (not _is_int(rating) or not 1 <= rating <= 5):
            raise InvalidBookError(f"Rating must be between 1 and 5, got {rating!r}")
        now = self._clock()
        book.user_rating = rating
        self._record("update_rating", book, now, rating=rating)
        self._recompute_stats()
        return _snapshot(book)

    def add_to_recently_viewed(self, book_id: str) -> Book:
        """Record a view of a book and show recommendations related to it.

        Only the first view of a book inserts it at the front of the list;
        viewing a book already in the list keeps its position. At most
        ``RECENTLY_VIEWED_LIMIT`` books are kept, the oldest dropped first.
        """
        book = self._locate(book_id)
        if book_id not in self._recently_viewed:
            self._recently_viewed.insert(0, book_id)
            del self._recently_viewed[RECENTLY_VIEWED_LIMIT:]
        self._focus(book)
        return _snapshot(book)

    def clear_focus(self) -> list[Book]:
        """Leave the focal book and show the home recommendations again."""
        self._focal_id = None
        self._recommendations = list(self._home)
        return _snapshots(self._recommendations)

    # ------------------------------------------------------------------
    # Goal and settings commands

    def set_reading_goal(
        self, target: int, time_frame: Optional[TimeFrame] = None
    ) -> ReadingGoal:
        """Configure the reading goal target and, optionally, its time frame.

        The books already counted are kept.

        Raises
        ------
        ConfigurationError
            If *target* is outside ``MIN_GOAL_TARGET`` to ``MAX_GOAL_TARGET``.
        """
        if not _is_int(target):
            raise ConfigurationError(f"Goal target must be an integer, got {target!r}")
        if not MIN_GOAL_TARGET <= target <= MAX_GOAL_TARGET:
            raise ConfigurationError(
                f"Goal target must be between {MIN_GOAL_TARGET} and "
                f"{MAX_GOAL_TARGET}, got {target}"
            )
        self._goal.target = target
        if time_frame is not None:
            self._goal.time_frame = TimeFrame(time_frame)
        self._record(
            "set_goal",
            None,
            self._clock(),
            target=target,
            time_frame=self._goal.time_frame.value,
        )
        return copy.copy(self._goal)

    def reset_reading_goal(self) -> ReadingGoal:
        self._goal.current = 0
        self._record("reset_goal", None, self._clock())
        return copy.copy(self._goal)

    def set_color_scheme(self, scheme: ColorScheme) -> AppSettings:
        try:
            self._settings.color_scheme = ColorScheme(scheme)
        except ValueError as e:
            raise ConfigurationError(f"Unknown color scheme: {scheme!r}") from e
        return self.settings

    def set_notifications_enabled(self, enabled: bool) -> AppSettings:
        self._settings.notifications_enabled = bool(enabled)
        return self.settings

    def set_sync_with_cloud(self, enabled: bool) -> AppSettings:
        self._settings.sync_with_cloud = bool(enabled)
        return self.settings

    def set_font_size(self, size: float) -> AppSettings:
        """Set the preferred font size.

        Raises
        ------
        ConfigurationError
            If *size* is outside ``MIN_FONT_SIZE`` to ``MAX_FONT_SIZE``.
        """
        if not font_size_in_range(size):
            raise ConfigurationError(
                f"Font size must be between {MIN_FONT_SIZE:g} and "
                f"{MAX_FONT_SIZE:g}, got {size}"
            )
        self._settings.preferred_font_size = float(size)
        return self.settings

    def set_show_reading_progress(self, enabled: bool) -> AppSettings:
        self._settings.show_reading_progress = bool(enabled)
        return self.settings

    # ------------------------------------------------------------------
    # Queries

    def books(self) -> list[Book]:
        self.refresh_overdue()
        return _snapshots(self._catalog)

    def get_book(self, book_id: str) -> Book:
        self.refresh_overdue()
        return _snapshot(self._locate(book_id))

    def currently_reading(self) -> list[Book]:
        self.refresh_overdue()
        return _snapshots(catalog.currently_reading(self._catalog))

    def want_to_read(self) -> list[Book]:
        self.refresh_overdue()
        return _snapshots(catalog.want_to_read(self._catalog))

    def finished_books(self) -> list[Book]:
        self.refresh_overdue()
        return _snapshots(catalog.finished_books(self._catalog))

    def checked_out_books(self) -> list[Book]:
        self.refresh_overdue()
        return _snapshots(catalog.checked_out_books(self._catalog))

    def overdue_books(self) -> list[Book]:
        self.refresh_overdue()
        return _snapshots(catalog.overdue_books(self._catalog))

    def search(self, query: str) -> list[Book]:
        self.refresh_overdue()
        return _snapshots(catalog.search_books(self._catalog, query))

    def genres(self) -> list[str]:
        return catalog.get_genres(self._catalog)

    def books_in_genre(self, genre: str) -> list[Book]:
        self.refresh_overdue()
        return _snapshots(catalog.books_in_genre(self._catalog, genre))

    def days_until_due(self, book_id: str) -> Optional[int]:
        """Return calendar days until a book is due, negative once overdue."""
        return self._locate(book_id).days_until_due(self._clock())

    def recently_viewed(self) -> list[Book]:
        """Return the recently viewed books, most recent first."""
        return _snapshots(self._catalog.get(i) for i in self._recently_viewed)

    def recommendations(self) -> list[Book]:
        """Return the current recommendations.

        These are related to the focal book after a view, and the home
        recommendations otherwise.
        """
        self.refresh_overdue()
        return _snapshots(self._recommendations)

    def home_recommendations(self) -> list[Book]:
        self.refresh_overdue()
        return _snapshots(self._home)

    def related_recommendations(self, book_id: str) -> list[Book]:
        """Return recommendations related to a book without changing focus."""
        focal = self._locate(book_id)
        return _snapshots(recommend.related_recommendations(self._catalog, focal))

    @property
    def reading_goal(self) -> ReadingGoal:
        return copy.copy(self._goal)

    @property
    def goal_progress(self) -> float:
        return self._goal.progress

    @property
    def stats(self) -> UserStats:
        self.refresh_overdue()
        return copy.copy(self._stats)

    @property
    def settings(self) -> AppSettings:
        return copy.copy(self._settings)

    def __len__(self) -> int:
        return len(self._catalog)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._catalog
