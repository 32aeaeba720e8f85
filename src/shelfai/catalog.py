"""In-memory book catalogue and read-only queries over it.

``Catalog`` owns the book records keyed by id. The module-level functions
are pure views over any iterable of books, used by the library facade to
answer the presentation layer's queries.
"""

from datetime import datetime
from typing import Iterable, Iterator, Optional

from .models import Book, LendingStatus

ALL_GENRES = "All"


class Catalog:
    """Mapping of book id to ``Book``.

    Adding a book whose id is already present replaces the existing record.
    Callers are responsible for generating unique ids.
    """

    def __init__(self, books: Optional[Iterable[Book]] = None) -> None:
        self._books: dict[str, Book] = {}
        for book in books or ():
            self.upsert(book)

    def get(self, book_id: str) -> Optional[Book]:
        """Look up a single book by id.

        Parameters
        ----------
        book_id : str
            The id to look up.

        Returns
        -------
        Book or None
            The matching book, or ``None`` if not found.
        """
        return self._books.get(book_id)

    def all(self) -> list[Book]:
        """Return all books in insertion order."""
        return list(self._books.values())

    def upsert(self, book: Book) -> None:
        """Insert *book*, replacing any record with the same id."""
        self._books[book.book_id] = book

    def remove(self, book_id: str) -> Optional[Book]:
        """Remove and return the book with *book_id*, if present."""
        return self._books.pop(book_id, None)

    def __len__(self) -> int:
        return len(self._books)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._books

    def __iter__(self) -> Iterator[Book]:
        return iter(list(self._books.values()))


def currently_reading(books: Iterable[Book]) -> list[Book]:
    """Return started but unfinished books, most recently read first.

    Books without a last-read date sort after the dated ones.
    """
    started = [b for b in books if 0 < b.reading_progress < 1]
    return sorted(
        started,
        key=lambda b: b.last_read_date or datetime.min,
        reverse=True,
    )


def want_to_read(books: Iterable[Book]) -> list[Book]:
    """Return books in the library that have not been started."""
    return [b for b in books if b.is_in_library and b.reading_progress == 0]


def finished_books(books: Iterable[Book]) -> list[Book]:
    return [b for b in books if b.is_read]


def checked_out_books(books: Iterable[Book]) -> list[Book]:
    """Return books currently on loan, overdue ones included."""
    return [
        b
        for b in books
        if b.status in (LendingStatus.CHECKED_OUT, LendingStatus.OVERDUE)
    ]


def overdue_books(books: Iterable[Book]) -> list[Book]:
    return [b for b in books if b.status == LendingStatus.OVERDUE]


def search_books(books: Iterable[Book], query: str) -> list[Book]:
    """Search books by title, author, or publisher.

    Matching is a case-insensitive substring test.

    Parameters
    ----------
    books : iterable of Book
        Books to search.
    query : str
        The search term. An empty query matches every book.

    Returns
    -------
    list of Book
        Matching books in catalogue order.
    """
    if not query:
        return list(books)
    needle = query.casefold()
    return [
        b
        for b in books
        if needle in b.title.casefold()
        or needle in b.author.casefold()
        or needle in (b.publisher or "").casefold()
    ]


def get_genres(books: Iterable[Book]) -> list[str]:
    """Return ``"All"`` followed by every distinct category, sorted.

    Parameters
    ----------
    books : iterable of Book
        Books to collect categories from.

    Returns
    -------
    list of str
        Genre names for a filter picker.
    """
    categories = {category for b in books for category in b.categories}
    return [ALL_GENRES] + sorted(categories - {ALL_GENRES})


def books_in_genre(books: Iterable[Book], genre: str) -> list[Book]:
    """Return books listing *genre* among their categories.

    ``"All"`` returns every book.
    """
    if genre == ALL_GENRES:
        return list(books)
    return [b for b in books if genre in b.categories]
