"""Rule-based book recommendations.

Both functions are pure: they filter the catalogue, stable-sort by average
rating (highest first, ties keep catalogue order) and truncate.
"""

from typing import Iterable

from .models import Book

HOME_MIN_RATING = 4.0
HOME_LIMIT = 5
RELATED_LIMIT = 3


def _by_rating(books: Iterable[Book]) -> list[Book]:
    return sorted(books, key=lambda b: b.rating, reverse=True)


def home_recommendations(books: Iterable[Book], limit: int = HOME_LIMIT) -> list[Book]:
    """Return highly rated books the user does not have yet.

    Parameters
    ----------
    books : iterable of Book
        The catalogue.
    limit : int, optional
        Maximum number of suggestions, by default 5.

    Returns
    -------
    list of Book
        Books outside the library rated at least ``HOME_MIN_RATING``.
    """
    candidates = (
        b for b in books if not b.is_in_library and b.rating >= HOME_MIN_RATING
    )
    return _by_rating(candidates)[:limit]


def related_recommendations(
    books: Iterable[Book], focal: Book, limit: int = RELATED_LIMIT
) -> list[Book]:
    """Return books sharing the primary category of *focal*.

    Parameters
    ----------
    books : iterable of Book
        The catalogue.
    focal : Book
        The book being viewed. It is never part of the result.
    limit : int, optional
        Maximum number of suggestions, by default 3.

    Returns
    -------
    list of Book
        Books outside the library whose categories include the focal book's
        primary category. Empty when *focal* has no categories.
    """
    if not focal.categories:
        return []
    genre = focal.categories[0]
    candidates = (
        b
        for b in books
        if b.book_id != focal.book_id
        and not b.is_in_library
        and genre in b.categories
    )
    return _by_rating(candidates)[:limit]
