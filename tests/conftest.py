"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta

import pytest

from shelfai.library import Library
from shelfai.models import Book
from shelfai.sample_data import sample_books

NOW = datetime(2026, 3, 10, 12, 0, 0)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    """A clock frozen at ``NOW``."""
    return FakeClock()


@pytest.fixture
def books():
    """The sample catalogue, dated relative to ``NOW``."""
    return sample_books(NOW)


@pytest.fixture
def activity():
    """List collecting activity entries emitted by the library."""
    return []


@pytest.fixture
def library(books, clock, activity):
    """A library seeded with the sample catalogue."""
    return Library(books, clock=clock, activity_sink=activity.append)


@pytest.fixture
def make_book():
    """Factory for minimal books with overridable fields."""

    def _make(book_id: str, **fields) -> Book:
        fields.setdefault("title", f"Book {book_id}")
        fields.setdefault("date_added", NOW)
        return Book(book_id=book_id, **fields)

    return _make
