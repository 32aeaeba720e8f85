"""CSV import for seeding a ShelfAI session.

Reads a CSV export of a book list and turns each row into a ``Book``,
skipping rows without a title and rows whose id was already seen. The
library core has no storage of its own; the CLI uses this to build the
initial catalogue of a session.
"""

import uuid
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import pandas as pd

from .models import Book, LendingStatus

_LOAN_STATUSES = (LendingStatus.CHECKED_OUT, LendingStatus.OVERDUE)


def _parse_datetime(value) -> Optional[datetime]:
    """Parse a date or datetime from a CSV cell.

    Parameters
    ----------
    value : any
        Raw value from the CSV. May be ``NaN`` or empty.

    Returns
    -------
    datetime or None
        Parsed value (dates become midnight), or ``None`` if unparseable.
    """
    if pd.isna(value) or not value:
        return None
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _parse_int(value) -> Optional[int]:
    if pd.isna(value):
        return None
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return None


def _parse_float(value) -> Optional[float]:
    if pd.isna(value):
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def _parse_bool(value) -> bool:
    """Parse a boolean value from a CSV cell.

    Accepts ``1``, ``true``, ``yes`` (case-insensitive) as truthy.

    Parameters
    ----------
    value : any
        Raw value from the CSV. May be ``NaN``.

    Returns
    -------
    bool
        Parsed boolean, or ``False`` if the value is missing.
    """
    if pd.isna(value):
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(int(value))
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return False


def _parse_str(value) -> str:
    if pd.isna(value):
        return ""
    return str(value).strip()


def _parse_list(value) -> list[str]:
    """Split a comma-separated cell into stripped, non-empty names."""
    return [part.strip() for part in _parse_str(value).split(",") if part.strip()]


def _parse_status(value) -> LendingStatus:
    raw = _parse_str(value).lower().replace(" ", "_")
    try:
        return LendingStatus(raw)
    except ValueError:
        return LendingStatus.AVAILABLE


def _row_to_book(row: pd.Series) -> Book:
    """Convert a pandas row to a Book instance.

    Maps CSV column names to ``Book`` fields and repairs per-user state that
    would break the book invariants: finished progress implies read, and
    only books on loan keep a due date.

    Parameters
    ----------
    row : pandas.Series
        A single row from the CSV DataFrame.

    Returns
    -------
    Book
        A populated ``Book`` instance.
    """
    progress = _parse_float(row.get("Reading Progress")) or 0.0
    progress = min(1.0, max(0.0, progress))
    status = _parse_status(row.get("Status"))
    due_date = _parse_datetime(row.get("Due Date"))
    if status not in _LOAN_STATUSES:
        due_date = None
    elif due_date is None:
        status = LendingStatus.AVAILABLE

    user_rating = _parse_int(row.get("User Rating"))
    if user_rating is not None and not 1 <= user_rating <= 5:
        user_rating = None

    return Book(
        book_id=_parse_str(row.get("Book Id")) or str(uuid.uuid4()),
        title=_parse_str(row.get("Title")),
        authors=_parse_list(row.get("Authors")),
        publisher=_parse_str(row.get("Publisher")) or None,
        published_date=_parse_str(row.get("Published Date")) or None,
        description=_parse_str(row.get("Description")) or None,
        page_count=_parse_int(row.get("Page Count")),
        categories=_parse_list(row.get("Categories")),
        average_rating=_parse_float(row.get("Average Rating")),
        cover_id=_parse_str(row.get("Cover Id")) or None,
        is_read=_parse_bool(row.get("Read")) or progress >= 1,
        is_in_library=_parse_bool(row.get("In Library")),
        reading_progress=progress,
        last_read_date=_parse_datetime(row.get("Last Read")),
        status=status,
        due_date=due_date,
        notes=_parse_str(row.get("Notes")),
        user_rating=user_rating,
        date_added=_parse_datetime(row.get("Date Added")) or datetime.now(),
    )


def import_csv(
    csv_path: Path,
    on_book: Optional[Callable[[Book, bool], None]] = None,
) -> tuple[list[Book], int]:
    """Read books from a CSV export.

    Parameters
    ----------
    csv_path : Path
        Path to the CSV file.
    on_book : callable, optional
        Callback invoked for each row as ``on_book(book, is_new)`` where
        *is_new* is ``True`` when the book was accepted.

    Returns
    -------
    tuple of (list of Book, int)
        ``(books, skipped_count)``. Rows without a title or with an id seen
        earlier in the file are skipped.
    """
    # Read as text so ids such as "007" keep their leading zeros
    df = pd.read_csv(csv_path, dtype=str)

    books: list[Book] = []
    seen: set[str] = set()
    skipped = 0

    for _, row in df.iterrows():
        book = _row_to_book(row)

        if not book.title or book.book_id in seen:
            skipped += 1
            if on_book:
                on_book(book, False)
            continue

        seen.add(book.book_id)
        books.append(book)
        if on_book:
            on_book(book, True)

    return books, skipped
