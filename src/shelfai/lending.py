"""Lending state machine for borrowed books.

Transitions::

    available   -> checked_out  (borrow)
    checked_out -> checked_out  (renew, due date extended)
    checked_out -> available    (return)
    checked_out -> overdue      (due date elapsed, see ``recompute_overdue``)
    overdue     -> available    (return)
    any         -> reserved     (reserve)
    reserved    -> available    (cancel reservation)

Operations that are not valid from the current status are silent no-ops.
Each function returns ``True`` when it changed the book.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable

from .models import Book, LendingStatus

logger = logging.getLogger(__name__)

LOAN_PERIOD = timedelta(days=14)

_ON_LOAN = (LendingStatus.CHECKED_OUT, LendingStatus.OVERDUE)


def _skip(operation: str, book: Book) -> bool:
    logger.debug(
        "%s ignored for %s: status is %s", operation, book.book_id, book.status.value
    )
    return False


def borrow(book: Book, now: datetime) -> bool:
    """Check out an available book for one loan period.

    Also marks the book as in the user's library.
    """
    if book.status != LendingStatus.AVAILABLE:
        return _skip("borrow", book)
    book.status = LendingStatus.CHECKED_OUT
    book.due_date = now + LOAN_PERIOD
    book.is_in_library = True
    return True


def return_book(book: Book, now: datetime) -> bool:
    """Return a checked-out or overdue book and clear its due date."""
    if book.status not in _ON_LOAN:
        return _skip("return", book)
    book.status = LendingStatus.AVAILABLE
    book.due_date = None
    return True


def renew(book: Book, now: datetime) -> bool:
    """Extend the due date of a checked-out book to one loan period from now.

    Overdue books cannot be renewed; they have to be returned first.
    """
    if book.status != LendingStatus.CHECKED_OUT:
        return _skip("renew", book)
    book.due_date = now + LOAN_PERIOD
    return True


def reserve(book: Book, now: datetime) -> bool:
    """Place a hold on the book regardless of its current status.

    A due date left over from a loan is cleared, since only books on loan
    carry one.
    """
    if book.status == LendingStatus.RESERVED:
        return False
    book.status = LendingStatus.RESERVED
    book.due_date = None
    return True


def cancel_reservation(book: Book, now: datetime) -> bool:
    if book.status != LendingStatus.RESERVED:
        return _skip("cancel reservation", book)
    book.status = LendingStatus.AVAILABLE
    return True


def recompute_overdue(books: Iterable[Book], now: datetime) -> list[Book]:
    """Mark every checked-out book whose due date has passed as overdue.

    Safe to call repeatedly; books already overdue are left untouched.

    Parameters
    ----------
    books : iterable of Book
        Books to sweep.
    now : datetime
        The reference time.

    Returns
    -------
    list of Book
        The books that transitioned to overdue in this sweep.
    """
    changed = []
    for book in books:
        if (
            book.status == LendingStatus.CHECKED_OUT
            and book.due_date is not None
            and book.due_date < now
        ):
            book.status = LendingStatus.OVERDUE
            changed.append(book)
    if changed:
        logger.debug("%d book(s) became overdue", len(changed))
    return changed
