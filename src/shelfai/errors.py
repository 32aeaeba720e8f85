"""Exceptions raised by the ShelfAI library core."""


class LibraryError(Exception):
    """Base class for recoverable library errors."""

    pass


class BookNotFoundError(LibraryError, KeyError):
    """Raised when a command references a book id absent from the catalogue."""

    def __init__(self, book_id: str) -> None:
        super().__init__(book_id)
        self.book_id = book_id

    def __str__(self) -> str:
        return f"No book found with id: {self.book_id}"


class InvalidTransitionError(LibraryError):
    """Raised for a lending transition that is not allowed.

    Every current transition is a permissive no-op, so nothing raises this
    yet; it is kept so callers can catch it alongside the other errors.
    """

    pass


class ConfigurationError(LibraryError, ValueError):
    """Raised for an invalid reading goal or settings value."""

    pass


class InvalidBookError(LibraryError, ValueError):
    """Raised when book input (manual add, user rating) is invalid."""

    pass
