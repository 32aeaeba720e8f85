"""Built-in starter catalogue.

Used by the CLI when no CSV file is given, and by the tests. Due and
last-read dates are relative to *now* so the sample stays meaningful.
"""

from datetime import datetime, timedelta
from typing import Optional

from .models import Book, LendingStatus


def sample_books(now: Optional[datetime] = None) -> list[Book]:
    """Return ten classic and contemporary books with varied user state."""
    now = now or datetime.now()
    day = timedelta(days=1)
    return [
        Book(
            book_id="1",
            title="The Great Gatsby",
            authors=["F. Scott Fitzgerald"],
            publisher="Scribner",
            published_date="1925",
            description="A story of wealth, love, and the American Dream in the 1920s.",
            page_count=180,
            categories=["Classic", "Literary Fiction"],
            average_rating=4.2,
            cover_id="823857",
            is_in_library=True,
            user_rating=4,
            date_added=now,
        ),
        Book(
            book_id="2",
            title="To Kill a Mockingbird",
            authors=["Harper Lee"],
            publisher="J. B. Lippincott & Co.",
            published_date="1960",
            description="A powerful story of racial injustice and moral growth.",
            page_count=281,
            categories=["Classic", "Literary Fiction"],
            average_rating=4.7,
            cover_id="823856",
            status=LendingStatus.CHECKED_OUT,
            due_date=now + 7 * day,
            date_added=now,
        ),
        Book(
            book_id="3",
            title="1984",
            authors=["George Orwell"],
            publisher="Secker & Warburg",
            published_date="1949",
            description="A dystopian novel about totalitarianism and surveillance.",
            page_count=328,
            categories=["Dystopian", "Science Fiction"],
            average_rating=4.5,
            cover_id="823855",
            reading_progress=0.3,
            last_read_date=now - day,
            date_added=now,
        ),
        Book(
            book_id="4",
            title="Pride and Prejudice",
            authors=["Jane Austen"],
            publisher="T. Egerton, Whitehall",
            published_date="1813",
            description="A romantic novel about the Bennet family.",
            page_count=279,
            categories=["Romance", "Classic"],
            average_rating=4.6,
            cover_id="823853",
            is_read=True,
            date_added=now,
        ),
        Book(
            book_id="5",
            title="The Hobbit",
            authors=["J.R.R. Tolkien"],
            publisher="Allen & Unwin",
            published_date="1937",
            description="A fantasy novel and prelude to The Lord of the Rings.",
            page_count=310,
            categories=["Fantasy", "Adventure"],
            average_rating=4.7,
            cover_id="823821",
            is_in_library=True,
            date_added=now,
        ),
        Book(
            book_id="6",
            title="Dune",
            authors=["Frank Herbert"],
            publisher="Chilton Books",
            published_date="1965",
            description="A science fiction epic about politics and ecology.",
            page_count=412,
            categories=["Science Fiction"],
            average_rating=4.8,
            cover_id="823840",
            status=LendingStatus.CHECKED_OUT,
            due_date=now + 3 * day,
            date_added=now,
        ),
        Book(
            book_id="7",
            title="The Hunger Games",
            authors=["Suzanne Collins"],
            publisher="Scholastic",
            published_date="2008",
            description="A dystopian novel about a televised fight to the death.",
            page_count=374,
            categories=["Young Adult", "Dystopian"],
            average_rating=4.3,
            cover_id="823765",
            is_in_library=True,
            date_added=now,
        ),
        Book(
            book_id="8",
            title="The Shining",
            authors=["Stephen King"],
            publisher="Doubleday",
            published_date="1977",
            description="A psychological horror novel about a haunted hotel.",
            page_count=447,
            categories=["Horror"],
            average_rating=4.3,
            cover_id="823785",
            is_read=True,
            date_added=now,
        ),
        Book(
            book_id="9",
            title="The Silent Patient",
            authors=["Alex Michaelides"],
            publisher="Celadon Books",
            published_date="2019",
            description="A psychological thriller about a woman who shoots her husband.",
            page_count=323,
            categories=["Thriller", "Mystery"],
            average_rating=4.2,
            cover_id="823808",
            date_added=now,
        ),
        Book(
            book_id="10",
            title="Where the Crawdads Sing",
            authors=["Delia Owens"],
            publisher="G.P. Putnam's Sons",
            published_date="2018",
            description="A novel about an abandoned girl who raises herself in the marshes.",
            page_count=368,
            categories=["Literary Fiction", "Mystery"],
            average_rating=4.8,
            cover_id="823807",
            date_added=now,
        ),
    ]
