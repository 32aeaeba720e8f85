"""Tests for the Library facade."""

from datetime import timedelta

import pytest
from conftest import NOW, FakeClock

from shelfai.errors import BookNotFoundError, ConfigurationError, InvalidBookError
from shelfai.library import Library
from shelfai.models import LendingStatus, ReadingGoal, TimeFrame
from shelfai.settings import AppSettings, ColorScheme


def _ids(books):
    return [b.book_id for b in books]


class TestConstruction:
    """Tests for library start-up."""

    def test_library_copies_input_books(self, books, clock):
        library = Library(books, clock=clock)
        books[0].title = "Changed"
        assert library.get_book("1").title == "The Great Gatsby"

    def test_defaults(self, clock):
        library = Library(clock=clock)
        assert len(library) == 0
        assert library.reading_goal == ReadingGoal()
        assert library.settings == AppSettings()

    def test_streak_extended_when_last_read_yesterday(self, books, clock):
        library = Library(books, clock=clock, reading_streak=2)
        assert library.stats.reading_streak == 3

    def test_streak_reset_when_reading_lapsed(self, make_book, clock):
        book = make_book("1", last_read_date=NOW - timedelta(days=4))
        library = Library([book], clock=clock, reading_streak=5)
        assert library.stats.reading_streak == 0

    def test_streak_kept_when_read_today(self, make_book, clock):
        book = make_book("1", last_read_date=NOW - timedelta(hours=1))
        library = Library([book], clock=clock, reading_streak=5)
        assert library.stats.reading_streak == 5

    def test_streak_checked_once_per_session(self, books, clock):
        library = Library(books, clock=clock, reading_streak=2)
        library.update_progress("3", 0.5)
        library.update_progress("3", 0.6)
        assert library.stats.reading_streak == 3

    def test_overdue_swept_on_start(self, make_book, clock):
        book = make_book(
            "1", status=LendingStatus.CHECKED_OUT, due_date=NOW - timedelta(days=1)
        )
        library = Library([book], clock=clock)
        assert library.get_book("1").status == LendingStatus.OVERDUE


class TestNotFound:
    """Commands on unknown ids should raise BookNotFoundError."""

    @pytest.mark.parametrize(
        "command, args",
        [
            ("borrow", ()),
            ("return_book", ()),
            ("renew", ()),
            ("reserve", ()),
            ("cancel_reservation", ()),
            ("update_progress", (0.5,)),
            ("toggle_read_status", ()),
            ("mark_currently_reading", ()),
            ("toggle_library_membership", ()),
            ("remove_book", ()),
            ("update_notes", ("note",)),
            ("update_user_rating", (3,)),
            ("add_to_recently_viewed", ()),
            ("get_book", ()),
            ("related_recommendations", ()),
            ("days_until_due", ()),
        ],
    )
    def test_unknown_id(self, library, command, args):
        with pytest.raises(BookNotFoundError) as exc_info:
            getattr(library, command)("nope", *args)
        assert exc_info.value.book_id == "nope"
        assert len(library) == 10

    def test_not_found_is_a_key_error(self, library):
        with pytest.raises(KeyError):
            library.get_book("nope")


class TestLendingCommands:
    """Tests for borrow, return, renew and reservations."""

    def test_borrow(self, library):
        book = library.borrow("9")
        assert book.status == LendingStatus.CHECKED_OUT
        assert book.due_date == NOW + timedelta(days=14)
        assert book.is_in_library

    def test_borrow_updates_recommendations(self, library):
        """Borrowing adds the book to the library, so home drops it."""
        library.borrow("10")
        assert "10" not in _ids(library.home_recommendations())

    def test_borrow_checked_out_is_noop(self, library, activity):
        before = library.get_book("2")
        after = library.borrow("2")
        assert after == before
        assert activity == []

    def test_return(self, library):
        book = library.return_book("2")
        assert book.status == LendingStatus.AVAILABLE
        assert book.due_date is None

    def test_renew(self, library, clock):
        clock.advance(days=2)
        book = library.renew("6")
        assert book.due_date == clock.now + timedelta(days=14)

    def test_renew_not_checked_out_leaves_book_unchanged(self, library):
        before = library.get_book("1")
        assert library.renew("1") == before

    def test_reserve_and_cancel(self, library):
        assert library.reserve("9").status == LendingStatus.RESERVED
        assert library.cancel_reservation("9").status == LendingStatus.AVAILABLE

    def test_due_date_passes(self, library, clock):
        clock.advance(days=5)
        assert _ids(library.overdue_books()) == ["6"]
        assert _ids(library.checked_out_books()) == ["2", "6"]
        assert library.days_until_due("6") == -2
        assert library.days_until_due("2") == 2

    def test_refresh_overdue_idempotent(self, library, clock):
        clock.advance(days=30)
        assert _ids(library.refresh_overdue()) == ["2", "6"]
        snapshot = library.books()
        assert library.refresh_overdue() == []
        assert library.books() == snapshot

    def test_return_overdue(self, library, clock):
        clock.advance(days=30)
        library.refresh_overdue()
        assert library.return_book("6").status == LendingStatus.AVAILABLE
        assert _ids(library.overdue_books()) == ["2"]


class TestProgressCommands:
    """Tests for reading progress and goal counting."""

    def test_update_progress(self, library):
        book = library.update_progress("3", 0.5)
        assert book.reading_progress == 0.5
        assert book.last_read_date == NOW
        assert not book.is_read

    def test_completion_counts_towards_goal(self, library):
        book = library.update_progress("3", 1.0)
        assert book.is_read
        assert library.reading_goal.current == 1
        assert library.stats.total_books_read == 3

    def test_repeated_completion_counted_once(self, library):
        library.update_progress("3", 1.0)
        library.update_progress("3", 1.0)
        assert library.reading_goal.current == 1

    def test_completion_after_reopening_counted_once(self, library):
        library.update_progress("3", 1.0)
        library.update_progress("3", 0.5)
        library.update_progress("3", 1.0)
        assert library.reading_goal.current == 1

    def test_finishing_a_read_book_does_not_count(self, library):
        """A book already marked read adds nothing to the goal."""
        assert library.get_book("4").is_read
        book = library.update_progress("4", 1.0)
        assert book.is_read
        assert book.reading_progress == 1.0
        assert library.reading_goal.current == 0
        assert library.stats.total_books_read == 2

    def test_progress_updates_last_reading_date(self, library, clock):
        clock.advance(hours=3)
        library.update_progress("5", 0.2)
        assert library.stats.last_reading_date == clock.now

    def test_toggle_read_status(self, library):
        book = library.toggle_read_status("5")
        assert book.is_read
        assert book.reading_progress == 1.0
        assert library.reading_goal.current == 1
        book = library.toggle_read_status("5")
        assert not book.is_read
        assert library.reading_goal.current == 1

    def test_mark_currently_reading(self, library):
        library.mark_currently_reading("5")
        assert _ids(library.currently_reading()) == ["5", "3"]
        assert "5" not in _ids(library.want_to_read())

    def test_mark_currently_reading_skips_read_book(self, library):
        book = library.mark_currently_reading("4")
        assert book.reading_progress == 0.0
        assert "4" not in _ids(library.currently_reading())
        assert "4" in _ids(library.finished_books())


class TestCatalogueCommands:
    """Tests for membership, manual adds, notes and ratings."""

    def test_toggle_library_membership(self, library, clock):
        clock.advance(days=1)
        book = library.toggle_library_membership("10")
        assert book.is_in_library
        assert book.date_added == clock.now
        assert "10" not in _ids(library.home_recommendations())
        book = library.toggle_library_membership("10")
        assert not book.is_in_library
        assert "10" in _ids(library.home_recommendations())

    def test_add_manual_book(self, library):
        book = library.add_manual_book("Piranesi", "Susanna Clarke", 272, "Fantasy")
        assert book.book_id in library
        assert book.is_in_library
        assert book.authors == ["Susanna Clarke"]
        assert book.categories == ["Fantasy"]
        assert book.status == LendingStatus.AVAILABLE
        assert len(library) == 11

    def test_manual_books_get_unique_ids(self, library):
        a = library.add_manual_book("Same", "Author", 100, "Genre")
        b = library.add_manual_book("Same", "Author", 100, "Genre")
        assert a.book_id != b.book_id
        assert len(library) == 12

    @pytest.mark.parametrize(
        "title, author, pages, genre",
        [
            ("", "Author", 100, "Genre"),
            ("Title", "  ", 100, "Genre"),
            ("Title", "Author", 0, "Genre"),
            ("Title", "Author", 100, ""),
        ],
    )
    def test_add_manual_book_rejects_incomplete_input(
        self, library, title, author, pages, genre
    ):
        with pytest.raises(InvalidBookError):
            library.add_manual_book(title, author, pages, genre)
        assert len(library) == 10

    def test_new_genre_appears_in_genres(self, library):
        library.add_manual_book("Piranesi", "Susanna Clarke", 272, "Magical Realism")
        assert "Magical Realism" in library.genres()

    def test_remove_book(self, library):
        library.add_to_recently_viewed("10")
        library.remove_book("10")
        assert "10" not in library
        assert "10" not in _ids(library.home_recommendations())
        assert library.recently_viewed() == []

    def test_remove_read_book_updates_stats(self, library):
        library.remove_book("8")
        stats = library.stats
        assert stats.total_books_read == 1
        assert stats.favorite_genre == "Romance"

    def test_update_notes(self, library):
        assert library.update_notes("1", "Reread in summer").notes == "Reread in summer"

    def test_update_user_rating(self, library):
        assert library.update_user_rating("5", 5).user_rating == 5
        assert library.update_user_rating("5", None).user_rating is None

    @pytest.mark.parametrize("rating", [0, 6, 3.5, True])
    def test_update_user_rating_rejects_out_of_range(self, library, rating):
        with pytest.raises(InvalidBookError):
            library.update_user_rating("1", rating)
        assert library.get_book("1").user_rating == 4


class TestSnapshots:
    """Returned books must not alias library state."""

    def test_command_result_is_detached(self, library):
        book = library.borrow("9")
        book.status = LendingStatus.AVAILABLE
        book.categories.append("Hacked")
        stored = library.get_book("9")
        assert stored.status == LendingStatus.CHECKED_OUT
        assert "Hacked" not in stored.categories

    def test_goal_and_settings_are_copies(self, library):
        library.reading_goal.target = 99
        library.settings.preferred_font_size = 99
        assert library.reading_goal.target == 10
        assert library.settings.preferred_font_size == 16.0


class TestRecentlyViewed:
    """Tests for the recently viewed list."""

    def test_bounded_most_recent_first(self, library):
        for book_id in ["1", "2", "3", "4", "5", "6"]:
            library.add_to_recently_viewed(book_id)
        assert _ids(library.recently_viewed()) == ["6", "5", "4", "3", "2"]

    def test_revisit_keeps_position(self, library):
        for book_id in ["1", "2", "3"]:
            library.add_to_recently_viewed(book_id)
        library.add_to_recently_viewed("1")
        assert _ids(library.recently_viewed()) == ["3", "2", "1"]

    def test_starts_empty(self, library):
        assert library.recently_viewed() == []


class TestRecommendations:
    """Tests for the facade's recommendation state."""

    def test_home_recommendations_on_start(self, library):
        assert _ids(library.recommendations()) == ["6", "10", "2", "4", "3"]

    def test_view_switches_to_related(self, library):
        library.add_to_recently_viewed("1")
        assert _ids(library.recommendations()) == ["2", "4"]

    def test_clear_focus_restores_home(self, library):
        library.add_to_recently_viewed("1")
        assert _ids(library.clear_focus()) == ["6", "10", "2", "4", "3"]

    def test_related_query_does_not_change_focus(self, library):
        assert _ids(library.related_recommendations("6")) == ["3"]
        assert _ids(library.recommendations()) == ["6", "10", "2", "4", "3"]

    def test_membership_change_refreshes_related(self, library):
        library.add_to_recently_viewed("1")
        library.toggle_library_membership("2")
        assert _ids(library.recommendations()) == ["4"]


class TestQueries:
    """Tests for query passthroughs."""

    def test_search(self, library):
        assert _ids(library.search("tolkien")) == ["5"]
        assert len(library.search("")) == 10

    def test_genres(self, library):
        genres = library.genres()
        assert genres[0] == "All"
        assert genres[1] == "Adventure"

    def test_books_in_genre(self, library):
        assert _ids(library.books_in_genre("Classic")) == ["1", "2", "4"]

    def test_stats(self, library):
        stats = library.stats
        assert stats.total_books_read == 2
        assert stats.pages_read == 726
        assert stats.favorite_genre == "Romance"

    def test_views(self, library):
        assert _ids(library.finished_books()) == ["4", "8"]
        assert _ids(library.want_to_read()) == ["1", "5", "7"]
        assert _ids(library.currently_reading()) == ["3"]


class TestGoalAndSettings:
    """Tests for goal configuration and settings setters."""

    def test_goal_progress(self, clock):
        library = Library(clock=clock, reading_goal=ReadingGoal(target=10, current=3))
        assert library.goal_progress == 0.3

    def test_zero_target_goal_progress_is_zero(self, clock):
        library = Library(clock=clock, reading_goal=ReadingGoal(target=0, current=3))
        assert library.goal_progress == 0.0

    def test_set_reading_goal(self, library):
        library.update_progress("3", 1.0)
        goal = library.set_reading_goal(20, TimeFrame.YEARLY)
        assert (goal.target, goal.current, goal.time_frame) == (20, 1, TimeFrame.YEARLY)
        assert library.goal_progress == 0.05

    @pytest.mark.parametrize("target", [0, -1, 101])
    def test_set_reading_goal_rejects_bad_target(self, library, target):
        with pytest.raises(ConfigurationError):
            library.set_reading_goal(target)
        assert library.reading_goal.target == 10

    def test_reset_reading_goal(self, library):
        library.update_progress("3", 1.0)
        assert library.reset_reading_goal().current == 0

    def test_settings_setters(self, library):
        library.set_color_scheme(ColorScheme.DARK)
        library.set_notifications_enabled(False)
        library.set_sync_with_cloud(False)
        library.set_font_size(20)
        settings = library.set_show_reading_progress(False)
        assert settings == AppSettings(
            color_scheme=ColorScheme.DARK,
            notifications_enabled=False,
            sync_with_cloud=False,
            preferred_font_size=20.0,
            show_reading_progress=False,
        )

    def test_color_scheme_accepts_value(self, library):
        assert library.set_color_scheme("system").color_scheme == ColorScheme.SYSTEM

    def test_unknown_color_scheme(self, library):
        with pytest.raises(ConfigurationError):
            library.set_color_scheme("sepia")

    @pytest.mark.parametrize("size", [13.9, 24.5])
    def test_font_size_bounds(self, library, size):
        with pytest.raises(ConfigurationError):
            library.set_font_size(size)
        assert library.settings.preferred_font_size == 16.0


class TestActivity:
    """Tests for activity entries emitted to the sink."""

    def test_applied_commands_are_recorded(self, library, activity):
        library.borrow("9")
        library.update_progress("3", 1.0)
        assert [e.action for e in activity] == ["borrow", "update_progress"]
        assert activity[0].book_id == "9"
        assert activity[0].title == "The Silent Patient"
        assert activity[0].source == "core"
        assert activity[0].timestamp == NOW.isoformat()
        assert activity[1].details == {"progress": 1.0, "completed": True}

    def test_overdue_sweep_is_recorded(self, library, activity, clock):
        clock.advance(days=30)
        library.books()
        assert sorted(e.book_id for e in activity if e.action == "overdue") == ["2", "6"]

    def test_no_sink_is_fine(self, books):
        library = Library(books, clock=FakeClock())
        library.borrow("9")
