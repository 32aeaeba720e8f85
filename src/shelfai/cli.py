"""CLI entry point for ShelfAI.

Every invocation builds one ``Library`` for the session, seeded from the
built-in sample catalogue or from a CSV file, and records applied changes in
the activity log. Without a subcommand the CLI runs an interactive session
against that library.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import click

from . import ui
from .activity_log import append_activity, read_recent_activity
from .errors import LibraryError
from .importer import import_csv
from .library import Library
from .models import TimeFrame
from .sample_data import sample_books
from .settings import ColorScheme, load_settings, save_settings

_VIEWS = {
    "all": Library.books,
    "reading": Library.currently_reading,
    "want": Library.want_to_read,
    "finished": Library.finished_books,
    "loans": Library.checked_out_books,
    "overdue": Library.overdue_books,
}


def _build_library(csv_path: Optional[Path]) -> Library:
    """Create the session library from a CSV file or the sample catalogue."""
    if csv_path:
        books, skipped = import_csv(csv_path)
        ui.print_import_summary(len(books), skipped)
    else:
        books = sample_books()
    return Library(
        books,
        settings=load_settings(),
        activity_sink=append_activity,
        source="cli",
    )


@click.group(invoke_without_command=True)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Seed the session from a CSV export instead of the sample books.",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, csv_path: Optional[Path], verbose: bool) -> None:
    """ShelfAI - track your books, loans and reading progress."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )
    ctx.obj = _build_library(csv_path)
    if ctx.invoked_subcommand is None:
        interactive_mode(ctx.obj)


@main.command("list")
@click.option(
    "--view",
    type=click.Choice(sorted(_VIEWS)),
    default="all",
    show_default=True,
    help="Which shelf to list.",
)
@click.option("--genre", "-g", help="Only books in this genre.")
@click.pass_obj
def list_cmd(library: Library, view: str, genre: Optional[str]) -> None:
    """List books in the catalogue."""
    books = _VIEWS[view](library)
    if genre:
        in_genre = {b.book_id for b in library.books_in_genre(genre)}
        books = [b for b in books if b.book_id in in_genre]
    ui.display_book_table(books)


@main.command("search")
@click.argument("query")
@click.pass_obj
def search_cmd(library: Library, query: str) -> None:
    """Search books by title, author, or publisher."""
    ui.display_book_table(library.search(query))


@main.command("genres")
@click.pass_obj
def genres_cmd(library: Library) -> None:
    """List the genres present in the catalogue."""
    ui.display_genres(library.genres())


@main.command("info")
@click.argument("book_id")
@click.pass_obj
def info_cmd(library: Library, book_id: str) -> None:
    """Show detailed info for a specific book."""
    try:
        book = library.add_to_recently_viewed(book_id)
    except LibraryError as e:
        ui.print_error(str(e))
        raise SystemExit(1)
    ui.display_book_info(book, datetime.now(), library.recommendations())


@main.command("recommend")
@click.argument("book_id", required=False)
@click.pass_obj
def recommend_cmd(library: Library, book_id: Optional[str]) -> None:
    """Suggest books, optionally related to BOOK_ID."""
    try:
        books = (
            library.related_recommendations(book_id)
            if book_id
            else library.home_recommendations()
        )
    except LibraryError as e:
        ui.print_error(str(e))
        raise SystemExit(1)
    ui.display_book_table(books)


@main.command("stats")
@click.pass_obj
def stats_cmd(library: Library) -> None:
    """Show reading statistics."""
    ui.display_stats(library.stats, library.reading_goal)


@main.command("loans")
@click.pass_obj
def loans_cmd(library: Library) -> None:
    """Show borrowed books and when they are due."""
    ui.display_loans(library.checked_out_books(), datetime.now())


@main.command("activity")
@click.option("--limit", "-n", default=20, show_default=True, help="Entries to show.")
def activity_cmd(limit: int) -> None:
    """Show recent library activity."""
    ui.display_activity(read_recent_activity(limit))


@main.command("settings")
@click.option("--color-scheme", type=click.Choice([c.value for c in ColorScheme]))
@click.option("--font-size", type=float)
@click.option("--notifications/--no-notifications", default=None)
@click.option("--sync/--no-sync", default=None)
@click.option("--show-progress/--hide-progress", default=None)
@click.pass_obj
def settings_cmd(
    library: Library,
    color_scheme: Optional[str],
    font_size: Optional[float],
    notifications: Optional[bool],
    sync: Optional[bool],
    show_progress: Optional[bool],
) -> None:
    """Show or change settings."""
    try:
        if color_scheme is not None:
            library.set_color_scheme(ColorScheme(color_scheme))
        if font_size is not None:
            library.set_font_size(font_size)
        if notifications is not None:
            library.set_notifications_enabled(notifications)
        if sync is not None:
            library.set_sync_with_cloud(sync)
        if show_progress is not None:
            library.set_show_reading_progress(show_progress)
    except LibraryError as e:
        ui.print_error(str(e))
        raise SystemExit(1)
    save_settings(library.settings)
    ui.display_settings(library.settings)


def _run_book_command(library: Library, command) -> None:
    """Prompt for a book id, run *command* on it and report the outcome."""
    book_id = ui.prompt_book_id()
    if not book_id:
        return
    try:
        book = command(library, book_id)
    except LibraryError as e:
        ui.print_error(str(e))
        return
    ui.print_success(f"{book.display_title(60)}: {ui.format_status(book)}")


def _update_progress(library: Library) -> None:
    book_id = ui.prompt_book_id()
    if not book_id or book_id not in library:
        ui.print_error(f"No book found with id: {book_id}")
        return
    value = ui.prompt_progress()
    if value is None:
        return
    book = library.update_progress(book_id, value)
    if book.is_read:
        ui.print_success(f"Finished: {book.display_title(60)}")
    else:
        ui.print_success(f"{book.display_title(60)}: {book.reading_progress:.0%} read")


def _add_book(library: Library) -> None:
    title = click.prompt("Title")
    author = click.prompt("Author")
    page_count = click.prompt("Page count", type=int)
    genre = click.prompt("Genre")
    try:
        book = library.add_manual_book(title, author, page_count, genre)
    except LibraryError as e:
        ui.print_error(str(e))
        return
    ui.print_success(f"Added: {book.display_title(60)} ({book.book_id})")


def _set_goal(library: Library) -> None:
    target = click.prompt("Books to read", type=int)
    time_frame = click.prompt(
        "Time frame",
        type=click.Choice([t.value for t in TimeFrame]),
        default=library.reading_goal.time_frame.value,
    )
    try:
        goal = library.set_reading_goal(target, TimeFrame(time_frame))
    except LibraryError as e:
        ui.print_error(str(e))
        return
    ui.print_success(f"Goal: {goal.target} books {goal.time_frame.value}")


def interactive_mode(library: Library) -> None:
    """Run the interactive menu mode against a single session library."""
    ui.console.print("[bold]ShelfAI[/bold] Library\n")
    ui.print_info(f"{len(library)} books in catalogue")
    for book in library.overdue_books():
        ui.print_error(f"Overdue: {book.display_title(60)}")

    options = [
        ("list", "l", "List all books"),
        ("search", "s", "Search books"),
        ("info", "i", "Book details"),
        ("recommend", "r", "Recommendations"),
        ("loans", "o", "Loans"),
        ("borrow", "b", "Borrow a book"),
        ("return", "t", "Return a book"),
        ("renew", "n", "Renew a loan"),
        ("reserve", "v", "Reserve a book"),
        ("progress", "p", "Update reading progress"),
        ("library", "m", "Add to / remove from my library"),
        ("add", "a", "Add a book by hand"),
        ("stats", "x", "Show statistics"),
        ("goal", "g", "Set reading goal"),
    ]

    while True:
        choice = ui.interactive_menu(options)

        if choice is None:
            break

        if choice == "list":
            ui.display_book_table(library.books())

        elif choice == "search":
            ui.display_book_table(library.search(ui.prompt_search()))

        elif choice == "info":
            book_id = ui.prompt_book_id()
            if book_id:
                try:
                    book = library.add_to_recently_viewed(book_id)
                except LibraryError as e:
                    ui.print_error(str(e))
                else:
                    ui.display_book_info(
                        book, datetime.now(), library.recommendations()
                    )

        elif choice == "recommend":
            ui.display_book_table(library.recommendations())

        elif choice == "loans":
            ui.display_loans(library.checked_out_books(), datetime.now())

        elif choice == "borrow":
            _run_book_command(library, Library.borrow)

        elif choice == "return":
            _run_book_command(library, Library.return_book)

        elif choice == "renew":
            _run_book_command(library, Library.renew)

        elif choice == "reserve":
            _run_book_command(library, Library.reserve)

        elif choice == "progress":
            _update_progress(library)

        elif choice == "library":
            _run_book_command(library, Library.toggle_library_membership)

        elif choice == "add":
            _add_book(library)

        elif choice == "stats":
            ui.display_stats(library.stats, library.reading_goal)

        elif choice == "goal":
            _set_goal(library)

    ui.console.print("\n[dim]Goodbye![/dim]")


if __name__ == "__main__":
    main()
