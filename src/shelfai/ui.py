"""Rich UI components for the ShelfAI CLI."""

from datetime import datetime
from typing import Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .activity_log import ActivityEntry
from .models import Book, LendingStatus, ReadingGoal, UserStats
from .settings import AppSettings

console = Console()

INFO_MAX_WIDTH = 80

_STATUS_STYLES = {
    LendingStatus.AVAILABLE: "green",
    LendingStatus.CHECKED_OUT: "blue",
    LendingStatus.OVERDUE: "red",
    LendingStatus.RESERVED: "yellow",
}


def _info_width() -> int:
    return min(console.width, INFO_MAX_WIDTH)


def print_success(message: str) -> None:
    """Print a success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗[/red] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def format_status(book: Book) -> str:
    style = _STATUS_STYLES[book.status]
    return f"[{style}]{book.status.display_name}[/{style}]"


def format_due(book: Book, now: datetime) -> str:
    """Describe when a book is due, e.g. ``in 3 days`` or ``2 days ago``."""
    days = book.days_until_due(now)
    if days is None:
        return ""
    if days == 0:
        return "today"
    if days > 0:
        return f"in {days} day{'s' if days != 1 else ''}"
    return f"{-days} day{'s' if days != -1 else ''} ago"


def print_import_summary(added: int, skipped: int) -> None:
    """Print import summary."""
    if skipped > 0:
        console.print(f"Loaded [bold]{added}[/bold] books ({skipped} skipped)")
    else:
        console.print(f"Loaded [bold]{added}[/bold] books")


def display_book_table(books: Iterable[Book], max_rows: int = 50) -> None:
    """Display books in a table format."""
    table = Table(show_header=True, header_style="dim", box=None, padding=(0, 2))
    table.add_column("Id", style="dim", no_wrap=True)
    table.add_column("Title", style="white", no_wrap=False, max_width=40)
    table.add_column("Authors", style="dim", no_wrap=False, max_width=25)
    table.add_column("Genre", style="cyan", no_wrap=True)
    table.add_column("Rating", justify="right")
    table.add_column("Status", no_wrap=True)

    count = 0
    for book in books:
        table.add_row(
            book.book_id,
            book.display_title(40),
            book.display_authors(25),
            book.genre,
            f"{book.rating:.1f}",
            format_status(book),
        )
        count += 1
        if count >= max_rows:
            break

    if count == 0:
        print_info("No books found.")
        return

    console.print(table)
    if count == max_rows:
        print_info(f"Showing first {max_rows} books. Use search to narrow down.")


def display_loans(books: Iterable[Book], now: datetime) -> None:
    """Display checked-out and overdue books with their due dates."""
    table = Table(show_header=True, header_style="dim", box=None, padding=(0, 2))
    table.add_column("Id", style="dim", no_wrap=True)
    table.add_column("Title", style="white", max_width=40)
    table.add_column("Status", no_wrap=True)
    table.add_column("Due", no_wrap=True)

    count = 0
    for book in books:
        due = book.due_date.strftime("%b %d, %Y") if book.due_date else "-"
        table.add_row(
            book.book_id,
            book.display_title(40),
            format_status(book),
            f"{due} [dim]({format_due(book, now)})[/dim]",
        )
        count += 1

    if count == 0:
        print_info("No books on loan.")
        return
    console.print(table)


def display_book_info(
    book: Book, now: datetime, related: Optional[list[Book]] = None
) -> None:
    """Display detailed book information."""
    lines = []

    def add_field(label: str, value: Optional[str]) -> None:
        if value:
            lines.append(f"[dim]{label}:[/dim] {value}")

    lines.append(f"[bold]{book.title}[/bold]")
    if book.authors:
        lines.append(f"[dim]by[/dim] {book.author}")
    lines.append("")

    add_field("Id", book.book_id)
    add_field("Publisher", book.publisher)
    add_field("Published", book.published_year)
    if book.page_count:
        add_field("Pages", str(book.page_count))
    if book.categories:
        add_field("Categories", ", ".join(book.categories))
    if book.average_rating is not None:
        add_field("Rating", f"{book.average_rating:.1f}")
    add_field("Cover", book.cover_url)

    if book.description:
        lines.append("")
        desc = book.description[:500]
        if len(book.description) > 500:
            desc += "..."
        lines.append(desc)

    lines.append("")
    status = [format_status(book)]
    if book.is_read:
        status.append("[green]Read[/green]")
    elif book.reading_progress > 0:
        status.append(f"{book.reading_progress:.0%} read")
    if book.is_in_library:
        status.append("[cyan]In library[/cyan]")
    if book.user_rating:
        status.append("★" * book.user_rating)
    lines.append(" | ".join(status))

    if book.due_date:
        lines.append(
            f"[dim]Due: {book.due_date.strftime('%b %d, %Y')} "
            f"({format_due(book, now)})[/dim]"
        )
    if book.notes:
        lines.append(f"[dim]Notes:[/dim] {book.notes}")

    if related:
        lines.append("")
        lines.append("[dim]You might also like:[/dim]")
        for other in related:
            lines.append(f"  {other.display_title(50)} [dim]({other.rating:.1f})[/dim]")

    panel = Panel(
        "\n".join(lines),
        title="[dim]Book Details[/dim]",
        title_align="left",
        border_style="dim",
        width=_info_width(),
        padding=(1, 2),
    )
    console.print(panel)


def display_stats(stats: UserStats, goal: ReadingGoal) -> None:
    """Display reading statistics and goal progress."""
    console.print(f"Books read:     [bold]{stats.total_books_read}[/bold]")
    console.print(f"Pages read:     [bold]{stats.pages_read}[/bold]")
    console.print(f"Favorite genre: [bold]{stats.favorite_genre}[/bold]")
    console.print(f"Reading streak: [bold]{stats.reading_streak}[/bold] days")
    if stats.last_reading_date:
        console.print(
            f"[dim]Last read: {stats.last_reading_date.strftime('%b %d, %Y')}[/dim]"
        )
    console.print()
    console.print(
        f"[dim]{goal.time_frame.display_name} goal:[/dim] "
        f"{goal.current}/{goal.target} ({goal.progress:.0%})"
    )


def display_genres(genres: list[str]) -> None:
    for genre in genres:
        console.print(f"  {genre}")


def display_settings(settings: AppSettings) -> None:
    console.print(f"Color scheme:          {settings.color_scheme.value}")
    console.print(f"Notifications:         {'on' if settings.notifications_enabled else 'off'}")
    console.print(f"Sync with cloud:       {'on' if settings.sync_with_cloud else 'off'}")
    console.print(f"Font size:             {settings.preferred_font_size:g}")
    console.print(f"Show reading progress: {'on' if settings.show_reading_progress else 'off'}")


def display_activity(entries: list[ActivityEntry]) -> None:
    """Display activity log entries, most recent first."""
    if not entries:
        print_info("No activity recorded.")
        return
    table = Table(show_header=True, header_style="dim", box=None, padding=(0, 2))
    table.add_column("When", style="dim", no_wrap=True)
    table.add_column("Action", style="cyan", no_wrap=True)
    table.add_column("Book", max_width=40)
    for entry in entries:
        table.add_row(entry.timestamp[:19].replace("T", " "), entry.action, entry.title or "")
    console.print(table)


def interactive_menu(options: list[tuple[str, str, str]]) -> Optional[str]:
    """Display an interactive menu and return the selected option key.

    Parameters
    ----------
    options : list of tuple of (str, str, str)
        Menu entries as ``(key, shortcut, label)``.

    Returns
    -------
    str or None
        The selected key, or ``None`` if the user quits.
    """
    shortcuts: dict[str, str] = {}
    console.print()
    for key, shortcut, label in options:
        shortcuts[shortcut] = key
        console.print(f"  [dim]\\[{shortcut}][/dim] {label}")
    console.print("  [dim]\\[q][/dim] Quit")
    console.print()

    while True:
        choice = Prompt.ask("[dim]Select[/dim]", default="q")

        if choice.lower() == "q":
            return None

        if choice.lower() in shortcuts:
            return shortcuts[choice.lower()]

        console.print("[dim]Invalid choice[/dim]")


def prompt_search() -> str:
    """Prompt for a search query."""
    return Prompt.ask("[dim]Search[/dim]", default="")


def prompt_book_id() -> str:
    """Prompt for a book id."""
    return Prompt.ask("[dim]Book id[/dim]")


def prompt_progress() -> Optional[float]:
    """Prompt for a reading progress percentage and return it as a fraction."""
    raw = Prompt.ask("[dim]Progress (0-100%)[/dim]")
    try:
        return float(raw.rstrip("%")) / 100
    except ValueError:
        print_error(f"Not a number: {raw}")
        return None
