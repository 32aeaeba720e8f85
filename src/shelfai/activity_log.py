"""Activity logging for tracking library changes.

The library facade describes every applied command as an ``ActivityEntry``
and hands it to an optional sink; it never writes files itself. The CLI
passes ``append_activity`` as that sink, which stores entries as JSON Lines
in ``~/.shelfai/data/activity.log``.
"""

import fcntl
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

_SHELFAI_DIR = Path.home() / ".shelfai"
_LOG_PATH = _SHELFAI_DIR / "data" / "activity.log"


@dataclass
class ActivityEntry:
    """A single activity log entry.

    Attributes
    ----------
    timestamp : str
        ISO 8601 timestamp with microseconds.
    action : str
        Name of the library command, e.g. ``borrow``, ``update_progress``,
        ``add_book``.
    source : str
        Who issued the command, e.g. ``cli`` or ``core``.
    book_id : str or None
        Book id when applicable.
    title : str or None
        Book title when applicable.
    details : dict
        Action-specific data.
    """

    timestamp: str
    action: str
    source: str
    book_id: Optional[str] = None
    title: Optional[str] = None
    details: dict = field(default_factory=dict)


def get_log_path() -> Path:
    """Return the path to the activity log file.

    Returns
    -------
    Path
        Path to ``~/.shelfai/data/activity.log``.
    """
    return _LOG_PATH


def make_entry(
    action: str,
    source: str,
    book_id: Optional[str] = None,
    title: Optional[str] = None,
    timestamp: Optional[datetime] = None,
    **details,
) -> ActivityEntry:
    """Build an activity entry without writing it anywhere.

    Parameters
    ----------
    action : str
        The action type.
    source : str
        The source of the action.
    book_id : str, optional
        Book id when applicable.
    title : str, optional
        Book title when applicable.
    timestamp : datetime, optional
        Time of the action. Defaults to now.
    **details
        Action-specific data. Values must be JSON-serialisable.

    Returns
    -------
    ActivityEntry
        The new entry.
    """
    return ActivityEntry(
        timestamp=(timestamp or datetime.now()).isoformat(),
        action=action,
        source=source,
        book_id=book_id,
        title=title,
        details=details,
    )


def append_activity(entry: ActivityEntry, log_path: Optional[Path] = None) -> None:
    """Append an activity entry to the log file.

    Uses POSIX file locking so concurrent CLI processes do not interleave
    lines.

    Parameters
    ----------
    entry : ActivityEntry
        The entry to write.
    log_path : Path, optional
        Log file to append to. Defaults to ``get_log_path()``.
    """
    log_path = log_path or get_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    line = json.dumps(asdict(entry), ensure_ascii=False) + "\n"

    with open(log_path, "a", encoding="utf-8") as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        try:
            f.write(line)
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)


def read_recent_activity(
    limit: int = 100, log_path: Optional[Path] = None
) -> list[ActivityEntry]:
    """Read the most recent activity entries from the log.

    Malformed lines are skipped.

    Parameters
    ----------
    limit : int
        Maximum number of entries to return.
    log_path : Path, optional
        Log file to read. Defaults to ``get_log_path()``.

    Returns
    -------
    list of ActivityEntry
        Recent entries sorted by timestamp descending (most recent first).
    """
    log_path = log_path or get_log_path()
    if not log_path.exists():
        return []

    entries = []
    with open(log_path, "r", encoding="utf-8") as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_SH)
        try:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    entries.append(ActivityEntry(**data))
                except (json.JSONDecodeError, TypeError):
                    continue
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    entries.sort(key=lambda e: e.timestamp, reverse=True)
    return entries[:limit]
