"""Application settings for ShelfAI.

``AppSettings`` holds the user's display and sync preferences. The library
core keeps one instance in memory and mutates it through its setters;
persisting it is left to the caller, which uses ``load_settings`` and
``save_settings`` to keep it as JSON in ``_SHELFAI_DIR/shelfai-settings.json``.
The file is created with defaults on first launch.
"""

import json
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

_SHELFAI_DIR = Path.home() / ".shelfai"
_DEFAULT_SETTINGS_PATH = _SHELFAI_DIR / "shelfai-settings.json"

MIN_FONT_SIZE = 14.0
MAX_FONT_SIZE = 24.0


class ColorScheme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


@dataclass
class AppSettings:
    """User preferences.

    Attributes
    ----------
    color_scheme : ColorScheme
        Light, dark, or follow the system.
    notifications_enabled : bool
        Whether due-date reminders are enabled.
    sync_with_cloud : bool
        Whether the presentation layer should sync the library.
    preferred_font_size : float
        Reading font size, between ``MIN_FONT_SIZE`` and ``MAX_FONT_SIZE``.
    show_reading_progress : bool
        Whether progress bars are shown on book cards.
    """

    color_scheme: ColorScheme = ColorScheme.LIGHT
    notifications_enabled: bool = True
    sync_with_cloud: bool = True
    preferred_font_size: float = 16.0
    show_reading_progress: bool = True


def font_size_in_range(size: float) -> bool:
    return MIN_FONT_SIZE <= size <= MAX_FONT_SIZE


def _settings_from_dict(data: dict) -> AppSettings:
    defaults = AppSettings()
    try:
        color_scheme = ColorScheme(data.get("color_scheme", defaults.color_scheme))
    except ValueError:
        color_scheme = defaults.color_scheme
    font_size = data.get("preferred_font_size", defaults.preferred_font_size)
    if not isinstance(font_size, (int, float)) or not font_size_in_range(font_size):
        font_size = defaults.preferred_font_size
    return AppSettings(
        color_scheme=color_scheme,
        notifications_enabled=bool(
            data.get("notifications_enabled", defaults.notifications_enabled)
        ),
        sync_with_cloud=bool(data.get("sync_with_cloud", defaults.sync_with_cloud)),
        preferred_font_size=float(font_size),
        show_reading_progress=bool(
            data.get("show_reading_progress", defaults.show_reading_progress)
        ),
    )


def load_settings(path: Optional[Path] = None) -> AppSettings:
    """Load settings from a JSON file.

    Creates the default settings file if it does not exist. Unknown or
    out-of-range values fall back to their defaults.

    Parameters
    ----------
    path : Path, optional
        Path to the settings file. Defaults to
        ``_SHELFAI_DIR/shelfai-settings.json``.

    Returns
    -------
    AppSettings
        Loaded (or default) application settings.
    """
    path = path or _DEFAULT_SETTINGS_PATH
    if not path.exists():
        settings = AppSettings()
        save_settings(settings, path)
        return settings
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError:
        return AppSettings()
    if not isinstance(data, dict):
        return AppSettings()
    return _settings_from_dict(data)


def save_settings(settings: AppSettings, path: Optional[Path] = None) -> None:
    """Write settings to a JSON file.

    Creates parent directories if they do not exist.

    Parameters
    ----------
    settings : AppSettings
        The settings to persist.
    path : Path, optional
        Destination file path. Defaults to
        ``_SHELFAI_DIR/shelfai-settings.json``.
    """
    path = path or _DEFAULT_SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    data = asdict(settings)
    data["color_scheme"] = settings.color_scheme.value
    path.write_text(json.dumps(data, indent=2) + "\n")
