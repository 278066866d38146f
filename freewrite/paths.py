from __future__ import annotations

import os
import tempfile
from pathlib import Path

APP_DIR_NAME = "Freewrite"


def data_directory() -> Path:
    override = os.environ.get("FREEWRITE_HOME")
    if override:
        return Path(override)
    local_appdata = os.environ.get("LOCALAPPDATA")
    if local_appdata:
        return Path(local_appdata) / APP_DIR_NAME
    return Path.home() / ".freewrite"


def database_path() -> Path:
    return data_directory() / "freewrite.sqlite3"


def export_directory() -> Path:
    return Path(tempfile.gettempdir())


def ensure_directories() -> None:
    data_directory().mkdir(parents=True, exist_ok=True)
