from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TimerState:
    minutes: int
    seconds: int
    is_running: bool


@dataclass(frozen=True)
class ExportedFile:
    name: str
    path: Path | None
    data: bytes


@dataclass(frozen=True)
class SaveResult:
    content: str
    ok: bool
    error: Exception | None = None
