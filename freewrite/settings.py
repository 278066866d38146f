from __future__ import annotations

import random

from .store import PersistenceStore

SELECTED_FONT_SETTING_KEY = "selected_font"
FONT_SIZE_SETTING_KEY = "font_size"

FONT_OPTIONS = {
    "lato": "Lato",
    "arial": "Arial",
    "system": "System",
    "serif": "Serif",
    "random": "Random",
}
DEFAULT_FONT = "lato"

FONT_FAMILIES = {
    "lato": "Lato",
    "arial": "Arial",
    "system": "TkDefaultFont",
    "serif": "Times New Roman",
}

RANDOM_FAMILIES = (
    "Helvetica", "Georgia", "Palatino", "Times New Roman", "Courier New",
    "Avenir", "Baskerville", "Cochin", "Copperplate", "Didot",
    "Futura", "Gill Sans", "Hoefler Text", "Optima", "Trebuchet MS",
)

FONT_SIZES = (12, 14, 16, 18, 20, 24, 28, 32)
DEFAULT_FONT_SIZE = 18


class WriterSettings:
    """Font preferences persisted next to the document."""

    def __init__(self, store: PersistenceStore, rng: random.Random | None = None):
        self._store = store
        self._rng = rng or random.Random()
        self.selected_font = DEFAULT_FONT
        self.font_size = DEFAULT_FONT_SIZE
        self.random_family = RANDOM_FAMILIES[0]
        self._load()

    def _load(self) -> None:
        saved_font = self._store.get(SELECTED_FONT_SETTING_KEY)
        if saved_font in FONT_OPTIONS:
            self.selected_font = saved_font

        saved_size = self._store.get(FONT_SIZE_SETTING_KEY)
        if saved_size is not None:
            try:
                size = float(saved_size)
            except ValueError:
                size = 0.0
            if size > 0:
                self.font_size = int(size) if size.is_integer() else size

        if self.selected_font == "random":
            self._pick_random_family()

    @property
    def font_family(self) -> str:
        if self.selected_font == "random":
            return self.random_family
        return FONT_FAMILIES[self.selected_font]

    def select_font(self, option: str) -> None:
        if option not in FONT_OPTIONS:
            raise ValueError(f"unknown font option: {option!r}")
        self.selected_font = option
        self._store.set(SELECTED_FONT_SETTING_KEY, option)
        if option == "random":
            self._pick_random_family()

    def cycle_font_size(self) -> int:
        if self.font_size in FONT_SIZES:
            index = FONT_SIZES.index(self.font_size)
            self.font_size = FONT_SIZES[(index + 1) % len(FONT_SIZES)]
        else:
            self.font_size = DEFAULT_FONT_SIZE
        self._store.set(FONT_SIZE_SETTING_KEY, str(self.font_size))
        return self.font_size

    def _pick_random_family(self) -> None:
        self.random_family = self._rng.choice(RANDOM_FAMILIES)
