from __future__ import annotations

from dataclasses import dataclass

AUTOSAVE_DELAY_SETTING_KEY = "autosave_delay_seconds"
SAVING_INDICATOR_SETTING_KEY = "saving_indicator_seconds"

DEFAULT_AUTOSAVE_DELAY_SECONDS = 2.0
DEFAULT_SAVING_INDICATOR_SECONDS = 0.5


@dataclass(frozen=True)
class AutosaveConfig:
    autosave_delay_seconds: float = DEFAULT_AUTOSAVE_DELAY_SECONDS
    saving_indicator_seconds: float = DEFAULT_SAVING_INDICATOR_SECONDS

    @classmethod
    def from_store(cls, store) -> "AutosaveConfig":
        get_float = getattr(store, "get_float", None)
        if get_float is None:
            return cls()
        delay = get_float(AUTOSAVE_DELAY_SETTING_KEY, DEFAULT_AUTOSAVE_DELAY_SECONDS)
        indicator = get_float(SAVING_INDICATOR_SETTING_KEY, DEFAULT_SAVING_INDICATOR_SECONDS)
        return cls(
            autosave_delay_seconds=max(0.1, min(60.0, delay)),
            saving_indicator_seconds=max(0.1, min(10.0, indicator)),
        )
