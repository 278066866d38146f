"""
Desktop shell for Freewrite using customtkinter.

The window only forwards edits and button presses to the document, timer and
settings objects and redraws itself when they change.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from tkinter import filedialog, messagebox

import customtkinter as ctk

from . import __version__
from .compose import open_compose
from .countdown import PRESET_MINUTES, CountdownTimer
from .document import CONTENT_EVENT, HISTORY_EVENT, SAVING_EVENT, DocumentModel
from .paths import database_path, ensure_directories
from .scheduler import ManualScheduler
from .settings import FONT_OPTIONS, WriterSettings
from .store import SettingsStore

logger = logging.getLogger(__name__)

CLEAR_TIMER_LABEL = "Clear"
HISTORY_PREVIEW_CHARS = 160


class TkTask:
    def __init__(self, widget, after_id: str):
        self._widget = widget
        self._after_id = after_id
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._widget.after_cancel(self._after_id)


class TkScheduler:
    """Schedules callbacks on the Tk event loop so the model stays single-threaded."""

    def __init__(self, widget):
        self._widget = widget

    def call_later(self, delay_seconds: float, callback) -> TkTask:
        after_id = self._widget.after(max(0, int(delay_seconds * 1000)), callback)
        return TkTask(self._widget, after_id)


class FreewriteWindow(ctk.CTk):
    """Main editor window"""

    def __init__(self, store: SettingsStore):
        super().__init__()

        self.store = store
        self.settings = WriterSettings(store)
        self.timer = CountdownTimer(on_expire=self._on_timer_expired)

        self.title("Freewrite")
        self.geometry("900x700")
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self._create_ui()

        # Created after the widgets so a failed load can be shown.
        self.document = DocumentModel(
            store,
            scheduler=TkScheduler(self),
            on_error=self._on_store_error,
        )
        self.document.subscribe(self._on_document_event)
        self._sync_editor_from_document()
        self._update_saving_label()

        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self.after(1000, self._tick)

    def _create_ui(self):
        """Create the editor and the bottom toolbar"""
        self.editor_font = ctk.CTkFont(
            family=self.settings.font_family,
            size=int(self.settings.font_size),
        )
        self.editor = ctk.CTkTextbox(self, wrap="word", font=self.editor_font)
        self.editor.pack(fill="both", expand=True, padx=40, pady=(30, 10))
        self.editor.bind("<KeyRelease>", self._on_editor_changed)
        self.editor.bind("<<Paste>>", lambda _e: self.after_idle(self._on_editor_changed))
        self.editor.bind("<<Cut>>", lambda _e: self.after_idle(self._on_editor_changed))

        self.toolbar = ctk.CTkFrame(self, height=44, corner_radius=0, fg_color="transparent")
        self.toolbar.pack(fill="x", padx=20, pady=(0, 12))

        self.font_menu = ctk.CTkOptionMenu(
            self.toolbar,
            values=list(FONT_OPTIONS.values()),
            command=self._on_font_selected,
            width=110,
        )
        self.font_menu.set(FONT_OPTIONS[self.settings.selected_font])
        self.font_menu.pack(side="left", padx=(0, 8))

        self.size_button = ctk.CTkButton(
            self.toolbar,
            text=f"{int(self.settings.font_size)}px",
            command=self._cycle_font_size,
            width=60,
        )
        self.size_button.pack(side="left", padx=(0, 8))

        self.timer_menu = ctk.CTkOptionMenu(
            self.toolbar,
            values=[f"{m} minutes" for m in PRESET_MINUTES] + [CLEAR_TIMER_LABEL],
            command=self._on_timer_selected,
            width=120,
        )
        self.timer_menu.set(self.timer.label)
        self.timer_menu.pack(side="left", padx=(0, 8))

        self.saving_label = ctk.CTkLabel(self.toolbar, text="", text_color="gray")
        self.saving_label.pack(side="left", padx=10)

        ctk.CTkButton(self.toolbar, text="New Entry", command=self._new_entry, width=100).pack(
            side="right", padx=(8, 0)
        )
        ctk.CTkButton(self.toolbar, text="History", command=self._show_history, width=80).pack(
            side="right", padx=(8, 0)
        )
        ctk.CTkButton(self.toolbar, text="Export", command=self._export, width=80).pack(
            side="right", padx=(8, 0)
        )
        ctk.CTkButton(self.toolbar, text="Chat", command=self._compose, width=70).pack(
            side="right", padx=(8, 0)
        )

    def _on_editor_changed(self, _event=None):
        text = self.editor.get("1.0", "end-1c")
        if text != self.document.content:
            self.document.set_content(text)

    def _on_document_event(self, event: str):
        if event == CONTENT_EVENT:
            self._sync_editor_from_document()
        elif event == SAVING_EVENT:
            self._update_saving_label()
        elif event == HISTORY_EVENT:
            logger.debug("History now holds %d entries", len(self.document.history))

    def _sync_editor_from_document(self):
        content = self.document.content
        if self.editor.get("1.0", "end-1c") == content:
            return
        self.editor.delete("1.0", "end")
        self.editor.insert("1.0", content)

    def _update_saving_label(self):
        self.saving_label.configure(text="Saving..." if self.document.is_saving else "")

    def _on_store_error(self, error: Exception):
        self.saving_label.configure(text="Not saved")
        logger.error("Document store failed: %s", error)

    def _on_font_selected(self, display_name: str):
        for option, name in FONT_OPTIONS.items():
            if name == display_name:
                self.settings.select_font(option)
                break
        self.editor_font.configure(family=self.settings.font_family)

    def _cycle_font_size(self):
        size = self.settings.cycle_font_size()
        self.editor_font.configure(size=size)
        self.size_button.configure(text=f"{size}px")

    def _on_timer_selected(self, choice: str):
        if choice == CLEAR_TIMER_LABEL:
            self.timer.clear()
        else:
            self.timer.start(int(choice.split()[0]))
        self.timer_menu.set(self.timer.label)

    def _tick(self):
        try:
            self.timer.tick()
            self.timer_menu.set(self.timer.label)
        finally:
            self.after(1000, self._tick)

    def _on_timer_expired(self):
        self.bell()

    def _new_entry(self):
        self.document.create_new_entry()
        self.editor.focus_set()

    def _show_history(self):
        HistoryDialog(self, self.document)

    def _export(self):
        exported = self.document.prepare_export()
        target = filedialog.asksaveasfilename(
            title="Export entry",
            initialfile=exported.name,
            defaultextension=".txt",
            filetypes=[("Text", "*.txt"), ("All files", "*.*")],
        )
        if not target:
            return
        try:
            Path(target).write_bytes(exported.data)
        except OSError as exc:
            messagebox.showerror("Freewrite", f"Export failed: {exc}")
            return
        logger.info("Exported entry to %s", target)

    def _compose(self):
        open_compose(self.document)

    def _on_close(self):
        self.document.flush()
        self.destroy()


class HistoryDialog(ctk.CTkToplevel):
    """Past entries; picking one loads it into the editor"""

    def __init__(self, parent, document: DocumentModel):
        super().__init__(parent)

        self.document = document
        self.title("History")
        self.geometry("520x560")

        self._create_ui()

    def _create_ui(self):
        scroll_frame = ctk.CTkScrollableFrame(self)
        scroll_frame.pack(fill="both", expand=True, padx=16, pady=16)

        history = self.document.history
        if not history:
            ctk.CTkLabel(
                scroll_frame,
                text="No entries yet.",
                font=ctk.CTkFont(size=16),
                text_color="gray",
            ).pack(pady=50)

        for index, entry in enumerate(history):
            preview = entry.strip().replace("\n", " ")
            if len(preview) > HISTORY_PREVIEW_CHARS:
                preview = preview[:HISTORY_PREVIEW_CHARS] + "..."
            ctk.CTkButton(
                scroll_frame,
                text=preview,
                anchor="w",
                fg_color="transparent",
                text_color=("gray10", "gray90"),
                command=lambda i=index: self._select(i),
            ).pack(fill="x", pady=4)

        ctk.CTkButton(self, text="Done", command=self.destroy, width=100).pack(pady=(0, 16))

    def _select(self, index: int):
        self.document.select_history(index)
        self.destroy()


def _export_cli(directory: str) -> int:
    ensure_directories()
    store = SettingsStore(database_path())
    # Nothing is edited here, so the autosave never needs a live clock.
    document = DocumentModel(store, scheduler=ManualScheduler())
    exported = document.export_current_content(Path(directory))
    print(exported.path)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="freewrite")
    parser.add_argument("--export", metavar="DIR", help="Write the saved document to DIR and exit")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    parser.add_argument("--version", action="store_true", help="Print app version and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.version:
        print(__version__)
        return 0
    if args.export:
        return _export_cli(args.export)

    ensure_directories()
    app = FreewriteWindow(SettingsStore(database_path()))
    app.mainloop()
    return 0
