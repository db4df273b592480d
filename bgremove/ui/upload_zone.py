"""Зона загрузки: клик открывает диалог выбора файла, файлы можно перетащить.

Принципы:
- SRP: только сбор путей к файлам; проверка типа и запуск обработки в шлюзе загрузки.
"""
from __future__ import annotations

from tkinter import filedialog, TclError
from typing import Callable, Optional

import customtkinter as ctk
from tkinterdnd2 import DND_FILES

FILE_TYPES = (
    ("Images", "*.png *.jpg *.jpeg *.webp *.bmp *.gif *.tiff"),
    ("All files", "*.*"),
)


class UploadZone(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, border_width=2, corner_radius=12, **kwargs)

        # callbacks
        self.on_file_selected: Optional[Callable[[str], None]] = None
        self.on_file_dropped: Optional[Callable[[Optional[str]], None]] = None

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._icon = ctk.CTkLabel(self, text="⇪", font=ctk.CTkFont(size=42))
        self._icon.grid(row=1, column=0, pady=(0, 6))
        self._text = ctk.CTkLabel(
            self, text="Перетащите изображение сюда или нажмите для выбора", font=ctk.CTkFont(size=15, weight="bold")
        )
        self._text.grid(row=2, column=0, padx=12)
        self._hint = ctk.CTkLabel(self, text="Поддерживаются JPG, PNG, WebP и другие распространённые форматы")
        self._hint.grid(row=3, column=0, padx=12, pady=(4, 0), sticky="n")

        self._enabled = True
        for widget in (self, self._icon, self._text, self._hint):
            widget.bind("<Button-1>", self._on_click)
        self._setup_dnd()

    # public API
    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    # events
    def _setup_dnd(self) -> None:
        self.drop_target_register(DND_FILES)
        self.dnd_bind("<<DropEnter>>", self._on_drag_enter)
        self.dnd_bind("<<DropLeave>>", self._on_drag_leave)
        self.dnd_bind("<<Drop>>", self._on_drop)

    def _on_click(self, _event: object) -> None:
        if not self._enabled:
            return
        try:
            file_path = filedialog.askopenfilename(title="Выберите изображение", filetypes=FILE_TYPES)
        except TclError:
            # Silent fail if dialog cannot open
            return
        if file_path and self.on_file_selected:
            self.on_file_selected(file_path)

    def _on_drag_enter(self, event: object) -> str:
        self.configure(border_color=("#3B8ED0", "#1F6AA5"))
        return getattr(event, "action", "copy")

    def _on_drag_leave(self, event: object) -> str:
        self.configure(border_color=ctk.ThemeManager.theme["CTkFrame"]["border_color"])
        return getattr(event, "action", "copy")

    def _on_drop(self, event: object) -> str:
        self._on_drag_leave(event)
        paths = self.tk.splitlist(getattr(event, "data", ""))
        # only the first dropped file is used
        if self._enabled and self.on_file_dropped:
            self.on_file_dropped(paths[0] if paths else None)
        return getattr(event, "action", "copy")
