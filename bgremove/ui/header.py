from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk


class Header(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=56, **kwargs)

        # callbacks
        self.on_theme_toggle: Optional[Callable[[str], None]] = None

        self.grid_columnconfigure(1, weight=1)

        self._logo = ctk.CTkLabel(self, text="BG Remove", font=ctk.CTkFont(size=18, weight="bold"))
        self._logo.grid(row=0, column=0, padx=(12, 8), pady=10, sticky="w")

        self._tagline = ctk.CTkLabel(self, text="Мгновенное удаление фона, полностью локально")
        self._tagline.grid(row=0, column=1, padx=6, pady=10, sticky="w")

        self._theme_var = ctk.StringVar(value="light")
        self._theme_switch = ctk.CTkSwitch(
            self,
            text="Тёмная тема",
            variable=self._theme_var,
            onvalue="dark",
            offvalue="light",
            command=self._on_theme_switch,
        )
        self._theme_switch.grid(row=0, column=2, padx=(6, 12), pady=10, sticky="e")

    # public API (sync from controller)
    def set_theme_value(self, theme: str) -> None:
        self._theme_var.set(theme)

    # events
    def _on_theme_switch(self) -> None:
        if self.on_theme_toggle:
            self.on_theme_toggle(self._theme_var.get())
