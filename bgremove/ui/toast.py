from __future__ import annotations

import customtkinter as ctk

LEVEL_COLORS = {
    "success": ("#2E7D32", "#388E3C"),
    "error": ("#C62828", "#D32F2F"),
}


class Toast(ctk.CTkFrame):
    """Всплывающее уведомление в нижнем правом углу окна, скрывается по таймеру."""
    def __init__(self, master: ctk.CTk, duration_ms: int = 3000, **kwargs) -> None:
        super().__init__(master, corner_radius=8, **kwargs)
        self._duration_ms = duration_ms
        self._hide_job: str | None = None

        self._label = ctk.CTkLabel(self, text="", text_color="white", wraplength=320, justify="left")
        self._label.pack(padx=14, pady=8)

    def show(self, message: str, level: str = "success") -> None:
        self.configure(fg_color=LEVEL_COLORS.get(level, LEVEL_COLORS["success"]))
        self._label.configure(text=message)
        self.place(relx=1.0, rely=1.0, x=-16, y=-16, anchor="se")
        self.lift()
        if self._hide_job is not None:
            self.after_cancel(self._hide_job)
        self._hide_job = self.after(self._duration_ms, self._hide)

    def _hide(self) -> None:
        self._hide_job = None
        self.place_forget()
