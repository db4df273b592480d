"""Панель предпросмотра: заголовок, канва с изображением «вписанным» в область, кнопка действия.

Принципы:
- SRP: отвечает только за представление изображения, без логики сессии.
- Прозрачные пиксели результата показываются поверх «шахматки» (numpy).
"""
from __future__ import annotations

from io import BytesIO
from typing import Callable, Optional

import customtkinter as ctk
import numpy as np
import tkinter as tk
from PIL import Image, ImageTk

CHECKER_TILE = 12


def make_checkerboard(width: int, height: int, tile: int = CHECKER_TILE, dark: bool = False) -> np.ndarray:
    """RGB-шахматка нужного размера, без циклов Python."""
    xs = np.arange(width) // tile
    ys = np.arange(height) // tile
    mask = (xs[np.newaxis, :] + ys[:, np.newaxis]) % 2 == 0
    c1, c2 = (60, 40) if dark else (235, 200)
    arr = np.where(mask[:, :, np.newaxis], c1, c2).astype(np.uint8)
    return np.repeat(arr, 3, axis=2)


def composite_on_checkerboard(image: Image.Image, dark: bool = False) -> Image.Image:
    """Накладывает RGBA-изображение на шахматку и возвращает RGB."""
    rgba = np.asarray(image.convert("RGBA"), dtype=np.float32)
    h, w = rgba.shape[:2]
    checker = make_checkerboard(w, h, dark=dark).astype(np.float32)
    alpha = rgba[:, :, 3:4] / 255.0
    out = rgba[:, :, :3] * alpha + checker * (1.0 - alpha)
    return Image.fromarray(out.astype(np.uint8), mode="RGB")


class PreviewPanel(ctk.CTkFrame):
    """Карточка «Оригинал» / «Без фона»."""
    def __init__(
        self,
        master: ctk.CTk | tk.Misc,
        title: str,
        transparent: bool = False,
        action_text: Optional[str] = None,
        closable: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(master, corner_radius=12, **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        # callbacks
        self.on_action: Optional[Callable[[], None]] = None
        self.on_close: Optional[Callable[[], None]] = None

        self._transparent = transparent
        self._image: Optional[Image.Image] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        self._message: Optional[str] = None

        self._title = ctk.CTkLabel(self, text=title, font=ctk.CTkFont(size=14, weight="bold"))
        self._title.grid(row=0, column=0, padx=10, pady=(8, 4), sticky="w")
        self._close_btn: Optional[ctk.CTkButton] = None
        if closable:
            self._close_btn = ctk.CTkButton(self, text="✕", width=36, command=self._emit_close)
            self._close_btn.grid(row=0, column=1, padx=(4, 10), pady=(8, 4), sticky="e")

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=1, column=0, columnspan=2, sticky="nsew", padx=10, pady=4)
        self._canvas.bind("<Configure>", self._on_canvas_resize)

        self._action_btn: Optional[ctk.CTkButton] = None
        if action_text:
            self._action_btn = ctk.CTkButton(self, text=action_text, state="disabled", command=self._emit_action)
            self._action_btn.grid(row=2, column=0, columnspan=2, padx=10, pady=(4, 10), sticky="e")

    # ---- Public API ----
    def set_image_bytes(self, data: bytes) -> None:
        """Показывает изображение из байтов (PNG/JPEG/...)."""
        image = Image.open(BytesIO(data))
        image.load()
        self._image = image
        self._message = None
        self._render()

    def show_message(self, text: str) -> None:
        """Убирает изображение и показывает текст, например индикатор обработки."""
        self._image = None
        self._message = text
        self._render()

    def reset(self) -> None:
        self._image = None
        self._message = None
        self._render()

    def set_action_enabled(self, enabled: bool) -> None:
        if self._action_btn is not None:
            self._action_btn.configure(state="normal" if enabled else "disabled")

    def set_close_enabled(self, enabled: bool) -> None:
        if self._close_btn is not None:
            self._close_btn.configure(state="normal" if enabled else "disabled")

    def refresh_theme(self) -> None:
        self._canvas.configure(bg=self._get_canvas_bg())
        self._render()

    # ---- Internals ----
    def _on_canvas_resize(self, _event: tk.Event) -> None:
        self._render()

    def _render(self) -> None:
        self._canvas.delete("all")
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))

        if self._image is None:
            text = self._message or "Нет изображения"
            self._canvas.create_text(canvas_w // 2, canvas_h // 2, text=text, fill=self._get_text_color())
            return

        img_w, img_h = self._image.size
        scale = min(canvas_w / img_w, canvas_h / img_h, 1.0) if img_w and img_h else 1.0
        scaled_w = max(1, int(img_w * scale))
        scaled_h = max(1, int(img_h * scale))

        resized = self._image.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)
        if self._transparent:
            resized = composite_on_checkerboard(resized, dark=self._is_dark())

        self._tk_image = ImageTk.PhotoImage(resized)
        self._canvas.create_image(canvas_w // 2, canvas_h // 2, image=self._tk_image, anchor="center")

    def _emit_action(self) -> None:
        if self.on_action:
            self.on_action()

    def _emit_close(self) -> None:
        if self.on_close:
            self.on_close()

    def _is_dark(self) -> bool:
        return ctk.get_appearance_mode().lower() == "dark"

    def _get_canvas_bg(self) -> str:
        # CTk does not expose canvas theme, so pick neutral
        return "#1f1f1f" if self._is_dark() else "#f2f2f2"

    def _get_text_color(self) -> str:
        return "#c8c8c8" if self._is_dark() else "#5a5a5a"
