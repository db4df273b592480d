"""Контроллер приложения: связывает UI с ядром обработки.

SOLID:
- SRP: класс управляет связями между UI и ядром (без логики сессии и обработки изображений).
- DIP: зависит от шлюза загрузки, контроллера сессии и экспортёра как от ролей.
Потоки:
- Tk живёт в главном потоке, ядро в `LoopThread`. События UI передаются в
  ядро через `loop.call`, порты ядра возвращаются в Tk через `window.after`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import customtkinter as ctk
from tkinterdnd2 import DND_FILES

from bgremove.controllers.session_controller import SessionController
from bgremove.controllers.upload_gateway import UploadGateway, UploadOrigin
from bgremove.core.exceptions import ExportError, ResourceRevokedError
from bgremove.core.loop import LoopThread
from bgremove.models.resource_model import ObjectHandle
from bgremove.models.session_model import SessionStatus
from bgremove.services.export_service import DownloadExporter
from bgremove.services.resource_manager import ResourceManager
from bgremove.services.theme_store import ThemeStore
from bgremove.ui.header import Header
from bgremove.ui.preview_panel import PreviewPanel
from bgremove.ui.toast import Toast
from bgremove.ui.upload_zone import UploadZone

logger = logging.getLogger(__name__)

PROCESSING_TEXT = "Удаляем фон…"


@dataclass
class AppController:
    """Связывает элементы UI с ядром.

    Ответственности:
    - Бинд событий UI (выбор файла, drop, очистка, скачивание, тема).
    - Подписка на порты `SessionController` и перенос их в поток Tk.
    - Загрузка и сохранение темы оформления.
    """
    window: ctk.CTk
    header: Header
    upload_zone: UploadZone
    previews: ctk.CTkFrame
    original: PreviewPanel
    processed: PreviewPanel
    toast: Toast
    loop: LoopThread
    resources: ResourceManager
    theme_store: ThemeStore

    session_controller: Optional[SessionController] = None
    gateway: Optional[UploadGateway] = None
    exporter: Optional[DownloadExporter] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики UI -> ядро и ядро -> UI.

        Компоненты UI ничего не знают друг о друге, общаются через контроллер.
        """
        self.upload_zone.on_file_selected = self._handle_file_selected
        self.upload_zone.on_file_dropped = self._handle_file_dropped
        self.original.on_close = self._handle_clear
        self.processed.on_action = self._handle_download
        self.header.on_theme_toggle = self._handle_theme_toggle
        self.previews.drop_target_register(DND_FILES)
        self.previews.dnd_bind("<<Drop>>", self._handle_preview_drop)

        # core ports are invoked on the loop thread
        self.session_controller.on_status_change = lambda status: self._ui(self._apply_status, status)
        self.session_controller.on_original_ready = lambda handle: self._show_handle(self.original, handle)
        self.session_controller.on_processed_ready = lambda handle: self._show_handle(self.processed, handle)
        self.session_controller.on_export_available = lambda enabled: self._ui(self.processed.set_action_enabled, enabled)

        theme = self.theme_store.load()
        ctk.set_appearance_mode(theme)
        self.header.set_theme_value(theme)

    def notify(self, message: str, level: str) -> None:
        """Приёмник уведомлений; может вызываться из любого потока."""
        self._ui(self.toast.show, message, level)

    # ---- Handlers (Tk thread) ----
    def _handle_file_selected(self, file_path: str) -> None:
        self.loop.call(self.gateway.submit_path, file_path, UploadOrigin.PICKER)

    def _handle_file_dropped(self, file_path: Optional[str]) -> None:
        self.loop.call(self.gateway.submit_path, file_path, UploadOrigin.DROP)

    def _handle_preview_drop(self, event: Any) -> str:
        # a new image dropped over a finished result replaces the session
        paths = self.window.tk.splitlist(event.data)
        self._handle_file_dropped(paths[0] if paths else None)
        return event.action

    def _handle_clear(self) -> None:
        self.loop.call(self.session_controller.clear)

    def _handle_download(self) -> None:
        self.loop.call(self._export)

    def _handle_theme_toggle(self, theme: str) -> None:
        ctk.set_appearance_mode(theme)
        self.theme_store.save(theme)
        self.original.refresh_theme()
        self.processed.refresh_theme()

    # ---- Helpers ----
    def _export(self) -> None:
        # loop thread: the artifact is read from the single-writer session cell
        try:
            self.exporter.export(self.session_controller.artifact)
        except ExportError:
            self.notify("Не удалось сохранить изображение", "error")

    def _show_handle(self, panel: PreviewPanel, handle: ObjectHandle) -> None:
        # bytes are resolved on the loop thread, before the handle can be revoked
        try:
            data = self.resources.resolve(handle)
        except ResourceRevokedError:
            logger.warning("Handle %s revoked before it was shown", handle.url)
            return
        self._ui(panel.set_image_bytes, data)

    def _apply_status(self, status: SessionStatus) -> None:
        if status is SessionStatus.DECODING:
            self.upload_zone.set_enabled(False)
        elif status is SessionStatus.REMOVING:
            self.original.set_close_enabled(False)
            self.processed.show_message(PROCESSING_TEXT)
            self._show_previews(True)
        elif status is SessionStatus.READY:
            self.original.set_close_enabled(True)
        elif status is SessionStatus.IDLE:
            self.original.reset()
            self.processed.reset()
            self.processed.set_action_enabled(False)
            self._show_previews(False)
            self.upload_zone.set_enabled(True)

    def _show_previews(self, visible: bool) -> None:
        if visible:
            self.upload_zone.grid_remove()
            self.previews.grid(row=1, column=0, sticky="nsew", padx=12, pady=(6, 12))
        else:
            self.previews.grid_remove()
            self.upload_zone.grid(row=1, column=0, sticky="nsew", padx=12, pady=(6, 12))

    def _ui(self, fn: Callable[..., Any], *args: Any) -> None:
        self.window.after(0, fn, *args)
