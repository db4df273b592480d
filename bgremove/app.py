import customtkinter as ctk
from tkinterdnd2 import TkinterDnD

from bgremove.controllers.app_controller import AppController
from bgremove.controllers.session_controller import SessionController
from bgremove.controllers.upload_gateway import UploadGateway
from bgremove.core.config import Settings
from bgremove.core.loop import LoopThread
from bgremove.services.export_service import DownloadExporter
from bgremove.services.image_service import ImageService
from bgremove.services.removal_service import BackgroundRemovalAdapter, RembgBackgroundRemover
from bgremove.services.resource_manager import ResourceManager
from bgremove.services.theme_store import ThemeStore
from bgremove.ui.header import Header
from bgremove.ui.preview_panel import PreviewPanel
from bgremove.ui.toast import Toast
from bgremove.ui.upload_zone import UploadZone


class BgRemoveApp(ctk.CTk, TkinterDnD.DnDWrapper):
    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self.TkdndVersion = TkinterDnD._require(self)
        ctk.set_default_color_theme("blue")

        self.title(settings.window_title)
        self.geometry("1100x680")
        self.minsize(760, 480)

        # root layout: header on top, content below
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=0)
        self.grid_rowconfigure(1, weight=1)

        self._header = Header(self)
        self._header.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))

        self._upload_zone = UploadZone(self)
        self._upload_zone.grid(row=1, column=0, sticky="nsew", padx=12, pady=(6, 12))

        self._previews = ctk.CTkFrame(self, fg_color="transparent")
        self._previews.grid_columnconfigure((0, 1), weight=1, uniform="preview")
        self._previews.grid_rowconfigure(0, weight=1)
        self._original = PreviewPanel(self._previews, title="Оригинал", closable=True)
        self._original.grid(row=0, column=0, sticky="nsew", padx=(0, 6))
        self._processed = PreviewPanel(self._previews, title="Без фона", transparent=True, action_text="Скачать")
        self._processed.grid(row=0, column=1, sticky="nsew", padx=(6, 0))

        self._toast = Toast(self, duration_ms=settings.toast_duration_ms)

        self._loop = LoopThread()
        resources = ResourceManager()
        image_service = ImageService()
        remover = BackgroundRemovalAdapter(RembgBackgroundRemover(settings.rembg_model))

        self._controller = AppController(
            window=self,
            header=self._header,
            upload_zone=self._upload_zone,
            previews=self._previews,
            original=self._original,
            processed=self._processed,
            toast=self._toast,
            loop=self._loop,
            resources=resources,
            theme_store=ThemeStore(settings.theme_file, default=settings.default_theme),
        )
        session = SessionController(resources, remover, image_service, notify=self._controller.notify)
        self._controller.session_controller = session
        self._controller.gateway = UploadGateway(session, image_service, notify=self._controller.notify)
        self._controller.exporter = DownloadExporter(settings.download_dir, notify=self._controller.notify)
        self._controller.bind_events()

        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self._loop.start()

    def _on_close(self) -> None:
        self._loop.stop()
        self.destroy()
