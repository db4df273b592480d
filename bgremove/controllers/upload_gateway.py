"""Шлюз загрузки: единая точка входа для выбора файла и drag-and-drop.

Проверяет тип файла и занятость контроллера, после чего передаёт файл в
`SessionController.begin`. Сам ресурсы не трогает.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from bgremove.controllers.session_controller import SessionController
from bgremove.core.exceptions import BgRemoveError, InvalidFileType
from bgremove.models.image_model import SourceFile
from bgremove.services.image_service import ImageService

logger = logging.getLogger(__name__)

Notify = Callable[[str, str], None]


class UploadOrigin(str, Enum):
    PICKER = "picker"
    DROP = "drop"


class RejectReason(str, Enum):
    INVALID_FILE_TYPE = "InvalidFileType"
    BUSY = "Busy"
    UNREADABLE = "Unreadable"


@dataclass(frozen=True)
class Accepted:
    task: asyncio.Task


@dataclass(frozen=True)
class Rejected:
    reason: RejectReason
    error: Optional[BgRemoveError] = field(default=None, compare=False)


UploadResult = Union[Accepted, Rejected]

_INVALID_TYPE_MESSAGES = {
    UploadOrigin.PICKER: "Выберите файл изображения",
    UploadOrigin.DROP: "Перетащите файл изображения",
}


class UploadGateway:
    def __init__(
        self,
        controller: SessionController,
        image_service: Optional[ImageService] = None,
        notify: Optional[Notify] = None,
    ) -> None:
        self._controller = controller
        self._image_service = image_service or ImageService()
        self._notify = notify

    def submit(self, source: Optional[SourceFile], origin: UploadOrigin = UploadOrigin.PICKER) -> UploadResult:
        """Проверяет файл и запускает сессию.

        Не-изображение всегда отклоняется с `InvalidFileType` и сообщением об
        ошибке, даже если контроллер занят. Загрузка во время обработки
        отклоняется молча (`Busy`), без очереди.
        """
        try:
            self._check_type(source, origin)
        except InvalidFileType as exc:
            logger.info("Rejected %s upload: %s", origin.value, exc)
            self._send(_INVALID_TYPE_MESSAGES[origin], "error")
            return Rejected(RejectReason.INVALID_FILE_TYPE, exc)

        if not self._controller.can_begin():
            logger.debug("Rejected %s upload of %s: controller is busy", origin.value, source.name)
            return Rejected(RejectReason.BUSY)

        task = self._controller.begin(source)
        if task is None:
            return Rejected(RejectReason.BUSY)
        return Accepted(task)

    def submit_path(self, file_path: Optional[str | Path], origin: UploadOrigin = UploadOrigin.PICKER) -> UploadResult:
        """Читает файл с диска и передаёт его в `submit`."""
        if not file_path:
            return self.submit(None, origin)
        try:
            source = self._image_service.read_source(file_path)
        except OSError as exc:
            logger.warning("Cannot read %s: %s", file_path, exc)
            self._send("Не удалось прочитать файл", "error")
            return Rejected(RejectReason.UNREADABLE)
        return self.submit(source, origin)

    @staticmethod
    def _check_type(source: Optional[SourceFile], origin: UploadOrigin) -> None:
        if source is None:
            raise InvalidFileType(f"empty {origin.value}")
        if not source.is_image:
            raise InvalidFileType(f"{source.name!r} is {source.mime_type or 'of unknown type'}, not an image")

    def _send(self, message: str, level: str) -> None:
        if self._notify is not None:
            self._notify(message, level)
