"""Удаление фона: внешний сервис за единым асинхронным контрактом.

Принципы:
- DIP: контроллер зависит от `BackgroundRemovalAdapter`, конкретный движок
  (`rembg`) подставляется через абстракцию `BackgroundRemover`.
- Любая ошибка движка превращается в `RemovalError` и не покидает адаптер.
- Одна попытка, без повторов: решение о показе ошибки принимает вызывающий.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from io import BytesIO
from typing import Any, Optional

from PIL import Image

from bgremove.core.exceptions import RemovalError
from bgremove.models.image_model import Artifact, SourceFile

logger = logging.getLogger(__name__)


class BackgroundRemover(ABC):
    @abstractmethod
    def remove(self, image_bytes: bytes) -> bytes:
        """Return image bytes with the background made transparent."""


class RembgBackgroundRemover(BackgroundRemover):
    def __init__(self, model_name: str = "u2net") -> None:
        self._model_name = model_name
        self._session: Optional[Any] = None

    def _get_session(self) -> Any:
        # Keep one session alive to avoid reloading the model on every image.
        if self._session is None:
            from rembg import new_session

            logger.info("Loading rembg model %s", self._model_name)
            self._session = new_session(self._model_name)
        return self._session

    def remove(self, image_bytes: bytes) -> bytes:
        from rembg import remove

        return remove(image_bytes, session=self._get_session())


class BackgroundRemovalAdapter:
    def __init__(self, remover: BackgroundRemover) -> None:
        self._remover = remover

    async def remove(self, source: SourceFile) -> Artifact:
        """Удаляет фон у `source` в рабочем потоке и возвращает PNG с альфа-каналом.

        MIME-тип повторно не проверяется: это уже сделал шлюз загрузки.

        Raises:
            RemovalError: при любом сбое движка или непригодном результате.
        """
        try:
            raw = await asyncio.to_thread(self._remover.remove, source.data)
            return await asyncio.to_thread(self._to_artifact, raw)
        except RemovalError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.warning("Background removal failed for %s: %r", source.name, exc)
            raise RemovalError(f"Не удалось удалить фон: {source.name}") from exc

    @staticmethod
    def _to_artifact(raw: bytes) -> Artifact:
        """Приводит ответ движка к RGBA PNG."""
        if not raw:
            raise RemovalError("Сервис удаления фона вернул пустой результат")
        image = Image.open(BytesIO(raw))
        if image.format == "PNG" and image.mode == "RGBA":
            image.load()
            return Artifact(data=raw, width=image.width, height=image.height)

        rgba = image.convert("RGBA")
        buffer = BytesIO()
        rgba.save(buffer, format="PNG")
        return Artifact(data=buffer.getvalue(), width=rgba.width, height=rgba.height)
