"""Модель сессии обработки одного изображения.

Сессия неизменяема: контроллер заменяет значение целиком на каждом
переходе, поэтому владелец и время жизни полей видны явно.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from bgremove.models.image_model import Artifact, DecodedImage, SourceFile
from bgremove.models.resource_model import ObjectHandle


class SessionStatus(str, Enum):
    IDLE = "Idle"
    DECODING = "Decoding"
    REMOVING = "Removing"
    READY = "Ready"
    FAILED = "Failed"

    @property
    def is_busy(self) -> bool:
        return self in (SessionStatus.DECODING, SessionStatus.REMOVING)


def _new_session_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class ImageSession:
    """Единица работы: один файл от загрузки до скачивания.

    Fields:
        id: Идентификатор сессии, ключ владельца в `ResourceManager`.
        status: Текущее состояние конечного автомата.
        source: Исходный файл.
        original: Декодированный оригинал с дескриптором предпросмотра.
        artifact: Результат; задан тогда и только тогда, когда status == READY.
        processed_handle: Дескриптор предпросмотра результата.
        error: Последняя ошибка (только для FAILED).
    """
    id: str = field(default_factory=_new_session_id)
    status: SessionStatus = SessionStatus.IDLE
    source: Optional[SourceFile] = None
    original: Optional[DecodedImage] = None
    artifact: Optional[Artifact] = None
    processed_handle: Optional[ObjectHandle] = None
    error: Optional[Exception] = None

    def __post_init__(self) -> None:
        if (self.artifact is not None) != (self.status is SessionStatus.READY):
            raise ValueError(f"artifact must be set if and only if status is Ready (status={self.status.value})")

    @classmethod
    def idle(cls) -> "ImageSession":
        return cls()

    @classmethod
    def start(cls, source: SourceFile) -> "ImageSession":
        return cls(status=SessionStatus.DECODING, source=source)

    def transition(self, status: SessionStatus, **changes: object) -> "ImageSession":
        return replace(self, status=status, **changes)

    @property
    def handles(self) -> tuple[ObjectHandle, ...]:
        found = []
        if self.original is not None:
            found.append(self.original.handle)
        if self.processed_handle is not None:
            found.append(self.processed_handle)
        return tuple(found)
