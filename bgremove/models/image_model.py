"""Модели данных для изображений.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass

from bgremove.models.resource_model import ObjectHandle


@dataclass(frozen=True)
class SourceFile:
    """Загруженный пользователем файл (аналог `File` в браузере).

    Fields:
        name: Имя файла без пути.
        mime_type: MIME-тип, например "image/png". Пустая строка, если не определён.
        data: Содержимое файла.
    """
    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


@dataclass(frozen=True)
class DecodedImage:
    """Декодированный оригинал и его дескриптор для предпросмотра.

    Fields:
        handle: Зарегистрированная ссылка на байты оригинала.
        width: Ширина, px.
        height: Высота, px.
        mode: Режим PIL, например "RGB".
    """
    handle: ObjectHandle
    width: int
    height: int
    mode: str


@dataclass(frozen=True)
class Artifact:
    """Результат удаления фона: PNG с альфа-каналом."""
    data: bytes
    width: int
    height: int
    mime_type: str = "image/png"

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("Artifact data must not be empty")
