"""Чтение файлов с диска и декодирование изображений.

Принципы:
- SRP: класс отвечает только за загрузку байтов и проверку, что они декодируются.
- OCP: новые источники (буфер обмена, URL) можно добавить отдельными методами.
- Возвращает `SourceFile` / `PIL.Image.Image` с предсказуемыми полями.
"""
from __future__ import annotations

import mimetypes
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from bgremove.core.exceptions import DecodeError
from bgremove.models.image_model import SourceFile


class ImageService:
    def read_source(self, file_path: str | Path) -> SourceFile:
        """Читает файл с диска и упаковывает его в `SourceFile`.

        MIME-тип определяется по расширению, как это делает браузер для `File.type`.
        Содержимое здесь не проверяется: это задача шлюза загрузки и декодера.

        Args:
            file_path: Путь до файла.

        Returns:
            `SourceFile` с именем, MIME-типом и байтами файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        mime_type, _encoding = mimetypes.guess_type(path.name)
        return SourceFile(name=path.name, mime_type=mime_type or "", data=path.read_bytes())

    def decode(self, source: SourceFile) -> Image.Image:
        """Полностью декодирует изображение (блокирующий вызов).

        Raises:
            DecodeError: если данные повреждены или не являются изображением.
        """
        try:
            image = Image.open(BytesIO(source.data))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise DecodeError(f"Файл не является изображением: {source.name}") from exc
        return image
