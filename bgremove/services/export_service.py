"""Сохранение результата в файл `bg-removed-<timestamp>.png`.

Временная ссылка на данные для экспорта (временный файл рядом с целевым)
живёт только на время записи и не учитывается в `ResourceManager`:
дескрипторы сессии к экспорту отношения не имеют.
"""
from __future__ import annotations

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Optional

from bgremove.core.exceptions import ExportError
from bgremove.models.image_model import Artifact

logger = logging.getLogger(__name__)

Notify = Callable[[str, str], None]


def export_filename(timestamp_ms: int, index: int = 0) -> str:
    if index:
        return f"bg-removed-{timestamp_ms}-{index}.png"
    return f"bg-removed-{timestamp_ms}.png"


class DownloadExporter:
    def __init__(
        self,
        download_dir: Path,
        notify: Optional[Notify] = None,
        clock_ms: Callable[[], int] = lambda: time.time_ns() // 1_000_000,
    ) -> None:
        self._download_dir = Path(download_dir)
        self._notify = notify
        self._clock_ms = clock_ms

    def export(self, artifact: Optional[Artifact]) -> Optional[Path]:
        """Сохраняет результат и возвращает путь к файлу; без результата ничего не делает."""
        if artifact is None:
            logger.debug("Export requested without a ready artifact; ignoring")
            return None

        target = self._free_target(self._clock_ms())
        try:
            self._write(target, artifact.data)
        except OSError as exc:
            logger.exception("Failed to save %s", target)
            raise ExportError(f"Не удалось сохранить файл: {target}") from exc

        logger.info("Saved %s (%d bytes)", target, len(artifact.data))
        if self._notify:
            self._notify("Изображение сохранено!", "success")
        return target

    def _free_target(self, timestamp_ms: int) -> Path:
        """Имя по времени; при совпадении (два сохранения за одну миллисекунду) добавляется `-N`."""
        index = 0
        target = self._download_dir / export_filename(timestamp_ms)
        while target.exists():
            index += 1
            target = self._download_dir / export_filename(timestamp_ms, index)
        return target

    def _write(self, target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".bg-removed-", suffix=".part", dir=target.parent)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, target)
        finally:
            # the transient reference is released whether or not the rename happened
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
