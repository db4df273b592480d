"""Хранение выбранной темы оформления (`light` | `dark`) в JSON-файле."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from bgremove.core.config import THEME_MODES

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class ThemeStore:
    def __init__(self, path: Path, default: str = "light") -> None:
        self._path = Path(path)
        self._default = default

    def load(self) -> str:
        """Возвращает сохранённую тему или тему по умолчанию, если файла нет или он повреждён."""
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return self._default
        except (OSError, ValueError) as exc:
            logger.warning("Cannot read theme from %s: %s", self._path, exc)
            return self._default

        theme = payload.get(THEME_KEY) if isinstance(payload, dict) else None
        return theme if theme in THEME_MODES else self._default

    def save(self, theme: str) -> None:
        if theme not in THEME_MODES:
            raise ValueError(f"Unknown theme: {theme}")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps({THEME_KEY: theme}), encoding="utf-8")
        except OSError as exc:
            logger.warning("Cannot save theme to %s: %s", self._path, exc)
