"""Учёт временных ссылок на бинарные данные (предпросмотр оригинала и результата).

Принципы:
- SRP: класс только регистрирует, выдаёт и отзывает дескрипторы.
- Таблица дескрипторов меняется исключительно через публичные методы.
- Отзыв идемпотентен: повторный отзыв или отзыв неизвестного дескриптора ничего не делает.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from bgremove.core.exceptions import ResourceRevokedError
from bgremove.models.resource_model import ObjectHandle

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    handle: ObjectHandle
    data: bytes


class ResourceManager:
    def __init__(self) -> None:
        self._entries: Dict[str, _Entry] = {}
        self.registered_count = 0
        self.revoked_count = 0

    def register(self, owner: str, data: bytes, mime_type: str) -> ObjectHandle:
        """Регистрирует байты за владельцем и возвращает новый дескриптор."""
        handle = ObjectHandle(url=f"blob:bgremove/{uuid.uuid4()}", owner=owner, mime_type=mime_type)
        self._entries[handle.url] = _Entry(handle=handle, data=data)
        self.registered_count += 1
        logger.debug("Registered %s for session %s (%d bytes)", handle.url, owner, len(data))
        return handle

    def resolve(self, handle: ObjectHandle) -> bytes:
        """Возвращает байты за дескриптором.

        Raises:
            ResourceRevokedError: если дескриптор уже отозван или не регистрировался.
        """
        entry = self._entries.get(handle.url)
        if entry is None:
            raise ResourceRevokedError(f"Handle is not live: {handle.url}")
        return entry.data

    def revoke(self, handle: ObjectHandle) -> bool:
        """Отзывает дескриптор. Возвращает False, если он уже не был активен."""
        entry = self._entries.pop(handle.url, None)
        if entry is None:
            return False
        self.revoked_count += 1
        logger.debug("Revoked %s", handle.url)
        return True

    def revoke_all(self, owner: str) -> int:
        """Отзывает все активные дескрипторы владельца, возвращает их количество."""
        revoked = 0
        for handle in self.live_handles(owner):
            if self.revoke(handle):
                revoked += 1
        return revoked

    def is_live(self, handle: ObjectHandle) -> bool:
        return handle.url in self._entries

    def live_handles(self, owner: Optional[str] = None) -> List[ObjectHandle]:
        return [e.handle for e in self._entries.values() if owner is None or e.handle.owner == owner]

    @property
    def live_count(self) -> int:
        return len(self._entries)
