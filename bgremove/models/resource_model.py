from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ObjectHandle:
    """Отзываемая ссылка на байты в памяти (аналог object URL).

    Fields:
        url: Уникальный идентификатор вида "blob:bgremove/<uuid>".
        owner: Идентификатор сессии-владельца.
        mime_type: MIME-тип данных за ссылкой.
    """
    url: str
    owner: str
    mime_type: str
