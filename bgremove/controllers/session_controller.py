"""Контроллер сессии: конечный автомат жизненного цикла одного изображения.

Idle → Decoding → Removing → Ready, Failed достижим из Decoding и Removing
и сразу сворачивается обратно в Idle после показа ошибки.

SOLID:
- SRP: только переходы состояний и порядок вызовов сервисов; отрисовку
  выполняют подписчики портов `on_*`.
- DIP: декодер, адаптер удаления фона и менеджер ресурсов передаются извне.
Ячейка `_session` пишется только этим классом.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from bgremove.core.exceptions import DecodeError, RemovalError
from bgremove.models.image_model import Artifact, DecodedImage, SourceFile
from bgremove.models.resource_model import ObjectHandle
from bgremove.models.session_model import ImageSession, SessionStatus
from bgremove.services.image_service import ImageService
from bgremove.services.removal_service import BackgroundRemovalAdapter
from bgremove.services.resource_manager import ResourceManager

logger = logging.getLogger(__name__)

Notify = Callable[[str, str], None]

MSG_PROCESSING = "Удаляем фон…"
MSG_READY = "Фон успешно удалён!"
MSG_DECODE_FAILED = "Не удалось открыть изображение. Выберите другой файл."
MSG_REMOVAL_FAILED = "Не удалось обработать изображение. Попробуйте ещё раз."


class SessionController:
    def __init__(
        self,
        resources: ResourceManager,
        remover: BackgroundRemovalAdapter,
        image_service: Optional[ImageService] = None,
        notify: Optional[Notify] = None,
    ) -> None:
        self._resources = resources
        self._remover = remover
        self._image_service = image_service or ImageService()
        self._notify = notify
        self._session = ImageSession.idle()

        # ports
        self.on_status_change: Optional[Callable[[SessionStatus], None]] = None
        self.on_original_ready: Optional[Callable[[ObjectHandle], None]] = None
        self.on_processed_ready: Optional[Callable[[ObjectHandle], None]] = None
        self.on_export_available: Optional[Callable[[bool], None]] = None

    # ---- State ----
    @property
    def session(self) -> ImageSession:
        return self._session

    @property
    def status(self) -> SessionStatus:
        return self._session.status

    @property
    def artifact(self) -> Optional[Artifact]:
        return self._session.artifact

    def can_begin(self) -> bool:
        return not self._session.status.is_busy

    # ---- Transitions ----
    def begin(self, source: SourceFile) -> Optional[asyncio.Task]:
        """Начинает новую сессию для `source` и возвращает задачу её обработки.

        Предусловие: нет сессии в состоянии Decoding или Removing, иначе
        вызов игнорируется и возвращается None. Готовая (Ready) сессия
        предварительно очищается, так что её дескрипторы отзываются раньше,
        чем регистрируются дескрипторы новой.

        Должен вызываться из работающего цикла событий.
        """
        if self._session.status.is_busy:
            logger.info("Ignoring %s: session %s is %s", source.name, self._session.id, self._session.status.value)
            return None
        loop = asyncio.get_running_loop()

        if self._session.status is not SessionStatus.IDLE:
            self._reset()

        session = ImageSession.start(source)
        logger.info("Session %s started for %s (%s, %d bytes)", session.id, source.name, source.mime_type, source.size)
        self._set(session)
        return loop.create_task(self._run(session), name=f"bgremove-session-{session.id}")

    def clear(self) -> bool:
        """Отзывает ресурсы сессии и возвращает автомат в Idle.

        Во время Decoding/Removing очистка невозможна (отмены нет) и
        возвращается False.
        """
        if self._session.status.is_busy:
            logger.info("Clear ignored: session %s is %s", self._session.id, self._session.status.value)
            return False
        self._reset()
        return True

    # ---- Internals ----
    async def _run(self, session: ImageSession) -> None:
        source = session.source
        try:
            try:
                image = await asyncio.to_thread(self._image_service.decode, source)
            except DecodeError as exc:
                self._fail(exc, MSG_DECODE_FAILED)
                return

            handle = self._resources.register(session.id, source.data, source.mime_type)
            original = DecodedImage(handle=handle, width=image.width, height=image.height, mode=image.mode)
            image.close()
            self._set(self._session.transition(SessionStatus.DECODING, original=original))
            self._emit(self.on_original_ready, handle)

            self._set(self._session.transition(SessionStatus.REMOVING))
            self._send(MSG_PROCESSING, "success")

            try:
                artifact = await self._remover.remove(source)
            except RemovalError as exc:
                self._fail(exc, MSG_REMOVAL_FAILED)
                return

            processed = self._resources.register(session.id, artifact.data, artifact.mime_type)
            self._set(self._session.transition(SessionStatus.READY, artifact=artifact, processed_handle=processed))
            logger.info("Session %s ready (%dx%d)", session.id, artifact.width, artifact.height)
            self._emit(self.on_processed_ready, processed)
            self._emit(self.on_export_available, True)
            self._send(MSG_READY, "success")
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected failure in session %s", session.id)
            # a failed unwind has already replaced the session with a fresh Idle one
            if self._session.id == session.id:
                self._fail(exc, MSG_REMOVAL_FAILED)

    def _fail(self, error: Exception, message: str) -> None:
        logger.error("Session %s failed: %s", self._session.id, error)
        try:
            self._set(self._session.transition(SessionStatus.FAILED, artifact=None, error=error))
            self._send(message, "error")
        finally:
            self._reset()

    def _reset(self) -> None:
        old = self._session
        revoked = self._resources.revoke_all(old.id)
        self._set(ImageSession.idle())
        self._emit(self.on_export_available, False)
        logger.debug("Session %s cleared, %d handle(s) revoked", old.id, revoked)

    def _set(self, session: ImageSession) -> None:
        previous = self._session.status
        self._session = session
        if session.status is not previous:
            logger.debug("Session %s: %s -> %s", session.id, previous.value, session.status.value)
            self._emit(self.on_status_change, session.status)

    def _emit(self, port: Optional[Callable], *args: object) -> None:
        if port is not None:
            port(*args)

    def _send(self, message: str, level: str) -> None:
        if self._notify is not None:
            self._notify(message, level)
