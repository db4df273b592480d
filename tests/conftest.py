import asyncio
import io
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pytest
from PIL import Image

from bgremove.controllers.session_controller import SessionController
from bgremove.controllers.upload_gateway import UploadGateway
from bgremove.models.image_model import Artifact, SourceFile
from bgremove.models.session_model import SessionStatus
from bgremove.services.image_service import ImageService
from bgremove.services.removal_service import BackgroundRemover
from bgremove.services.resource_manager import ResourceManager


def png_bytes(size=(10, 10), mode="RGB", color="red") -> bytes:
    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def cutout_bytes(size=(10, 10)) -> bytes:
    """RGBA PNG with a transparent left half."""
    img = Image.new("RGBA", size, color=(255, 0, 0, 255))
    for x in range(size[0] // 2):
        for y in range(size[1]):
            img.putpixel((x, y), (0, 0, 0, 0))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


class CountingResourceManager(ResourceManager):
    """Records every register/revoke in call order."""
    def __init__(self) -> None:
        super().__init__()
        self.events: List[Tuple[str, str, str]] = []

    def register(self, owner, data, mime_type):
        handle = super().register(owner, data, mime_type)
        self.events.append(("register", handle.url, owner))
        return handle

    def revoke(self, handle):
        revoked = super().revoke(handle)
        if revoked:
            self.events.append(("revoke", handle.url, handle.owner))
        return revoked

    def urls(self, kind: str, owner: Optional[str] = None) -> List[str]:
        return [url for k, url, o in self.events if k == kind and (owner is None or o == owner)]


class FakeRemovalAdapter:
    """Async removal double; `gate` keeps the call suspended until set."""
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[str] = []

    async def remove(self, source: SourceFile) -> Artifact:
        self.calls.append(source.name)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return Artifact(data=cutout_bytes(), width=10, height=10)


class FailingRemover(BackgroundRemover):
    def __init__(self, error: Exception) -> None:
        self.error = error

    def remove(self, image_bytes: bytes) -> bytes:
        raise self.error


class StaticRemover(BackgroundRemover):
    def __init__(self, result: bytes) -> None:
        self.result = result
        self.received: List[bytes] = []

    def remove(self, image_bytes: bytes) -> bytes:
        self.received.append(image_bytes)
        return self.result


@dataclass
class Recorder:
    statuses: List[SessionStatus] = field(default_factory=list)
    originals: list = field(default_factory=list)
    processed: list = field(default_factory=list)
    export: List[bool] = field(default_factory=list)
    notifications: List[Tuple[str, str]] = field(default_factory=list)

    def attach(self, controller: SessionController) -> None:
        controller.on_status_change = self.statuses.append
        controller.on_original_ready = self.originals.append
        controller.on_processed_ready = self.processed.append
        controller.on_export_available = self.export.append

    def notify(self, message: str, level: str) -> None:
        self.notifications.append((message, level))

    @property
    def levels(self) -> List[str]:
        return [level for _message, level in self.notifications]


async def wait_for_status(controller: SessionController, status: SessionStatus, timeout: float = 5.0) -> None:
    async def _poll():
        while controller.status is not status:
            await asyncio.sleep(0.005)
    await asyncio.wait_for(_poll(), timeout)


@pytest.fixture
def sample_png():
    """10x10 PNG bytes."""
    return png_bytes()


@pytest.fixture
def image_source(sample_png):
    return SourceFile(name="photo.png", mime_type="image/png", data=sample_png)


@pytest.fixture
def second_source():
    return SourceFile(name="second.png", mime_type="image/png", data=png_bytes(color="blue"))


@pytest.fixture
def text_source():
    return SourceFile(name="notes.txt", mime_type="text/plain", data=b"hello")


@pytest.fixture
def corrupt_source():
    return SourceFile(name="broken.png", mime_type="image/png", data=b"definitely not a png")


@pytest.fixture
def resources():
    return CountingResourceManager()


@pytest.fixture
def remover():
    return FakeRemovalAdapter()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def controller(resources, remover, recorder):
    ctrl = SessionController(resources, remover, ImageService(), notify=recorder.notify)
    recorder.attach(ctrl)
    return ctrl


@pytest.fixture
def gateway(controller, recorder):
    return UploadGateway(controller, ImageService(), notify=recorder.notify)
