import asyncio

import pytest

from bgremove.controllers.session_controller import SessionController
from bgremove.core.exceptions import DecodeError, RemovalError
from bgremove.models.session_model import SessionStatus
from bgremove.services.image_service import ImageService
from bgremove.services.removal_service import BackgroundRemovalAdapter

from conftest import FailingRemover, wait_for_status


async def test_image_reaches_ready(controller, recorder, resources, image_source):
    """A 10x10 PNG runs Idle -> Decoding -> Removing -> Ready."""
    assert controller.status is SessionStatus.IDLE

    task = controller.begin(image_source)
    assert task is not None
    await task

    assert recorder.statuses == [SessionStatus.DECODING, SessionStatus.REMOVING, SessionStatus.READY]
    assert len(recorder.originals) == 1 and recorder.originals[0] is not None
    assert len(recorder.processed) == 1 and recorder.processed[0] is not None
    assert recorder.export == [True]
    assert recorder.levels == ["success", "success"]

    session = controller.session
    assert session.artifact is not None and session.artifact.data
    assert session.original.handle == recorder.originals[0]
    assert session.processed_handle == recorder.processed[0]
    assert (session.original.width, session.original.height) == (10, 10)


async def test_ready_registers_one_original_and_one_processed_handle(controller, resources, image_source):
    await controller.begin(image_source)

    session = controller.session
    registered = resources.urls("register", session.id)
    assert registered == [session.original.handle.url, session.processed_handle.url]
    assert session.original.handle.mime_type == "image/png"
    assert resources.resolve(session.original.handle) == image_source.data
    assert resources.resolve(session.processed_handle) == session.artifact.data


async def test_begin_is_rejected_while_decoding(controller, image_source, second_source):
    task = controller.begin(image_source)
    assert controller.status is SessionStatus.DECODING
    first_id = controller.session.id

    assert controller.begin(second_source) is None
    assert controller.session.id == first_id

    await task
    assert controller.session.source is image_source


async def test_begin_is_rejected_while_removing(controller, remover, recorder, image_source, second_source):
    remover.gate = asyncio.Event()
    task = controller.begin(image_source)
    await wait_for_status(controller, SessionStatus.REMOVING)
    session_id = controller.session.id

    assert controller.begin(second_source) is None
    assert controller.session.id == session_id
    assert controller.status is SessionStatus.REMOVING

    remover.gate.set()
    await task
    assert controller.status is SessionStatus.READY
    assert remover.calls == ["photo.png"]
    assert recorder.statuses.count(SessionStatus.DECODING) == 1


async def test_removal_network_error_unwinds_to_idle(resources, recorder, image_source):
    adapter = BackgroundRemovalAdapter(FailingRemover(ConnectionError("network is unreachable")))
    controller = SessionController(resources, adapter, ImageService(), notify=recorder.notify)
    recorder.attach(controller)

    await controller.begin(image_source)

    assert recorder.statuses == [
        SessionStatus.DECODING,
        SessionStatus.REMOVING,
        SessionStatus.FAILED,
        SessionStatus.IDLE,
    ]
    assert recorder.levels[-1] == "error"
    assert recorder.processed == []
    assert recorder.export == [False]
    # only the original was ever registered, and it is gone now
    assert len(resources.urls("register")) == 1
    assert resources.urls("revoke") == resources.urls("register")
    assert resources.live_count == 0
    assert controller.artifact is None


async def test_removal_failure_is_reported_as_removal_error(controller, remover, recorder, image_source):
    remover.error = RemovalError("service down")
    failures = []
    controller.on_status_change = lambda status: failures.append(controller.session.error) if status is SessionStatus.FAILED else None

    await controller.begin(image_source)

    assert len(failures) == 1 and isinstance(failures[0], RemovalError)
    assert controller.status is SessionStatus.IDLE
    assert controller.session.error is None


async def test_decode_error_skips_removal(controller, remover, recorder, resources, corrupt_source):
    failures = []
    recorder_append = recorder.statuses.append

    def on_status(status):
        recorder_append(status)
        if status is SessionStatus.FAILED:
            failures.append(controller.session.error)

    controller.on_status_change = on_status

    await controller.begin(corrupt_source)

    assert recorder.statuses == [SessionStatus.DECODING, SessionStatus.FAILED, SessionStatus.IDLE]
    assert isinstance(failures[0], DecodeError)
    assert remover.calls == []
    assert resources.events == []
    assert recorder.originals == []
    assert recorder.levels == ["error"]


async def test_clear_revokes_every_handle_exactly_once(controller, resources, recorder, image_source):
    await controller.begin(image_source)
    session = controller.session

    assert controller.clear() is True
    assert controller.clear() is True

    revoked = resources.urls("revoke", session.id)
    assert sorted(revoked) == sorted(resources.urls("register", session.id))
    assert len(revoked) == len(set(revoked)) == 2
    assert resources.live_count == 0
    assert controller.status is SessionStatus.IDLE
    assert controller.artifact is None
    assert recorder.export == [True, False, False]
    assert recorder.statuses[-1] is SessionStatus.IDLE


async def test_clear_while_removing_is_ignored(controller, remover, image_source):
    remover.gate = asyncio.Event()
    task = controller.begin(image_source)
    await wait_for_status(controller, SessionStatus.REMOVING)

    assert controller.clear() is False
    assert controller.status is SessionStatus.REMOVING

    remover.gate.set()
    await task
    assert controller.status is SessionStatus.READY


async def test_new_upload_revokes_previous_session_first(controller, resources, recorder, image_source, second_source):
    await controller.begin(image_source)
    first = controller.session

    await controller.begin(second_source)
    second = controller.session

    assert second.id != first.id
    kinds = [(kind, owner) for kind, _url, owner in resources.events]
    last_first_revoke = max(i for i, (k, o) in enumerate(kinds) if k == "revoke" and o == first.id)
    first_second_register = min(i for i, (k, o) in enumerate(kinds) if k == "register" and o == second.id)
    assert last_first_revoke < first_second_register
    assert len(resources.urls("revoke", first.id)) == 2
    assert resources.live_handles(first.id) == []
    assert len(resources.live_handles(second.id)) == 2
    assert recorder.statuses[3:] == [
        SessionStatus.IDLE,
        SessionStatus.DECODING,
        SessionStatus.REMOVING,
        SessionStatus.READY,
    ]


async def test_port_failure_unwinds_session(controller, recorder, resources, image_source):
    def broken_port(_handle):
        raise RuntimeError("widget destroyed")

    controller.on_processed_ready = broken_port

    await controller.begin(image_source)

    assert controller.status is SessionStatus.IDLE
    assert recorder.levels[-1] == "error"
    assert resources.live_count == 0


def test_begin_requires_running_loop(controller, image_source):
    with pytest.raises(RuntimeError):
        controller.begin(image_source)
    assert controller.status is SessionStatus.IDLE


async def test_failure_unwinds_even_if_error_toast_fails(resources, remover, image_source):
    """A dead notification sink must not leave the session stuck in Failed."""
    statuses = []

    def notify(message, level):
        if level == "error":
            raise RuntimeError("window already destroyed")

    remover.error = RemovalError("service down")
    controller = SessionController(resources, remover, ImageService(), notify=notify)
    controller.on_status_change = statuses.append

    await controller.begin(image_source)

    assert statuses == [SessionStatus.DECODING, SessionStatus.REMOVING, SessionStatus.FAILED, SessionStatus.IDLE]
    assert controller.status is SessionStatus.IDLE
    assert resources.live_count == 0
    assert resources.urls("revoke") == resources.urls("register")
    assert controller.can_begin()
