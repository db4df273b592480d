import pytest

from bgremove.core.exceptions import ExportError
from bgremove.models.image_model import Artifact
from bgremove.services.export_service import DownloadExporter, export_filename

from conftest import cutout_bytes


def test_export_filename():
    assert export_filename(1700000000123) == "bg-removed-1700000000123.png"
    assert export_filename(1700000000123, 2) == "bg-removed-1700000000123-2.png"


def test_export_without_artifact_is_noop(tmp_path):
    notes = []
    exporter = DownloadExporter(tmp_path, notify=lambda m, l: notes.append(l))

    assert exporter.export(None) is None
    assert list(tmp_path.iterdir()) == []
    assert notes == []


def test_export_writes_png(tmp_path):
    notes = []
    artifact = Artifact(data=cutout_bytes(), width=10, height=10)
    exporter = DownloadExporter(tmp_path / "downloads", notify=lambda m, l: notes.append(l), clock_ms=lambda: 1700000000123)

    path = exporter.export(artifact)

    assert path == tmp_path / "downloads" / "bg-removed-1700000000123.png"
    assert path.read_bytes() == artifact.data
    # no transient files left behind
    assert [p.name for p in path.parent.iterdir()] == [path.name]
    assert notes == ["success"]


def test_export_failure_raises(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")
    exporter = DownloadExporter(blocker)

    with pytest.raises(ExportError):
        exporter.export(Artifact(data=b"png", width=1, height=1))


def test_export_in_same_millisecond_keeps_both_files(tmp_path):
    exporter = DownloadExporter(tmp_path, clock_ms=lambda: 1700000000123)

    first = exporter.export(Artifact(data=b"first", width=1, height=1))
    second = exporter.export(Artifact(data=b"second", width=1, height=1))

    assert first.name == "bg-removed-1700000000123.png"
    assert second.name == "bg-removed-1700000000123-1.png"
    assert first.read_bytes() == b"first"
    assert second.read_bytes() == b"second"
