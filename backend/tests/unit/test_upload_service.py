from __future__ import annotations

import io
from pathlib import Path

import pytest
from fastapi import HTTPException, UploadFile

from catalog.services.upload_service import UploadService


def _upload(name: str, content: bytes) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=name)


def test_save_uses_generated_name_and_keeps_original(tmp_path: Path) -> None:
    service = UploadService(uploads_dir=tmp_path / "uploads", max_bytes=1024)

    stored = service.save(_upload("Holiday Photo.JPG", b"jpeg"))

    path = Path(stored.path)
    assert path.is_absolute()
    assert path.parent == (tmp_path / "uploads").resolve()
    assert path.suffix == ".jpg"
    assert path.name != "Holiday Photo.JPG"
    assert path.read_bytes() == b"jpeg"
    assert stored.original_name == "Holiday Photo.JPG"
    assert stored.size == 4


def test_save_strips_directories_and_odd_suffixes(tmp_path: Path) -> None:
    service = UploadService(uploads_dir=tmp_path, max_bytes=1024)

    stored = service.save(_upload("../../etc/passwd", b"x"))
    assert Path(stored.path).parent == tmp_path.resolve()
    assert Path(stored.path).suffix == ""
    assert stored.original_name == "passwd"

    weird = service.save(_upload("archive.tar.g$z", b"x"))
    assert Path(weird.path).suffix == ""


def test_save_rejects_oversized_files_without_leaving_partials(tmp_path: Path) -> None:
    service = UploadService(uploads_dir=tmp_path, max_bytes=3)

    with pytest.raises(HTTPException) as excinfo:
        service.save(_upload("big.png", b"too big"))

    assert excinfo.value.status_code == 413
    assert list(tmp_path.iterdir()) == []


def test_discard_only_touches_files_inside_uploads_dir(tmp_path: Path) -> None:
    uploads = tmp_path / "uploads"
    service = UploadService(uploads_dir=uploads, max_bytes=1024)
    stored = service.save(_upload("a.png", b"a"))
    outside = tmp_path / "keep.png"
    outside.write_bytes(b"keep")

    service.discard(str(outside))
    service.discard(None)
    service.discard(str(uploads / "missing.png"))
    service.discard(stored.path)

    assert outside.exists()
    assert not Path(stored.path).exists()


class _FailingReader(io.BytesIO):
    """Serves one full chunk, then fails like a dropped connection or full disk."""

    def __init__(self) -> None:
        super().__init__(b"x" * (64 * 1024 * 2))
        self.reads = 0

    def read(self, size: int | None = -1) -> bytes:
        self.reads += 1
        if self.reads > 1:
            raise OSError(28, "No space left on device")
        return super().read(size)


def test_save_removes_partial_file_when_copy_fails(tmp_path: Path) -> None:
    service = UploadService(uploads_dir=tmp_path, max_bytes=1024 * 1024)

    with pytest.raises(OSError):
        service.save(UploadFile(file=_FailingReader(), filename="half.png"))

    assert list(tmp_path.iterdir()) == []
