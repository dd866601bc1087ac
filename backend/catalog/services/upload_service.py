from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4

from fastapi import HTTPException, UploadFile

logger = logging.getLogger(__name__)

_CHUNK_BYTES = 64 * 1024
_SUFFIX_PATTERN = re.compile(r"^\.[a-z0-9]{1,10}$")


@dataclass(frozen=True)
class StoredFile:
    path: str
    original_name: str
    size: int


class UploadService:
    """Persists uploaded images under generated names inside ``uploads_dir``."""

    def __init__(self, *, uploads_dir: str | Path, max_bytes: int) -> None:
        self.uploads_dir = Path(uploads_dir)
        self.max_bytes = max_bytes

    def save(self, upload: UploadFile) -> StoredFile:
        original_name = Path(upload.filename or "").name
        target_dir = self.uploads_dir.resolve()
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / f"{uuid4().hex}{self._safe_suffix(original_name)}"

        written = self._copy(upload.file, target)
        logger.info("Stored upload %s (%d bytes)", target.name, written)
        return StoredFile(path=str(target), original_name=original_name, size=written)

    def discard(self, path: str | None) -> None:
        if not path:
            return
        candidate = Path(path).resolve()
        if candidate.parent != self.uploads_dir.resolve():
            return
        try:
            candidate.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove stored upload %s: %s", candidate.name, exc)

    def _copy(self, source: BinaryIO, target: Path) -> int:
        written = 0
        try:
            source.seek(0)
            with target.open("wb") as handle:
                while True:
                    chunk = source.read(_CHUNK_BYTES)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise HTTPException(status_code=413, detail="Uploaded file is too large")
                    handle.write(chunk)
        except BaseException:
            target.unlink(missing_ok=True)
            raise
        return written

    @staticmethod
    def _safe_suffix(filename: str) -> str:
        suffix = Path(filename).suffix.lower()
        return suffix if _SUFFIX_PATTERN.match(suffix) else ""
