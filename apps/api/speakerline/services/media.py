"""Validation and temporary storage of uploaded media."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
import secrets
import time

from fastapi import UploadFile

from speakerline.domain.errors import ValidationError

logger = logging.getLogger(__name__)

_READ_CHUNK_BYTES = 1024 * 1024
ACCEPTED_CONTENT_TYPE_PREFIX = "video/"


def validate_media_type(content_type: str | None) -> None:
    if not content_type or not content_type.lower().startswith(ACCEPTED_CONTENT_TYPE_PREFIX):
        raise ValidationError(
            "Please select a valid video file",
            details={"content_type": content_type},
        )


def unique_storage_name(original_filename: str | None) -> str:
    """Name temp files ``<epoch-ms>-<random><original suffix>``."""
    suffix = Path(original_filename or "").suffix.lower()
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"


def discard_media(path: Path | None) -> None:
    if path is None:
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("media.discard_failed path=%s reason=%s", path.name, exc)


async def store_upload(upload: UploadFile | None, *, upload_dir: Path, max_bytes: int) -> Path:
    """Persist an incoming upload under upload_dir and return its path.

    Nothing is left on disk when validation fails, including an upload that
    crosses max_bytes part way through.
    """
    if upload is None or not upload.filename:
        raise ValidationError("No video file uploaded")
    validate_media_type(upload.content_type)

    upload_dir.mkdir(parents=True, exist_ok=True)
    target = upload_dir / unique_storage_name(upload.filename)
    written = 0
    try:
        with target.open("wb") as handle:
            while chunk := await upload.read(_READ_CHUNK_BYTES):
                written += len(chunk)
                if written > max_bytes:
                    raise ValidationError(
                        "File size exceeds the upload limit",
                        details={"max_bytes": max_bytes},
                    )
                await asyncio.to_thread(handle.write, chunk)
    except BaseException:
        discard_media(target)
        raise
    finally:
        await upload.close()

    logger.info("media.stored name=%s bytes=%s", target.name, written)
    return target
