"""
Media upload "service layer".

Validates incoming files, buffers them with a size limit and hands them to the
media host (`core/media.py`). The host does all transformation work; this
module only shapes the descriptors the article editor stores.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from core import media
from core.errors import InvalidRequest, NotFound, ServerError

logger = logging.getLogger(__name__)

MAX_FILES_PER_REQUEST = 10


@dataclass(frozen=True)
class UploadKind:
    resource_type: str
    mime_prefix: str
    extensions: frozenset[str]
    max_bytes: int
    folder: str
    id_prefix: str
    label: str


IMAGE = UploadKind(
    resource_type="image",
    mime_prefix="image/",
    extensions=frozenset({".jpg", ".jpeg", ".png", ".webp", ".avif"}),
    max_bytes=10 * 1024 * 1024,  # 10 MiB
    folder="wildlife-images",
    id_prefix="wildlife",
    label="image",
)

VIDEO = UploadKind(
    resource_type="video",
    mime_prefix="video/",
    extensions=frozenset({".mp4", ".mov", ".avi", ".mkv", ".webm"}),
    max_bytes=100 * 1024 * 1024,  # 100 MiB
    folder="wildlife-videos",
    id_prefix="wildlife_video",
    label="video",
)

# Applied by the host on the way in.
IMAGE_INCOMING_TRANSFORMATION = {
    "width": 1200,
    "height": 800,
    "crop": "limit",
    "quality": "auto:good",
    "fetch_format": "auto",
}

VIDEO_EAGER_TRANSFORMATION = {
    "width": 1280,
    "height": 720,
    "crop": "limit",
    "quality": "auto:good",
    "video_codec": "h264",
}


def new_public_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{secrets.token_hex(6)}"


def validate_upload(file: UploadFile | None, kind: UploadKind) -> None:
    if file is None or not file.filename:
        raise InvalidRequest(f"No {kind.label} file provided")

    content_type = (file.content_type or "").lower()
    ext = Path(file.filename).suffix.lower()
    if not content_type.startswith(kind.mime_prefix) or ext not in kind.extensions:
        raise InvalidRequest(f"Only {kind.label} files are allowed!")


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise InvalidRequest("File too large. Please use a smaller file.")

    if not buf:
        raise InvalidRequest("Uploaded file is empty.")
    return bytes(buf)


def image_descriptor(public_id: str, url: str, *, caption: str = "", alt: str = "") -> dict:
    return {
        "id": public_id,
        "url": url,
        "caption": caption,
        "alt": alt,
        "sizes": media.image_sizes(public_id, url),
    }


async def _store(file: UploadFile | None, kind: UploadKind, **options) -> dict:
    validate_upload(file, kind)
    data = await read_upload_bytes(file, kind.max_bytes)
    try:
        result = await media.upload_asset(
            data,
            filename=str(file.filename),
            resource_type=kind.resource_type,
            folder=kind.folder,
            public_id=new_public_id(kind.id_prefix),
            **options,
        )
    except media.MediaHostError as exc:
        logger.exception("media_upload_failed kind=%s filename=%s", kind.label, file.filename)
        raise ServerError(f"{kind.label.capitalize()} upload failed") from exc

    logger.info(
        "media_uploaded kind=%s public_id=%s bytes=%s",
        kind.label,
        result.get("public_id"),
        len(data),
    )
    return result


async def upload_image(file: UploadFile | None, *, caption: str = "", alt: str = "") -> dict:
    result = await _store(file, IMAGE, transformation=IMAGE_INCOMING_TRANSFORMATION)
    return image_descriptor(str(result["public_id"]), str(result["secure_url"]), caption=caption, alt=alt)


async def upload_images(files: list[UploadFile]) -> list[dict]:
    if not files:
        raise InvalidRequest("No image files provided")
    if len(files) > MAX_FILES_PER_REQUEST:
        raise InvalidRequest("Too many files")

    # Validate the whole batch before anything reaches the host.
    for file in files:
        validate_upload(file, IMAGE)

    images = []
    for file in files:
        result = await _store(file, IMAGE, transformation=IMAGE_INCOMING_TRANSFORMATION)
        images.append(image_descriptor(str(result["public_id"]), str(result["secure_url"])))
    return images


async def upload_video(file: UploadFile | None, *, caption: str = "") -> dict:
    result = await _store(file, VIDEO, eager=VIDEO_EAGER_TRANSFORMATION, eager_async=True)
    public_id = str(result["public_id"])
    return {
        "id": public_id,
        "url": str(result["secure_url"]),
        "caption": caption,
        "thumbnail": media.video_thumbnail_url(public_id),
        "duration": result.get("duration"),
        "format": result.get("format"),
    }


async def delete_asset(public_id: str, *, resource_type: str) -> None:
    try:
        result = await media.destroy_asset(public_id, resource_type=resource_type)
    except media.MediaHostError as exc:
        logger.exception("media_delete_failed public_id=%s", public_id)
        raise ServerError("Failed to delete file") from exc

    if result != "ok":
        raise NotFound("File not found or already deleted")
    logger.info("media_deleted public_id=%s resource_type=%s", public_id, resource_type)


def transform_image(public_id: str, *, width: int, height: int, crop: str, quality: str) -> dict:
    transformation = {"width": width, "height": height, "crop": crop, "quality": quality}
    try:
        url = media.delivery_url(public_id, transformation={**transformation, "fetch_format": "auto"})
    except media.MediaHostError as exc:
        logger.exception("media_transform_failed public_id=%s", public_id)
        raise ServerError("Failed to transform image") from exc
    return {"url": url, "transformation": transformation}
