"""
Cloudinary helpers built on the official SDK.

Uploads and deletes go through `cloudinary.uploader` (blocking HTTP, so they
run in the threadpool). Delivery URLs (resized images, video thumbnails) are
rendered locally with `cloudinary.utils.cloudinary_url`; they never need a
round trip to the host.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any

import cloudinary.exceptions
import cloudinary.uploader
import cloudinary.utils
from fastapi.concurrency import run_in_threadpool

from . import config

IMAGE_SIZES: dict[str, dict[str, Any]] = {
    "thumbnail": {"width": 300, "height": 200, "crop": "fill", "quality": "auto:good", "fetch_format": "auto"},
    "medium": {"width": 800, "height": 600, "crop": "limit", "quality": "auto:good", "fetch_format": "auto"},
    "large": {"width": 1200, "height": 800, "crop": "limit", "quality": "auto:good", "fetch_format": "auto"},
}

VIDEO_THUMBNAIL: list[dict[str, Any]] = [
    {"width": 800, "height": 450, "crop": "fill"},
    {"quality": "auto:good"},
]


# Media host failures are explicit and separable from other runtime errors.
class MediaHostError(RuntimeError):
    pass


@dataclass(frozen=True)
class Credentials:
    cloud_name: str
    api_key: str
    api_secret: str

    def as_options(self) -> dict[str, str]:
        return {"cloud_name": self.cloud_name, "api_key": self.api_key, "api_secret": self.api_secret}


def cloud_name() -> str:
    return config.env_str("CLOUDINARY_CLOUD_NAME")


def credentials() -> Credentials:
    creds = Credentials(
        cloud_name=cloud_name(),
        api_key=config.env_str("CLOUDINARY_API_KEY"),
        api_secret=config.env_str("CLOUDINARY_API_SECRET"),
    )
    if not (creds.cloud_name and creds.api_key and creds.api_secret):
        raise MediaHostError("Cloudinary credentials are not configured.")
    return creds


def timeout_s() -> float:
    return config.env_float("MEDIA_TIMEOUT_S", 120.0)


def delivery_url(
    public_id: str,
    *,
    resource_type: str = "image",
    transformation: dict[str, Any] | list[dict[str, Any]] | None = None,
    fmt: str | None = None,
) -> str:
    name = cloud_name()
    if not name:
        raise MediaHostError("CLOUDINARY_CLOUD_NAME is empty.")

    options: dict[str, Any] = {
        "cloud_name": name,
        "resource_type": resource_type,
        "secure": True,
        # Folders in the public id must not pull in a "v1/" segment.
        "force_version": False,
    }
    if isinstance(transformation, list):
        options["transformation"] = [dict(step) for step in transformation]
    elif transformation:
        options.update(transformation)
    if fmt:
        options["format"] = fmt

    url, _ = cloudinary.utils.cloudinary_url(public_id, **options)
    return url


def image_sizes(public_id: str | None, original_url: str) -> dict[str, str]:
    """
    Derived-size URLs for a stored image.

    Falls back to the original URL when the image has no host id or no cloud
    is configured (e.g. images linked from elsewhere).
    """
    if not public_id or not cloud_name():
        sizes = {name: original_url for name in IMAGE_SIZES}
    else:
        sizes = {
            name: delivery_url(public_id, transformation=size)
            for name, size in IMAGE_SIZES.items()
        }
    sizes["original"] = original_url
    return sizes


def video_thumbnail_url(public_id: str) -> str:
    return delivery_url(public_id, resource_type="video", transformation=VIDEO_THUMBNAIL, fmt="jpg")


async def upload_asset(
    data: bytes,
    *,
    filename: str,
    resource_type: str,
    folder: str,
    public_id: str,
    transformation: dict[str, Any] | None = None,
    eager: dict[str, Any] | None = None,
    eager_async: bool = False,
) -> dict[str, Any]:
    """
    Upload one file and return the host's description of the stored asset.
    """
    if not data:
        raise MediaHostError("Upload body is empty.")
    creds = credentials()

    options: dict[str, Any] = {
        **creds.as_options(),
        "resource_type": resource_type,
        "folder": folder,
        "public_id": public_id,
        "timeout": timeout_s(),
    }
    if transformation:
        options["transformation"] = [dict(transformation)]
    if eager:
        options["eager"] = [dict(eager)]
        options["eager_async"] = eager_async

    stream = io.BytesIO(data)
    stream.name = filename
    try:
        result = await run_in_threadpool(cloudinary.uploader.upload, stream, **options)
    except cloudinary.exceptions.Error as exc:
        raise MediaHostError(f"Cloudinary upload failed: {exc}") from exc

    if not result.get("public_id") or not result.get("secure_url"):
        raise MediaHostError("Cloudinary returned no asset id.")
    return result


async def destroy_asset(public_id: str, *, resource_type: str = "image") -> str:
    """
    Delete an asset by id. Returns the host's result string ("ok", "not found").
    """
    public_id = (public_id or "").strip()
    if not public_id:
        raise MediaHostError("Public id is empty.")
    creds = credentials()

    try:
        result = await run_in_threadpool(
            cloudinary.uploader.destroy,
            public_id,
            resource_type=resource_type,
            timeout=timeout_s(),
            **creds.as_options(),
        )
    except cloudinary.exceptions.Error as exc:
        raise MediaHostError(f"Cloudinary destroy failed: {exc}") from exc
    return str(result.get("result") or "")
