"""
FastAPI router for media uploads.
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import Field

from auth import dependencies as auth_dependencies
from core.schemas import ApiModel, envelope

from . import service

router = APIRouter(prefix="/upload", dependencies=[Depends(auth_dependencies.require_contributor)])


class TransformRequest(ApiModel):
    width: int = Field(default=800, ge=1, le=5000)
    height: int = Field(default=600, ge=1, le=5000)
    crop: Literal["limit", "fill", "fit", "scale", "thumb", "pad"] = "limit"
    quality: str = Field(default="auto:good", pattern=r"^(auto(:(best|good|eco|low))?|\d{1,3})$")


@router.post("/image")
async def upload_image(
    image: UploadFile | None = File(default=None),
    caption: str = Form(default=""),
    alt: str = Form(default=""),
) -> dict:
    descriptor = await service.upload_image(image, caption=caption, alt=alt)
    return envelope({"image": descriptor}, message="Image uploaded successfully")


@router.post("/multiple-images")
async def upload_multiple_images(images: list[UploadFile] = File(default=[])) -> dict:
    descriptors = await service.upload_images(images)
    return envelope(
        {"images": descriptors},
        message=f"{len(descriptors)} images uploaded successfully",
    )


@router.post("/video")
async def upload_video(
    video: UploadFile | None = File(default=None),
    caption: str = Form(default=""),
) -> dict:
    descriptor = await service.upload_video(video, caption=caption)
    return envelope({"video": descriptor}, message="Video uploaded successfully")


@router.delete("/delete/{public_id:path}")
async def delete_file(
    public_id: str,
    resource_type: Literal["image", "video"] = Query(default="image", alias="resourceType"),
) -> dict:
    await service.delete_asset(public_id, resource_type=resource_type)
    return envelope(message="File deleted successfully")


@router.post("/transform-image/{public_id:path}")
async def transform_image(public_id: str, payload: TransformRequest | None = None) -> dict:
    payload = payload or TransformRequest()
    result = service.transform_image(
        public_id,
        width=payload.width,
        height=payload.height,
        crop=payload.crop,
        quality=payload.quality,
    )
    return envelope(result)
