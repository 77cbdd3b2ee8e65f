"""Tests for core.media (Cloudinary SDK helpers)."""

import asyncio
from unittest.mock import MagicMock

import cloudinary.exceptions
import cloudinary.uploader
import pytest

from core import media


def url_path(url: str) -> str:
    return url.split("?", 1)[0]


@pytest.fixture
def cloud(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    monkeypatch.setenv("CLOUDINARY_API_KEY", "key123")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "shhh")


@pytest.fixture
def sdk_upload(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    mock = MagicMock(return_value={"public_id": "wildlife-images/wildlife_1_x", "secure_url": "https://cdn/x.jpg"})
    monkeypatch.setattr(cloudinary.uploader, "upload", mock)
    return mock


class TestDeliveryUrls:
    def test_image_sizes(self, cloud) -> None:
        sizes = media.image_sizes("wildlife-images/wildlife_1_abc", "https://cdn/original.jpg")
        assert sizes["original"] == "https://cdn/original.jpg"
        assert url_path(sizes["thumbnail"]) == (
            "https://res.cloudinary.com/demo/image/upload/c_fill,f_auto,h_200,q_auto:good,w_300/"
            "wildlife-images/wildlife_1_abc"
        )
        assert "/c_limit,f_auto,h_600,q_auto:good,w_800/" in sizes["medium"]
        assert "/c_limit,f_auto,h_800,q_auto:good,w_1200/" in sizes["large"]

    def test_image_sizes_without_cloud_fall_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CLOUDINARY_CLOUD_NAME", raising=False)
        sizes = media.image_sizes("abc", "https://cdn/a.jpg")
        assert set(sizes) == {"thumbnail", "medium", "large", "original"}
        assert set(sizes.values()) == {"https://cdn/a.jpg"}

    def test_image_sizes_without_id_fall_back(self, cloud) -> None:
        sizes = media.image_sizes(None, "https://elsewhere/a.jpg")
        assert sizes["thumbnail"] == "https://elsewhere/a.jpg"

    def test_video_thumbnail_chains_steps(self, cloud) -> None:
        assert url_path(media.video_thumbnail_url("wildlife-videos/v1")) == (
            "https://res.cloudinary.com/demo/video/upload/c_fill,h_450,w_800/q_auto:good/wildlife-videos/v1.jpg"
        )

    def test_no_cloud_name(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CLOUDINARY_CLOUD_NAME", raising=False)
        with pytest.raises(media.MediaHostError):
            media.delivery_url("abc")


class TestUploadAsset:
    def test_passes_folder_id_and_transformation(self, cloud, sdk_upload) -> None:
        result = asyncio.run(
            media.upload_asset(
                b"\x89PNG fake",
                filename="otter.png",
                resource_type="image",
                folder="wildlife-images",
                public_id="wildlife_1_x",
                transformation={"width": 1200, "height": 800, "crop": "limit"},
            )
        )

        assert result["secure_url"] == "https://cdn/x.jpg"
        stream = sdk_upload.call_args.args[0]
        assert stream.read() == b"\x89PNG fake"
        assert stream.name == "otter.png"
        kwargs = sdk_upload.call_args.kwargs
        assert kwargs["folder"] == "wildlife-images"
        assert kwargs["public_id"] == "wildlife_1_x"
        assert kwargs["resource_type"] == "image"
        assert kwargs["transformation"] == [{"width": 1200, "height": 800, "crop": "limit"}]
        assert kwargs["cloud_name"] == "demo"
        assert kwargs["api_key"] == "key123"
        assert "eager" not in kwargs

    def test_eager_video(self, cloud, sdk_upload) -> None:
        asyncio.run(
            media.upload_asset(
                b"mp4",
                filename="wolves.mp4",
                resource_type="video",
                folder="wildlife-videos",
                public_id="wildlife_video_1",
                eager={"width": 1280, "video_codec": "h264"},
                eager_async=True,
            )
        )
        kwargs = sdk_upload.call_args.kwargs
        assert kwargs["eager"] == [{"width": 1280, "video_codec": "h264"}]
        assert kwargs["eager_async"] is True

    def test_sdk_error_raises(self, cloud, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            cloudinary.uploader, "upload", MagicMock(side_effect=cloudinary.exceptions.Error("Invalid API key"))
        )
        with pytest.raises(media.MediaHostError):
            asyncio.run(media.upload_asset(b"data", filename="a.jpg", resource_type="image", folder="f", public_id="p"))

    def test_missing_credentials(self, monkeypatch: pytest.MonkeyPatch, sdk_upload) -> None:
        monkeypatch.delenv("CLOUDINARY_API_SECRET", raising=False)
        monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
        with pytest.raises(media.MediaHostError):
            asyncio.run(media.upload_asset(b"data", filename="a.jpg", resource_type="image", folder="f", public_id="p"))
        sdk_upload.assert_not_called()


class TestDestroyAsset:
    def test_returns_host_result(self, cloud, monkeypatch: pytest.MonkeyPatch) -> None:
        destroy = MagicMock(return_value={"result": "not found"})
        monkeypatch.setattr(cloudinary.uploader, "destroy", destroy)

        result = asyncio.run(media.destroy_asset("wildlife-videos/v1", resource_type="video"))

        assert result == "not found"
        assert destroy.call_args.args == ("wildlife-videos/v1",)
        assert destroy.call_args.kwargs["resource_type"] == "video"
