"""Unit tests for the S3-compatible media storage client."""

from __future__ import annotations

import io
from unittest import mock

import pytest
from botocore.exceptions import ClientError

from core import storage as storage_module
from core.storage import MediaStorage, MediaStorageError, StoredMedia


def _client_error(operation: str) -> ClientError:
    return ClientError({"Error": {"Code": "500", "Message": "boom"}}, operation)


@pytest.fixture()
def s3_client():
    return mock.Mock()


@pytest.fixture()
def media(s3_client) -> MediaStorage:
    return MediaStorage(bucket="complaints", region="us-east-1", folder="uploads/", client=s3_client)


class TestMediaStorage:

    def test_generate_key_keeps_extension_under_folder(self, media):
        key = media.generate_key("Photo.JPG")
        assert key.startswith("uploads/")
        assert key.endswith(".jpg")
        assert media.generate_key("Photo.JPG") != key

    def test_generate_key_without_folder(self, s3_client):
        media = MediaStorage(bucket="b", region="r", client=s3_client)
        assert "/" not in media.generate_key("a.png")

    def test_file_url_variants(self, s3_client):
        aws = MediaStorage(bucket="b", region="eu-west-1", client=s3_client)
        minio = MediaStorage(bucket="b", region="r", endpoint_url="http://minio:9000/", client=s3_client)
        cdn = MediaStorage(bucket="b", region="r", public_base_url="https://cdn.example.com/", client=s3_client)

        assert aws.get_file_url("k.png") == "https://b.s3.eu-west-1.amazonaws.com/k.png"
        assert minio.get_file_url("k.png") == "http://minio:9000/b/k.png"
        assert cdn.get_file_url("k.png") == "https://cdn.example.com/k.png"

    def test_upload_returns_location(self, media, s3_client):
        result = media.upload_fileobj(io.BytesIO(b"data"), "tap.png", "image/png")

        assert isinstance(result, StoredMedia)
        assert result.public_id.startswith("uploads/")
        assert result.url.endswith(result.public_id)
        args, kwargs = s3_client.upload_fileobj.call_args
        assert args[1:] == ("complaints", result.public_id)
        assert kwargs["ExtraArgs"] == {"ContentType": "image/png"}

    def test_upload_guesses_content_type(self, media, s3_client):
        media.upload_fileobj(io.BytesIO(b"data"), "photo.jpeg")

        assert s3_client.upload_fileobj.call_args.kwargs["ExtraArgs"] == {"ContentType": "image/jpeg"}

    def test_upload_failure_raises(self, media, s3_client):
        s3_client.upload_fileobj.side_effect = _client_error("PutObject")

        with pytest.raises(MediaStorageError):
            media.upload_fileobj(io.BytesIO(b"data"), "tap.png")

    def test_delete(self, media, s3_client):
        assert media.delete("uploads/x.png") is True
        s3_client.delete_object.assert_called_once_with(Bucket="complaints", Key="uploads/x.png")

    def test_delete_failure_returns_false(self, media, s3_client):
        s3_client.delete_object.side_effect = _client_error("DeleteObject")

        assert media.delete("uploads/x.png") is False


class TestGetMediaStorage:

    def test_built_once_from_settings(self, settings):
        settings.MEDIA_STORAGE = {
            "BUCKET": "from-settings",
            "REGION": "us-east-1",
            "FOLDER": "complaints",
        }
        storage_module.reset_media_storage()
        try:
            with mock.patch("core.storage.boto3.client") as client_factory:
                first = storage_module.get_media_storage()
                second = storage_module.get_media_storage()

            assert first is second
            assert first.bucket == "from-settings"
            assert first.folder == "complaints"
            client_factory.assert_called_once()
        finally:
            storage_module.reset_media_storage()
