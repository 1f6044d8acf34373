"""
Tests for the image storage backends.
"""

import re
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from shared.config.settings import Settings
from shared.infrastructure.storage import ImageStorageError, create_storage, generate_key
from shared.infrastructure.storage.local_backend import LocalImageStorage
from shared.infrastructure.storage.s3_backend import S3ImageStorage


class TestGenerateKey:

    def test_keeps_extension(self):
        assert re.fullmatch(r"products/[0-9a-f]{32}\.png", generate_key("Feijoada.PNG"))

    def test_client_name_is_discarded(self):
        key = generate_key("../../etc/passwd.jpg")
        assert ".." not in key
        assert key.endswith(".jpg")

    def test_keys_are_unique(self):
        assert generate_key("a.png") != generate_key("a.png")


class TestLocalImageStorage:

    def test_save_and_delete(self, tmp_path):
        storage = LocalImageStorage(tmp_path, "/uploads/")
        stored = storage.save("dish.jpg", "image/jpeg", b"jpeg-bytes")

        assert stored.url == f"/uploads/{stored.key}"
        assert (tmp_path / stored.key).read_bytes() == b"jpeg-bytes"

        storage.delete(stored.key)
        assert not storage.exists(stored.key)

    def test_delete_missing_key_is_noop(self, tmp_path):
        LocalImageStorage(tmp_path).delete("products/missing.png")

    def test_rejects_keys_outside_media_dir(self, tmp_path):
        storage = LocalImageStorage(tmp_path / "media")
        with pytest.raises(ImageStorageError):
            storage.delete("../outside.png")


def client_error(operation):
    return ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, operation)


class TestS3ImageStorage:

    def test_save_uploads_public_object(self):
        client = MagicMock()
        storage = S3ImageStorage("menu", "https://cdn.example.com/", client=client)

        stored = storage.save("dish.png", "image/png", b"png-bytes")

        kwargs = client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "menu"
        assert kwargs["Key"] == stored.key
        assert kwargs["Body"] == b"png-bytes"
        assert kwargs["ContentType"] == "image/png"
        assert kwargs["ACL"] == "public-read"
        assert stored.url == f"https://cdn.example.com/{stored.key}"

    def test_presigned_url_without_public_base(self):
        client = MagicMock()
        client.generate_presigned_url.return_value = "https://signed"
        storage = S3ImageStorage("menu", client=client)

        assert storage.url("products/a.png") == "https://signed"
        client.generate_presigned_url.assert_called_once()

    def test_upload_failure(self):
        client = MagicMock()
        client.put_object.side_effect = client_error("PutObject")
        storage = S3ImageStorage("menu", "https://cdn.example.com", client=client)

        with pytest.raises(ImageStorageError):
            storage.save("dish.png", "image/png", b"png-bytes")

    def test_delete(self):
        client = MagicMock()
        S3ImageStorage("menu", "https://cdn", client=client).delete("products/a.png")
        client.delete_object.assert_called_once_with(Bucket="menu", Key="products/a.png")

    def test_delete_failure(self):
        client = MagicMock()
        client.delete_object.side_effect = client_error("DeleteObject")
        with pytest.raises(ImageStorageError):
            S3ImageStorage("menu", "https://cdn", client=client).delete("products/a.png")


class TestCreateStorage:

    def test_local_backend_by_default(self, tmp_path):
        storage = create_storage(Settings(media_dir=str(tmp_path), media_url_prefix="/media"))
        assert isinstance(storage, LocalImageStorage)
        assert storage.url("products/a.png") == "/media/products/a.png"
