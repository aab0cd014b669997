"""Cloudinary Image Store — SDK calls patched at the cloudinary.uploader boundary."""

import pytest

from closetmap.core.errors import ImageStorageError
from closetmap.infrastructure.image_store import CloudinaryImageStore
from cloudinary.exceptions import Error as CloudinaryError


@pytest.fixture
def store():
    return CloudinaryImageStore("demo", "key", "secret", upload_timeout_seconds=5)


async def test_upload_passes_folder_and_credentials(store, monkeypatch):
    calls = []

    def fake_upload(file, **options):
        calls.append((file, options))
        return {"secure_url": "https://res.test/x.jpg", "public_id": "closetmap/alice/clothes/x"}

    monkeypatch.setattr("cloudinary.uploader.upload", fake_upload)
    stored = await store.upload("data:image/jpeg;base64,AAAA", "closetmap/alice/clothes")

    assert stored.url == "https://res.test/x.jpg"
    assert stored.public_id == "closetmap/alice/clothes/x"
    file, options = calls[0]
    assert file == "data:image/jpeg;base64,AAAA"
    assert options["folder"] == "closetmap/alice/clothes"
    assert options["cloud_name"] == "demo"
    assert options["api_secret"] == "secret"


async def test_upload_sdk_error_mapped(store, monkeypatch):
    def failing(file, **options):
        raise CloudinaryError("Invalid image file")

    monkeypatch.setattr("cloudinary.uploader.upload", failing)
    with pytest.raises(ImageStorageError) as exc:
        await store.upload("data:image/jpeg;base64,AAAA", "f")
    assert exc.value.http_status == 502


async def test_unconfigured_store_refuses():
    store = CloudinaryImageStore(None, None, None)
    with pytest.raises(ImageStorageError):
        await store.upload("data:image/jpeg;base64,AAAA", "f")


@pytest.mark.parametrize("outcome", ["ok", "not found"])
async def test_delete_success_outcomes(store, monkeypatch, outcome):
    monkeypatch.setattr(
        "cloudinary.uploader.destroy", lambda public_id, **options: {"result": outcome},
    )
    await store.delete("closetmap/alice/clothes/x")


async def test_delete_unexpected_outcome(store, monkeypatch):
    monkeypatch.setattr(
        "cloudinary.uploader.destroy", lambda public_id, **options: {"result": "error"},
    )
    with pytest.raises(ImageStorageError):
        await store.delete("x")
