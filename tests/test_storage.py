"""
Tests for the listing photo bucket.
"""

import pytest

from plot_catalog.services.storage import PhotoStorage
from plot_catalog.utils.exceptions import (
    FileSizeExceededError,
    FileUploadError,
    StorageError,
    UnsupportedFileTypeError,
)
from tests.conftest import make_upload, png_bytes, store_photos


class TestPhotoStorage:
    """Upload, listing and removal of photos."""

    @pytest.mark.asyncio
    async def test_upload_names_object_by_timestamp(self, storage: PhotoStorage):
        path = await storage.upload("abc", make_upload("mi foto del lago.png", png_bytes()))

        namespace, name = path.split("/")
        stamp, rest = name.split("-", 1)
        assert namespace == "abc"
        assert stamp.isdigit()
        assert rest == "mi-foto-del-lago.png"
        assert (storage.root / path).read_bytes() == png_bytes()

    @pytest.mark.asyncio
    async def test_same_name_twice_does_not_overwrite(self, storage: PhotoStorage):
        first = await storage.upload("abc", make_upload("a.png", png_bytes("red")))
        second = await storage.upload("abc", make_upload("a.png", png_bytes("blue")))

        assert first != second
        assert len(storage.list_objects("abc")) == 2

    @pytest.mark.asyncio
    async def test_listing_keeps_upload_order_within_one_millisecond(self, storage: PhotoStorage, monkeypatch):
        monkeypatch.setattr("plot_catalog.services.storage.time.time", lambda: 1700000000.0)

        for name in ["z.png", "a.png", "z.png", "m.png"]:
            await storage.upload("abc", make_upload(name, png_bytes()))

        names = [path.split("/")[1] for path in storage.list_objects("abc")]
        assert [name.split("-", 1)[1] for name in names] == ["z.png", "a.png", "z.png", "m.png"]
        assert names[0] == "1700000000000-z.png"

    def test_public_url(self, storage: PhotoStorage):
        assert storage.public_url("abc/1-a.png") == (
            "http://localhost:8000/storage/listing-photos/abc/1-a.png"
        )

    def test_list_objects_sorted_and_limited(self, storage: PhotoStorage):
        store_photos(storage, "ns", ["c.png", "a.png", "b.png"])

        assert storage.list_objects("ns") == ["ns/a.png", "ns/b.png", "ns/c.png"]
        assert storage.list_objects("ns", limit=2) == ["ns/a.png", "ns/b.png"]

    def test_list_missing_namespace(self, storage: PhotoStorage):
        assert storage.list_objects("nothing-here") == []

    @pytest.mark.parametrize("namespace", ["", "../etc", "a/b", ".hidden"])
    def test_rejects_unsafe_namespace(self, storage: PhotoStorage, namespace):
        with pytest.raises(StorageError):
            storage.list_objects(namespace)

    def test_remove_namespace(self, storage: PhotoStorage):
        store_photos(storage, "ns", ["a.png"])

        storage.remove_namespace("ns")

        assert storage.list_objects("ns") == []
        storage.remove_namespace("ns")


class TestPhotoValidation:
    """Photo checks before anything is written."""

    @pytest.mark.asyncio
    async def test_unsupported_type(self, storage: PhotoStorage):
        with pytest.raises(UnsupportedFileTypeError):
            await storage.validate_photo(make_upload("doc.pdf", b"%PDF", "application/pdf"))

    @pytest.mark.asyncio
    async def test_extension_mismatch(self, storage: PhotoStorage):
        with pytest.raises(FileUploadError):
            await storage.validate_photo(make_upload("photo.jpg", png_bytes(), "image/png"))

    @pytest.mark.asyncio
    async def test_content_is_not_an_image(self, storage: PhotoStorage):
        with pytest.raises(FileUploadError, match="Invalid image file"):
            await storage.validate_photo(make_upload("photo.png", b"not an image"))

    @pytest.mark.asyncio
    async def test_content_does_not_match_type(self, storage: PhotoStorage):
        with pytest.raises(FileUploadError):
            await storage.validate_photo(make_upload("photo.jpg", png_bytes(), "image/jpeg"))

    @pytest.mark.asyncio
    async def test_too_large(self, storage: PhotoStorage):
        storage.max_file_size = 10

        with pytest.raises(FileSizeExceededError):
            await storage.validate_photo(make_upload("photo.png", png_bytes()))
