"""Image attachment handler tests."""

import uuid
from unittest import mock

from django.core.files.storage import FileSystemStorage, default_storage
from django.test import SimpleTestCase, override_settings

from core.errors import UploadFailed
from core.uploads import ImageUploader, StoredImage
from tests.utils import make_image


class ImageUploaderTests(SimpleTestCase):
    def setUp(self):
        self.owner_id = uuid.uuid4()

    def test_featured_image_scoped_by_owner_with_random_name(self):
        first = ImageUploader.upload(self.owner_id, make_image("photo.PNG"))
        second = ImageUploader.upload(self.owner_id, make_image("photo.PNG"))

        prefix = f"/media/blog_images/{self.owner_id}/"
        self.assertTrue(first.startswith(prefix))
        self.assertTrue(first.endswith(".png"))
        self.assertNotEqual(first, second)

    @override_settings(POST_IMAGES_DIR="covers")
    def test_featured_image_directory_is_configurable(self):
        url = ImageUploader.upload(self.owner_id, make_image())
        self.assertIn(f"/covers/{self.owner_id}/", url)

    def test_avatar_path_is_fixed_per_owner_and_overwritten(self):
        first = ImageUploader.upload_avatar(self.owner_id, make_image("me.png"))
        second = ImageUploader.upload_avatar(self.owner_id, make_image("me.png", size=(8, 8)))

        self.assertEqual(first, f"/media/avatars/{self.owner_id}.png")
        self.assertEqual(first, second)

    def test_storage_failure_raises_upload_failed(self):
        storage = mock.create_autospec(FileSystemStorage, instance=True)
        storage.save.side_effect = OSError("disk full")

        with self.assertRaises(UploadFailed) as ctx:
            ImageUploader.upload(self.owner_id, make_image(), storage=storage)

        self.assertEqual(ctx.exception.message, UploadFailed.default_message)
        storage.url.assert_not_called()

    def test_explicit_storage_is_used(self):
        storage = mock.create_autospec(FileSystemStorage, instance=True)
        storage.save.return_value = "stored/name.png"
        storage.url.return_value = "https://cdn.example.com/stored/name.png"

        url = ImageUploader.upload(self.owner_id, make_image(), storage=storage)

        self.assertEqual(url, "https://cdn.example.com/stored/name.png")
        saved_path = storage.save.call_args.args[0]
        self.assertTrue(saved_path.startswith(f"blog_images/{self.owner_id}/"))

    def test_store_returns_path_and_url(self):
        stored = ImageUploader.store(self.owner_id, make_image())

        self.assertTrue(stored.path.startswith(f"blog_images/{self.owner_id}/"))
        self.assertEqual(stored.url, f"/media/{stored.path}")
        self.assertTrue(default_storage.exists(stored.path))

    def test_discard_removes_stored_image(self):
        stored = ImageUploader.store(self.owner_id, make_image())

        ImageUploader.discard(stored)

        self.assertFalse(default_storage.exists(stored.path))

    def test_discard_failure_does_not_mask_caller_error(self):
        storage = mock.create_autospec(FileSystemStorage, instance=True)
        storage.delete.side_effect = OSError("gone away")

        ImageUploader.discard(StoredImage(path="blog_images/x/y.png", url="/media/y.png"), storage=storage)

        storage.delete.assert_called_once_with("blog_images/x/y.png")
