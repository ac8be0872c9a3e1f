"""Image attachment handler: store uploads and resolve their public URLs."""

import os
import uuid
from dataclasses import dataclass
from typing import Any

import structlog
from django.conf import settings
from django.core.files.storage import Storage, default_storage

from .errors import UploadFailed

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StoredImage:
    """Where an upload landed: the storage name and its public URL."""

    path: str
    url: str


class ImageUploader:
    """Put uploaded images into object storage scoped by owner.

    Featured images get a random file name per upload. An owner has at most
    one avatar, so avatar paths are fixed per owner and overwritten.
    """

    @classmethod
    def upload(cls, owner_id: Any, file, storage: Storage | None = None) -> str:
        """Store a featured image and return its public URL."""

        return cls.store(owner_id, file, storage).url

    @classmethod
    def store(cls, owner_id: Any, file, storage: Storage | None = None) -> StoredImage:
        """Store a featured image; keep the path so the caller can discard it."""

        name = f"{uuid.uuid4().hex}{cls._extension(file)}"
        path = f"{settings.POST_IMAGES_DIR}/{owner_id}/{name}"
        return cls._put(path, file, storage or default_storage, overwrite=False)

    @classmethod
    def upload_avatar(cls, owner_id: Any, file, storage: Storage | None = None) -> str:
        """Store (or replace) the owner's avatar and return its public URL."""

        path = f"{settings.AVATARS_DIR}/{owner_id}{cls._extension(file)}"
        return cls._put(path, file, storage or default_storage, overwrite=True).url

    @staticmethod
    def discard(image: StoredImage, storage: Storage | None = None) -> None:
        """Remove an image whose owning write failed.

        Runs on an error path that is already raising, so a storage failure
        here is logged rather than raised over the original error.
        """
        storage = storage or default_storage
        try:
            storage.delete(image.path)
        except Exception as exc:
            logger.warning("orphan_image_cleanup_failed", path=image.path, error=str(exc))
            return
        logger.info("orphan_image_discarded", path=image.path)

    @staticmethod
    def _extension(file) -> str:
        _, ext = os.path.splitext(getattr(file, "name", "") or "")
        return ext.lower()

    @staticmethod
    def _put(path: str, file, storage: Storage, overwrite: bool) -> StoredImage:
        try:
            if overwrite and storage.exists(path):
                storage.delete(path)
            stored_path = storage.save(path, file)
            url = storage.url(stored_path)
        except Exception as exc:
            logger.warning("image_upload_failed", path=path, error=str(exc))
            raise UploadFailed() from exc

        logger.info("image_uploaded", path=stored_path)
        return StoredImage(path=stored_path, url=url)


__all__ = ["ImageUploader", "StoredImage"]
