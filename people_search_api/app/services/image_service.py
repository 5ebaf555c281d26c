"""
Business logic for avatar images.

``ImageService`` stores avatar images and keeps the ``images`` and
``people`` collections pointing at each other: when an image is stored
for a person, the image's ``person_id`` and the person's ``avatar_id``
are written in the same commit.

Storing an avatar is a read-check-write sequence (person lookup,
existing image lookup, conflict check, mutation, commit).  It runs
while holding the per-resource locks of the image id and the person id
involved, so two uploads for the same image or the same person cannot
interleave, while uploads for unrelated resources run in parallel.
"""

import base64
import binascii
import logging
import os
from typing import List, Optional

from ..core.errors import ConflictError, ErrorKind, NotFoundError, ValidationError, is_blank
from ..core.store import IMAGES, PEOPLE, EntityStore
from ..schemas.image import AvatarImage, ImageEntry
from .locks import image_key, person_key, resource_locks


logger = logging.getLogger(__name__)

JPEG_EXTENSIONS = {".jpg", ".jpeg"}


def decode_image_data(b64: Optional[str]) -> bytes:
    """Decode base64 image data, rejecting malformed or empty input.

    Whitespace and line breaks (MIME-wrapped base64) are ignored; any
    other character outside the base64 alphabet is an error.
    """
    if not b64:
        raise ValidationError(ErrorKind.INVALID_IMAGE_DATA)
    try:
        data = base64.b64decode("".join(b64.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(ErrorKind.INVALID_IMAGE_DATA) from exc
    if not data:
        raise ValidationError(ErrorKind.INVALID_IMAGE_DATA)
    return data


def media_type_for(image_id: str) -> str:
    """Derive the content type from the extension of an image id.

    ``.jpg`` and ``.jpeg`` map to JPEG; anything else is served as PNG.
    """
    _, ext = os.path.splitext(image_id)
    return "image/jpeg" if ext.lower() in JPEG_EXTENSIONS else "image/png"


class ImageService:
    """Avatar storage and retrieval."""

    @classmethod
    def get_image(cls, image_id: Optional[str]) -> ImageEntry:
        """Retrieve an image by id.

        Raises ``ValidationError`` for a blank id and ``NotFoundError``
        if no image has that id.  Nothing is modified.
        """
        if is_blank(image_id):
            raise ValidationError(ErrorKind.EMPTY_IMAGE_ID)
        with EntityStore() as store:
            image = store.find_by_id(IMAGES, image_id)
        if image is None:
            raise NotFoundError(ErrorKind.IMAGE_ID_NOT_FOUND, image_id)
        return image

    @classmethod
    def put_avatar(cls, avatar: Optional[AvatarImage]) -> ImageEntry:
        """Store an avatar submitted as base64 JSON.

        With an ``id`` naming an existing image, that image is updated in
        place; otherwise a new image is created under a store-assigned
        id.  See ``store_avatar_image`` for the person binding rules.
        """
        if avatar is None:
            raise ValidationError(ErrorKind.INVALID_IMAGE_DATA)
        try:
            data = decode_image_data(avatar.data)
        except ValidationError:
            logger.warning(
                "Rejected avatar with undecodable data: id %r, personId %r",
                avatar.id,
                avatar.person_id,
            )
            raise
        image = ImageEntry(id=avatar.id, person_id=avatar.person_id, data=data)
        return cls.store_avatar_image(image)

    @classmethod
    def upload_avatar(cls, person_id: Optional[str], files: Optional[List[bytes]]) -> ImageEntry:
        """Store a single uploaded file as a new avatar for ``person_id``."""
        if is_blank(person_id):
            raise ValidationError(ErrorKind.PERSON_ID_NOT_FOUND, person_id or "")
        if files is None:
            raise ValidationError(ErrorKind.EMPTY_IMAGE_DATA)
        if len(files) != 1:
            raise ValidationError(ErrorKind.ONE_IMAGE_REQUIRED)
        return cls.store_avatar_image(ImageEntry(person_id=person_id, data=files[0]))

    @classmethod
    def store_avatar_image(cls, image: ImageEntry) -> ImageEntry:
        """Add or update ``image`` and bind it to its person in one commit.

        1. A non-blank ``person_id`` must name an existing person.
        2. A non-blank ``id`` naming an existing image updates it, unless
           that image is already bound to a different person id (plain
           equality, so a blank ``person_id`` against a bound image is a
           mismatch too), which is a conflict.
        3. Otherwise a new image is added and the store assigns its id.
        4. The resolved person's ``avatar_id`` is set to the image id.

        Every failure happens before anything is staged.
        """
        if image is None or not image.data:
            raise ValidationError(ErrorKind.EMPTY_IMAGE_DATA)

        keys = []
        if not is_blank(image.id):
            keys.append(image_key(image.id))
        if not is_blank(image.person_id):
            keys.append(person_key(image.person_id))

        with resource_locks.hold(keys):
            with EntityStore() as store:
                person = None
                if not is_blank(image.person_id):
                    person = store.find_by_id(PEOPLE, image.person_id)
                    if person is None:
                        logger.warning("Avatar for unknown person %s rejected", image.person_id)
                        raise ValidationError(ErrorKind.PERSON_ID_NOT_FOUND, image.person_id)

                existing = None
                if not is_blank(image.id):
                    existing = store.find_by_id(IMAGES, image.id)
                    if (
                        existing is not None
                        and not is_blank(existing.person_id)
                        and existing.person_id != image.person_id
                    ):
                        logger.warning(
                            "Image %s belongs to person %s, refusing to rebind to %r",
                            existing.id,
                            existing.person_id,
                            image.person_id,
                        )
                        raise ConflictError(ErrorKind.PERSON_ID_MISMATCH)

                if existing is None:
                    stored = image.model_copy()
                    store.add(stored)
                else:
                    existing.data = image.data
                    existing.person_id = image.person_id
                    store.update(existing)
                    stored = existing

                if person is not None:
                    person.avatar_id = stored.id
                    store.update(person)

                store.commit()

        logger.info(
            "%s image %s (%d bytes) for person %s",
            "Created" if existing is None else "Updated",
            stored.id,
            len(stored.data),
            stored.person_id,
        )
        return stored
