"""
Pydantic models for avatar images.

``ImageEntry`` is the stored entity (raw bytes).  ``AvatarImage`` is the
body of ``PUT /api/image``: the image bytes travel base64 encoded under
the ``data`` key (``b64Data`` is accepted too, as sent by older
clients).
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class ImageEntry(BaseModel):
    """An avatar image.  ``person_id`` is a weak reference to a person."""

    id: Optional[str] = None
    person_id: Optional[str] = Field(None, alias="personId")
    data: bytes = b""

    model_config = {
        "populate_by_name": True,
    }


class AvatarImage(BaseModel):
    """Schema for uploading an avatar image as JSON."""

    id: Optional[str] = Field(None, description="Id of an existing image to replace")
    person_id: Optional[str] = Field(None, alias="personId", description="Id of the person the image belongs to")
    data: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("data", "b64Data"),
        description="Base64 encoded image bytes",
    )

    model_config = {
        "populate_by_name": True,
    }
