"""
Pydantic models for person records.

``PersonEntry`` is both the request/response body of the ``/people``
endpoints and the entity kept in the ``people`` collection.  Names are
optional at the schema level on purpose: the service layer reports a
blank first or last name with its own error kind instead of a generic
validation failure.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PersonEntry(BaseModel):
    """A person in the directory.

    ``id`` is assigned by the store and never changes afterwards.
    ``avatar_id`` is a weak reference to an image id.
    """

    id: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    gender: Optional[str] = None
    age: Optional[int] = None
    interests: Optional[str] = None
    avatar_id: Optional[str] = Field(None, alias="avatarId")
    addr1: Optional[str] = None
    addr2: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zipCode")

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    def copy_from(self, other: "PersonEntry") -> "PersonEntry":
        """Update every field except ``id`` from ``other`` and return self."""
        if other is not None and other is not self:
            for name in type(self).model_fields:
                if name != "id":
                    setattr(self, name, getattr(other, name))
        return self
