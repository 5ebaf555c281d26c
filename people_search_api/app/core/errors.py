"""
Error kinds and service exceptions.

Services raise one of the ``ServiceError`` subclasses below; the API
layer turns them into ``HTTPException`` responses using the
``status_code`` attached to each class.  Every error carries an
``ErrorKind`` tag and a short English message built from
``MESSAGES``.  Translating those messages is left to clients.
"""

from enum import Enum
from typing import Any, Dict

from fastapi import status


class ErrorKind(str, Enum):
    UNRECOGNIZED_JSON_OBJECT = "UnrecognizedJsonObject"
    EMPTY_PERSON_ID = "EmptyPersonId"
    PERSON_ID_NOT_FOUND = "PersonIdNotFound"
    EMPTY_PERSON_FIRST_NAME = "EmptyPersonFirstName"
    EMPTY_PERSON_LAST_NAME = "EmptyPersonLastName"
    PERSON_ID_MISMATCH = "PersonIdMismatch"
    EMPTY_IMAGE_ID = "EmptyImageId"
    IMAGE_ID_NOT_FOUND = "ImageIdNotFound"
    EMPTY_IMAGE_DATA = "EmptyImageData"
    INVALID_IMAGE_DATA = "InvalidImageData"
    ONE_IMAGE_REQUIRED = "OneImageRequired"


MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.UNRECOGNIZED_JSON_OBJECT: "Unrecognized JSON object.",
    ErrorKind.EMPTY_PERSON_ID: "Empty person Id.",
    ErrorKind.PERSON_ID_NOT_FOUND: "Person Id {0} not found.",
    ErrorKind.EMPTY_PERSON_FIRST_NAME: "Empty person first name.",
    ErrorKind.EMPTY_PERSON_LAST_NAME: "Empty person last name.",
    ErrorKind.PERSON_ID_MISMATCH: "Person Id mismatch.",
    ErrorKind.EMPTY_IMAGE_ID: "Empty image Id.",
    ErrorKind.IMAGE_ID_NOT_FOUND: "Image Id {0} not found.",
    ErrorKind.EMPTY_IMAGE_DATA: "Empty image data.",
    ErrorKind.INVALID_IMAGE_DATA: "Invalid image data.",
    ErrorKind.ONE_IMAGE_REQUIRED: "Exactly one image is required.",
}


class ServiceError(Exception):
    """Base class for errors reported back to API clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, kind: ErrorKind, *args: Any) -> None:
        self.kind = kind
        self.message = MESSAGES[kind].format(*args)
        super().__init__(self.message)

    def to_detail(self) -> Dict[str, str]:
        return {"error": self.kind.value, "message": self.message}


class ValidationError(ServiceError):
    """Blank required field or malformed submission."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ServiceError):
    """No entity with the given id."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    """An image already bound to one person cannot be rebound to another."""

    status_code = status.HTTP_409_CONFLICT


def is_blank(value: Any) -> bool:
    """Return ``True`` for ``None``, empty and whitespace-only strings."""
    return value is None or not str(value).strip()
