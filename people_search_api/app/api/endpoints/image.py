"""
Avatar image endpoints.

``GET /image/{id}`` serves the raw image bytes.  ``PUT /image`` takes a
base64 JSON submission that may create a new image or replace an
existing one, and ``POST /image/{person_id}`` takes a single multipart
file upload that always creates a new image for the person.
"""

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Body, Request, Response, status
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from people_search_api.app.core.errors import ServiceError
from people_search_api.app.schemas.image import AvatarImage
from people_search_api.app.services.image_service import ImageService, media_type_for
from .people import http_error


router = APIRouter()


def content_disposition(filename: str) -> str:
    """Build an inline ``Content-Disposition`` value for ``filename``.

    Names that need escaping get an ASCII ``filename`` fallback plus the
    RFC 5987 ``filename*`` form, since header values must be Latin-1.
    """
    quoted = quote(filename)
    if quoted == filename:
        return f'inline; filename="{filename}"'
    fallback = "".join(c if c.isascii() and c.isprintable() and c not in '"\\' else "_" for c in filename)
    return f"inline; filename=\"{fallback}\"; filename*=UTF-8''{quoted}"


@router.get("/{image_id}", response_class=Response)
def get_image_by_id(image_id: str) -> Response:
    """Return the image bytes, using the id as the suggested file name."""
    try:
        image = ImageService.get_image(image_id)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(
        content=image.data,
        media_type=media_type_for(image.id),
        headers={"Content-Disposition": content_disposition(image.id)},
    )


@router.put("", status_code=status.HTTP_200_OK, response_class=Response)
def put_avatar(avatar: Optional[AvatarImage] = Body(None)) -> Response:
    """Store an avatar image and bind it to its person.

    Responds 400 for undecodable data or an unknown person and 409 when
    the image already belongs to a different person.
    """
    try:
        ImageService.put_avatar(avatar)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_200_OK)


@router.post("/{person_id}", status_code=status.HTTP_200_OK, response_class=Response)
async def upload_avatar(person_id: str, request: Request) -> Response:
    """Upload exactly one image file as the person's new avatar.

    Every file part of the multipart form counts, whatever its field
    name.  The store work runs in the threadpool like the sync routes.
    """
    form = await request.form()
    try:
        uploads = [value for _, value in form.multi_items() if isinstance(value, UploadFile)]
        contents = [await upload.read() for upload in uploads] or None
    finally:
        await form.close()
    try:
        await run_in_threadpool(ImageService.upload_avatar, person_id, contents)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_200_OK)
