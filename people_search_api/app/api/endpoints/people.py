"""
Person endpoints.

CRUD routes over the people directory.  Handlers are plain functions:
FastAPI runs them in its threadpool, which lets the services use
blocking SQLite calls and thread locks.  Service errors are translated
to HTTP status codes here.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, HTTPException, Query, Request, Response, status

from people_search_api.app.core.errors import ServiceError
from people_search_api.app.schemas.person import PersonEntry
from people_search_api.app.services.person_service import PersonService


logger = logging.getLogger(__name__)

router = APIRouter()


def http_error(exc: ServiceError) -> HTTPException:
    """Translate a service error into the matching HTTP error response."""
    logger.warning("Request rejected (%s): %s", exc.kind.value, exc.message)
    return HTTPException(status_code=exc.status_code, detail=exc.to_detail())


@router.get("", response_model=List[PersonEntry])
def list_people(name: Optional[str] = Query(None, description="Substring of a first or last name")) -> List[PersonEntry]:
    """Return all people whose first or last name contains ``name``.

    The match is case insensitive.  Without ``name`` every person is
    returned.
    """
    return PersonService.list_people(name)


@router.get("/{person_id}", response_model=PersonEntry, name="get_person_by_id")
def get_person_by_id(person_id: str) -> PersonEntry:
    """Retrieve a single person.  400 for a blank id, 404 if unknown."""
    try:
        return PersonService.get_person(person_id)
    except ServiceError as e:
        raise http_error(e) from e


@router.post("", response_model=PersonEntry, status_code=status.HTTP_201_CREATED)
def create_person(
    request: Request,
    response: Response,
    person: Optional[PersonEntry] = Body(None),
) -> PersonEntry:
    """Add a new person.

    Any ``id`` in the body is ignored; the response carries the new id
    and a ``Location`` header pointing at the created record.
    """
    try:
        created = PersonService.create_person(person)
    except ServiceError as e:
        raise http_error(e) from e
    response.headers["Location"] = str(request.url_for("get_person_by_id", person_id=created.id))
    return created


@router.put("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_person(person_id: str, person: Optional[PersonEntry] = Body(None)) -> None:
    """Replace every field of an existing person except its id."""
    try:
        PersonService.update_person(person_id, person)
    except ServiceError as e:
        raise http_error(e) from e
    return None


@router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_person(person_id: str) -> None:
    try:
        PersonService.delete_person(person_id)
    except ServiceError as e:
        raise http_error(e) from e
    return None
