"""
Business logic for person records.

``PersonService`` validates incoming records and orchestrates the
create, read, update and delete operations against the ``people``
collection of the entity store.  Validation always happens before any
change is staged, so a rejected request never writes anything.

Update and delete hold the per-person lock shared with the image
service, which keeps them from interleaving with an avatar upload that
is rewriting the same person's ``avatar_id``.
"""

import logging
from typing import List, Optional

from ..core.errors import ErrorKind, NotFoundError, ValidationError, is_blank
from ..core.store import PEOPLE, EntityStore
from ..schemas.person import PersonEntry
from .locks import person_key, resource_locks


logger = logging.getLogger(__name__)


class PersonService:
    """CRUD operations for people."""

    @classmethod
    def list_people(cls, name: Optional[str] = None) -> List[PersonEntry]:
        """Return all people, optionally filtered by name.

        When ``name`` is not blank, only people whose first or last name
        contains it are returned.  The match is a case-insensitive
        substring match on the trimmed filter.
        """
        needle = "" if name is None else name.strip().lower()
        with EntityStore() as store:
            people = store.all(PEOPLE)
        if not needle:
            return people
        return [
            person
            for person in people
            if needle in (person.first_name or "").lower()
            or needle in (person.last_name or "").lower()
        ]

    @classmethod
    def get_person(cls, person_id: Optional[str]) -> PersonEntry:
        """Retrieve a single person by id.

        Raises ``ValidationError`` for a blank id and ``NotFoundError``
        when no person has exactly that id.
        """
        if is_blank(person_id):
            raise ValidationError(ErrorKind.EMPTY_PERSON_ID)
        with EntityStore() as store:
            person = store.find_by_id(PEOPLE, person_id)
        if person is None:
            raise NotFoundError(ErrorKind.PERSON_ID_NOT_FOUND, person_id)
        return person

    @classmethod
    def create_person(cls, person: Optional[PersonEntry]) -> PersonEntry:
        """Store a new person and return it with its assigned id.

        A caller-supplied ``id`` is always discarded.
        """
        if person is None:
            raise ValidationError(ErrorKind.UNRECOGNIZED_JSON_OBJECT)
        cls._check_names(person)

        entry = person.model_copy()
        with EntityStore() as store:
            store.add(entry)
            store.commit()
        logger.info("Created person %s (%s %s)", entry.id, entry.first_name, entry.last_name)
        return entry

    @classmethod
    def update_person(cls, person_id: Optional[str], person: Optional[PersonEntry]) -> PersonEntry:
        """Overwrite every field but ``id`` of an existing person.

        The body may omit ``id``; if it carries one, it must equal
        ``person_id``.
        """
        if person is None:
            raise ValidationError(ErrorKind.UNRECOGNIZED_JSON_OBJECT)
        if is_blank(person_id):
            raise ValidationError(ErrorKind.EMPTY_PERSON_ID)
        if not is_blank(person.id) and person.id != person_id:
            raise ValidationError(ErrorKind.PERSON_ID_MISMATCH)
        cls._check_names(person)

        with resource_locks.hold([person_key(person_id)]):
            with EntityStore() as store:
                existing = store.find_by_id(PEOPLE, person_id)
                if existing is None:
                    raise NotFoundError(ErrorKind.PERSON_ID_NOT_FOUND, person_id)
                existing.copy_from(person)
                store.update(existing)
                store.commit()
        logger.info("Updated person %s", person_id)
        return existing

    @classmethod
    def delete_person(cls, person_id: Optional[str]) -> None:
        """Remove a person.  Images bound to the person are left alone."""
        if is_blank(person_id):
            raise ValidationError(ErrorKind.EMPTY_PERSON_ID)

        with resource_locks.hold([person_key(person_id)]):
            with EntityStore() as store:
                existing = store.find_by_id(PEOPLE, person_id)
                if existing is None:
                    raise NotFoundError(ErrorKind.PERSON_ID_NOT_FOUND, person_id)
                store.remove(existing)
                store.commit()
        logger.info("Deleted person %s", person_id)

    @staticmethod
    def _check_names(person: PersonEntry) -> None:
        if is_blank(person.first_name):
            raise ValidationError(ErrorKind.EMPTY_PERSON_FIRST_NAME)
        if is_blank(person.last_name):
            raise ValidationError(ErrorKind.EMPTY_PERSON_LAST_NAME)
