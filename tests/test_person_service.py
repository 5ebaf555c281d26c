"""
Tests for PersonService.

Covers name filtering, blank-id handling, id assignment on create,
path/body id checks on update, and delete.
"""
import pytest

from conftest import BLANK_IDS, find, snapshot
from people_search_api.app.core.errors import ErrorKind, NotFoundError, ValidationError
from people_search_api.app.core.store import PEOPLE
from people_search_api.app.schemas.person import PersonEntry
from people_search_api.app.services.person_service import PersonService


def names(people):
    return sorted(f"{p.first_name} {p.last_name}" for p in people)


class TestListPeople:
    @pytest.mark.parametrize("name", [None, "", " ", "\t\n"])
    def test_blank_filter_returns_everyone(self, seeded, name):
        assert len(PersonService.list_people(name)) == 5

    def test_empty_directory(self, database):
        assert PersonService.list_people() == []

    def test_substring_match_on_first_or_last_name(self, seeded):
        # "o" appears in Hello, World, John, Doe, Some, Person
        assert names(PersonService.list_people("o")) == [
            "Hello World",
            "Jane Doe",
            "John Smith",
            "Some Person",
        ]

    def test_match_is_case_insensitive_and_trimmed(self, seeded):
        assert names(PersonService.list_people("  wORLd ")) == ["Hello World"]
        assert names(PersonService.list_people("SMI")) == ["John Smith"]

    def test_match_is_not_prefix_only(self, seeded):
        assert names(PersonService.list_people("ers")) == ["Some Person"]

    def test_no_match(self, seeded):
        assert PersonService.list_people("zzz") == []


class TestGetPerson:
    def test_found(self, seeded):
        person = PersonService.get_person("1")
        assert person.id == "1"
        assert person.first_name == "Hello"
        assert person.last_name == "World"
        assert person.avatar_id == "world.png"

    def test_not_found(self, seeded):
        with pytest.raises(NotFoundError) as info:
            PersonService.get_person("999")
        assert info.value.kind == ErrorKind.PERSON_ID_NOT_FOUND
        assert info.value.message == "Person Id 999 not found."

    def test_id_match_is_exact(self, seeded):
        with pytest.raises(NotFoundError):
            PersonService.get_person(" 1")

    @pytest.mark.parametrize("person_id", BLANK_IDS)
    def test_blank_id_is_bad_request(self, seeded, person_id):
        with pytest.raises(ValidationError) as info:
            PersonService.get_person(person_id)
        assert info.value.kind == ErrorKind.EMPTY_PERSON_ID


class TestCreatePerson:
    def test_assigns_new_id(self, seeded):
        created = PersonService.create_person(PersonEntry(id="99", first_name="a", last_name="b"))
        assert created.id
        assert created.id != "99"
        stored = find(PEOPLE, created.id)
        assert stored.first_name == "a"
        assert find(PEOPLE, "99") is None

    def test_does_not_mutate_the_argument(self, database):
        person = PersonEntry(id="99", first_name="a", last_name="b")
        PersonService.create_person(person)
        assert person.id == "99"

    def test_keeps_optional_fields(self, database):
        created = PersonService.create_person(
            PersonEntry(first_name="Ada", last_name="Lovelace", age=36, city="London", zip_code="W1")
        )
        stored = find(PEOPLE, created.id)
        assert stored.age == 36
        assert stored.city == "London"
        assert stored.zip_code == "W1"

    def test_none_is_rejected(self, database):
        with pytest.raises(ValidationError) as info:
            PersonService.create_person(None)
        assert info.value.kind == ErrorKind.UNRECOGNIZED_JSON_OBJECT

    @pytest.mark.parametrize("first, last, kind", [
        (None, "b", ErrorKind.EMPTY_PERSON_FIRST_NAME),
        (" ", "b", ErrorKind.EMPTY_PERSON_FIRST_NAME),
        ("a", None, ErrorKind.EMPTY_PERSON_LAST_NAME),
        ("a", "\t", ErrorKind.EMPTY_PERSON_LAST_NAME),
    ])
    def test_blank_names_are_rejected(self, database, first, last, kind):
        with pytest.raises(ValidationError) as info:
            PersonService.create_person(PersonEntry(first_name=first, last_name=last))
        assert info.value.kind == kind
        assert PersonService.list_people() == []


class TestUpdatePerson:
    def test_copies_every_field_but_id(self, seeded):
        body = PersonEntry(first_name="Goodbye", last_name="Moon", age=1, interests=None, avatar_id="x.png")
        PersonService.update_person("1", body)
        stored = find(PEOPLE, "1")
        assert stored.id == "1"
        assert stored.first_name == "Goodbye"
        assert stored.last_name == "Moon"
        assert stored.age == 1
        assert stored.interests is None
        assert stored.avatar_id == "x.png"
        assert stored.country is None

    def test_matching_body_id_is_accepted(self, seeded):
        PersonService.update_person("2", PersonEntry(id="2", first_name="Jo", last_name="Smith"))
        assert find(PEOPLE, "2").first_name == "Jo"

    def test_mismatched_body_id_is_rejected(self, seeded):
        before = snapshot()
        with pytest.raises(ValidationError) as info:
            PersonService.update_person("1", PersonEntry(id="2", first_name="a", last_name="b"))
        assert info.value.kind == ErrorKind.PERSON_ID_MISMATCH
        assert snapshot() == before

    def test_mismatch_wins_over_other_errors(self, seeded):
        with pytest.raises(ValidationError) as info:
            PersonService.update_person("1", PersonEntry(id="2"))
        assert info.value.kind == ErrorKind.PERSON_ID_MISMATCH

    def test_not_found(self, seeded):
        with pytest.raises(NotFoundError):
            PersonService.update_person("999", PersonEntry(first_name="a", last_name="b"))

    @pytest.mark.parametrize("person_id", BLANK_IDS)
    def test_blank_id_is_bad_request(self, seeded, person_id):
        with pytest.raises(ValidationError):
            PersonService.update_person(person_id, PersonEntry(first_name="a", last_name="b"))

    def test_blank_names_are_rejected(self, seeded):
        with pytest.raises(ValidationError) as info:
            PersonService.update_person("1", PersonEntry(first_name="a", last_name=""))
        assert info.value.kind == ErrorKind.EMPTY_PERSON_LAST_NAME
        assert find(PEOPLE, "1").last_name == "World"

    def test_none_body_is_rejected(self, seeded):
        with pytest.raises(ValidationError) as info:
            PersonService.update_person("1", None)
        assert info.value.kind == ErrorKind.UNRECOGNIZED_JSON_OBJECT


class TestDeletePerson:
    def test_removes_person(self, seeded):
        PersonService.delete_person("7")
        assert find(PEOPLE, "7") is None
        assert len(PersonService.list_people()) == 4

    def test_not_found(self, seeded):
        with pytest.raises(NotFoundError):
            PersonService.delete_person("999")

    @pytest.mark.parametrize("person_id", BLANK_IDS)
    def test_blank_id_is_bad_request(self, seeded, person_id):
        before = snapshot()
        with pytest.raises(ValidationError):
            PersonService.delete_person(person_id)
        assert snapshot() == before
