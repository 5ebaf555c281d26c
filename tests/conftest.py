"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite file under ``tmp_path``; the global
``settings`` object is pointed at it with ``monkeypatch`` so nothing
leaks between tests.

Seeded state (``seeded`` fixture):
- people "1" (Hello World), "2" (John Smith), "7" (Mr Ed), plus Jane Doe
  and Some Person under generated ids
- images world.png -> "1", man_960_720.png -> "2", mr_ed_960_720.png -> "7",
  and unbound woman_960_720.png, profile_placeholder.png, photo.jpg
"""
import base64

import pytest
from fastapi.testclient import TestClient

from people_search_api.app.core.config import settings
from people_search_api.app.core.db import init_db
from people_search_api.app.core.seed import seed_database
from people_search_api.app.core.store import IMAGES, PEOPLE, EntityStore


SEED_IMAGES = {
    "world.png": b"\x89PNG\r\n\x1a\nworld",
    "man_960_720.png": b"\x89PNG\r\n\x1a\nman",
    "mr_ed_960_720.png": b"\x89PNG\r\n\x1a\nmr ed",
    "woman_960_720.png": b"\x89PNG\r\n\x1a\nwoman",
    "profile_placeholder.png": b"\x89PNG\r\n\x1a\nplaceholder",
    "photo.jpg": b"\xff\xd8\xff\xe0photo",
}

BLANK_IDS = [None, "", " ", "\t", "\n", "\r", "\r\n", " \t\r\n"]


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


@pytest.fixture
def database(tmp_path, monkeypatch):
    """Empty database with the schema applied."""
    db_path = tmp_path / "people.db"
    monkeypatch.setattr(settings, "database_url", str(db_path))
    monkeypatch.setattr(settings, "seed_demo_data", False)
    monkeypatch.setattr(settings, "seed_image_dir", "")
    init_db()
    return db_path


@pytest.fixture
def image_dir(tmp_path):
    path = tmp_path / "images"
    path.mkdir()
    for name, data in SEED_IMAGES.items():
        (path / name).write_bytes(data)
    (path / "notes.txt").write_text("not an image")
    return path


@pytest.fixture
def seeded(database, image_dir):
    """Database loaded with the demo people and the seed images."""
    seed_database(str(image_dir))
    return database


@pytest.fixture
def client(seeded):
    from people_search_api.app.main import app
    return TestClient(app)


def snapshot():
    """Return every stored person and image as plain dicts."""
    with EntityStore() as store:
        people = [p.model_dump() for p in store.all(PEOPLE)]
        images = [i.model_dump() for i in store.all(IMAGES)]
    return people, images


def find(collection, entity_id):
    with EntityStore() as store:
        return store.find_by_id(collection, entity_id)
