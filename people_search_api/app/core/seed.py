"""
Demo data loaded at startup.

A couple of people get short numeric-looking ids ("1", "2", "7") so the
API is easy to try by hand and so clients are exercised with ids that
look like numbers but are strings.  Avatar images are only seeded when
``settings.seed_image_dir`` points at a directory of image files.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from .config import settings
from .store import IMAGES, PEOPLE, EntityStore
from ..schemas.image import ImageEntry
from ..schemas.person import PersonEntry


logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg"}

# Seed image file name -> id of the person it belongs to.
IMAGE_OWNERS: Dict[str, str] = {
    "world.png": "1",
    "man_960_720.png": "2",
    "mr_ed_960_720.png": "7",
}


def demo_people() -> List[PersonEntry]:
    return [
        PersonEntry(
            id="1",
            first_name="Hello",
            last_name="World",
            gender="Planet",
            age=4543000,
            interests="Rotating",
            avatar_id="world.png",
            addr1="3rd Planet",
            country="Milky Way",
            state="Orian Arm",
            city="Solar System",
            zip_code="0",
        ),
        PersonEntry(
            id="2",
            first_name="John",
            last_name="Smith",
            gender="Male",
            age=25,
            interests="Making stuff out of metal.",
            avatar_id="man_960_720.png",
            addr1="123 Main St.",
            country="USA",
            state="UT",
            city="Salt Lake City",
            zip_code="84101",
        ),
        PersonEntry(
            first_name="Jane",
            last_name="Doe",
            gender="Female",
            age=30,
            interests="Writing letters.",
            avatar_id="woman_960_720.png",
            addr1="328 West 89th Street",
            addr2="APT B1",
            country="USA",
            state="NY",
            city="New York",
            zip_code="10024",
        ),
        PersonEntry(first_name="Some", last_name="Person"),
        PersonEntry(
            id="7",
            first_name="Mr",
            last_name="Ed",
            gender="Male",
            age=4,
            interests="Talking.",
            avatar_id="mr_ed_960_720.png",
        ),
    ]


def load_images(image_dir: Path) -> List[ImageEntry]:
    """Build image entries from the image files directly inside ``image_dir``."""
    images = []
    for path in sorted(image_dir.iterdir()):
        if path.is_file() and path.suffix.lower() in IMAGE_SUFFIXES:
            images.append(
                ImageEntry(id=path.name, person_id=IMAGE_OWNERS.get(path.name), data=path.read_bytes())
            )
    return images


def seed_database(image_dir: Optional[str] = None) -> None:
    """Populate empty collections with demo data.

    People are only added when the people table is empty, images only
    when the images table is empty and ``image_dir`` exists.
    """
    image_dir = settings.seed_image_dir if image_dir is None else image_dir
    with EntityStore() as store:
        if store.count(PEOPLE) == 0:
            for person in demo_people():
                store.add_with_id(person)
            logger.info("Seeded %d demo people", store.commit())

        if image_dir and store.count(IMAGES) == 0:
            path = Path(image_dir)
            if not path.is_dir():
                logger.warning("Seed image directory %s does not exist", path)
                return
            for image in load_images(path):
                store.add_with_id(image)
            logger.info("Seeded %d images from %s", store.commit(), path)
