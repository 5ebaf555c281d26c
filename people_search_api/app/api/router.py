"""
Top-level API router.

Aggregates the domain routers under a single router that ``main``
mounts at ``/api``.
"""

from fastapi import APIRouter

from .endpoints import image, people

router = APIRouter()

router.include_router(people.router, prefix="/people", tags=["people"])
router.include_router(image.router, prefix="/image", tags=["image"])
