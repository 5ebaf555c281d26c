"""
Pydantic schema definitions for API payloads and stored entities.

JSON payloads use camelCase keys (``firstName``, ``avatarId``) to match
the single-page front end, while Python code uses snake_case
attributes.  Every model accepts both spellings on input.
"""
