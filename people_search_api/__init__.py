"""
Top-level package for the People Search API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``people_search_api.app.main.app``.
"""

__all__ = []
