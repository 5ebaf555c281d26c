"""
Endpoint modules.  Each module defines a ``router`` that is included in
``api/router.py``.
"""
