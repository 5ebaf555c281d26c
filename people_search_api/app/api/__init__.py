"""API routers for the people directory."""
