"""
Service layer.

Each service encapsulates the business logic for one collection and
talks to the database only through ``core.store.EntityStore``, so the
API handlers never see SQL.
"""
