"""
issue_tracker.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
- Adapt repositories to the auth core's storage port.
"""

# Package marker.
