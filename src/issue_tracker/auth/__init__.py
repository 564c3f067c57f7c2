"""
issue_tracker.auth

Authentication/authorization core.

Responsibilities:
- Password hashing and session tokens.
- Identity resolution (token -> Principal).
- Authorization decisions, list-visibility scopes and guards.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package imports FastAPI or SQLAlchemy except `deps.py`;
# storage is reached only through the protocols in `ports.py`.
