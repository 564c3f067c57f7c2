"""
issue_tracker.services

Service layer (transaction owners).

Responsibilities:
- Implement each operation: authenticate, authorize through a named policy,
  then read/write through repositories and commit.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services take `Principal | None` explicitly; they never look at HTTP state.
