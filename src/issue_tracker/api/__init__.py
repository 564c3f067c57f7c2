"""
issue_tracker.api

HTTP API package (FastAPI).

Responsibilities:
- App factory and composition root.
- Routers binding HTTP requests to services.
"""

# Package marker.
