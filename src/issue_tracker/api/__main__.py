"""
issue_tracker.api.__main__

Entrypoint for running the API via `python -m issue_tracker.api`.
"""

from __future__ import annotations

import uvicorn

from issue_tracker.api.app import create_app
from issue_tracker.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
