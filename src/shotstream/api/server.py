"""
ASGI Entry Point for the shotstream API.

This module exposes the `app` object required by ASGI servers (Uvicorn).
It loads environment variables from `.env` before the application factory
reads settings.

Usage
-----
Run via the module entry point:
    $ python -m shotstream.api.server

Or via uvicorn directly:
    $ uvicorn shotstream.api.server:app --reload
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from shotstream.api.app import create_app

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #

load_dotenv(dotenv_path=Path(".env"))

app = create_app()


def main() -> None:
    """Run the API server locally for development."""
    uvicorn.run(
        "shotstream.api.server:app",
        host="127.0.0.1",
        port=8000,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()
