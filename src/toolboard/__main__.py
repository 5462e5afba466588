"""Run the API server.

Usage:
    python -m toolboard

Or via the console script:
    toolboard
"""

import uvicorn

from toolboard.config import settings


def main():
    """CLI entry point."""
    uvicorn.run(
        "toolboard.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
