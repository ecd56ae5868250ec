"""
Run the Notes API with uvicorn: ``python -m notes_api``.

Host, port and log level come from the environment (see notes_api.config).
"""

import uvicorn

from notes_api.config import settings


def main() -> None:
    uvicorn.run(
        "notes_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
