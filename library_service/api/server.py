"""Run the book records API with uvicorn on the configured host and port."""

from __future__ import annotations

import uvicorn

from library_service.api.api_config import get_api_config
from library_service.common.settings import get_settings


def main() -> None:
    config = get_api_config()
    settings = get_settings()
    uvicorn.run(
        "library_service.api.app:app",
        host=config.host,
        port=config.port,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
