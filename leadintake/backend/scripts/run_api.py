from __future__ import annotations

import logging

import uvicorn

from app.config import settings


def _quiet_logging() -> None:
    # Root defaults
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s:%(name)s:%(message)s",
    )

    # Quiet the usual offenders
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def main() -> None:
    _quiet_logging()
    logging.getLogger(__name__).info("API starting env=%s", settings.ENV)
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, log_config=None)


if __name__ == "__main__":
    main()
