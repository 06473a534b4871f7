"""Entry point: ``python -m isucondition``."""

import logging

import uvicorn

from isucondition.core.config import get_settings


def main():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("isucondition.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
