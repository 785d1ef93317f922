import logging

import uvicorn

from scancart.config import settings


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    uvicorn.run("scancart.web.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
