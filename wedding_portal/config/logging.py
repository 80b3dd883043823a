import logging
import sys
from logging import StreamHandler

from wedding_portal.config.settings import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# every session store round trip is logged by these at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: int | None = None) -> None:
    if level is None:
        level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[StreamHandler(sys.stdout)])

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
