"""Log severities available to scripts, mapped onto the ``logging`` module."""

import logging
from typing import Dict, Tuple

logger = logging.getLogger(__name__)

NOTICE = 25
ALERT = 55
EMERG = 60

logging.addLevelName(NOTICE, "NOTICE")
logging.addLevelName(ALERT, "ALERT")
logging.addLevelName(EMERG, "EMERG")

LEVELS: Tuple[str, ...] = ("debug", "info", "notice", "warning", "err", "alert", "emerg", "crit")

LEVEL_NUMBERS: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "notice": NOTICE,
    "warning": logging.WARNING,
    "err": logging.ERROR,
    "alert": ALERT,
    "emerg": EMERG,
    "crit": logging.CRITICAL,
}


def send_log(level: str, message: str) -> None:
    if level not in LEVEL_NUMBERS:
        raise ValueError(f"Unknown log level '{level}'")
    logger.log(LEVEL_NUMBERS[level], message)


def configure_logging(level: str = "notice") -> None:
    logging.basicConfig(
        level=LEVEL_NUMBERS.get(level, NOTICE),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
