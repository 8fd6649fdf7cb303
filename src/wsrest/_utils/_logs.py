import logging
import sys
from typing import TYPE_CHECKING

from .constants import LOGGER_NAME

if TYPE_CHECKING:
    from .._config import WSLogLevel

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(log_level: "WSLogLevel") -> None:
    """Attach a console handler to the ``wsrest`` logger.

    The handler is added once per process. Calls are logged at INFO, so the
    logger level is lowered to INFO whenever call logging is switched on.
    """
    from .._config import WSLogLevel

    if log_level == WSLogLevel.OFF:
        return

    if not any(getattr(h, "_wsrest_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
        handler._wsrest_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    if logger.level == logging.NOTSET or logger.level > logging.INFO:
        logger.setLevel(logging.INFO)
