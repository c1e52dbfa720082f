import logging
import sys
from typing import Optional

LOG_FORMAT = "[%(asctime)s - %(name)s:%(lineno)d - %(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "restcraft-stderr"

logger: logging.Logger = logging.getLogger("restcraft")


def setup_logging(should_debug: Optional[bool] = None) -> None:
    """Sends restcraft logs to stderr at INFO, or DEBUG when ``should_debug``.

    The stderr handler is installed once; later calls only change the level.
    """
    logger.setLevel(logging.DEBUG if should_debug else logging.INFO)
    if any(handler.get_name() == _HANDLER_NAME for handler in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)
