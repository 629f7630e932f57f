import sys
from typing import Union

from loguru import logger

from .config import load_config

LOG_FORMAT = "{line: >4}:{level}:\t{message}"


def configure_logging(
    level: Union[str, None] = None,
    fmt: str = LOG_FORMAT,
    sink=sys.stderr,
) -> int:
    """
    Replace all configured loguru handlers with a single one

    :param level: minimum level, defaults to the configured `log_level`
    :param fmt: loguru format string
    :param sink: where records go
    :returns: the id of the new handler
    """
    if level is None:
        level = load_config().log_level
    logger.remove()  # All configured handlers are removed
    return logger.add(sink, format=fmt, level=level)
