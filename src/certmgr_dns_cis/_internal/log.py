"""Logging utilities for the challenge handler.

Records go to the root logger. When running as a Cloud Functions action
everything at `constants.ACTION_LOGGING_LEVEL` and above is written to
stderr, which the platform captures as the activation log. The command line
runner adjusts the level from ``-v``/``--quiet`` and can add a log file.

"""
import logging
import sys
from typing import Optional

from certmgr_dns_cis import constants

# Logging format
CLI_FMT = "%(message)s"
FILE_FMT = "%(asctime)s:%(levelname)s:%(name)s:%(message)s"


logger = logging.getLogger(__name__)


def get_level(verbose_count: int = 0, quiet: bool = False) -> int:
    """Terminal logging level for the given verbosity flags."""
    if quiet:
        return constants.QUIET_LOGGING_LEVEL
    return max(constants.DEFAULT_LOGGING_LEVEL - verbose_count * 10, logging.DEBUG)


def setup_logging(level: int, fmt: str = CLI_FMT, log_file: Optional[str] = None) -> None:
    """Setup logging on the root logger.

    Handlers installed by an earlier call are replaced, so calling this
    more than once in the same process does not duplicate output.

    :param int level: Level of the stream handler.
    :param str fmt: Format of the stream handler.
    :param str log_file: If set, also log everything at DEBUG to this file.

    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, '_certmgr_dns_cis', False):
            root_logger.removeHandler(handler)
            handler.close()

    root_logger.setLevel(logging.DEBUG)  # send all records to handlers

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter(fmt))
    stream_handler.setLevel(level)
    _install(root_logger, stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FMT))
        file_handler.setLevel(logging.DEBUG)
        _install(root_logger, file_handler)
        logger.debug('Saving debug log to %s', log_file)

    logger.debug('Root logging level set at %d', level)


def _install(root_logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, '_certmgr_dns_cis', True)
    root_logger.addHandler(handler)
