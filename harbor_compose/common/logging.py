#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Logging for harbor-compose. DEBUG and INFO go to stdout, WARNING and above to stderr.
"""

from __future__ import annotations

import logging as logthings
import sys

APP_LOGGER_NAME = "harbor-compose"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class HarborFormatter(logthings.Formatter):
    default_format = "%(asctime)s [%(levelname)8s] %(message)s"
    debug_format = "%(asctime)s [%(levelname)8s] (%(filename)s.%(lineno)d) %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    def format(self, record) -> str:
        if record.levelno == logthings.DEBUG:
            return logthings.Formatter(self.debug_format, self.date_format).format(record)
        return logthings.Formatter(self.default_format, self.date_format).format(record)


class StdoutFilter(logthings.Filter):
    def filter(self, rec):
        return rec.levelno < logthings.WARNING


def setup_logging():
    app_logger = logthings.getLogger(APP_LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)

    stdout_handler = logthings.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(HarborFormatter())
    stdout_handler.addFilter(StdoutFilter())

    stderr_handler = logthings.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(HarborFormatter())
    stderr_handler.setLevel(logthings.WARNING)

    app_logger.addHandler(stdout_handler)
    app_logger.addHandler(stderr_handler)
    app_logger.setLevel(logthings.INFO)
    return app_logger


def set_log_level(level_name: str) -> bool:
    """
    :param str level_name: DEBUG, INFO, WARNING, ERROR or CRITICAL, in any case
    :returns: False when the level is not one of those
    """
    if level_name.upper() not in LOG_LEVELS:
        return False
    LOG.setLevel(level_name.upper())
    return True


LOG = setup_logging()
