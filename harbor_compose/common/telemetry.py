#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Usage metrics, posted in the background. Set HARBOR_TELEMETRY=0 to disable.
"""

from __future__ import annotations

import getpass
import platform
import threading
from os import environ

import requests

from harbor_compose import __version__
from harbor_compose.common.logging import LOG

TELEMETRY_ENV_VAR = "HARBOR_TELEMETRY"
METRIC_SOURCE = "harbor-compose"


def telemetry_enabled() -> bool:
    return environ.get(TELEMETRY_ENV_VAR) != "0"


def current_user() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return ""


def build_metric(action: str, error: str = None) -> dict:
    metric = {
        "source": METRIC_SOURCE,
        "action": action,
        "os": platform.system().lower(),
        "arch": platform.machine(),
        "user": current_user(),
        "version": __version__,
    }
    if error:
        metric["error"] = error
    return metric


def post_metric(endpoint: str, metric: dict, session=None) -> None:
    session = session or requests
    try:
        session.post(endpoint, json=metric, timeout=5)
    except requests.exceptions.RequestException as error:
        LOG.debug(f"error posting telemetry data: {error}")


def write_metric(config, action: str, error: str = None):
    """
    Posts a metric on a daemon thread so the command never waits for it.

    :param harbor_compose.common.config.HarborConfig config:
    :param str action: the command being run
    :param str error: error message, if the command failed
    :returns: the thread posting the metric, None when telemetry is disabled
    :rtype: threading.Thread
    """
    if not telemetry_enabled():
        return None
    LOG.debug("posting telemetry data")
    endpoint = f"{config.telemetry_uri}/v1/api/metric"
    thread = threading.Thread(
        target=post_metric, args=(endpoint, build_metric(action, error)), daemon=True
    )
    thread.start()
    return thread
