#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Most commonly used functions and values shared across all modules.
"""

from __future__ import annotations

from datetime import datetime as dt


def get_build_token_env_var(shipment: str, environment: str) -> str:
    """
    Name of the environment variable holding the build token of a shipment environment

    >>> get_build_token_env_var("mss-my-app", "dev")
    'MSS_MY_APP_DEV_TOKEN'
    """
    return f"{shipment.upper().replace('-', '_')}_{environment.upper()}_TOKEN"


def get_timestamp() -> str:
    return dt.utcnow().strftime("%Y-%m-%dT%H:%M:%SZ")
