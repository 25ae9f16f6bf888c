#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Implementation of the harbor-compose commands, and helpers they share.
"""

from __future__ import annotations

from os import environ

from harbor_compose.common import get_build_token_env_var
from harbor_compose.common.logging import LOG
from harbor_compose.exceptions import BuildTokenMissing

MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND = "shipment environment not found"


def get_build_token(shipment: str, environment: str) -> str:
    """
    Reads the build token of the shipment environment from SHIPMENT_ENV_TOKEN.

    :raises: BuildTokenMissing when the variable is not set
    """
    env_var_name = get_build_token_env_var(shipment, environment)
    LOG.debug(f"looking for environment variable named: {env_var_name}")
    token = environ.get(env_var_name)
    if not token:
        raise BuildTokenMissing(
            "A shipment/environment build token is required. "
            f"Please specify an environment variable named, {env_var_name}"
        )
    return token
