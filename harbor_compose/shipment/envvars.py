#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Classification of environment variables into special, log shipping, hidden and basic variables.

Special variables carry deployment metadata (customer, product...) and never end up in compose
files. Log shipping variables configure the platform log forwarding. Hidden variables are secrets
that go to an env file rather than in docker-compose.yml.
"""

from __future__ import annotations

from harbor_compose.shipment import BASIC, HIDDEN, EnvVar

CUSTOMER = "CUSTOMER"
PRODUCT = "PRODUCT"
PROJECT = "PROJECT"
PROPERTY = "PROPERTY"
BARGE = "BARGE"
RESTART = "HC_RESTART"

SHIP_LOGS = "SHIP_LOGS"
LOGS_ENDPOINT = "LOGS_ENDPOINT"
LOGS_ACCESS_KEY = "LOGS_ACCESS_KEY"
LOGS_SECRET_KEY = "LOGS_SECRET_KEY"
LOGS_DOMAIN_NAME = "LOGS_DOMAIN_NAME"
LOGS_REGION = "LOGS_REGION"
LOGS_QUEUE_NAME = "LOGS_QUEUE_NAME"

HEALTHCHECK = "HEALTHCHECK"
PORT = "PORT"

SPECIAL_ENV_VARS = (CUSTOMER, PRODUCT, PROJECT, PROPERTY, BARGE, RESTART)
LOG_SHIPPING_ENV_VARS = (
    SHIP_LOGS,
    LOGS_ENDPOINT,
    LOGS_ACCESS_KEY,
    LOGS_SECRET_KEY,
    LOGS_DOMAIN_NAME,
    LOGS_REGION,
    LOGS_QUEUE_NAME,
)


def is_special(name: str) -> bool:
    return name.upper() in SPECIAL_ENV_VARS


def is_log_shipping(name: str) -> bool:
    return name.upper() in LOG_SHIPPING_ENV_VARS


def escape_value(value: str) -> str:
    """docker-compose interpolates $, so a literal $ must be written $$"""
    return value.replace("$", "$$")


def env_var(name: str, value: str) -> EnvVar:
    return EnvVar(name, value, BASIC)


def env_var_hidden(name: str, value: str) -> EnvVar:
    return EnvVar(name, value, HIDDEN)


def find_env_var(name: str, env_vars: list):
    """
    :returns: the first variable with that exact name, None otherwise
    :rtype: EnvVar
    """
    for _env_var in env_vars:
        if _env_var.name == name:
            return _env_var
    return None


def copy_env_vars(
    source: list,
    destination: dict = None,
    special: dict = None,
    hidden: dict = None,
    log_shipping: dict = None,
) -> None:
    """
    Copies each variable of source into the bucket it belongs to. Buckets set to None are not
    collected. Values of all but special variables are escaped for docker-compose.

    :param list[EnvVar] source:
    :param dict destination: basic variables
    :param dict special: metadata variables, values unescaped
    :param dict hidden: variables of type hidden
    :param dict log_shipping: log shipping variables
    """
    for _env_var in source:
        if is_special(_env_var.name):
            if special is not None:
                special[_env_var.name] = _env_var.value
            continue
        value = escape_value(_env_var.value)
        if is_log_shipping(_env_var.name):
            if log_shipping is not None:
                log_shipping[_env_var.name] = value
        elif _env_var.type == HIDDEN:
            if hidden is not None:
                hidden[_env_var.name] = value
        elif destination is not None:
            destination[_env_var.name] = value


class EnvVarBuckets:
    """
    All four buckets for a list of variables. Each variable lands in exactly one bucket.
    """

    def __init__(self, source: list = None):
        self.basic = {}
        self.special = {}
        self.hidden = {}
        self.log_shipping = {}
        if source:
            self.add(source)

    def add(self, source: list) -> None:
        copy_env_vars(
            source,
            destination=self.basic,
            special=self.special,
            hidden=self.hidden,
            log_shipping=self.log_shipping,
        )
