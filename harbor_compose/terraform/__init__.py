#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Generation of terraform source code (main.tf) for the harbor terraform provider,
from an existing shipment environment.
"""

from __future__ import annotations

from os import environ

from harbor_compose.common.files import can_write
from harbor_compose.common.logging import LOG
from harbor_compose.compose.harbor_compose import HarborCompose
from harbor_compose.shipment import ShipmentEnvironment
from harbor_compose.shipment.envvars import (
    LOGS_ACCESS_KEY,
    LOGS_DOMAIN_NAME,
    LOGS_ENDPOINT,
    LOGS_QUEUE_NAME,
    LOGS_REGION,
    LOGS_SECRET_KEY,
    SHIP_LOGS,
    find_env_var,
)
from harbor_compose.templates import render_template

TERRAFORM_FILE = "main.tf"
DEFAULT_HEALTHCHECK_INTERVAL = 10
DEFAULT_HEALTHCHECK_TIMEOUT = 1
DEFAULT_AWS_PROFILE = "default"

LOG_SHIPPING_SETTINGS = {
    LOGS_ENDPOINT: "endpoint",
    LOGS_DOMAIN_NAME: "aws_elasticsearch_domain_name",
    LOGS_REGION: "aws_region",
    LOGS_ACCESS_KEY: "aws_access_key",
    LOGS_SECRET_KEY: "aws_secret_key",
    LOGS_QUEUE_NAME: "sqs_queue_name",
}


def get_terraform_port(port) -> dict:
    """
    Port settings as rendered in terraform, with the Harbor health check defaults

    :param harbor_compose.shipment.Port port:
    :rtype: dict
    """
    return {
        "healthcheck": port.healthcheck,
        "healthcheck_interval": port.healthcheck_interval
        if port.healthcheck_interval is not None
        else DEFAULT_HEALTHCHECK_INTERVAL,
        "healthcheck_timeout": port.healthcheck_timeout
        if port.healthcheck_timeout is not None
        else DEFAULT_HEALTHCHECK_TIMEOUT,
        "value": port.value,
        "protocol": port.protocol,
        "external": port.external,
        "public_vip": port.public_vip,
        "public_port": port.public_port,
        "enable_proxy_protocol": port.enable_proxy_protocol,
        "ssl_arn": port.ssl_arn,
        "ssl_management_type": port.ssl_management_type,
    }


def get_log_shipping(env_vars: list) -> dict:
    """
    Log shipping settings from the environment level variables. Log shipping is specified when
    SHIP_LOGS is set.

    :param list[harbor_compose.shipment.EnvVar] env_vars:
    :rtype: dict
    """
    log_shipping = {"is_specified": False, "provider": ""}
    log_shipping.update({setting: "" for setting in LOG_SHIPPING_SETTINGS.values()})
    ship_logs = find_env_var(SHIP_LOGS, env_vars)
    if ship_logs:
        log_shipping["is_specified"] = True
        log_shipping["provider"] = ship_logs.value
    for env_var_name, setting in LOG_SHIPPING_SETTINGS.items():
        env_var = find_env_var(env_var_name, env_vars)
        if env_var:
            log_shipping[setting] = env_var.value
    return log_shipping


def get_terraform_data(
    shipment_env: ShipmentEnvironment,
    harbor_compose: HarborCompose,
    role: bool = False,
    saml_user: str = "",
) -> dict:
    """
    Gathers the values rendered in main.tf.

    :param ShipmentEnvironment shipment_env:
    :param HarborCompose harbor_compose: the harbor compose of the shipment environment
    :param bool role: render an IAM role for the application
    :param str saml_user: user allowed to assume the IAM role
    :rtype: dict
    """
    compose_shipment = harbor_compose.shipments[shipment_env.parent_shipment.name]
    containers = []
    for container in shipment_env.containers:
        containers.append(
            {
                "name": container.name,
                "primary": any(port.primary for port in container.ports),
                "ports": [get_terraform_port(port) for port in container.ports],
            }
        )
    return {
        "shipment": shipment_env.parent_shipment.name,
        "env": shipment_env.name,
        "group": compose_shipment.group,
        "barge": compose_shipment.barge,
        "replicas": compose_shipment.replicas,
        "monitored": True
        if compose_shipment.enable_monitoring is None
        else compose_shipment.enable_monitoring,
        "containers": containers,
        "log_shipping": get_log_shipping(shipment_env.env_vars),
        "role": role,
        "aws_profile": environ.get("AWS_PROFILE") or DEFAULT_AWS_PROFILE,
        "saml_user": saml_user,
    }


def generate_terraform_source(data: dict) -> str:
    return render_template("main.tf.j2", **data)


def write_terraform_source(
    shipment_env: ShipmentEnvironment,
    harbor_compose: HarborCompose,
    print_usage: bool = True,
    role: bool = False,
    saml_user: str = "",
    file_path: str = TERRAFORM_FILE,
) -> bool:
    """
    Renders and writes main.tf, prompting if it already exists.

    :param bool print_usage: print the commands importing the existing state into terraform
    :returns: whether the file was written
    :rtype: bool
    """
    content = generate_terraform_source(
        get_terraform_data(shipment_env, harbor_compose, role, saml_user)
    )
    if not can_write(file_path):
        LOG.debug(f"Skipping {file_path}")
        return False
    with open(file_path, "w") as tf_fd:
        tf_fd.write(content)
    print(f"wrote {file_path}")
    if print_usage:
        shipment = shipment_env.parent_shipment.name
        print()
        print(
            "to start using terraform, run the following commands to import current state:"
        )
        print()
        print("terraform init")
        print(f"terraform import harbor_shipment.app {shipment}")
        print(
            f"terraform import harbor_shipment_env.{shipment_env.name} {shipment}::{shipment_env.name}"
        )
        print()
    return True
