#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
The init command asks a few questions and writes:

* docker-compose.yml, to run the application locally with docker
* hidden.env, for the hidden environment variables, in docker and in harbor
* harbor-compose.yml, to run the application in harbor
* main.tf, to manage the harbor infrastructure

With -y / --yes, defaults are used and no question is asked.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.common.settings import HarborComposeSettings

from os import path

from harbor_compose.common.files import (
    SENSITIVE_FILES,
    can_write,
    ignore_sensitive_files,
    prompt_and_get_response,
)
from harbor_compose.common.names import get_random_name
from harbor_compose.compose.docker_compose import (
    DockerCompose,
    DockerComposeService,
)
from harbor_compose.compose.harbor_compose import ComposeShipment, HarborCompose
from harbor_compose.compose.transform import compose_to_shipment_environment
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.shipment.envvars import HEALTHCHECK, PORT
from harbor_compose.terraform import write_terraform_source

DEFAULT_BACKEND_IMAGE = "quay.io/turner/turner-defaultbackend:0.2.0"
SAMPLE_HIDDEN_ENV_FILE = "#FOO=bar\n"

MESSAGE_REPLICAS_MUST_BE_NUMBER = "replicas must be a number"
MESSAGE_ENABLE_MONITORING_TRUE_FALSE = "please enter true or false for enableMonitoring"
MESSAGE_TIMEOUT_VALID_NUMBER = (
    "please enter a valid number for healthcheckTimeoutSeconds"
)
MESSAGE_INTERVAL_VALID_NUMBER = (
    "please enter a valid number for healthcheckIntervalSeconds"
)
MESSAGE_INTERVAL_GREATER_THAN_TIMEOUT = (
    "healthcheckIntervalSeconds must be > healthcheckTimeoutSeconds"
)

TRUE_VALUES = ["1", "t", "true"]
FALSE_VALUES = ["0", "f", "false"]


class InitDefaults:
    registry = "quay.io/turner"
    container = "mss-harbor-app"
    tag = "0.1.0"
    public_port = "80"
    internal_port = "5000"
    healthcheck = "/health"
    env = "dev"
    barge = "digital-sandbox"
    replicas = "4"
    group = "mss"
    property = "turner"
    project = "turner"
    product = "turner"
    enable_monitoring = "true"
    healthcheck_timeout = "1"
    healthcheck_interval = "10"


def parse_bool(value: str, error_message: str) -> bool:
    """
    >>> parse_bool("True", "invalid")
    True
    >>> parse_bool("0", "invalid")
    False
    """
    if value.strip().lower() in TRUE_VALUES:
        return True
    if value.strip().lower() in FALSE_VALUES:
        return False
    raise ConfigurationError(error_message)


def parse_int(value: str, error_message: str) -> int:
    try:
        return int(value)
    except ValueError as error:
        raise ConfigurationError(error_message) from error


def write_hidden_env_file(hidden_env_file: str) -> None:
    if not can_write(hidden_env_file):
        return
    with open(hidden_env_file, "w") as hidden_fd:
        hidden_fd.write(SAMPLE_HIDDEN_ENV_FILE)
    ignore_sensitive_files([path.basename(hidden_env_file)] + SENSITIVE_FILES)


def get_init_docker_compose(
    random_name: str, hidden_env_file: str, use_defaults: bool = False
) -> DockerCompose:
    """
    Docker compose with a single service. Without a real image, the default backend image is used.
    """
    registry = InitDefaults.registry
    container = random_name if use_defaults else InitDefaults.container
    tag = InitDefaults.tag
    public_port = InitDefaults.public_port
    internal_port = InitDefaults.internal_port
    healthcheck = InitDefaults.healthcheck
    if not use_defaults:
        registry = prompt_and_get_response(
            "docker registry: (e.g., quay.io/turner) ", registry
        )
        container = prompt_and_get_response(
            "docker container name: (e.g., mss-harbor-app) ", random_name
        )
        tag = prompt_and_get_response("version tag: (e.g., 0.1.0) ", tag)
        public_port = prompt_and_get_response("public port: (e.g., 80) ", public_port)
        internal_port = prompt_and_get_response(
            "internal port: (e.g., 5000) ", internal_port
        )
        healthcheck = prompt_and_get_response(
            "health check: (e.g., /health) ", healthcheck
        )

    image = f"{registry}/{container}:{tag}"
    if image in [
        f"{InitDefaults.registry}/{InitDefaults.container}:{InitDefaults.tag}",
        f"{registry}/{random_name}:{tag}",
    ]:
        image = DEFAULT_BACKEND_IMAGE
    environment = {HEALTHCHECK: healthcheck}
    if image == DEFAULT_BACKEND_IMAGE:
        environment[PORT] = internal_port
    service = DockerComposeService(
        container,
        {
            "build": ".",
            "image": image,
            "ports": [f"{public_port}:{internal_port}"],
            "environment": environment,
            "env_file": [hidden_env_file],
        },
    )
    return DockerCompose(services={container: service})


def get_init_compose_shipment(
    container_names: list, use_defaults: bool = False, random_name: str = ""
) -> tuple:
    """
    :returns: the shipment name and its definition
    :rtype: tuple[str, ComposeShipment]
    """
    name = random_name
    env = InitDefaults.env
    barge = InitDefaults.barge
    replicas = InitDefaults.replicas
    group = InitDefaults.group
    enable_monitoring = InitDefaults.enable_monitoring
    timeout = InitDefaults.healthcheck_timeout
    interval = InitDefaults.healthcheck_interval
    shipment_property = InitDefaults.property
    project = InitDefaults.project
    product = InitDefaults.product
    if not use_defaults:
        name = prompt_and_get_response(
            "shipment name: (e.g., mss-harbor-app) ", random_name
        )
        env = prompt_and_get_response(
            "shipment environment: (dev, qa, prod, etc.) ", env
        )
        barge = prompt_and_get_response(
            "barge: (digital-sandbox, ent-prod, corp-sandbox, corp-prod, news, nba) ",
            barge,
        )
        replicas = prompt_and_get_response(
            "how many container instances: (e.g., 4) ", replicas
        )
        parse_int(replicas, MESSAGE_REPLICAS_MUST_BE_NUMBER)
        group = prompt_and_get_response("group (mss, news, nba, ams, etc.): ", group)
        enable_monitoring = prompt_and_get_response(
            "enable monitoring (true|false): ", enable_monitoring
        )
        parse_bool(enable_monitoring, MESSAGE_ENABLE_MONITORING_TRUE_FALSE)
        timeout = prompt_and_get_response(
            "healthcheck timeout seconds (1): ", timeout
        )
        parse_int(timeout, MESSAGE_TIMEOUT_VALID_NUMBER)
        interval = prompt_and_get_response(
            "healthcheck interval seconds (10): ", interval
        )
        parse_int(interval, MESSAGE_INTERVAL_VALID_NUMBER)
        if not int(interval) > int(timeout):
            raise ConfigurationError(MESSAGE_INTERVAL_GREATER_THAN_TIMEOUT)
        shipment_property = prompt_and_get_response(
            "property (turner.com, cnn.com, etc.): ", shipment_property
        )
        project = prompt_and_get_response("project: ", project)
        product = prompt_and_get_response("product: ", product)

    compose_shipment = ComposeShipment(
        {
            "env": env,
            "barge": barge,
            "containers": container_names,
            "replicas": parse_int(replicas, MESSAGE_REPLICAS_MUST_BE_NUMBER),
            "group": group,
            "property": shipment_property,
            "project": project,
            "product": product,
            "enableMonitoring": parse_bool(
                enable_monitoring, MESSAGE_ENABLE_MONITORING_TRUE_FALSE
            ),
            "healthcheckTimeoutSeconds": parse_int(
                timeout, MESSAGE_TIMEOUT_VALID_NUMBER
            ),
            "healthcheckIntervalSeconds": parse_int(
                interval, MESSAGE_INTERVAL_VALID_NUMBER
            ),
        }
    )
    return name, compose_shipment


def init(settings: HarborComposeSettings) -> None:
    write_hidden_env_file(settings.hidden_env_file)
    random_name = get_random_name()

    if not path.exists(settings.docker_compose_file):
        get_init_docker_compose(
            random_name, settings.hidden_env_file, settings.yes
        ).write(settings.docker_compose_file)
    docker_compose = settings.load_docker_compose()

    name, compose_shipment = get_init_compose_shipment(
        list(docker_compose.services.keys()), settings.yes, random_name
    )
    harbor_compose = HarborCompose({name: compose_shipment})
    if can_write(settings.harbor_compose_file):
        harbor_compose.write(settings.harbor_compose_file)

    shipment_env = compose_to_shipment_environment(
        name, compose_shipment, docker_compose, settings.hidden_env_file
    )
    write_terraform_source(shipment_env, harbor_compose, print_usage=False)
    print("done")
    print()
    print("use terraform plan/apply to manage your infrastructure")
    print(
        "use docker-compose build/push, harbor-compose up/deploy to manage your application"
    )
