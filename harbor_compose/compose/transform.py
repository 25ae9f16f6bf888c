#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Transformations between a Harbor shipment environment and the docker-compose / harbor-compose
representations of it.
"""

from __future__ import annotations

from copy import deepcopy

from harbor_compose.common.files import parse_env_var_names
from harbor_compose.common.logging import LOG
from harbor_compose.compose.docker_compose import (
    DockerCompose,
    DockerComposeService,
    parse_port,
)
from harbor_compose.compose.harbor_compose import ComposeShipment, HarborCompose
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.shipment import (
    EC2_PROVIDER,
    Container,
    ShipmentEnvironment,
    get_primary_port,
)
from harbor_compose.shipment.envvars import (
    BARGE,
    CUSTOMER,
    HEALTHCHECK,
    PORT,
    PRODUCT,
    PROJECT,
    PROPERTY,
    EnvVarBuckets,
    copy_env_vars,
    env_var,
    env_var_hidden,
    find_env_var,
)

HIDDEN_ENV_FILE = "hidden.env"


def get_container_port(container):
    """
    The port PORT and HEALTHCHECK are set from: the primary port, else the first one.
    """
    if not container.ports:
        return None
    for port in container.ports:
        if port.primary:
            return port
    return container.ports[0]


def shipment_to_docker_compose(
    shipment_env: ShipmentEnvironment, hidden_env_file: str = HIDDEN_ENV_FILE
) -> tuple:
    """
    Renders a docker-compose service per container of the shipment environment.
    Shipment, environment and container variables are merged in that order. Hidden variables
    of all containers are collected together, to be written to hidden_env_file.

    :param ShipmentEnvironment shipment_env:
    :param str hidden_env_file: env_file set on services when hidden variables exist
    :returns: the docker compose and the hidden variables
    :rtype: tuple[DockerCompose, dict]
    """
    docker_compose = DockerCompose()
    hidden_env_vars = {}
    for container in shipment_env.containers:
        service = DockerComposeService(container.name, {"image": container.image})
        service.ports = [
            f"{port.public_port or port.value}:{port.value}"
            for port in container.ports
        ]
        environment = {}
        port = get_container_port(container)
        if port:
            environment[PORT] = str(port.value)
            environment[HEALTHCHECK] = port.healthcheck
        for env_vars in [
            shipment_env.parent_shipment.env_vars,
            shipment_env.env_vars,
            container.env_vars,
        ]:
            copy_env_vars(env_vars, environment, hidden=hidden_env_vars)
        service.environment = environment
        if hidden_env_vars:
            service.env_file = [hidden_env_file]
        docker_compose.services[container.name] = service
    return docker_compose, hidden_env_vars


def shipment_to_harbor_compose(shipment_env: ShipmentEnvironment) -> HarborCompose:
    """
    Renders the harbor-compose definition of a shipment environment.

    :raises: ProviderNotFound when the environment has no ec2 provider
    """
    provider = shipment_env.ec2_provider
    shipment_buckets = EnvVarBuckets(shipment_env.parent_shipment.env_vars)
    env_buckets = EnvVarBuckets(shipment_env.env_vars)
    special = {**shipment_buckets.special, **env_buckets.special}

    shipment = ComposeShipment()
    shipment.env = shipment_env.name
    shipment.group = shipment_env.parent_shipment.group
    shipment.enable_monitoring = shipment_env.enable_monitoring
    if shipment_env.containers:
        primary_port = get_primary_port(shipment_env.containers[0].ports)
        shipment.healthcheck_timeout_seconds = primary_port.healthcheck_timeout
        shipment.healthcheck_interval_seconds = primary_port.healthcheck_interval
    shipment.product = special.get(PRODUCT, "")
    shipment.project = special.get(PROJECT, "")
    shipment.property = special.get(PROPERTY, "")
    shipment.environment = env_buckets.log_shipping
    shipment.barge = provider.barge or special.get(BARGE, "")
    shipment.replicas = provider.replicas
    shipment.containers = [container.name for container in shipment_env.containers]
    return HarborCompose({shipment_env.parent_shipment.name: shipment})


def docker_service_env_vars(
    service: DockerComposeService, hidden_env_file: str = HIDDEN_ENV_FILE
) -> list:
    """
    Maps the variables of a docker-compose service to Harbor variables. Variables declared in
    an env_file named after hidden_env_file are hidden, all others are basic.

    :rtype: list[EnvVar]
    """
    environment = service.resolved_environment
    env_vars = []
    hidden_file = service.find_env_file(hidden_env_file)
    if hidden_file:
        for name in parse_env_var_names(service.env_file_path(hidden_file)):
            env_vars.append(env_var_hidden(name, environment.pop(name, "")))
    for name, value in environment.items():
        if name:
            env_vars.append(env_var(name, value))
    return env_vars


def compose_to_shipment_environment(
    shipment_name: str,
    compose_shipment: ComposeShipment,
    docker_compose: DockerCompose,
    hidden_env_file: str = HIDDEN_ENV_FILE,
) -> ShipmentEnvironment:
    """
    Builds the desired shipment environment from the harbor-compose and docker-compose files.
    The first port of each service becomes its PORT, primary for the first container only.

    :param str shipment_name:
    :param ComposeShipment compose_shipment:
    :param DockerCompose docker_compose:
    :param str hidden_env_file:
    :rtype: ShipmentEnvironment
    :raises: ConfigurationError when a container is not a service of the docker compose file
    """
    parent_env_vars = [
        env_var(CUSTOMER, compose_shipment.group),
        env_var(PROPERTY, compose_shipment.property),
        env_var(PROJECT, compose_shipment.project),
        env_var(PRODUCT, compose_shipment.product),
    ]
    shipment_env = ShipmentEnvironment(
        {
            "name": compose_shipment.env,
            "parentShipment": {
                "name": shipment_name,
                "group": compose_shipment.group,
            },
            "enableMonitoring": True
            if compose_shipment.enable_monitoring is None
            else compose_shipment.enable_monitoring,
            "providers": [
                {
                    "name": EC2_PROVIDER,
                    "barge": compose_shipment.barge,
                    "replicas": compose_shipment.replicas,
                }
            ],
        }
    )
    shipment_env.parent_shipment.env_vars = parent_env_vars
    shipment_env.env_vars = [
        env_var(name, value) for name, value in compose_shipment.environment.items()
    ]
    for index, container_name in enumerate(compose_shipment.containers):
        service = docker_compose.get_service(container_name)
        if not service.image:
            raise ConfigurationError(
                f"{container_name} - 'image' is required in docker compose file"
            )
        container_env_vars = docker_service_env_vars(service, hidden_env_file)
        ports = []
        if service.ports:
            public_port, value = parse_port(service.ports[0])
            healthcheck = find_env_var(HEALTHCHECK, container_env_vars)
            ports.append(
                {
                    "name": PORT,
                    "value": value,
                    "public_port": public_port,
                    "primary": index == 0,
                    "protocol": "http",
                    "external": False,
                    "healthcheck": healthcheck.value if healthcheck else "",
                    "healthcheck_timeout": compose_shipment.healthcheck_timeout_seconds,
                    "healthcheck_interval": compose_shipment.healthcheck_interval_seconds,
                }
            )
        else:
            LOG.warning(f"{shipment_name} - service {container_name} has no port")
        container = Container(
            {"name": container_name, "image": service.image, "ports": ports}
        )
        container.env_vars = container_env_vars
        shipment_env.containers.append(container)
    return shipment_env


def minimal_harbor_compose(harbor_compose: HarborCompose) -> HarborCompose:
    """
    Returns a copy of the harbor compose without the settings that terraform manages.
    """
    minimal = deepcopy(harbor_compose)
    for shipment in minimal.shipments.values():
        shipment.barge = ""
        shipment.enable_monitoring = None
        shipment.group = ""
        shipment.healthcheck_timeout_seconds = None
        shipment.healthcheck_interval_seconds = None
        shipment.ignore_image_version = False
        shipment.product = ""
        shipment.project = ""
        shipment.property = ""
        shipment.replicas = 0
    return minimal
