#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
The up command applies the docker/harbor compose files and brings the application up on Harbor:

* creates the shipment environments if needed
* updates container and environment level variables
* updates and catalogs the container images
* updates replicas, monitoring and health check timings
* triggers the shipment environments
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.api import HarborApi
    from harbor_compose.common.settings import HarborComposeSettings
    from harbor_compose.compose.docker_compose import DockerCompose
    from harbor_compose.compose.harbor_compose import ComposeShipment

from harbor_compose.commands.login import authenticate
from harbor_compose.common.logging import LOG
from harbor_compose.compose.images import get_image_tag
from harbor_compose.compose.transform import (
    compose_to_shipment_environment,
    docker_service_env_vars,
)
from harbor_compose.exceptions import ValidationError
from harbor_compose.shipment import ShipmentEnvironment, get_primary_port
from harbor_compose.shipment.envvars import BARGE, HEALTHCHECK, env_var, find_env_var

SUCCESS_MESSAGE = (
    "Please allow up to 5 minutes for Load Balancer and DNS changes to take effect."
)
MAX_REPLICAS = 1000

MESSAGE_ENVIRONMENT_UNDERSCORES = "environment can not contain underscores ('_')"
MESSAGE_BARGE_REQUIRED = "barge is required for a shipment"
MESSAGE_REPLICA_VALIDATION = "replicas must be between 1 and 1000"
MESSAGE_CONTAINER_REQUIRED = "at least 1 container is required"
MESSAGE_PORT_REQUIRED = "at least one port is required"
MESSAGE_HEALTHCHECK_REQUIRED = (
    "a container-level 'HEALTHCHECK' environment variable is required"
)
MESSAGE_CHANGE_BARGE = (
    "changing barges involves downtime. Please run the 'down' command first, "
    "then change barge and then run 'up' again"
)
MESSAGE_CHANGE_PORT = (
    "port changes involve downtime.  Please run the 'down --delete' command first"
)
MESSAGE_CHANGE_HEALTHCHECK = (
    "healthcheck changes involve downtime.  Please run the 'down --delete' command first"
)
MESSAGE_CHANGE_CONTAINER = (
    "container changes involve downtime.  Please run the 'down --delete' command first"
)


def validate_up(
    desired: ShipmentEnvironment, existing: ShipmentEnvironment = None
) -> None:
    """
    Checks the desired state is valid, and that applying it to the existing shipment
    environment does not require downtime.

    :param ShipmentEnvironment desired: built from the compose files
    :param ShipmentEnvironment existing: the current state, None if it does not exist yet
    :raises: ValidationError
    """
    if "_" in desired.name:
        raise ValidationError(MESSAGE_ENVIRONMENT_UNDERSCORES)
    provider = desired.ec2_provider
    if not provider.barge:
        raise ValidationError(MESSAGE_BARGE_REQUIRED)
    if not 0 <= provider.replicas <= MAX_REPLICAS:
        raise ValidationError(MESSAGE_REPLICA_VALIDATION)
    if not desired.containers:
        raise ValidationError(MESSAGE_CONTAINER_REQUIRED)
    for container in desired.containers:
        if not container.ports:
            raise ValidationError(f"{container.name} - {MESSAGE_PORT_REQUIRED}")
        if not find_env_var(HEALTHCHECK, container.env_vars):
            raise ValidationError(f"{container.name} - {MESSAGE_HEALTHCHECK_REQUIRED}")

    if existing is None:
        return
    existing_provider = existing.ec2_provider
    LOG.debug(f"existing barge: {existing_provider.barge}")
    LOG.debug(f"desired barge: {provider.barge}")
    if provider.barge != existing_provider.barge:
        raise ValidationError(MESSAGE_CHANGE_BARGE)
    existing_containers = {
        container.name: container for container in existing.containers
    }
    for desired_container in desired.containers:
        if desired_container.name not in existing_containers:
            raise ValidationError(MESSAGE_CHANGE_CONTAINER)
        existing_port = get_primary_port(
            existing_containers[desired_container.name].ports
        )
        desired_port = get_primary_port(desired_container.ports)
        if (existing_port.value, existing_port.public_port) != (
            desired_port.value,
            desired_port.public_port,
        ):
            raise ValidationError(MESSAGE_CHANGE_PORT)
        if existing_port.healthcheck != desired_port.healthcheck:
            raise ValidationError(MESSAGE_CHANGE_HEALTHCHECK)


def catalog_container(api: HarborApi, name: str, image: str) -> bool:
    """
    Catalogs the image version unless it already is.

    :returns: whether the image got cataloged
    :rtype: bool
    """
    tag = get_image_tag(image)
    if api.customs.is_cataloged(name, tag):
        LOG.debug(f"container {name} already cataloged")
        return False
    LOG.debug(f"cataloging container {name}")
    api.catalogit.catalog(name, image, tag)
    return True


def print_trigger_messages(messages: list) -> None:
    for message in messages:
        print(message)


def create_shipment(
    api: HarborApi,
    shipment_name: str,
    compose_shipment: ComposeShipment,
    docker_compose: DockerCompose,
    desired: ShipmentEnvironment,
) -> None:
    LOG.debug(f"{shipment_name}::{compose_shipment.env} - creating shipment environment")
    for container_name in compose_shipment.containers:
        service = docker_compose.get_service(container_name)
        catalog_container(api, container_name, service.image)
    api.shipit.create_shipment_environment(desired)
    success, messages = api.trigger.trigger(shipment_name, compose_shipment.env)
    print_trigger_messages(messages)
    if success and compose_shipment.replicas > 0:
        print(SUCCESS_MESSAGE)


def update_ports(
    api: HarborApi, existing: ShipmentEnvironment, compose_shipment: ComposeShipment
) -> None:
    """
    Updates the health check timings of the existing ports which differ from the
    harbor compose file ones.
    """
    timeout = compose_shipment.healthcheck_timeout_seconds
    interval = compose_shipment.healthcheck_interval_seconds
    for container in existing.containers:
        for port in container.ports:
            payload = {"name": port.name}
            if timeout is not None and timeout != port.healthcheck_timeout:
                payload["healthcheck_timeout"] = timeout
            if interval is not None and interval != port.healthcheck_interval:
                payload["healthcheck_interval"] = interval
            if len(payload) == 1:
                continue
            LOG.debug(f"updating port: {port.name} on container: {container.name}")
            api.shipit.update_port(
                existing.parent_shipment.name, existing.name, container.name, payload
            )


def update_shipment(
    api: HarborApi,
    existing: ShipmentEnvironment,
    shipment_name: str,
    compose_shipment: ComposeShipment,
    docker_compose: DockerCompose,
    hidden_env_file: str,
) -> None:
    env = compose_shipment.env
    existing_containers = {
        container.name: container for container in existing.containers
    }
    for container_name in compose_shipment.containers:
        LOG.debug(f"processing container: {container_name}")
        service = docker_compose.get_service(container_name)
        if not compose_shipment.ignore_image_version:
            catalog_container(api, container_name, service.image)
            if container_name not in existing_containers:
                raise ValidationError(
                    "Cannot find container. Adding new containers is not supported"
                )
            if service.image != existing_containers[container_name].image:
                api.shipit.update_container(
                    shipment_name,
                    existing.name,
                    {"name": container_name, "image": service.image},
                )
            else:
                LOG.debug("image has not changed, skipping")
        for _env_var in docker_service_env_vars(service, hidden_env_file):
            LOG.debug(f"processing {_env_var}")
            api.shipit.save_env_var(shipment_name, env, _env_var, container_name)

    environment = dict(compose_shipment.environment)
    if compose_shipment.barge:
        environment[BARGE] = compose_shipment.barge
    for name, value in environment.items():
        LOG.debug(f"processing {name}")
        api.shipit.save_env_var(shipment_name, env, env_var(name, value))

    update_ports(api, existing, compose_shipment)

    if (
        compose_shipment.enable_monitoring is not None
        and compose_shipment.enable_monitoring != existing.enable_monitoring
    ):
        LOG.debug("updating shipment/environment configuration (enableMonitoring)")
        api.shipit.update_shipment_environment(
            shipment_name, env, {"enableMonitoring": compose_shipment.enable_monitoring}
        )

    provider = existing.ec2_provider
    if compose_shipment.replicas != provider.replicas:
        api.shipit.update_provider(
            shipment_name,
            existing.name,
            {"name": provider.name, "replicas": compose_shipment.replicas},
        )

    _, messages = api.trigger.trigger(shipment_name, env)
    print_trigger_messages(messages)
    if provider.replicas == 0:
        print(SUCCESS_MESSAGE)


def up(settings: HarborComposeSettings) -> None:
    authenticate(settings)
    api = settings.api
    docker_compose, harbor_compose = settings.load_compose_files()
    for shipment_name, compose_shipment in harbor_compose.shipments.items():
        LOG.debug(f"processing shipment: {shipment_name}/{compose_shipment.env}")
        existing = api.shipit.get_shipment_environment(
            shipment_name, compose_shipment.env
        )
        desired = compose_to_shipment_environment(
            shipment_name, compose_shipment, docker_compose, settings.hidden_env_file
        )
        validate_up(desired, existing)
        print(f"Starting {shipment_name} {compose_shipment.env} ...")
        if existing is None:
            LOG.debug("shipment environment not found")
            create_shipment(
                api, shipment_name, compose_shipment, docker_compose, desired
            )
        else:
            update_shipment(
                api,
                existing,
                shipment_name,
                compose_shipment,
                docker_compose,
                settings.hidden_env_file,
            )
        print("done")
