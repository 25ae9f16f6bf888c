#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
deploy and catalog commands. Both authenticate with the build token of the shipment environment,
read from the SHIPMENT_ENV_TOKEN environment variable, rather than with the user credentials.

Example (shipment = mss-app-web)::

    MSS_APP_WEB_DEV_TOKEN=xyz harbor-compose deploy
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.common.settings import HarborComposeSettings

from harbor_compose.commands import get_build_token
from harbor_compose.common.logging import LOG
from harbor_compose.compose.images import get_image_tag
from harbor_compose.shipment import EC2_PROVIDER


def deploy(settings: HarborComposeSettings) -> None:
    """
    Triggers an image deployment for all shipments and containers of the compose files.
    Images not cataloged yet get cataloged by the deployment.
    """
    api = settings.api
    docker_compose, harbor_compose = settings.load_compose_files()
    for shipment_name, compose_shipment in harbor_compose.shipments.items():
        env = settings.environment_override or compose_shipment.env
        print(f"deploying images for shipment: {shipment_name} {env} ...")
        build_token = get_build_token(shipment_name, env)
        for container_name in compose_shipment.containers:
            service = docker_compose.get_service(container_name)
            tag = get_image_tag(service.image)
            LOG.debug(f"deploying container: {container_name}")
            api.customs.deploy(
                shipment_name,
                env,
                build_token,
                {
                    "name": container_name,
                    "image": service.image,
                    "version": tag,
                    "catalog": not api.customs.is_cataloged(container_name, tag),
                },
                EC2_PROVIDER,
            )
        print("done")


def catalog(settings: HarborComposeSettings) -> None:
    """
    Adds the container images of the compose files to the Harbor catalog. Images already
    cataloged are skipped, so the command can safely run several times.
    """
    api = settings.api
    docker_compose, harbor_compose = settings.load_compose_files()
    for shipment_name, compose_shipment in harbor_compose.shipments.items():
        print(f"cataloging images for shipment: {shipment_name} ...")
        for container_name in compose_shipment.containers:
            service = docker_compose.get_service(container_name)
            tag = get_image_tag(service.image)
            if api.customs.is_cataloged(container_name, tag):
                LOG.debug(f"{container_name}:{tag} has already been cataloged")
                continue
            LOG.debug(f"cataloging container: {container_name}")
            api.customs.catalog(
                shipment_name,
                compose_shipment.env,
                get_build_token(shipment_name, compose_shipment.env),
                {"name": container_name, "image": service.image, "version": tag},
                EC2_PROVIDER,
            )
        print("done")
