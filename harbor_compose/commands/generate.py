#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
generate and terraform commands, which output files from an existing shipment environment:
compose files to build and run the application locally, build provider files for CI/CD and
terraform source to manage the shipment environment.

Examples::

    harbor-compose generate my-shipment dev
    harbor-compose generate my-shipment dev --build-provider circleciv2
    harbor-compose generate my-shipment dev --terraform
    harbor-compose terraform my-shipment dev
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.common.settings import HarborComposeSettings
    from harbor_compose.compose.docker_compose import DockerCompose
    from harbor_compose.compose.harbor_compose import HarborCompose
    from harbor_compose.shipment import ShipmentEnvironment

from os import path

from harbor_compose.build_providers import get_build_provider
from harbor_compose.commands import MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND
from harbor_compose.commands.login import authenticate
from harbor_compose.common.files import (
    SENSITIVE_FILES,
    can_write,
    ignore_sensitive_files,
    write_artifacts,
    write_env_file,
)
from harbor_compose.common.logging import LOG
from harbor_compose.compose.transform import (
    minimal_harbor_compose,
    shipment_to_docker_compose,
    shipment_to_harbor_compose,
)
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.terraform import write_terraform_source


def fetch_shipment_environment(settings: HarborComposeSettings):
    """
    Logs in and fetches the shipment environment given as positional arguments.

    :returns: the shipment environment, None if it does not exist
    :rtype: ShipmentEnvironment
    """
    if not settings.shipment or not settings.environment:
        raise ConfigurationError(
            f"at least 2 arguments are required. ex: harbor-compose {settings.command} my-shipment dev"
        )
    authenticate(settings)
    LOG.debug("fetching shipment...")
    shipment_env = settings.api.shipit.get_shipment_environment(
        settings.shipment, settings.environment
    )
    if shipment_env is None:
        print(MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND)
    return shipment_env


def write_build_artifacts(
    build_provider: str,
    docker_compose: DockerCompose,
    harbor_compose: HarborCompose,
    token: str,
) -> None:
    """
    Prepares the docker compose services for the build provider and writes its files.

    :raises: BuildProviderNotFound
    """
    provider = get_build_provider(build_provider)
    LOG.debug(f"using build provider {provider}")
    write_artifacts(provider.provide_artifacts(docker_compose, harbor_compose, token))


def write_compose_files(
    docker_compose: DockerCompose,
    harbor_compose: HarborCompose,
    hidden_env_vars: dict,
    docker_compose_file: str,
    harbor_compose_file: str,
    hidden_env_file: str,
) -> None:
    """
    Writes the compose files, and the hidden variables when there are some. Existing files
    are only overwritten once confirmed.
    """
    if can_write(docker_compose_file):
        docker_compose.write(docker_compose_file)
        print(f"wrote {docker_compose_file}")
    if can_write(harbor_compose_file):
        harbor_compose.write(harbor_compose_file)
        print(f"wrote {harbor_compose_file}")
    if hidden_env_vars:
        if can_write(hidden_env_file):
            write_env_file(hidden_env_vars, hidden_env_file)
            print(f"wrote {hidden_env_file}")
        ignore_sensitive_files([path.basename(hidden_env_file)] + SENSITIVE_FILES)


def generate(settings: HarborComposeSettings) -> None:
    shipment_env = fetch_shipment_environment(settings)
    if shipment_env is None:
        return
    harbor_compose = shipment_to_harbor_compose(shipment_env)
    docker_compose, hidden_env_vars = shipment_to_docker_compose(
        shipment_env, settings.hidden_env_file
    )
    if settings.build_provider:
        write_build_artifacts(
            settings.build_provider,
            docker_compose,
            harbor_compose,
            shipment_env.build_token,
        )
    if settings.terraform:
        write_terraform_source(shipment_env, harbor_compose, print_usage=True)
        harbor_compose = minimal_harbor_compose(harbor_compose)
    write_compose_files(
        docker_compose,
        harbor_compose,
        hidden_env_vars,
        settings.docker_compose_file,
        settings.harbor_compose_file,
        settings.hidden_env_file,
    )
    print("done")


def terraform(settings: HarborComposeSettings) -> None:
    """
    Outputs a main.tf file to start managing an existing shipment environment with terraform
    """
    shipment_env = fetch_shipment_environment(settings)
    if shipment_env is None:
        return
    write_terraform_source(
        shipment_env, shipment_to_harbor_compose(shipment_env), print_usage=True
    )
    print("done")
