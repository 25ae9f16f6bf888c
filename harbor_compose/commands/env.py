#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
env list, push and pull commands, to manage the environment variables of shipment environments.

By default the shipment environments are the ones of harbor-compose.yml. The --shipment and
--environment flags select a single shipment environment instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.common.settings import HarborComposeSettings

from tabulate import tabulate

from harbor_compose.commands import MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND
from harbor_compose.commands.login import authenticate
from harbor_compose.common.files import output_env_file, output_file
from harbor_compose.common.logging import LOG
from harbor_compose.compose.docker_compose import DockerCompose
from harbor_compose.compose.transform import (
    docker_service_env_vars,
    shipment_to_docker_compose,
    shipment_to_harbor_compose,
)
from harbor_compose.shipment.envvars import env_var, is_special

LIST_ACTION = "list"
PUSH_ACTION = "push"
PULL_ACTION = "pull"


def format_env_vars(env_vars: list) -> str:
    """
    Table of the variables, special ones excluded.

    :param list[harbor_compose.shipment.EnvVar] env_vars:
    :rtype: str
    """
    return tabulate(
        [
            [_env_var.name, _env_var.value, _env_var.type]
            for _env_var in env_vars
            if not is_special(_env_var.name)
        ],
        ["NAME", "VALUE", "TYPE"],
        tablefmt="plain",
    )


def list_env_vars(settings: HarborComposeSettings) -> None:
    """
    Lists the environment and container level variables of the shipment environments
    """
    authenticate(settings)
    shipment_environments, _ = settings.get_shipment_environments()
    for shipment_name, env in shipment_environments:
        print(f"SHIPMENT: {shipment_name}")
        print(f"ENVIRONMENT: {env}")
        shipment_env = settings.api.shipit.get_shipment_environment(shipment_name, env)
        if shipment_env is None:
            print(MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND)
            return
        if any(not is_special(_env_var.name) for _env_var in shipment_env.env_vars):
            print()
            print(format_env_vars(shipment_env.env_vars))
        print()
        for container in shipment_env.containers:
            print(f"CONTAINER: {container.name}")
            print()
            print(format_env_vars(container.env_vars))
            print()


def push_env_vars(settings: HarborComposeSettings) -> None:
    """
    Uploads the variables docker-compose gives to each container, and the environment
    section of harbor-compose.yml. Does not trigger a deployment.
    """
    authenticate(settings)
    api = settings.api
    shipment_environments, harbor_compose = settings.get_shipment_environments()
    docker_compose = settings.load_docker_compose()
    for shipment_name, env in shipment_environments:
        shipment_env = api.shipit.get_shipment_environment(shipment_name, env)
        if shipment_env is None:
            print(MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND)
            return
        for container in shipment_env.containers:
            LOG.debug(f"processing container: {container.name}")
            service = docker_compose.get_service(container.name)
            for _env_var in docker_service_env_vars(service, settings.hidden_env_file):
                LOG.debug(f"processing {_env_var}")
                api.shipit.save_env_var(shipment_name, env, _env_var, container.name)
        if harbor_compose is not None:
            LOG.debug("looking for harbor-compose.yml envvars")
            compose_shipment = harbor_compose.shipments[shipment_name]
            for name, value in compose_shipment.environment.items():
                LOG.debug(f"processing {name}")
                api.shipit.save_env_var(shipment_name, env, env_var(name, value))
    print("done")
    print("run 'up' or 'deploy' for the environment variable changes to take effect")


def pull_env_vars(settings: HarborComposeSettings) -> None:
    """
    Writes the variables of the shipment environments to the compose files.

    Basic variables go to the environment section of docker-compose.yml, or to the --env-file
    file when set. Hidden variables go to the --hidden file. harbor-compose.yml gets the
    environment level variables.
    """
    authenticate(settings)
    api = settings.api
    shipment_environments, local_harbor_compose = settings.get_shipment_environments()
    pulled_docker_compose = DockerCompose()
    hidden_env_vars = {}
    basic_env_vars = {}
    for shipment_name, env in shipment_environments:
        shipment_env = api.shipit.get_shipment_environment(shipment_name, env)
        if shipment_env is None:
            print(MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND)
            return

        remote_harbor_compose = shipment_to_harbor_compose(shipment_env)
        remote_environment = remote_harbor_compose.shipments[shipment_name].environment
        if (
            local_harbor_compose is not None
            and remote_environment
            and shipment_name in local_harbor_compose.shipments
        ):
            LOG.debug(
                f"updating {settings.harbor_compose_file} with remote environment-level envvars"
            )
            local_harbor_compose.shipments[shipment_name].environment = dict(
                remote_environment
            )

        remote_docker_compose, remote_hidden_env_vars = shipment_to_docker_compose(
            shipment_env, settings.hidden_env_file
        )
        hidden_env_vars.update(remote_hidden_env_vars)
        for name, service in remote_docker_compose.services.items():
            if settings.env_file:
                basic_env_vars.update(service.environment)
                service.environment = {}
                service.env_file.append(settings.env_file)
            pulled_docker_compose.services[name] = service

    if local_harbor_compose is not None:
        output_file(local_harbor_compose.to_yaml(), settings.harbor_compose_file)
    output_file(pulled_docker_compose.to_yaml(), settings.docker_compose_file)
    output_env_file(hidden_env_vars, settings.hidden_env_file)
    output_env_file(basic_env_vars, settings.env_file)
    print("done")


ENV_ACTIONS = {
    LIST_ACTION: list_env_vars,
    "ls": list_env_vars,
    PUSH_ACTION: push_env_vars,
    PULL_ACTION: pull_env_vars,
}
