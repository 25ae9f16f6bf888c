#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
ps, logs and events commands, which report the running state of the shipments.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.api.helmit import ShipmentStatus
    from harbor_compose.common.settings import HarborComposeSettings
    from harbor_compose.compose.docker_compose import DockerCompose
    from harbor_compose.compose.harbor_compose import ComposeShipment

from tabulate import tabulate

from harbor_compose.commands import MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND
from harbor_compose.commands.login import authenticate
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.shipment import EC2_PROVIDER

EVENT_MESSAGE_LENGTH = 60
LOGS_SEPARATOR = "-" * 110


def get_shipment_primary_port(
    docker_compose: DockerCompose, compose_shipment: ComposeShipment
) -> int:
    """
    :returns: the public port of the first container
    :raises: ConfigurationError when the shipment has no container or the container no port
    """
    for container_name in compose_shipment.containers:
        public_port, _ = docker_compose.get_service(container_name).first_port
        return public_port
    raise ConfigurationError("no shipment port found")


def get_shipment_endpoint(
    shipment: str, environment: str, port, provider: str = EC2_PROVIDER
) -> str:
    """
    >>> get_shipment_endpoint("my-app", "dev", 80)
    'http://my-app.dev.services.ec2.dmtio.net'
    >>> get_shipment_endpoint("my-app", "dev", 443)
    'https://my-app.dev.services.ec2.dmtio.net'
    >>> get_shipment_endpoint("my-app", "dev", 8080)
    'http://my-app.dev.services.ec2.dmtio.net:8080'
    """
    port = str(port)
    protocol = "https" if port == "443" else "http"
    port_suffix = "" if port in ["80", "443"] else f":{port}"
    return f"{protocol}://{shipment}.{environment}.services.{provider}.dmtio.net{port_suffix}"


def format_shipment_status(
    name: str,
    compose_shipment: ComposeShipment,
    shipment_status: ShipmentStatus,
    endpoint: str,
) -> str:
    summary = tabulate(
        [
            ["SHIPMENT:", name],
            ["ENVIRONMENT:", compose_shipment.env],
            ["ENDPOINT:", endpoint],
            ["STATUS:", shipment_status.phase],
            ["CONTAINERS:", len(compose_shipment.containers)],
            ["REPLICAS:", compose_shipment.replicas],
        ],
        tablefmt="plain",
    )
    containers = tabulate(
        [
            [
                container.short_id,
                container.image,
                container.status,
                container.started,
                container.restarts,
                container.last_state,
            ]
            for container in shipment_status.containers
        ],
        ["ID", "IMAGE", "STATUS", "STARTED", "RESTARTS", "LAST STATE"],
        tablefmt="plain",
    )
    return f"\n{summary}\n\n{containers}\n-----"


def ps(settings: HarborComposeSettings) -> None:
    docker_compose, harbor_compose = settings.load_compose_files()
    for shipment_name, compose_shipment in harbor_compose.shipments.items():
        shipment_status = settings.api.helmit.get_status(
            compose_shipment.barge, shipment_name, compose_shipment.env
        )
        endpoint = get_shipment_endpoint(
            shipment_name,
            compose_shipment.env,
            get_shipment_primary_port(docker_compose, compose_shipment),
        )
        print(
            format_shipment_status(
                shipment_name, compose_shipment, shipment_status, endpoint
            )
        )


def logs(settings: HarborComposeSettings) -> None:
    harbor_compose = settings.load_harbor_compose()
    for shipment_name, compose_shipment in harbor_compose.shipments.items():
        print(f"Logs For:  {shipment_name} {compose_shipment.env}")
        for replica in settings.api.helmit.get_logs(
            compose_shipment.barge, shipment_name, compose_shipment.env
        ):
            print(LOGS_SEPARATOR)
            print(f"--------------------------------------- Host {replica.host}")
            print(LOGS_SEPARATOR)
            for container in replica.containers:
                print(LOGS_SEPARATOR)
                print(
                    f"--------------------------------------- Logs For {container.get('name', '')}"
                )
                print(LOGS_SEPARATOR)
                for line in container.get("logs") or []:
                    print(line)


def filter_events(events: list, events_type: str) -> list:
    if events_type.lower() == "all":
        return list(events)
    return [event for event in events if event.type.lower() == events_type.lower()]


def format_events(events: list, full_message: bool = False) -> str:
    """
    :param list[harbor_compose.api.helmit.ShipmentEvent] events:
    :param bool full_message: when False, messages are truncated to 60 characters
    """
    if full_message:
        return "\n".join(f"{event.reason} - {event.message}\n" for event in events)
    return tabulate(
        [
            [
                event.type,
                event.reason,
                event.message[:EVENT_MESSAGE_LENGTH],
                event.last_timestamp,
                event.count,
            ]
            for event in events
        ],
        ["TYPE", "REASON", "MESSAGE", "TIME", "COUNT"],
        tablefmt="plain",
    )


def events(settings: HarborComposeSettings) -> None:
    authenticate(settings)
    api = settings.api
    shipment_environments, _ = settings.get_shipment_environments()
    for shipment_name, env in shipment_environments:
        shipment_env = api.shipit.get_shipment_environment(shipment_name, env)
        if shipment_env is None:
            print(MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND)
            return
        shipment_events = api.helmit.get_events(
            shipment_env.ec2_provider.barge, shipment_name, env
        )
        if not shipment_events:
            print("no events found")
            print()
            print(
                "note that events only occur around a deployment or an unhealthy application "
                "and eventually disappear when an app becomes healthy"
            )
            continue
        print()
        print(
            format_events(
                filter_events(shipment_events, settings.events_type),
                settings.full_message,
            )
        )
        print("-----")
