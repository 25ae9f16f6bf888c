#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from os import path

from pytest import fixture, raises

from harbor_compose.api.helmit import ShipmentEvent, ShipmentStatus
from harbor_compose.commands.ps import (
    EVENT_MESSAGE_LENGTH,
    filter_events,
    format_events,
    format_shipment_status,
    get_shipment_endpoint,
    get_shipment_primary_port,
)
from harbor_compose.compose.docker_compose import DockerCompose
from harbor_compose.compose.harbor_compose import ComposeShipment, HarborCompose
from harbor_compose.exceptions import ConfigurationError


@fixture()
def events(load_fixture):
    return [ShipmentEvent(event) for event in load_fixture("events.json")["events"]]


@fixture()
def compose_files(project_dir, monkeypatch):
    monkeypatch.delenv("TAG", raising=False)
    docker_compose = DockerCompose.from_file(path.join(project_dir, "docker-compose.yml"))
    harbor_compose = HarborCompose.from_file(path.join(project_dir, "harbor-compose.yml"))
    return docker_compose, harbor_compose


def test_shipment_endpoint():
    assert (
        get_shipment_endpoint("mss-my-app", "dev", 80)
        == "http://mss-my-app.dev.services.ec2.dmtio.net"
    )
    assert (
        get_shipment_endpoint("mss-my-app", "prod", "443")
        == "https://mss-my-app.prod.services.ec2.dmtio.net"
    )
    assert (
        get_shipment_endpoint("mss-my-app", "dev", 3000)
        == "http://mss-my-app.dev.services.ec2.dmtio.net:3000"
    )


def test_shipment_primary_port(compose_files):
    docker_compose, harbor_compose = compose_files
    _, compose_shipment = harbor_compose.first_shipment
    assert get_shipment_primary_port(docker_compose, compose_shipment) == 80
    with raises(ConfigurationError):
        get_shipment_primary_port(docker_compose, ComposeShipment({"env": "dev"}))


def test_filter_events(events):
    assert len(filter_events(events, "all")) == 3
    assert [event.reason for event in filter_events(events, "warning")] == [
        "Unhealthy"
    ]
    assert len(filter_events(events, "Normal")) == 2


def test_format_events(events):
    table = format_events(events)
    assert "TYPE" in table and "COUNT" in table
    long_message = events[0].message
    assert len(long_message) > EVENT_MESSAGE_LENGTH
    assert long_message[:EVENT_MESSAGE_LENGTH] in table
    assert long_message not in table

    full = format_events(events, full_message=True)
    assert f"Pulled - {long_message}" in full
    assert "TYPE" not in full


def test_format_shipment_status(compose_files, load_fixture):
    _, harbor_compose = compose_files
    name, compose_shipment = harbor_compose.first_shipment
    status = ShipmentStatus(load_fixture("status.json"))
    assert status.containers[0].started == "2022-03-01T10:00:00Z"
    assert status.containers[0].last_state == "terminated 2022-03-01T09:59:00Z"
    assert status.containers[1].started == "ContainerCreating"
    output = format_shipment_status(
        name,
        compose_shipment,
        status,
        "http://mss-my-app.dev.services.ec2.dmtio.net",
    )
    assert "Running" in output
    assert "0123456" in output
    assert "0123456789abcdef" not in output
    assert "http://mss-my-app.dev.services.ec2.dmtio.net" in output
    assert output.endswith("-----")
