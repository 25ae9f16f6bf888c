#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Client to the helmit API, which reports the running state of shipments
"""

from __future__ import annotations

from compose_x_common.compose_x_common import set_else_none

from harbor_compose.api.client import HarborApiClient

RUNNING = "running"
WAITING = "waiting"
TERMINATED = "terminated"


class ContainerStatus:
    """
    A running instance of a container

    :ivar str started: when the container started, or why it is waiting
    :ivar str last_state: set when the previous instance of the container terminated
    """

    def __init__(self, definition: dict):
        self.id = set_else_none("id", definition, alt_value="")
        self.image = set_else_none("image", definition, alt_value="")
        self.status = set_else_none("status", definition, alt_value="")
        self.restarts = int(set_else_none("restarts", definition, alt_value=0))
        state = set_else_none("state", definition, alt_value={})
        current = set_else_none(self.status, state, alt_value={})
        self.started = ""
        if self.status == RUNNING:
            self.started = set_else_none("startedAt", current, alt_value="")
        elif self.status == WAITING:
            self.started = set_else_none("reason", current, alt_value="")
        last_state = set_else_none("lastState", definition, alt_value={})
        terminated = set_else_none(TERMINATED, last_state)
        self.last_state = (
            f"{TERMINATED} {set_else_none('finishedAt', terminated, alt_value='')}".strip()
            if terminated
            else ""
        )

    def __repr__(self):
        return f"{self.short_id}({self.status})"

    @property
    def short_id(self) -> str:
        return self.id[:7]


class ShipmentStatus:
    def __init__(self, definition: dict):
        status = set_else_none("status", definition, alt_value={})
        self.phase = set_else_none("phase", status, alt_value="")
        self.containers = [
            ContainerStatus(container)
            for container in set_else_none("containers", status, alt_value=[])
        ]


class ShipmentEvent:
    """
    A container orchestration event. last_timestamp is ISO 8601, which sorts chronologically.
    """

    def __init__(self, definition: dict):
        self.type = set_else_none("type", definition, alt_value="")
        self.reason = set_else_none("reason", definition, alt_value="")
        self.message = set_else_none("message", definition, alt_value="")
        self.count = int(set_else_none("count", definition, alt_value=0))
        self.last_timestamp = set_else_none("lastTimestamp", definition, alt_value="")

    def __repr__(self):
        return f"{self.type}: {self.reason}"


class LogReplica:
    """
    A replica of a shipment with the logs of each of its containers

    :ivar list containers: dicts with the name, id, image and logs of each container
    """

    def __init__(self, definition: dict):
        self.host = set_else_none("host", definition, alt_value="")
        self.provider = set_else_none("provider", definition, alt_value="")
        self.containers = set_else_none("containers", definition, alt_value=[])


class HelmitClient(HarborApiClient):
    def get(self, template: str, barge: str, shipment: str, env: str):
        response = self.request(
            "GET",
            self.uri(template, barge=barge, shipment=shipment, env=env),
            authenticated=False,
        )
        return self.json(response)

    def get_logs(self, barge: str, shipment: str, env: str) -> list:
        """
        :returns: the replicas of the shipment with the logs of their containers
        :rtype: list[LogReplica]
        """
        body = self.get("/harbor/{barge}/{shipment}/{env}", barge, shipment, env)
        return [
            LogReplica(replica)
            for replica in set_else_none("replicas", body, alt_value=[])
        ]

    def get_status(self, barge: str, shipment: str, env: str) -> ShipmentStatus:
        return ShipmentStatus(
            self.get("/shipment/status/{barge}/{shipment}/{env}", barge, shipment, env)
        )

    def get_events(self, barge: str, shipment: str, env: str) -> list:
        """
        :returns: the events, most recent first
        :rtype: list[ShipmentEvent]
        """
        body = self.get(
            "/shipment/events/{barge}/{shipment}/{env}", barge, shipment, env
        )
        events = [
            ShipmentEvent(event)
            for event in set_else_none("events", body, alt_value=[])
        ]
        return sorted(events, key=lambda event: event.last_timestamp, reverse=True)
