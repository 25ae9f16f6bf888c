#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Loading and writing harbor-compose.yml files, which describe the shipments and environments
a docker-compose.yml file is deployed to.
"""

from __future__ import annotations

import yaml
from compose_x_common.compose_x_common import keyisset, set_else_none

from harbor_compose.common.logging import LOG
from harbor_compose.compose.docker_compose import load_yaml_file
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.specs import HARBOR_COMPOSE_SPEC, validate_content

HARBOR_COMPOSE_FILE = "harbor-compose.yml"


class ComposeShipment:
    """
    Desired state of a shipment environment. Optional settings left to None were not specified
    and are not changed on the platform.

    :ivar str env: name of the environment
    :ivar str barge:
    :ivar list containers: names of the docker-compose services part of the shipment
    :ivar int replicas:
    :ivar dict environment: environment level variables
    :ivar bool enable_monitoring:
    :ivar int healthcheck_timeout_seconds:
    :ivar int healthcheck_interval_seconds:
    :ivar bool ignore_image_version:
    """

    def __init__(self, definition: dict = None):
        definition = definition or {}
        self.env = set_else_none("env", definition, alt_value="")
        self.barge = set_else_none("barge", definition, alt_value="")
        self.containers = list(set_else_none("containers", definition, alt_value=[]))
        self.replicas = set_else_none("replicas", definition, alt_value=0)
        self.group = set_else_none("group", definition, alt_value="")
        self.property = set_else_none("property", definition, alt_value="")
        self.project = set_else_none("project", definition, alt_value="")
        self.product = set_else_none("product", definition, alt_value="")
        environment = set_else_none("environment", definition, alt_value={})
        self.environment = {
            key: stringify(value) for key, value in environment.items()
        }
        self.enable_monitoring = set_else_none(
            "enableMonitoring", definition, eval_bool=True
        )
        self.healthcheck_timeout_seconds = set_else_none(
            "healthcheckTimeoutSeconds", definition
        )
        self.healthcheck_interval_seconds = set_else_none(
            "healthcheckIntervalSeconds", definition
        )
        self.ignore_image_version = keyisset("ignoreImageVersion", definition)

    def __repr__(self):
        return self.env

    def to_dict(self) -> dict:
        """
        Only set values are rendered, so that an unset property stays unset once written back.
        """
        definition = {"env": self.env}
        if self.barge:
            definition["barge"] = self.barge
        if self.containers:
            definition["containers"] = list(self.containers)
        if self.replicas:
            definition["replicas"] = self.replicas
        if self.group:
            definition["group"] = self.group
        if self.property:
            definition["property"] = self.property
        if self.project:
            definition["project"] = self.project
        if self.product:
            definition["product"] = self.product
        if self.environment:
            definition["environment"] = dict(self.environment)
        if self.enable_monitoring is not None:
            definition["enableMonitoring"] = self.enable_monitoring
        if self.healthcheck_timeout_seconds is not None:
            definition["healthcheckTimeoutSeconds"] = self.healthcheck_timeout_seconds
        if self.healthcheck_interval_seconds is not None:
            definition[
                "healthcheckIntervalSeconds"
            ] = self.healthcheck_interval_seconds
        if self.ignore_image_version:
            definition["ignoreImageVersion"] = True
        return definition


def stringify(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class HarborCompose:
    """
    The shipments of a harbor-compose.yml file, in declaration order.
    """

    def __init__(self, shipments: dict = None):
        self.shipments = shipments if shipments is not None else {}

    @classmethod
    def from_content(cls, content: dict, file_name: str = None) -> HarborCompose:
        validate_content(content, HARBOR_COMPOSE_SPEC, file_name)
        shipments = {
            name: ComposeShipment(definition)
            for name, definition in content["shipments"].items()
        }
        return cls(shipments)

    @classmethod
    def from_file(cls, file_path: str) -> HarborCompose:
        return cls.from_content(load_yaml_file(file_path), file_path)

    @property
    def first_shipment(self) -> tuple:
        """
        :returns: name and definition of the first declared shipment
        :raises: ConfigurationError when the file holds no shipment
        """
        for name, shipment in self.shipments.items():
            return name, shipment
        raise ConfigurationError("No shipment defined in the harbor compose file")

    def to_dict(self) -> dict:
        return {
            "shipments": {
                name: shipment.to_dict() for name, shipment in self.shipments.items()
            }
        }

    def to_yaml(self) -> str:
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def write(self, file_path: str) -> None:
        LOG.debug(f"writing harbor-compose file to {file_path}")
        with open(file_path, "w") as compose_fd:
            compose_fd.write(self.to_yaml())
