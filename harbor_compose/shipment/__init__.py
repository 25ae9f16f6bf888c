#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Classes representing a Harbor shipment environment, as returned and accepted by the shipit API
"""

from __future__ import annotations

from compose_x_common.compose_x_common import keyisset, set_else_none

from harbor_compose.exceptions import ProviderNotFound

EC2_PROVIDER = "ec2"
BASIC = "basic"
HIDDEN = "hidden"


class EnvVar:
    """
    An environment variable, at shipment, environment, container or provider level
    """

    def __init__(self, name: str, value: str = "", var_type: str = BASIC):
        self.name = name
        self.value = value
        self.type = var_type

    def __repr__(self):
        return f"{self.name}({self.type})"

    def __eq__(self, other):
        if not isinstance(other, EnvVar):
            return NotImplemented
        return (self.name, self.value, self.type) == (
            other.name,
            other.value,
            other.type,
        )

    @classmethod
    def from_dict(cls, definition: dict) -> EnvVar:
        return cls(
            set_else_none("name", definition, alt_value=""),
            set_else_none("value", definition, alt_value=""),
            set_else_none("type", definition, alt_value=BASIC),
        )

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value, "type": self.type}


def env_vars_from_list(definitions: list) -> list:
    return [EnvVar.from_dict(env_var) for env_var in definitions or []]


class Port:
    """
    A container port. Exactly one port across a shipment environment is primary.

    :ivar int healthcheck_interval: seconds between health checks, None if not set
    :ivar int healthcheck_timeout: health check timeout in seconds, None if not set
    """

    def __init__(self, definition: dict = None):
        definition = definition or {}
        self.name = set_else_none("name", definition, alt_value="")
        self.value = int(set_else_none("value", definition, alt_value=0))
        self.protocol = set_else_none("protocol", definition, alt_value="http")
        self.healthcheck = set_else_none("healthcheck", definition, alt_value="")
        self.healthcheck_interval = set_else_none("healthcheck_interval", definition)
        self.healthcheck_timeout = set_else_none("healthcheck_timeout", definition)
        self.primary = keyisset("primary", definition)
        self.external = keyisset("external", definition)
        self.public_vip = keyisset("public_vip", definition)
        self.public_port = int(set_else_none("public_port", definition, alt_value=0))
        self.enable_proxy_protocol = keyisset("enable_proxy_protocol", definition)
        self.ssl_arn = set_else_none("ssl_arn", definition, alt_value="")
        self.ssl_management_type = set_else_none(
            "ssl_management_type", definition, alt_value=""
        )

    def __repr__(self):
        return f"{self.public_port}:{self.value}"

    def to_dict(self) -> dict:
        definition = {
            "name": self.name,
            "value": self.value,
            "protocol": self.protocol,
            "healthcheck": self.healthcheck,
            "primary": self.primary,
            "external": self.external,
            "public_vip": self.public_vip,
            "public_port": self.public_port,
            "enable_proxy_protocol": self.enable_proxy_protocol,
            "ssl_arn": self.ssl_arn,
            "ssl_management_type": self.ssl_management_type,
        }
        if self.healthcheck_interval is not None:
            definition["healthcheck_interval"] = self.healthcheck_interval
        if self.healthcheck_timeout is not None:
            definition["healthcheck_timeout"] = self.healthcheck_timeout
        return definition


def get_primary_port(ports: list) -> Port:
    """
    :returns: the primary port of the list, an empty Port when there is none
    :rtype: Port
    """
    for port in ports:
        if port.primary:
            return port
    return Port()


class Container:
    def __init__(self, definition: dict = None):
        definition = definition or {}
        self.name = set_else_none("name", definition, alt_value="")
        self.image = set_else_none("image", definition, alt_value="")
        self.env_vars = env_vars_from_list(set_else_none("envVars", definition))
        self.ports = [Port(port) for port in set_else_none("ports", definition, [])]

    def __repr__(self):
        return f"{self.name}({self.image})"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "image": self.image,
            "envVars": [env_var.to_dict() for env_var in self.env_vars],
            "ports": [port.to_dict() for port in self.ports],
        }


class Provider:
    def __init__(self, definition: dict = None):
        definition = definition or {}
        self.name = set_else_none("name", definition, alt_value="")
        self.replicas = int(set_else_none("replicas", definition, alt_value=0))
        self.barge = set_else_none("barge", definition, alt_value="")
        self.env_vars = env_vars_from_list(set_else_none("envVars", definition))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "replicas": self.replicas,
            "barge": self.barge,
            "envVars": [env_var.to_dict() for env_var in self.env_vars],
        }


class ParentShipment:
    def __init__(self, definition: dict = None):
        definition = definition or {}
        self.name = set_else_none("name", definition, alt_value="")
        self.group = set_else_none("group", definition, alt_value="")
        self.env_vars = env_vars_from_list(set_else_none("envVars", definition))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "group": self.group,
            "envVars": [env_var.to_dict() for env_var in self.env_vars],
        }


class ShipmentEnvironment:
    """
    A named environment of a shipment, with its variables, containers and providers.

    :ivar str name: name of the environment (dev, qa, prod...)
    :ivar ParentShipment parent_shipment:
    :ivar list[EnvVar] env_vars: environment level variables
    :ivar list[Container] containers:
    :ivar list[Provider] providers:
    :ivar bool enable_monitoring:
    :ivar str iam_role:
    :ivar str build_token:
    """

    def __init__(self, definition: dict = None):
        definition = definition or {}
        self.name = set_else_none("name", definition, alt_value="")
        self.parent_shipment = ParentShipment(
            set_else_none("parentShipment", definition, alt_value={})
        )
        self.env_vars = env_vars_from_list(set_else_none("envVars", definition))
        self.containers = [
            Container(container)
            for container in set_else_none("containers", definition, alt_value=[])
        ]
        self.providers = [
            Provider(provider)
            for provider in set_else_none("providers", definition, alt_value=[])
        ]
        self.enable_monitoring = set_else_none(
            "enableMonitoring", definition, alt_value=True, eval_bool=True
        )
        self.iam_role = set_else_none("iamRole", definition, alt_value="")
        self.build_token = set_else_none("buildToken", definition, alt_value="")

    def __repr__(self):
        return f"{self.parent_shipment.name}::{self.name}"

    @property
    def ec2_provider(self) -> Provider:
        """
        :raises: ProviderNotFound when the environment has no ec2 provider
        """
        for provider in self.providers:
            if provider.name == EC2_PROVIDER:
                return provider
        raise ProviderNotFound(f"{self} - ec2 provider is missing")

    def to_dict(self) -> dict:
        definition = {
            "name": self.name,
            "enableMonitoring": self.enable_monitoring,
            "envVars": [env_var.to_dict() for env_var in self.env_vars],
            "containers": [container.to_dict() for container in self.containers],
            "providers": [provider.to_dict() for provider in self.providers],
            "parentShipment": self.parent_shipment.to_dict(),
        }
        if self.iam_role:
            definition["iamRole"] = self.iam_role
        return definition
