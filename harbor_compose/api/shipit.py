#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Client to the shipit API, which stores the shipments, environments, containers and variables.
"""

from __future__ import annotations

from harbor_compose.api.client import HarborApiClient
from harbor_compose.common.logging import LOG
from harbor_compose.shipment import EC2_PROVIDER, EnvVar, ShipmentEnvironment

ENVIRONMENT_PATH = "/v1/shipment/{shipment}/environment/{env}"
CONTAINER_PATH = f"{ENVIRONMENT_PATH}/container/{{container}}"

ENV_VAR_CREATED = "created"
ENV_VAR_UPDATED = "updated"
ENV_VAR_UNCHANGED = "unchanged"


class ShipitClient(HarborApiClient):
    def get_shipment_environment(self, shipment: str, env: str):
        """
        :returns: the shipment environment, None if it does not exist
        :rtype: ShipmentEnvironment
        """
        response = self.request(
            "GET",
            self.uri(f"{ENVIRONMENT_PATH}/", shipment=shipment, env=env),
            allowed_codes=(404,),
        )
        if response.status_code == 404:
            return None
        return ShipmentEnvironment(self.json(response))

    def update_provider(self, shipment: str, env: str, payload: dict) -> None:
        LOG.debug(f"{shipment}::{env} - updating ec2 provider")
        self.request(
            "PUT",
            self.uri(
                f"{ENVIRONMENT_PATH}/provider/{EC2_PROVIDER}",
                shipment=shipment,
                env=env,
            ),
            payload=payload,
        )

    def update_shipment_environment(self, shipment: str, env: str, payload: dict) -> None:
        self.request(
            "PUT",
            self.uri(ENVIRONMENT_PATH, shipment=shipment, env=env),
            payload=payload,
        )

    def update_container(self, shipment: str, env: str, payload: dict) -> None:
        self.request(
            "PUT",
            self.uri(
                CONTAINER_PATH, shipment=shipment, env=env, container=payload["name"]
            ),
            payload=payload,
        )

    def update_port(self, shipment: str, env: str, container: str, payload: dict) -> None:
        self.request(
            "PUT",
            self.uri(
                f"{CONTAINER_PATH}/port/{{port}}",
                shipment=shipment,
                env=env,
                container=container,
                port=payload["name"],
            ),
            payload=payload,
        )

    def env_var_uri(
        self, shipment: str, env: str, name: str = None, container: str = None
    ) -> str:
        """
        URI of a variable when name is set, of the variables collection otherwise.
        Variables are at the environment level unless a container is given.
        """
        template = CONTAINER_PATH if container else ENVIRONMENT_PATH
        if name:
            return self.uri(
                f"{template}/envvar/{{name}}",
                shipment=shipment,
                env=env,
                container=container or "",
                name=name,
            )
        return self.uri(
            f"{template}/envvars/", shipment=shipment, env=env, container=container or ""
        )

    def get_env_var(self, shipment: str, env: str, name: str, container: str = None):
        """
        :returns: the variable, None if it does not exist
        :rtype: EnvVar
        """
        response = self.request(
            "GET",
            self.env_var_uri(shipment, env, name, container),
            allowed_codes=(404,),
        )
        if response.status_code == 404:
            return None
        return EnvVar.from_dict(self.json(response))

    def save_env_var(
        self, shipment: str, env: str, env_var: EnvVar, container: str = None
    ) -> str:
        """
        Creates the variable when it does not exist, updates it when its value or type changed.

        :param str shipment:
        :param str env:
        :param EnvVar env_var:
        :param str container: name of the container, None for an environment level variable
        :returns: what was done, created, updated or unchanged
        :rtype: str
        """
        existing = self.get_env_var(shipment, env, env_var.name, container)
        if existing is None:
            LOG.debug(f"{shipment}::{env} - creating {env_var}")
            self.request(
                "POST",
                self.env_var_uri(shipment, env, container=container),
                expected_codes=(201,),
                payload=env_var.to_dict(),
            )
            return ENV_VAR_CREATED
        if existing.value != env_var.value or existing.type != env_var.type:
            LOG.debug(f"{shipment}::{env} - updating {env_var}")
            self.request(
                "PUT",
                self.env_var_uri(shipment, env, env_var.name, container),
                payload=env_var.to_dict(),
            )
            return ENV_VAR_UPDATED
        LOG.debug(f"{shipment}::{env} - {env_var} unchanged, skipping")
        return ENV_VAR_UNCHANGED

    def create_shipment_environment(self, shipment_env: ShipmentEnvironment) -> bool:
        """
        Bulk creates a new shipment environment.

        :returns: True when the API reports no error
        :rtype: bool
        """
        payload = shipment_env.to_dict()
        payload["username"] = self.username
        payload["token"] = self.token
        response = self.request(
            "POST",
            self.uri("/v1/bulk/shipments"),
            expected_codes=(201,),
            allowed_codes=(200, 400, 409, 422, 500),
            payload=payload,
        )
        if response.status_code != 201:
            print(
                f"creating shipment was not successful: {response.text}\n"
                f"code: {response.status_code}"
            )
            return False
        body = self.json(response)
        return isinstance(body, dict) and body.get("errors") is False

    def delete_shipment_environment(self, shipment: str, env: str) -> None:
        self.request("DELETE", self.uri(ENVIRONMENT_PATH, shipment=shipment, env=env))
