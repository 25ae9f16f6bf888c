#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Base class of the build providers.

A build provider rewrites the docker compose services for its build environment and returns
the files (CI configuration, scripts) that the build environment needs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.compose.docker_compose import DockerCompose
    from harbor_compose.compose.harbor_compose import HarborCompose

from harbor_compose.common import get_build_token_env_var

BUILD_CONTEXT = "."


class BuildProvider:
    """
    :cvar str name: name the provider is selected with
    :cvar str image_tag_suffix: appended to the image of every service, if set
    :cvar bool ci: the provider builds in a CI service, where ports and environment are not needed
    """

    name = None
    image_tag_suffix = None
    ci = False

    def __repr__(self):
        return self.name

    def set_services(self, docker_compose: DockerCompose) -> None:
        for service in docker_compose.services.values():
            service.build = BUILD_CONTEXT
            if self.image_tag_suffix:
                service.image += self.image_tag_suffix
            if self.ci:
                service.environment = {}
                service.ports = []

    def get_artifacts(self, harbor_compose: HarborCompose, token: str) -> list:
        return []

    def provide_artifacts(
        self, docker_compose: DockerCompose, harbor_compose: HarborCompose, token: str
    ) -> list:
        """
        Updates the docker compose services for the build and returns the files to write.

        :param DockerCompose docker_compose: modified in place
        :param HarborCompose harbor_compose:
        :param str token: build token of the shipment environment
        :rtype: list[harbor_compose.common.files.FileArtifact]
        """
        self.set_services(docker_compose)
        return self.get_artifacts(harbor_compose, token)


def print_build_token_variables(
    ci_name: str, harbor_compose: HarborCompose, token: str
) -> None:
    print()
    print(
        f"Be sure to supply the following environment variables in your {ci_name} build:\n"
        "DOCKER_USER (registry user)\n"
        "DOCKER_PASS (registry password)"
    )
    if harbor_compose is not None:
        for name, shipment in harbor_compose.shipments.items():
            print(f"{get_build_token_env_var(name, shipment.env)}={token}")
    print()
