#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Circle CI build providers, for the 1.0 (circle.yml) and 2.0 (.circleci/config.yml) formats
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.compose.harbor_compose import HarborCompose

from harbor_compose.build_providers.provider import (
    BuildProvider,
    print_build_token_variables,
)
from harbor_compose.common.files import FileArtifact
from harbor_compose.templates import render_template


class CircleCIv1(BuildProvider):
    name = "circleciv1"
    image_tag_suffix = "-${CIRCLE_BUILD_NUM}"
    ci = True
    config_file = "circle.yml"
    template = "circle.yml.j2"

    def get_artifacts(self, harbor_compose: HarborCompose, token: str) -> list:
        artifacts = [FileArtifact(self.config_file, render_template(self.template))]
        print_build_token_variables("Circle CI", harbor_compose, token)
        return artifacts


class CircleCIv2(CircleCIv1):
    name = "circleciv2"
    config_file = ".circleci/config.yml"
    template = "circleci-config.yml.j2"
