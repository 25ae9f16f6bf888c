#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Codeship (Pro) build provider
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.compose.harbor_compose import HarborCompose

from harbor_compose.build_providers.provider import BuildProvider
from harbor_compose.common import get_build_token_env_var
from harbor_compose.common.files import FileArtifact, ignore_sensitive_files
from harbor_compose.templates import render_template

CODESHIP_ENV_FILE = "codeship.env"
CODESHIP_AES_FILE = "codeship.aes"
SENSITIVE_FILES = [CODESHIP_ENV_FILE, CODESHIP_AES_FILE]

INSTRUCTIONS = """Now you just need to:

- add your quay.io registry credentials to codeship.env
- download your AES key from your codeship project and put it in codeship.aes
- encrypt your codeship.env by running 'jet encrypt codeship.env codeship.env.encrypted'
- check in codeship.env.encrypted but don't check in codeship.env"""


class Codeship(BuildProvider):
    name = "codeship"
    image_tag_suffix = "-${CI_BUILD_ID}"
    ci = True

    def get_artifacts(self, harbor_compose: HarborCompose, token: str) -> list:
        shipment_name, shipment = harbor_compose.first_shipment
        artifacts = [
            FileArtifact(
                "codeship-services.yml", render_template("codeship-services.yml.j2")
            ),
            FileArtifact("codeship-steps.yml", render_template("codeship-steps.yml.j2")),
            FileArtifact(
                CODESHIP_ENV_FILE,
                render_template(
                    "codeship.env.j2",
                    token_name=get_build_token_env_var(shipment_name, shipment.env),
                    token=token,
                ),
            ),
            FileArtifact(CODESHIP_AES_FILE, ""),
            FileArtifact(
                "docker-push.sh", render_template("docker-push.sh.j2"), file_mode=0o777
            ),
        ]
        ignore_sensitive_files(SENSITIVE_FILES)
        print()
        print(INSTRUCTIONS)
        print()
        return artifacts
