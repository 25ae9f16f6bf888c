#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Endpoints configuration, read from ~/.harbor/config or the file pointed at by HC_CONFIG
"""

from __future__ import annotations

import json
from os import environ, path

from compose_x_common.compose_x_common import keyisset

from harbor_compose.common.logging import LOG

HARBOR_HOME_DIR = path.join(path.expanduser("~"), ".harbor")
CONFIG_ENV_VAR = "HC_CONFIG"


class HarborConfig:
    """
    Holds the URIs of the Harbor services. Keys missing from the configuration file
    fall back to the default endpoints.

    :ivar str config_path: the file the configuration was read from
    """

    shipit_key = "shipit"
    catalogit_key = "catalogit"
    trigger_key = "trigger"
    auth_key = "authn"
    helmit_key = "helmit"
    harbor_key = "harbor"
    customs_key = "customs"
    barges_key = "barges"
    telemetry_key = "telemetry"
    terraform_template_key = "terraformTemplate"

    defaults = {
        shipit_key: "http://shipit.services.dmtio.net",
        catalogit_key: "http://catalogit.services.dmtio.net",
        trigger_key: "http://harbor-trigger.services.dmtio.net",
        auth_key: "https://auth.services.dmtio.net",
        helmit_key: "http://helmit.services.dmtio.net",
        harbor_key: "http://harbor.services.dmtio.net",
        customs_key: "https://customs.services.dmtio.net",
        barges_key: "http://barges.services.dmtio.net",
        telemetry_key: "http://telemetry.services.dmtio.net",
        terraform_template_key: "https://github.com/turnerlabs/terraform-ecs-fargate/archive/master.zip",
    }

    def __init__(self, config_path: str = None, definition: dict = None):
        if config_path is None:
            config_path = environ.get(
                CONFIG_ENV_VAR, path.join(HARBOR_HOME_DIR, "config")
            )
        self.config_path = config_path
        if definition is None:
            definition = self.read_config_file(config_path)
        self.definition = definition

    @staticmethod
    def read_config_file(config_path: str) -> dict:
        """
        Reads the JSON configuration file. A missing or invalid file yields an empty configuration.

        :param str config_path:
        :rtype: dict
        """
        LOG.debug(f"Reading configuration from {config_path}")
        try:
            with open(config_path) as config_fd:
                content = json.loads(config_fd.read())
        except FileNotFoundError:
            LOG.debug(f"{config_path} not found. Using default endpoints")
            return {}
        except json.JSONDecodeError:
            LOG.debug(f"{config_path} is not valid JSON. Using default endpoints")
            return {}
        if not isinstance(content, dict):
            return {}
        return content

    def get(self, key: str) -> str:
        if keyisset(key, self.definition):
            return self.definition[key].rstrip("/")
        return self.defaults[key]

    @property
    def shipit_uri(self) -> str:
        return self.get(self.shipit_key)

    @property
    def catalogit_uri(self) -> str:
        return self.get(self.catalogit_key)

    @property
    def trigger_uri(self) -> str:
        return self.get(self.trigger_key)

    @property
    def auth_uri(self) -> str:
        return self.get(self.auth_key)

    @property
    def helmit_uri(self) -> str:
        return self.get(self.helmit_key)

    @property
    def harbor_uri(self) -> str:
        return self.get(self.harbor_key)

    @property
    def customs_uri(self) -> str:
        return self.get(self.customs_key)

    @property
    def barges_uri(self) -> str:
        return self.get(self.barges_key)

    @property
    def telemetry_uri(self) -> str:
        return self.get(self.telemetry_key)

    @property
    def terraform_template_uri(self) -> str:
        return self.get(self.terraform_template_key)
