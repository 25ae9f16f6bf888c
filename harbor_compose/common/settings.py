#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module for the HarborComposeSettings class
"""

from __future__ import annotations

from compose_x_common.compose_x_common import keyisset, set_else_none

from harbor_compose.api import HarborApi
from harbor_compose.common.config import HarborConfig
from harbor_compose.common.logging import LOG
from harbor_compose.compose.docker_compose import DOCKER_COMPOSE_FILE, DockerCompose
from harbor_compose.compose.harbor_compose import HARBOR_COMPOSE_FILE, HarborCompose
from harbor_compose.compose.transform import HIDDEN_ENV_FILE
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.terraform.ecsfargate import DEFAULT_ROLE, ECS_FARGATE_PLATFORM

MESSAGE_SHIPMENT_ENVIRONMENT_FLAGS_REQUIRED = (
    "both --shipment and --environment flags are required"
)


class HarborComposeSettings:
    """
    Class to handle the settings of a harbor-compose invocation.

    :ivar HarborConfig config: the Harbor endpoints
    :ivar harbor_compose.common.credentials.Credentials credentials: set once logged in
    """

    command_arg = "command"
    subcommand_arg = "subcommand"
    verbose_arg = "verbose"
    docker_compose_file_arg = "DockerComposeFile"
    harbor_compose_file_arg = "HarborComposeFile"

    shipment_arg = "Shipment"
    environment_arg = "Environment"
    environment_override_arg = "EnvironmentOverride"
    hidden_env_file_arg = "HiddenEnvFile"
    env_file_arg = "EnvFile"
    delete_arg = "Delete"
    build_provider_arg = "BuildProvider"
    terraform_arg = "Terraform"
    yes_arg = "Yes"
    events_type_arg = "EventsType"
    full_message_arg = "FullMessage"

    platform_arg = "Platform"
    role_arg = "Role"
    account_id_arg = "AccountId"
    vpc_arg = "Vpc"
    private_subnets_arg = "PrivateSubnets"
    public_subnets_arg = "PublicSubnets"
    region_arg = "RegionName"

    up_arg = "up"
    down_arg = "down"
    deploy_arg = "deploy"
    catalog_arg = "catalog"
    restart_arg = "restart"
    ps_arg = "ps"
    logs_arg = "logs"
    events_arg = "events"
    env_arg = "env"
    buildtoken_arg = "buildtoken"
    generate_arg = "generate"
    terraform_cmd_arg = "terraform"
    init_arg = "init"
    migrate_arg = "migrate"
    login_arg = "login"
    logout_arg = "logout"
    version_arg = "version"

    default_events_type = "all"
    events_types = ["all", "normal", "warning"]

    active_commands = [
        {
            "name": up_arg,
            "help": "Creates or updates the shipment environments and starts them",
        },
        {
            "name": down_arg,
            "help": "Stops the shipment environments, or deletes them with --delete",
        },
        {
            "name": deploy_arg,
            "help": "Triggers an image deployment for all shipments and containers",
        },
        {
            "name": catalog_arg,
            "help": "Adds the container images to the Harbor catalog",
        },
        {"name": restart_arg, "help": "Restarts the shipment environments"},
    ]
    inspection_commands = [
        {"name": ps_arg, "help": "Lists shipment and container status"},
        {"name": logs_arg, "help": "Displays the output of the containers"},
        {"name": events_arg, "help": "Shows container orchestration events"},
        {"name": env_arg, "help": "Manages environment variables"},
        {"name": buildtoken_arg, "help": "Manages harbor build tokens"},
    ]
    generation_commands = [
        {
            "name": generate_arg,
            "help": "Generates compose files, build artifacts and terraform source from an existing shipment",
        },
        {
            "name": terraform_cmd_arg,
            "help": "Generates terraform source (main.tf) from an existing shipment",
        },
        {
            "name": init_arg,
            "help": "Interactively creates docker-compose.yml, harbor-compose.yml and main.tf files",
        },
        {
            "name": migrate_arg,
            "help": "Outputs the files to migrate a shipment environment to another platform",
        },
    ]
    neutral_commands = [
        {"name": login_arg, "help": "Logs in to Harbor"},
        {"name": logout_arg, "help": "Logs out of Harbor"},
        {"name": version_arg, "help": "harbor-compose version"},
    ]
    all_commands = (
        active_commands + inspection_commands + generation_commands + neutral_commands
    )

    def __init__(
        self, config: HarborConfig = None, session=None, home_dir: str = None, **kwargs
    ):
        """
        :param HarborConfig config: endpoints configuration, read from file when not set
        :param requests.Session session: HTTP session shared by the API clients
        :param str home_dir: directory of the credentials file, ~/.harbor when not set
        :param kwargs: the parsed command line arguments
        """
        self.command = set_else_none(self.command_arg, kwargs)
        self.subcommand = set_else_none(self.subcommand_arg, kwargs)
        self.verbose = keyisset(self.verbose_arg, kwargs)
        self.docker_compose_file = set_else_none(
            self.docker_compose_file_arg, kwargs, alt_value=DOCKER_COMPOSE_FILE
        )
        self.harbor_compose_file = set_else_none(
            self.harbor_compose_file_arg, kwargs, alt_value=HARBOR_COMPOSE_FILE
        )
        self.shipment = set_else_none(self.shipment_arg, kwargs)
        self.environment = set_else_none(self.environment_arg, kwargs)
        self.environment_override = set_else_none(self.environment_override_arg, kwargs)
        self.hidden_env_file = set_else_none(
            self.hidden_env_file_arg, kwargs, alt_value=HIDDEN_ENV_FILE
        )
        self.env_file = set_else_none(self.env_file_arg, kwargs)
        self.delete = keyisset(self.delete_arg, kwargs)
        self.build_provider = set_else_none(self.build_provider_arg, kwargs)
        self.terraform = keyisset(self.terraform_arg, kwargs)
        self.yes = keyisset(self.yes_arg, kwargs)
        self.events_type = set_else_none(
            self.events_type_arg, kwargs, alt_value=self.default_events_type
        )
        self.full_message = keyisset(self.full_message_arg, kwargs)

        self.platform = set_else_none(
            self.platform_arg, kwargs, alt_value=ECS_FARGATE_PLATFORM
        )
        self.role = set_else_none(self.role_arg, kwargs, alt_value=DEFAULT_ROLE)
        self.migration_overrides = {
            "account_id": set_else_none(self.account_id_arg, kwargs),
            "vpc": set_else_none(self.vpc_arg, kwargs),
            "private_subnets": set_else_none(self.private_subnets_arg, kwargs),
            "public_subnets": set_else_none(self.public_subnets_arg, kwargs),
            "region": set_else_none(self.region_arg, kwargs),
        }

        self.config = config if config is not None else HarborConfig()
        self.session = session
        self.home_dir = home_dir
        self.credentials = None
        self._api = None

    def __repr__(self):
        return f"{self.command}({self.docker_compose_file}, {self.harbor_compose_file})"

    @property
    def api(self) -> HarborApi:
        """
        The API clients, authenticated with the credentials in use when first accessed
        """
        if self._api is None:
            self._api = HarborApi(self.config, self.credentials, self.session)
        return self._api

    def set_credentials(self, credentials) -> None:
        self.credentials = credentials
        self._api = None

    def load_harbor_compose(self) -> HarborCompose:
        LOG.debug(f"Loading harbor compose file {self.harbor_compose_file}")
        return HarborCompose.from_file(self.harbor_compose_file)

    def load_docker_compose(self) -> DockerCompose:
        LOG.debug(f"Loading docker compose file {self.docker_compose_file}")
        return DockerCompose.from_file(self.docker_compose_file)

    def load_compose_files(self) -> tuple:
        """
        :rtype: tuple[DockerCompose, HarborCompose]
        """
        return self.load_docker_compose(), self.load_harbor_compose()

    def get_shipment_environments(self) -> tuple:
        """
        The shipment environments to work on: the one set with --shipment and --environment,
        otherwise all the shipments of the harbor compose file.

        :returns: the list of (shipment, environment) and the harbor compose, None when the
          shipment environment was set on the command line
        :rtype: tuple[list, HarborCompose]
        :raises: ConfigurationError when only one of --shipment and --environment is set
        """
        if self.shipment and self.environment:
            return [(self.shipment, self.environment)], None
        if self.shipment or self.environment:
            raise ConfigurationError(MESSAGE_SHIPMENT_ENVIRONMENT_FLAGS_REQUIRED)
        harbor_compose = self.load_harbor_compose()
        return [
            (name, shipment.env) for name, shipment in harbor_compose.shipments.items()
        ], harbor_compose
