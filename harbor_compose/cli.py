#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Console script for harbor-compose.
"""

import argparse
import sys

from harbor_compose import __version__
from harbor_compose.commands.buildtoken import BUILDTOKEN_ACTIONS
from harbor_compose.commands.deploy import catalog, deploy
from harbor_compose.commands.down import down
from harbor_compose.commands.env import ENV_ACTIONS
from harbor_compose.commands.generate import generate, terraform
from harbor_compose.commands.init import init
from harbor_compose.commands.login import login, logout
from harbor_compose.commands.migrate import migrate
from harbor_compose.commands.ps import events, logs, ps
from harbor_compose.commands.restart import restart
from harbor_compose.commands.up import up
from harbor_compose.common.logging import LOG, set_log_level
from harbor_compose.common.settings import HarborComposeSettings
from harbor_compose.common.telemetry import write_metric
from harbor_compose.exceptions import HarborComposeException


class ArgparseHelper(argparse._HelpAction):
    """
    Used to help print top level '--help' arguments from argparse
    when used with subparsers
    """

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help()
        print()
        subparsers_actions = [
            action
            for action in parser._actions
            if isinstance(action, argparse._SubParsersAction)
        ]
        for subparsers_action in subparsers_actions:
            for choice, subparser in list(subparsers_action.choices.items()):
                if choice in [
                    cmd["name"] for cmd in HarborComposeSettings.active_commands
                ] or choice in [
                    cmd["name"] for cmd in HarborComposeSettings.generation_commands
                ]:
                    print(f"Command '{choice}'")
                    print(subparser.format_usage())
        parser.exit()


def print_version(settings: HarborComposeSettings) -> None:
    print(__version__)


def add_shipment_environment_flags(parser) -> None:
    parser.add_argument(
        "-s",
        "--shipment",
        dest=HarborComposeSettings.shipment_arg,
        required=False,
        help="shipment name, instead of the shipments of harbor-compose.yml",
    )
    parser.add_argument(
        "-e",
        "--environment",
        dest=HarborComposeSettings.environment_arg,
        required=False,
        help="environment name, instead of the environments of harbor-compose.yml",
    )


def add_shipment_environment_args(parser) -> None:
    parser.add_argument(
        HarborComposeSettings.shipment_arg,
        nargs="?",
        help="shipment name",
    )
    parser.add_argument(
        HarborComposeSettings.environment_arg,
        nargs="?",
        help="environment name",
    )


def add_build_provider_flag(parser) -> None:
    parser.add_argument(
        "-b",
        "--build-provider",
        dest=HarborComposeSettings.build_provider_arg,
        required=False,
        help="generate build provider-specific files that allow you to build Docker images and do CI/CD",
    )


def add_env_parser(cmd_parsers, command: dict) -> None:
    env_parser = cmd_parsers.add_parser(name=command["name"], help=command["help"])
    env_cmd_parsers = env_parser.add_subparsers(
        dest=HarborComposeSettings.subcommand_arg, help="Action to execute."
    )
    env_cmd_parsers.required = True
    env_files_parser = argparse.ArgumentParser(add_help=False)
    add_shipment_environment_flags(env_files_parser)
    env_files_parser.add_argument(
        "--hidden",
        dest=HarborComposeSettings.hidden_env_file_arg,
        required=False,
        help="Path to the env file holding the hidden environment variables",
    )
    env_files_parser.add_argument(
        "--env-file",
        dest=HarborComposeSettings.env_file_arg,
        required=False,
        help="Path to the env file to pull the basic environment variables to",
    )
    env_cmd_parsers.add_parser(
        name="list",
        aliases=["ls"],
        help="Lists the environment variables of the shipment environments",
        parents=[env_files_parser],
    )
    env_cmd_parsers.add_parser(
        name="push",
        help="Uploads the local environment variables. No deployment is triggered",
        parents=[env_files_parser],
    )
    env_cmd_parsers.add_parser(
        name="pull",
        help="Writes the remote environment variables to the local compose and env files",
        parents=[env_files_parser],
    )


def main_parser():
    """
    Console script for harbor-compose.
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "-h",
        "--help",
        action=ArgparseHelper,
        help="show this help message and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        dest=HarborComposeSettings.verbose_arg,
        action="store_true",
        default=False,
        help="verbose output",
    )
    parser.add_argument(
        "-f",
        "--file",
        dest=HarborComposeSettings.docker_compose_file_arg,
        required=False,
        help="Path to the Docker compose file. Defaults to docker-compose.yml",
    )
    parser.add_argument(
        "-c",
        "--harbor-file",
        dest=HarborComposeSettings.harbor_compose_file_arg,
        required=False,
        help="Path to the Harbor compose file. Defaults to harbor-compose.yml",
    )
    parser.add_argument(
        "--loglevel", type=str, help="Log level. Defaults to INFO", required=False
    )

    cmd_parsers = parser.add_subparsers(
        dest=HarborComposeSettings.command_arg, help="Command to execute."
    )
    for command in HarborComposeSettings.active_commands:
        cmd_parser = cmd_parsers.add_parser(name=command["name"], help=command["help"])
        if command["name"] == HarborComposeSettings.down_arg:
            cmd_parser.add_argument(
                "--delete",
                dest=HarborComposeSettings.delete_arg,
                action="store_true",
                default=False,
                help="delete the shipment environments",
            )
        elif command["name"] == HarborComposeSettings.deploy_arg:
            cmd_parser.add_argument(
                "-e",
                "--env",
                dest=HarborComposeSettings.environment_override_arg,
                required=False,
                help="deploy to this environment instead of the one of harbor-compose.yml",
            )

    for command in HarborComposeSettings.inspection_commands:
        if command["name"] == HarborComposeSettings.env_arg:
            add_env_parser(cmd_parsers, command)
            continue
        cmd_parser = cmd_parsers.add_parser(name=command["name"], help=command["help"])
        if command["name"] == HarborComposeSettings.events_arg:
            add_shipment_environment_flags(cmd_parser)
            cmd_parser.add_argument(
                "-t",
                "--type",
                dest=HarborComposeSettings.events_type_arg,
                choices=HarborComposeSettings.events_types,
                default=HarborComposeSettings.default_events_type,
                type=str.lower,
                help="filter events by type",
            )
            cmd_parser.add_argument(
                "-m",
                "--message",
                dest=HarborComposeSettings.full_message_arg,
                action="store_true",
                default=False,
                help="show the full event messages",
            )
        elif command["name"] == HarborComposeSettings.buildtoken_arg:
            buildtoken_cmd_parsers = cmd_parser.add_subparsers(
                dest=HarborComposeSettings.subcommand_arg, help="Action to execute."
            )
            buildtoken_cmd_parsers.required = True
            buildtoken_cmd_parsers.add_parser(
                name="list",
                aliases=["ls"],
                help="Lists the build tokens of the shipments of harbor-compose.yml",
            )

    for command in HarborComposeSettings.generation_commands:
        cmd_parser = cmd_parsers.add_parser(name=command["name"], help=command["help"])
        if command["name"] == HarborComposeSettings.init_arg:
            cmd_parser.add_argument(
                "-y",
                "--yes",
                dest=HarborComposeSettings.yes_arg,
                action="store_true",
                default=False,
                help="use the defaults instead of asking questions",
            )
            continue
        add_shipment_environment_args(cmd_parser)
        if command["name"] == HarborComposeSettings.generate_arg:
            add_build_provider_flag(cmd_parser)
            cmd_parser.add_argument(
                "-t",
                "--terraform",
                dest=HarborComposeSettings.terraform_arg,
                action="store_true",
                default=False,
                help="generate terraform source (main.tf)",
            )
        elif command["name"] == HarborComposeSettings.migrate_arg:
            add_build_provider_flag(cmd_parser)
            cmd_parser.add_argument(
                "-p",
                "--platform",
                dest=HarborComposeSettings.platform_arg,
                required=False,
                help="target migration platform. Defaults to ecsfargate",
            )
            cmd_parser.add_argument(
                "-r",
                "--role",
                dest=HarborComposeSettings.role_arg,
                required=False,
                help="migrate using specified aws role. Defaults to devops",
            )
            cmd_parser.add_argument(
                "--account-id",
                dest=HarborComposeSettings.account_id_arg,
                required=False,
                help="AWS account to migrate to, instead of the barge account",
            )
            cmd_parser.add_argument(
                "--vpc",
                dest=HarborComposeSettings.vpc_arg,
                required=False,
                help="VPC to migrate to, instead of the barge VPC",
            )
            cmd_parser.add_argument(
                "--private-subnets",
                dest=HarborComposeSettings.private_subnets_arg,
                required=False,
                help="Comma separated private subnets, instead of the barge ones",
            )
            cmd_parser.add_argument(
                "--public-subnets",
                dest=HarborComposeSettings.public_subnets_arg,
                required=False,
                help="Comma separated public subnets, instead of the barge ones",
            )
            cmd_parser.add_argument(
                "--region",
                dest=HarborComposeSettings.region_arg,
                required=False,
                help="AWS region to migrate to. Defaults to us-east-1",
            )

    for command in HarborComposeSettings.neutral_commands:
        cmd_parsers.add_parser(name=command["name"], help=command["help"])
    return parser


COMMANDS = {
    HarborComposeSettings.up_arg: up,
    HarborComposeSettings.down_arg: down,
    HarborComposeSettings.deploy_arg: deploy,
    HarborComposeSettings.catalog_arg: catalog,
    HarborComposeSettings.restart_arg: restart,
    HarborComposeSettings.ps_arg: ps,
    HarborComposeSettings.logs_arg: logs,
    HarborComposeSettings.events_arg: events,
    HarborComposeSettings.generate_arg: generate,
    HarborComposeSettings.terraform_cmd_arg: terraform,
    HarborComposeSettings.init_arg: init,
    HarborComposeSettings.migrate_arg: migrate,
    HarborComposeSettings.login_arg: login,
    HarborComposeSettings.logout_arg: logout,
    HarborComposeSettings.version_arg: print_version,
}

SUBCOMMANDS = {
    HarborComposeSettings.env_arg: ENV_ACTIONS,
    HarborComposeSettings.buildtoken_arg: BUILDTOKEN_ACTIONS,
}


def get_command_function(settings: HarborComposeSettings):
    """
    :returns: the function implementing the command (and action) of the invocation
    """
    if settings.command in SUBCOMMANDS:
        return SUBCOMMANDS[settings.command][settings.subcommand]
    return COMMANDS[settings.command]


def main():
    """
    Main entry point for CLI
    :return: status code
    """
    parser = main_parser()
    if len(sys.argv) == 1:
        parser.print_help()
        sys.exit()
    args = parser.parse_args()
    if args.loglevel and not set_log_level(args.loglevel):
        print(f"Log level value {args.loglevel} is invalid.")
    if getattr(args, HarborComposeSettings.verbose_arg):
        set_log_level("DEBUG")
    LOG.debug(args)
    if not args.command:
        parser.print_help()
        sys.exit()

    settings = HarborComposeSettings(**vars(args))
    LOG.debug(settings)
    write_metric(settings.config, settings.command)
    try:
        get_command_function(settings)(settings)
    except HarborComposeException as error:
        LOG.error(error)
        write_metric(settings.config, settings.command, error=str(error))
        sys.exit(-1)
    return 0


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
