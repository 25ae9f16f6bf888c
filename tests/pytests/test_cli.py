#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

import sys

from pytest import raises

from harbor_compose.cli import get_command_function, main, main_parser
from harbor_compose.commands.buildtoken import list_build_tokens
from harbor_compose.commands.env import pull_env_vars
from harbor_compose.commands.up import up
from harbor_compose.common.settings import HarborComposeSettings
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.terraform.ecsfargate import DEFAULT_ROLE, ECS_FARGATE_PLATFORM


def get_settings(*args) -> HarborComposeSettings:
    return HarborComposeSettings(**vars(main_parser().parse_args(list(args))))


def test_global_flags():
    settings = get_settings("-f", "compose.yml", "-c", "harbor.yml", "up")
    assert settings.command == "up"
    assert settings.docker_compose_file == "compose.yml"
    assert settings.harbor_compose_file == "harbor.yml"
    assert get_command_function(settings) is up

    settings = get_settings("up")
    assert settings.docker_compose_file == "docker-compose.yml"
    assert settings.harbor_compose_file == "harbor-compose.yml"
    assert settings.hidden_env_file == "hidden.env"


def test_down_and_deploy():
    assert get_settings("down", "--delete").delete
    assert not get_settings("down").delete
    assert get_settings("deploy", "-e", "qa").environment_override == "qa"


def test_events():
    settings = get_settings("events", "-s", "my-app", "-e", "dev", "-t", "Warning", "-m")
    assert settings.events_type == "warning"
    assert settings.full_message
    assert settings.get_shipment_environments() == ([("my-app", "dev")], None)
    assert get_settings("events").events_type == "all"
    with raises(SystemExit):
        get_settings("events", "--type", "critical")


def test_shipment_environment_flags_required():
    settings = get_settings("env", "ls", "-s", "my-app")
    with raises(ConfigurationError):
        settings.get_shipment_environments()


def test_subcommands():
    settings = get_settings("env", "pull", "--hidden", "secrets.env", "--env-file", ".env")
    assert settings.subcommand == "pull"
    assert settings.hidden_env_file == "secrets.env"
    assert settings.env_file == ".env"
    assert get_command_function(settings) is pull_env_vars
    assert get_command_function(get_settings("buildtoken", "ls")) is list_build_tokens
    with raises(SystemExit):
        get_settings("env")


def test_generation_commands():
    settings = get_settings("generate", "my-app", "dev", "-b", "circleciv2", "-t")
    assert (settings.shipment, settings.environment) == ("my-app", "dev")
    assert settings.build_provider == "circleciv2"
    assert settings.terraform
    assert get_settings("init", "-y").yes

    settings = get_settings("migrate", "my-app", "dev")
    assert settings.platform == ECS_FARGATE_PLATFORM
    assert settings.role == DEFAULT_ROLE
    assert set(settings.migration_overrides.values()) == {None}

    settings = get_settings(
        "migrate",
        "my-app",
        "dev",
        "--role",
        "admin",
        "--account-id",
        "123456789012",
        "--vpc",
        "vpc-1",
        "--private-subnets",
        "subnet-a,subnet-b",
        "--region",
        "us-west-2",
    )
    assert settings.role == "admin"
    assert settings.migration_overrides == {
        "account_id": "123456789012",
        "vpc": "vpc-1",
        "private_subnets": "subnet-a,subnet-b",
        "public_subnets": None,
        "region": "us-west-2",
    }


def test_version(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["harbor-compose", "version"])
    assert main() == 0
    assert capsys.readouterr().out.strip() == "0.1.0"


def test_command_errors_exit(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["harbor-compose", "ps"])
    with raises(SystemExit) as exit_info:
        main()
    assert exit_info.value.code == -1
