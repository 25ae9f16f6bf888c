#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
migrate command, which outputs the files needed to migrate a shipment environment to another
platform. No resource is created: the migration itself is done by running terraform and the
printed commands.

Examples::

    harbor-compose migrate my-shipment dev
    harbor-compose migrate my-shipment dev --platform ecsfargate --build-provider circleciv2
    harbor-compose migrate my-shipment prod --platform ecsfargate --role admin
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.common.settings import HarborComposeSettings

from os import environ, path

from harbor_compose.commands.generate import (
    fetch_shipment_environment,
    write_build_artifacts,
    write_compose_files,
)
from harbor_compose.common.aws import verify_account
from harbor_compose.compose.transform import (
    shipment_to_docker_compose,
    shipment_to_harbor_compose,
)
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.terraform.ecsfargate import (
    ECS_FARGATE_PLATFORM,
    migrate_to_ecs_fargate,
)

MESSAGE_PLATFORM_NOT_SUPPORTED = (
    f"{ECS_FARGATE_PLATFORM} is the only platform currently supported"
)


def print_next_steps(env: str) -> None:
    print()
    print(
        "Run the following commands to provision an matching infrastructure stack on the target platform:"
    )
    print("cd infrastructure/base")
    print("terraform init")
    print("terraform apply")
    print(f"cd ../env/{env}")
    print("terraform init")
    print("terraform apply")
    print()
    print("Then run the following script to copy your docker image to ECR:")
    print("./migrate-image.sh")
    print()
    print(
        "Then run the following command to deploy your application image and environment variables:"
    )
    print("fargate service deploy -f docker-compose.yml")
    print()
    print("To integrate with DOC monitoring:")
    print("./doc-monitoring.sh on")
    print()
    print(
        "Once you're comfortable with your new environment, run the following command to delete your harbor environment:"
    )
    print("harbor-compose down --delete")
    print()


def migrate(settings: HarborComposeSettings) -> None:
    if settings.platform != ECS_FARGATE_PLATFORM:
        raise ConfigurationError(MESSAGE_PLATFORM_NOT_SUPPORTED)
    shipment_env = fetch_shipment_environment(settings)
    if shipment_env is None:
        return

    account_id = settings.migration_overrides.get("account_id")
    if account_id:
        verify_account(account_id, profile_name=environ.get("AWS_PROFILE"))

    harbor_compose = shipment_to_harbor_compose(shipment_env)
    docker_compose, hidden_env_vars = shipment_to_docker_compose(
        shipment_env, settings.hidden_env_file
    )
    env_dir, migration_data = migrate_to_ecs_fargate(
        shipment_env,
        harbor_compose,
        settings.api.barges,
        settings.config.terraform_template_uri,
        settings.role,
        **settings.migration_overrides,
    )
    for service in docker_compose.services.values():
        service.image = migration_data.new_image

    if settings.build_provider:
        write_build_artifacts(
            settings.build_provider,
            docker_compose,
            harbor_compose,
            shipment_env.build_token,
        )
    write_compose_files(
        docker_compose,
        harbor_compose,
        hidden_env_vars,
        path.join(env_dir, path.basename(settings.docker_compose_file)),
        path.join(env_dir, path.basename(settings.harbor_compose_file)),
        path.join(env_dir, path.basename(settings.hidden_env_file)),
    )
    print_next_steps(shipment_env.name)
