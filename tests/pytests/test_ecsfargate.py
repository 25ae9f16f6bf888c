#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

import io
import zipfile
from os import path
from unittest.mock import MagicMock

from pytest import fixture, raises

from harbor_compose.api.barges import Barge
from harbor_compose.compose.transform import shipment_to_harbor_compose
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.shipment import ShipmentEnvironment
from harbor_compose.terraform.ecsfargate import (
    get_contact_email,
    get_fargate_yaml,
    get_tfvars_for_base,
    get_tfvars_for_env,
    migrate_image,
    migrate_to_ecs_fargate,
    translate_shipment_environment,
    update_terraform_backend,
)

TEMPLATE_MAIN_TF = """terraform {
  backend "s3" {
    region  = "us-east-1"
    profile = ""
    bucket  = ""
    key     = "dev.terraform.tfstate"
  }
}"""

TEMPLATE_FILES = [
    "base/main.tf",
    "env/dev/main.tf",
    "env/dev/lb-http.tf",
    "env/dev/lb-https.tf",
    "env/dev/logs-logzio.tf",
    "env/dev/logs-logzio.zip",
    "env/dev/autoscale-time.tf",
]


@fixture()
def shipment_env(shipment_definition):
    return ShipmentEnvironment(shipment_definition)


@fixture()
def barges_client(load_fixture):
    client = MagicMock()
    client.get_barge.return_value = Barge(load_fixture("barges.json")["barges"][0])
    client.get_group.return_value = {"admins": [], "users": ["jdoe@turner.com"]}
    client.download_file.return_value = b"#!/bin/sh\n"
    return client


@fixture()
def template_archive():
    content = io.BytesIO()
    with zipfile.ZipFile(content, "w") as archive:
        for file_name in TEMPLATE_FILES:
            archive.writestr(
                f"terraform-ecs-fargate-master/{file_name}",
                TEMPLATE_MAIN_TF if file_name.endswith("main.tf") else "",
            )
    response = MagicMock()
    response.status_code = 200
    response.content = content.getvalue()
    return response


def test_migrate_image():
    assert (
        migrate_image("quay.io/turner/web:1.0.0", "123456789012", "us-east-1", "web")
        == "123456789012.dkr.ecr.us-east-1.amazonaws.com/web:1.0.0"
    )
    assert migrate_image("quay.io/turner/web", "123456789012", "us-east-1", "web").endswith(
        ".amazonaws.com/web:latest"
    )
    assert migrate_image(
        "localhost:5000/web:1.0.0", "123456789012", "us-east-1", "web"
    ).endswith(".amazonaws.com/web:1.0.0")
    assert migrate_image("localhost:5000/web", "123456789012", "us-east-1", "web").endswith(
        ".amazonaws.com/web:latest"
    )


def test_contact_email():
    assert get_contact_email({"admins": ["admin@turner.com"], "users": ["u@t.com"]}) == (
        "admin@turner.com"
    )
    assert get_contact_email({"users": ["u@t.com"]}) == "u@t.com"
    assert get_contact_email({}) == ""


def test_translate_shipment_environment(shipment_env, barges_client):
    data = translate_shipment_environment(
        shipment_env, shipment_to_harbor_compose(shipment_env), barges_client
    )
    assert data.aws_account_id == "123456789012"
    assert data.aws_account_name == "aws-sandbox"
    assert data.aws_vpc == "vpc-0123abcd"
    assert data.aws_private_subnets == "subnet-priv1,subnet-priv2"
    assert data.aws_region == "us-east-1"
    assert data.aws_role == "devops"
    assert data.contact_email == "jdoe@turner.com"
    assert data.new_image == "123456789012.dkr.ecr.us-east-1.amazonaws.com/mss-my-app:1.0.0"
    assert data.primary_port["healthcheck_interval"] == 10
    assert data.primary_port["healthcheck_timeout"] == 5
    assert data.http_port["public_port"] == 80
    assert data.https_port is None
    assert data.log_shipping_provider == "logzio"
    assert data.logz_token == "xyz"


def test_translate_with_overrides(shipment_env, barges_client):
    shipment_env.containers[0].ports[0].healthcheck_interval = 2
    data = translate_shipment_environment(
        shipment_env,
        shipment_to_harbor_compose(shipment_env),
        barges_client,
        role="admin",
        account_id="210987654321",
        vpc="vpc-other",
        region="us-west-2",
    )
    assert data.aws_role == "admin"
    assert data.aws_vpc == "vpc-other"
    assert data.primary_port["healthcheck_interval"] == 5
    assert data.new_image == "210987654321.dkr.ecr.us-west-2.amazonaws.com/mss-my-app:1.0.0"


def test_translate_errors(shipment_env, barges_client):
    harbor_compose = shipment_to_harbor_compose(shipment_env)
    barges_client.get_barge.return_value = None
    with raises(ConfigurationError):
        translate_shipment_environment(shipment_env, harbor_compose, barges_client)


def test_missing_primary_port_healthcheck(shipment_env, barges_client):
    shipment_env.containers[0].ports[0].healthcheck = ""
    with raises(ConfigurationError):
        translate_shipment_environment(
            shipment_env, shipment_to_harbor_compose(shipment_env), barges_client
        )


def test_tfvars(shipment_env, barges_client):
    data = translate_shipment_environment(
        shipment_env, shipment_to_harbor_compose(shipment_env), barges_client
    )
    base = get_tfvars_for_base(data)
    assert 'aws_profile = "aws-sandbox:aws-sandbox-devops"' in base
    assert 'environment      = "prod"' in base
    env = get_tfvars_for_env(data)
    assert 'environment      = "dev"' in env
    assert 'container_port = "3000"' in env
    assert 'health_check_timeout = "5"' in env
    assert 'logz_token = "xyz"' in env
    assert "https_port" not in env
    assert get_fargate_yaml("mss-my-app", "dev") == (
        "cluster: mss-my-app-dev\nservice: mss-my-app-dev\n"
    )


def test_update_terraform_backend(shipment_env, barges_client):
    data = translate_shipment_environment(
        shipment_env, shipment_to_harbor_compose(shipment_env), barges_client
    )
    main_tf = update_terraform_backend(TEMPLATE_MAIN_TF, data)
    assert '    profile = "aws-sandbox:aws-sandbox-devops"\n' in main_tf
    assert '    bucket  = "tf-state-mss-my-app"\n' in main_tf
    assert '    key     = "dev.terraform.tfstate"\n' in main_tf
    assert 'region  = "us-east-1"' in main_tf


def test_migrate_to_ecs_fargate(
    shipment_env, barges_client, template_archive, tmp_path, monkeypatch
):
    monkeypatch.setattr(
        "harbor_compose.terraform.ecsfargate.requests.get",
        lambda *args, **kwargs: template_archive,
    )
    env_dir, data = migrate_to_ecs_fargate(
        shipment_env,
        shipment_to_harbor_compose(shipment_env),
        barges_client,
        "https://example.com/master.zip",
        base_path=str(tmp_path),
    )
    assert env_dir == path.join(str(tmp_path), "infrastructure", "env", "dev")
    base_dir = tmp_path / "infrastructure" / "base"
    assert (base_dir / "terraform.tfvars").exists()
    assert (tmp_path / "infrastructure" / "env" / "dev" / "terraform.tfvars").exists()
    assert not path.exists(path.join(env_dir, "lb-https.tf"))
    assert path.exists(path.join(env_dir, "lb-http.tf"))
    assert path.exists(path.join(env_dir, "logs-logzio.tf"))
    assert path.exists(path.join(env_dir, "autoscale-time.tf"))
    assert path.exists(path.join(env_dir, "doc-monitoring.tf"))
    assert path.exists(path.join(env_dir, "migrate-image.tpl"))
    with open(path.join(env_dir, "main.tf")) as main_tf_fd:
        assert 'bucket  = "tf-state-mss-my-app"' in main_tf_fd.read()
    with open(path.join(env_dir, "fargate.yml")) as fargate_fd:
        assert fargate_fd.read().startswith("cluster: mss-my-app-dev")
    assert data.new_image.endswith("/mss-my-app:1.0.0")
