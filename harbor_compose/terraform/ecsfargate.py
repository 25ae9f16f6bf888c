#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Migration of a shipment environment to AWS ECS Fargate.

The terraform-ecs-fargate template is installed into infrastructure/base and
infrastructure/env/<environment>, then customized with the settings of the shipment environment
and of the AWS account behind its barge.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.api.barges import BargesClient

import io
import zipfile
from datetime import datetime as dt
from os import listdir, makedirs, path, remove
from shutil import copytree, rmtree
from tempfile import TemporaryDirectory

import requests

from harbor_compose.common.files import ask_for_confirmation
from harbor_compose.common.logging import LOG
from harbor_compose.compose.harbor_compose import HarborCompose
from harbor_compose.compose.images import get_image_tag
from harbor_compose.exceptions import ApiError, ConfigurationError
from harbor_compose.shipment import ShipmentEnvironment
from harbor_compose.shipment.envvars import LOGS_ENDPOINT, SHIP_LOGS, find_env_var
from harbor_compose.templates import render_template
from harbor_compose.terraform import get_terraform_port

ECS_FARGATE_PLATFORM = "ecsfargate"
DEFAULT_AWS_REGION = "us-east-1"
DEFAULT_ROLE = "devops"
LOGZIO_PROVIDER = "logzio"
INFRASTRUCTURE_DIR = "infrastructure"
TFVARS_FILE = "terraform.tfvars"
FARGATE_FILE = "fargate.yml"
MIN_HEALTHCHECK_INTERVAL = 5
HEALTHCHECK_TIMEOUT = 5
DOC_MONITORING_FILES = ["doc-monitoring.tf", "doc-monitoring.tpl"]
IMAGE_MIGRATION_FILES = ["migrate-image.tf", "migrate-image.tpl"]


class EcsTerraformShipmentEnvironment:
    """
    Settings of a shipment environment translated to its ECS Fargate counterpart

    :ivar dict primary_port: the port the load balancer health checks
    :ivar dict http_port: the http (or tcp) port, None if there is none
    :ivar dict https_port: the https port, None if there is none
    :ivar bool public_lb: whether the load balancer is internet facing
    :ivar str logz_token: logz.io listener token, when logs are shipped to logz.io
    """

    def __init__(self, shipment: str, env: str):
        self.shipment = shipment
        self.env = env
        self.group = ""
        self.replicas = 0
        self.monitored = True
        self.iam_role = ""
        self.product = ""
        self.project = ""
        self.property = ""
        self.container_name = ""
        self.old_image = ""
        self.new_image = ""
        self.contact_email = ""
        self.aws_account_id = ""
        self.aws_account_name = ""
        self.aws_vpc = ""
        self.aws_private_subnets = ""
        self.aws_public_subnets = ""
        self.aws_region = DEFAULT_AWS_REGION
        self.aws_role = DEFAULT_ROLE
        self.primary_port = None
        self.http_port = None
        self.https_port = None
        self.public_lb = False
        self.log_shipping_provider = ""
        self.log_shipping_endpoint = ""
        self.logz_token = ""
        self.generated_date = (
            dt.now().astimezone().strftime("%b %d, %Y at %I:%M%p (%Z)")
        )

    def __repr__(self):
        return f"{self.shipment}::{self.env}"

    @property
    def iam_role_is_specified(self) -> bool:
        return bool(self.iam_role)

    def template_context(self) -> dict:
        return dict(vars(self))


def migrate_image(image: str, account_id: str, region: str, shipment: str) -> str:
    """
    Image of the shipment in ECR, keeping the tag of the current image

    >>> migrate_image("quay.io/turner/my-app:0.1.0", "123456789012", "us-east-1", "my-app")
    '123456789012.dkr.ecr.us-east-1.amazonaws.com/my-app:0.1.0'
    """
    tag = get_image_tag(image)
    return f"{account_id}.dkr.ecr.{region}.amazonaws.com/{shipment}:{tag}"


def get_contact_email(group: dict) -> str:
    """
    :param dict group: group members as returned by the groups API
    :returns: the first admin, else the first user, of the group
    """
    for members_key in ["admins", "users"]:
        members = group.get(members_key) or []
        if members:
            return members[0]
    return ""


def set_ports(data: EcsTerraformShipmentEnvironment, container) -> None:
    """
    Maps the ports of the container to the load balancer ports. The AWS minimums apply to the
    health check of the primary port.

    :raises: ConfigurationError when the primary port has no health check
    """
    for port in container.ports:
        tf_port = get_terraform_port(port)
        data.public_lb = port.public_vip
        if port.primary:
            if not port.healthcheck:
                raise ConfigurationError(f"{data} - primary port missing health check")
            if tf_port["healthcheck_interval"] < MIN_HEALTHCHECK_INTERVAL:
                tf_port["healthcheck_interval"] = MIN_HEALTHCHECK_INTERVAL
            if tf_port["healthcheck_timeout"] == 1:
                tf_port["healthcheck_timeout"] = HEALTHCHECK_TIMEOUT
            data.primary_port = tf_port
        if not tf_port["public_port"]:
            tf_port["public_port"] = tf_port["value"]
        if port.protocol in ["http", "tcp"]:
            data.http_port = tf_port
        elif port.protocol == "https":
            data.https_port = tf_port


def translate_shipment_environment(
    shipment_env: ShipmentEnvironment,
    harbor_compose: HarborCompose,
    barges_client: BargesClient,
    role: str = DEFAULT_ROLE,
    **overrides,
) -> EcsTerraformShipmentEnvironment:
    """
    Translates a shipment environment into the settings of the ECS Fargate template.

    :param ShipmentEnvironment shipment_env:
    :param HarborCompose harbor_compose: the harbor compose of the shipment environment
    :param BargesClient barges_client: to look up the barge account and network, and the group
    :param str role: AWS role used to run terraform
    :param overrides: account_id, vpc, private_subnets, public_subnets, region to use instead
      of the barge settings
    :raises: ConfigurationError when the barge is unknown or the container has no primary port
    """
    shipment_name = shipment_env.parent_shipment.name
    compose_shipment = harbor_compose.shipments[shipment_name]
    if not shipment_env.containers:
        raise ConfigurationError(f"{shipment_env} - no container to migrate")
    container = shipment_env.containers[0]

    data = EcsTerraformShipmentEnvironment(shipment_name, shipment_env.name)
    data.group = compose_shipment.group
    data.replicas = compose_shipment.replicas
    data.monitored = (
        True
        if compose_shipment.enable_monitoring is None
        else compose_shipment.enable_monitoring
    )
    data.iam_role = shipment_env.iam_role
    data.product = compose_shipment.product
    data.project = compose_shipment.project
    data.property = compose_shipment.property
    data.container_name = container.name
    data.old_image = container.image
    data.aws_role = role

    barge = barges_client.get_barge(compose_shipment.barge)
    if barge is None:
        raise ConfigurationError(f"barge {compose_shipment.barge} not found")
    data.contact_email = get_contact_email(barges_client.get_group(data.group))
    if not data.contact_email:
        LOG.warning(f"could not find user for group: {data.group}")

    data.aws_account_id = overrides.get("account_id") or barge.account_id
    data.aws_account_name = barge.account_name
    data.aws_vpc = overrides.get("vpc") or barge.vpc
    data.aws_private_subnets = overrides.get("private_subnets") or ",".join(
        barge.private_subnets
    )
    data.aws_public_subnets = overrides.get("public_subnets") or ",".join(
        barge.public_subnets
    )
    data.aws_region = overrides.get("region") or DEFAULT_AWS_REGION
    data.new_image = migrate_image(
        container.image, data.aws_account_id, data.aws_region, shipment_name
    )

    set_ports(data, container)
    if data.primary_port is None:
        raise ConfigurationError(f"{data} - {container.name} has no primary port")
    LOG.debug(f"{data} - http port = {data.http_port}, https port = {data.https_port}")

    ship_logs = find_env_var(SHIP_LOGS, shipment_env.env_vars)
    if ship_logs:
        data.log_shipping_provider = ship_logs.value
    logs_endpoint = find_env_var(LOGS_ENDPOINT, shipment_env.env_vars)
    if logs_endpoint:
        data.log_shipping_endpoint = logs_endpoint.value
        # https://listener.logz.io:8071?token=xyz
        if "=" in logs_endpoint.value:
            data.logz_token = logs_endpoint.value.split("=")[1]
    return data


def get_tfvars_for_base(data: EcsTerraformShipmentEnvironment) -> str:
    return render_template(
        "base.tfvars.j2", tags_environment="prod", **data.template_context()
    )


def get_tfvars_for_env(data: EcsTerraformShipmentEnvironment) -> str:
    return render_template(
        "env.tfvars.j2", tags_environment=data.env, **data.template_context()
    )


def get_fargate_yaml(shipment: str, env: str) -> str:
    return render_template("fargate.yml.j2", shipment=shipment, env=env)


def update_terraform_backend(main_tf: str, data: EcsTerraformShipmentEnvironment) -> str:
    """
    Points the S3 backend of the environment main.tf at the state bucket of the shipment

    :param str main_tf: content of main.tf
    :rtype: str
    """
    lines = []
    for line in main_tf.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith('profile = ""'):
            line = f'    profile = "{data.aws_account_name}:{data.aws_account_name}-{data.aws_role}"'
        if trimmed.startswith("bucket"):
            line = f'    bucket  = "tf-state-{data.shipment}"'
        if trimmed.startswith("key"):
            line = f'    key     = "{data.env}.terraform.tfstate"'
        lines.append(f"{line}\n")
    return "".join(lines)


def download_terraform_template(template_uri: str, target_dir: str) -> str:
    """
    Downloads and extracts the template archive.

    :returns: the root directory of the extracted template
    :raises: ApiError when the archive cannot be downloaded
    """
    print("downloading terraform template", template_uri)
    try:
        response = requests.get(template_uri, timeout=120)
    except requests.exceptions.RequestException as error:
        raise ApiError(f"GET {template_uri} failed: {error}") from error
    if response.status_code != 200:
        raise ApiError(
            f"GET {template_uri} returned {response.status_code}",
            status_code=response.status_code,
        )
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        archive.extractall(target_dir)
    for name in sorted(listdir(target_dir)):
        if path.isdir(path.join(target_dir, name)):
            return path.join(target_dir, name)
    raise ConfigurationError(f"{template_uri} does not contain a terraform template")


def install_terraform_template(
    repo_dir: str, environment: str, base_path: str = "."
) -> tuple:
    """
    Copies base and env/dev of the template into infrastructure/base (unless it already exists)
    and infrastructure/env/<environment> (prompting if it already exists).

    :returns: the base and environment directories
    :raises: ConfigurationError when the user refuses to overwrite the environment directory
    """
    print("installing terraform template")
    infra_dir = path.join(base_path, INFRASTRUCTURE_DIR)
    makedirs(infra_dir, exist_ok=True)
    base_dir = path.join(infra_dir, "base")
    if not path.exists(base_dir):
        LOG.debug(f"copying {repo_dir}/base to {base_dir}")
        copytree(path.join(repo_dir, "base"), base_dir)
    else:
        print(f"{base_dir} already exists, ignoring")
    env_dir = path.join(infra_dir, "env", environment)
    if path.exists(env_dir):
        if not ask_for_confirmation(f"{env_dir} already exists. Overwrite?"):
            raise ConfigurationError(f"{env_dir} already exists")
        rmtree(env_dir)
    copytree(path.join(repo_dir, "env", "dev"), env_dir)
    return base_dir, env_dir


def remove_files(directory: str, files: list) -> None:
    for file_name in files:
        file_path = path.join(directory, file_name)
        LOG.debug(f"deleting {file_path}")
        if path.exists(file_path):
            remove(file_path)


def download_barge_files(barges_client: BargesClient, env_dir: str, files: list) -> None:
    for file_name in files:
        with open(path.join(env_dir, file_name), "wb") as file_fd:
            file_fd.write(barges_client.download_file(file_name))


def write_file(file_path: str, content: str) -> None:
    LOG.debug(f"writing {file_path}")
    with open(file_path, "w") as file_fd:
        file_fd.write(content)


def migrate_to_ecs_fargate(
    shipment_env: ShipmentEnvironment,
    harbor_compose: HarborCompose,
    barges_client: BargesClient,
    template_uri: str,
    role: str = DEFAULT_ROLE,
    base_path: str = ".",
    **overrides,
) -> tuple:
    """
    Installs and customizes the ECS Fargate terraform template for the shipment environment.

    :returns: the environment directory and the migration settings
    :rtype: tuple[str, EcsTerraformShipmentEnvironment]
    """
    data = translate_shipment_environment(
        shipment_env, harbor_compose, barges_client, role, **overrides
    )
    with TemporaryDirectory() as download_dir:
        repo_dir = download_terraform_template(template_uri, download_dir)
        base_dir, env_dir = install_terraform_template(
            repo_dir, shipment_env.name, base_path
        )
    LOG.debug(f"environment installed to: {env_dir}")

    write_file(path.join(base_dir, TFVARS_FILE), get_tfvars_for_base(data))
    write_file(path.join(env_dir, TFVARS_FILE), get_tfvars_for_env(data))

    main_tf = path.join(env_dir, "main.tf")
    with open(main_tf) as main_tf_fd:
        content = main_tf_fd.read()
    write_file(main_tf, update_terraform_backend(content, data))

    if data.http_port and not data.https_port:
        remove_files(env_dir, ["lb-https.tf"])
    if data.https_port and not data.http_port:
        remove_files(env_dir, ["lb-http.tf"])

    download_barge_files(barges_client, env_dir, DOC_MONITORING_FILES)
    download_barge_files(barges_client, env_dir, IMAGE_MIGRATION_FILES)

    if data.log_shipping_provider != LOGZIO_PROVIDER:
        remove_files(env_dir, ["logs-logzio.tf", "logs-logzio.zip"])
    if "prod" in data.env:
        remove_files(env_dir, ["autoscale-time.tf", "autoscale-time.zip"])

    write_file(path.join(env_dir, FARGATE_FILE), get_fargate_yaml(data.shipment, data.env))
    return env_dir, data
