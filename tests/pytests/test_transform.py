#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from os import path

from pytest import fixture, raises

from harbor_compose.common.files import serialize_env_file, write_env_file
from harbor_compose.compose.docker_compose import DockerCompose, DockerComposeService
from harbor_compose.compose.harbor_compose import HarborCompose
from harbor_compose.compose.transform import (
    compose_to_shipment_environment,
    docker_service_env_vars,
    minimal_harbor_compose,
    shipment_to_docker_compose,
    shipment_to_harbor_compose,
)
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.shipment import BASIC, HIDDEN, ShipmentEnvironment
from harbor_compose.shipment.envvars import (
    env_var,
    env_var_hidden,
    find_env_var,
    is_log_shipping,
    is_special,
)


@fixture()
def shipment_env(shipment_definition):
    return ShipmentEnvironment(shipment_definition)


@fixture()
def compose_env(monkeypatch):
    monkeypatch.delenv("TAG", raising=False)
    monkeypatch.delenv("NAME", raising=False)


def test_shipment_to_docker_compose(shipment_env):
    docker_compose, hidden_env_vars = shipment_to_docker_compose(shipment_env)
    service = docker_compose.services["web"]
    assert service.image == "quay.io/turner/web:1.0.0"
    assert service.ports == ["80:3000"]
    assert service.environment["PORT"] == "3000"
    assert service.environment["HEALTHCHECK"] == "/health"
    assert service.environment["PRICE"] == "$$5"
    assert service.environment["FOO"] == "bar"
    assert service.environment["SHIPMENT_VAR"] == "shipment-level"
    for name in ["HC_RESTART", "CUSTOMER", "BARGE", "SHIP_LOGS", "DB_PASSWORD"]:
        assert name not in service.environment
    assert hidden_env_vars == {"ENV_SECRET": "s3cr3t", "DB_PASSWORD": "p@ss"}
    assert service.env_file == ["hidden.env"]
    assert "HC_RESTART" not in docker_compose.to_yaml()


def test_shipment_to_docker_compose_without_hidden_vars(shipment_env):
    shipment_env.env_vars = [
        env_var for env_var in shipment_env.env_vars if env_var.type != HIDDEN
    ]
    shipment_env.containers[0].env_vars = [
        env_var
        for env_var in shipment_env.containers[0].env_vars
        if env_var.type != HIDDEN
    ]
    docker_compose, hidden_env_vars = shipment_to_docker_compose(shipment_env)
    assert hidden_env_vars == {}
    assert docker_compose.services["web"].env_file == []


def test_shipment_to_harbor_compose(shipment_env):
    harbor_compose = shipment_to_harbor_compose(shipment_env)
    name, shipment = harbor_compose.first_shipment
    assert name == "mss-my-app"
    assert shipment.env == "dev"
    assert shipment.barge == "digital-sandbox"
    assert shipment.replicas == 2
    assert shipment.group == "mss"
    assert shipment.property == "turner.com"
    assert shipment.project == "my-project"
    assert shipment.product == "my-product"
    assert shipment.containers == ["web"]
    assert shipment.healthcheck_timeout_seconds == 1
    assert shipment.healthcheck_interval_seconds == 10
    assert shipment.environment == {
        "SHIP_LOGS": "logzio",
        "LOGS_ENDPOINT": "https://listener.logz.io:8071?token=xyz",
    }
    assert "HC_RESTART" not in harbor_compose.to_yaml()


def test_minimal_harbor_compose(shipment_env):
    harbor_compose = shipment_to_harbor_compose(shipment_env)
    minimal = minimal_harbor_compose(harbor_compose)
    shipment = minimal.shipments["mss-my-app"]
    assert shipment.to_dict() == {
        "env": "dev",
        "containers": ["web"],
        "environment": {
            "SHIP_LOGS": "logzio",
            "LOGS_ENDPOINT": "https://listener.logz.io:8071?token=xyz",
        },
    }
    assert harbor_compose.shipments["mss-my-app"].barge == "digital-sandbox"


def test_compose_to_shipment_environment(project_dir, compose_env):
    docker_compose = DockerCompose.from_file(path.join(project_dir, "docker-compose.yml"))
    harbor_compose = HarborCompose.from_file(path.join(project_dir, "harbor-compose.yml"))
    name, compose_shipment = harbor_compose.first_shipment
    shipment_env = compose_to_shipment_environment(
        name, compose_shipment, docker_compose
    )
    assert shipment_env.name == "dev"
    assert shipment_env.parent_shipment.name == "mss-my-app"
    assert find_env_var("CUSTOMER", shipment_env.parent_shipment.env_vars).value == "mss"
    assert shipment_env.ec2_provider.barge == "digital-sandbox"
    assert shipment_env.ec2_provider.replicas == 2
    assert find_env_var("DEBUG", shipment_env.env_vars).value == "true"

    container = shipment_env.containers[0]
    assert container.image == "quay.io/turner/web:1.0.0"
    assert find_env_var("DB_PASSWORD", container.env_vars).type == HIDDEN
    assert find_env_var("GREETING", container.env_vars).value == "hello world"
    assert find_env_var("HEALTHCHECK", container.env_vars).type == BASIC
    port = container.ports[0]
    assert (port.public_port, port.value) == (80, 3000)
    assert port.primary
    assert port.healthcheck == "/health"
    assert port.healthcheck_timeout == 1
    assert port.healthcheck_interval == 10


def test_compose_to_shipment_environment_missing_service(project_dir, compose_env):
    harbor_compose = HarborCompose.from_file(path.join(project_dir, "harbor-compose.yml"))
    name, compose_shipment = harbor_compose.first_shipment
    with raises(ConfigurationError):
        compose_to_shipment_environment(name, compose_shipment, DockerCompose())


def test_docker_service_env_vars_without_hidden_file(tmp_path):
    service = DockerComposeService(
        "web",
        {"image": "web", "environment": ["FOO=bar", "EMPTY="]},
        base_dir=str(tmp_path),
    )
    env_vars = docker_service_env_vars(service)
    assert [(env_var.name, env_var.value, env_var.type) for env_var in env_vars] == [
        ("FOO", "bar", BASIC),
        ("EMPTY", "", BASIC),
    ]


def test_docker_service_quoted_hidden_value(tmp_path):
    (tmp_path / "hidden.env").write_text('DB_PASSWORD="p@ss word"\n')
    service = DockerComposeService(
        "web",
        {"image": "web", "env_file": ["hidden.env"]},
        base_dir=str(tmp_path),
    )
    password = find_env_var("DB_PASSWORD", docker_service_env_vars(service))
    assert (password.value, password.type) == ("p@ss word", HIDDEN)


def test_restart_var_never_rendered(shipment_env):
    shipment_env.parent_shipment.env_vars.append(env_var("HC_RESTART", "shipment"))
    shipment_env.containers[0].env_vars += [
        env_var("HC_RESTART", "container"),
        env_var_hidden("hc_restart", "hidden"),
    ]
    docker_compose, hidden_env_vars = shipment_to_docker_compose(shipment_env)
    harbor_compose = shipment_to_harbor_compose(shipment_env)
    for content in [
        docker_compose.to_yaml(),
        harbor_compose.to_yaml(),
        serialize_env_file(hidden_env_vars),
    ]:
        assert "HC_RESTART" not in content.upper()


def test_generated_files_load_back(shipment_env, tmp_path, compose_env):
    docker_compose, hidden_env_vars = shipment_to_docker_compose(shipment_env)
    docker_compose.write(str(tmp_path / "docker-compose.yml"))
    shipment_to_harbor_compose(shipment_env).write(str(tmp_path / "harbor-compose.yml"))
    write_env_file(hidden_env_vars, str(tmp_path / "hidden.env"))

    harbor_compose = HarborCompose.from_file(str(tmp_path / "harbor-compose.yml"))
    name, compose_shipment = harbor_compose.first_shipment
    loaded = compose_to_shipment_environment(
        name,
        compose_shipment,
        DockerCompose.from_file(str(tmp_path / "docker-compose.yml")),
    )

    def collect(env, var_type):
        env_vars = env.parent_shipment.env_vars + env.env_vars
        for container in env.containers:
            env_vars = env_vars + container.env_vars
        return {
            _env_var.name: _env_var.value
            for _env_var in env_vars
            if _env_var.type == var_type
            and not is_special(_env_var.name)
            and _env_var.name not in ["PORT", "HEALTHCHECK"]
        }

    assert collect(loaded, BASIC) == collect(shipment_env, BASIC)
    assert collect(loaded, BASIC)["PRICE"] == "$5"
    assert collect(loaded, HIDDEN) == {"ENV_SECRET": "s3cr3t", "DB_PASSWORD": "p@ss"}
    assert {
        name for name in collect(loaded, BASIC) if is_log_shipping(name)
    } == {"SHIP_LOGS", "LOGS_ENDPOINT"}
    assert (loaded.name, loaded.parent_shipment.name) == ("dev", "mss-my-app")
