#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from os import path

from pytest import fixture, raises

from harbor_compose.compose.docker_compose import DockerCompose, parse_port
from harbor_compose.compose.harbor_compose import HarborCompose
from harbor_compose.compose.images import get_image_tag, parse_image, split_image
from harbor_compose.exceptions import ConfigurationError


@fixture()
def compose_env(monkeypatch):
    monkeypatch.delenv("TAG", raising=False)
    monkeypatch.delenv("NAME", raising=False)


def test_parse_port():
    tests = [
        ("80:3000", (80, 3000)),
        ("3000", (3000, 3000)),
        (3000, (3000, 3000)),
        ("127.0.0.1:80:3000", (80, 3000)),
        ("80:3000/tcp", (80, 3000)),
    ]
    for port, expected in tests:
        assert parse_port(port) == expected
    with raises(ConfigurationError):
        parse_port("http:web")


def test_images():
    assert parse_image("repo:1.2.3-rc1") == ("repo", "1.2.3", "rc1")
    assert parse_image("quay.io/turner/web:0.1.0") == (
        "quay.io/turner/web",
        "0.1.0",
        "",
    )
    assert parse_image("repo") == ("repo", "latest", "")
    assert split_image("localhost:5000/web") == ("localhost:5000/web", "latest")
    assert get_image_tag("localhost:5000/web:1.0.0") == "1.0.0"


def test_load_docker_compose(project_dir, compose_env):
    docker_compose = DockerCompose.from_file(path.join(project_dir, "docker-compose.yml"))
    service = docker_compose.get_service("web")
    assert service.build == "."
    assert service.image == "quay.io/turner/web:1.0.0"
    assert service.first_port == (80, 3000)
    assert service.find_env_file("hidden.env") == "hidden.env"
    assert service.resolved_environment["DB_PASSWORD"] == "p@ss"
    assert service.resolved_environment["GREETING"] == "hello world"
    with raises(ConfigurationError):
        docker_compose.get_service("worker")


def test_docker_compose_environment_override(project_dir, monkeypatch):
    monkeypatch.setenv("TAG", "2.0.0")
    monkeypatch.setenv("NAME", "harbor")
    docker_compose = DockerCompose.from_file(path.join(project_dir, "docker-compose.yml"))
    service = docker_compose.get_service("web")
    assert service.image == "quay.io/turner/web:2.0.0"
    assert service.environment["GREETING"] == "hello harbor"


def test_invalid_docker_compose(tmp_path):
    compose_file = tmp_path / "docker-compose.yml"
    compose_file.write_text("version: '2'\nservices:\n  - web\n")
    with raises(ConfigurationError):
        DockerCompose.from_file(str(compose_file))
    compose_file.write_text("version: '3.7'\nservices:\n  web:\n    image: web\n")
    with raises(ConfigurationError):
        DockerCompose.from_file(str(compose_file))
    with raises(ConfigurationError):
        DockerCompose.from_file(str(tmp_path / "missing.yml"))


def test_missing_env_file(tmp_path):
    compose_file = tmp_path / "docker-compose.yml"
    compose_file.write_text(
        "version: '2'\nservices:\n  web:\n    image: web\n    env_file: hidden.env\n"
    )
    service = DockerCompose.from_file(str(compose_file)).get_service("web")
    assert service.env_file == ["hidden.env"]
    with raises(ConfigurationError):
        service.resolved_environment


def test_load_harbor_compose(project_dir):
    harbor_compose = HarborCompose.from_file(path.join(project_dir, "harbor-compose.yml"))
    name, shipment = harbor_compose.first_shipment
    assert name == "mss-my-app"
    assert shipment.environment == {"FOO": "bar", "DEBUG": "true"}
    assert shipment.enable_monitoring is True
    assert shipment.ignore_image_version is False


def test_invalid_harbor_compose(tmp_path):
    compose_file = tmp_path / "harbor-compose.yml"
    compose_file.write_text("shipments:\n  my-app:\n    env: dev\n    replicas: two\n")
    with raises(ConfigurationError):
        HarborCompose.from_file(str(compose_file))
    compose_file.write_text("shipments:\n  my-app:\n    env: dev\n    unknown: true\n")
    with raises(ConfigurationError):
        HarborCompose.from_file(str(compose_file))
    with raises(ConfigurationError):
        HarborCompose().first_shipment


def test_write_harbor_compose(project_dir, tmp_path):
    harbor_compose = HarborCompose.from_file(path.join(project_dir, "harbor-compose.yml"))
    output = str(tmp_path / "harbor-compose.yml")
    harbor_compose.write(output)
    assert HarborCompose.from_file(output).to_dict() == harbor_compose.to_dict()
