#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import fixture, raises

from harbor_compose import __version__
from harbor_compose.build_providers import get_build_provider
from harbor_compose.compose.transform import (
    shipment_to_docker_compose,
    shipment_to_harbor_compose,
)
from harbor_compose.exceptions import BuildProviderNotFound
from harbor_compose.shipment import ShipmentEnvironment


@fixture()
def compose_files(shipment_definition):
    shipment_env = ShipmentEnvironment(shipment_definition)
    docker_compose, _ = shipment_to_docker_compose(shipment_env)
    return docker_compose, shipment_to_harbor_compose(shipment_env)


@fixture()
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_get_build_provider():
    assert get_build_provider("CircleCIv2").name == "circleciv2"
    with raises(BuildProviderNotFound):
        get_build_provider("jenkins")


def test_local_build(compose_files):
    docker_compose, harbor_compose = compose_files
    artifacts = get_build_provider("local").provide_artifacts(
        docker_compose, harbor_compose, "token"
    )
    assert artifacts == []
    service = docker_compose.services["web"]
    assert service.build == "."
    assert service.image == "quay.io/turner/web:1.0.0"
    assert service.ports == ["80:3000"]
    assert service.environment


def test_circleci(compose_files, capsys):
    docker_compose, harbor_compose = compose_files
    artifacts = get_build_provider("circleciv2").provide_artifacts(
        docker_compose, harbor_compose, "token"
    )
    assert [artifact.file_path for artifact in artifacts] == [".circleci/config.yml"]
    assert f"harbor-cicd-image:{__version__}" in artifacts[0].file_contents
    service = docker_compose.services["web"]
    assert service.image == "quay.io/turner/web:1.0.0-${CIRCLE_BUILD_NUM}"
    assert service.environment == {}
    assert service.ports == []
    assert "MSS_MY_APP_DEV_TOKEN=token" in capsys.readouterr().out

    artifacts = get_build_provider("circleciv1").get_artifacts(harbor_compose, "token")
    assert artifacts[0].file_path == "circle.yml"
    assert f"harbor-compose=={__version__}" in artifacts[0].file_contents


def test_codeship(compose_files, workdir):
    docker_compose, harbor_compose = compose_files
    artifacts = get_build_provider("codeship").provide_artifacts(
        docker_compose, harbor_compose, "token"
    )
    by_name = {artifact.file_path: artifact for artifact in artifacts}
    assert set(by_name) == {
        "codeship-services.yml",
        "codeship-steps.yml",
        "codeship.env",
        "codeship.aes",
        "docker-push.sh",
    }
    assert "MSS_MY_APP_DEV_TOKEN=token" in by_name["codeship.env"].file_contents
    assert by_name["docker-push.sh"].file_mode == 0o777
    assert docker_compose.services["web"].image.endswith("-${CI_BUILD_ID}")
    assert "codeship.env" in (workdir / ".gitignore").read_text()
    assert "codeship.aes" in (workdir / ".dockerignore").read_text()
