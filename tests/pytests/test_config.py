#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

import json
import stat
from random import Random

from pytest import raises

from harbor_compose.common import get_build_token_env_var, get_timestamp
from harbor_compose.common.config import CONFIG_ENV_VAR, HarborConfig
from harbor_compose.common.credentials import (
    Credentials,
    delete_credentials,
    read_credentials,
    write_credentials,
)
from harbor_compose.common.names import get_random_name
from harbor_compose.common.telemetry import build_metric, write_metric
from harbor_compose.exceptions import AuthenticationError


def test_default_config(tmp_path):
    config = HarborConfig(str(tmp_path / "config"))
    assert config.shipit_uri == "http://shipit.services.dmtio.net"
    assert config.auth_uri == "https://auth.services.dmtio.net"
    assert config.terraform_template_uri.endswith("terraform-ecs-fargate/archive/master.zip")


def test_config_file(tmp_path, monkeypatch):
    config_file = tmp_path / "config"
    config_file.write_text(
        json.dumps({"shipit": "http://localhost:8080/", "customs": "http://customs"})
    )
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
    config = HarborConfig()
    assert config.config_path == str(config_file)
    assert config.shipit_uri == "http://localhost:8080"
    assert config.customs_uri == "http://customs"
    assert config.helmit_uri == "http://helmit.services.dmtio.net"


def test_invalid_config_file(tmp_path):
    config_file = tmp_path / "config"
    config_file.write_text("shipit: http://localhost")
    assert HarborConfig(str(config_file)).definition == {}


def test_credentials(tmp_path):
    home_dir = str(tmp_path / ".harbor")
    assert read_credentials(home_dir) is None
    file_path = write_credentials(Credentials("jdoe", "token123"), home_dir)
    assert stat.S_IMODE((tmp_path / ".harbor" / "credentials").stat().st_mode) == 0o600
    with open(file_path) as creds_fd:
        assert json.loads(creds_fd.read()) == {
            "version": "v1",
            "username": "jdoe",
            "token": "token123",
        }
    credentials = read_credentials(home_dir)
    assert (credentials.username, credentials.token) == ("jdoe", "token123")
    assert delete_credentials(home_dir)
    assert not delete_credentials(home_dir)


def test_invalid_credentials(tmp_path):
    (tmp_path / "credentials").write_text("not json")
    with raises(AuthenticationError):
        read_credentials(str(tmp_path))


def test_build_token_env_var():
    assert get_build_token_env_var("mss-my-app", "dev") == "MSS_MY_APP_DEV_TOKEN"
    assert get_build_token_env_var("app", "prod-east") == "APP_PROD-EAST_TOKEN"


def test_timestamp():
    timestamp = get_timestamp()
    assert len(timestamp) == 20
    assert timestamp.endswith("Z")


def test_random_names():
    assert get_random_name(rand=Random(42)) == get_random_name(rand=Random(42))
    name = get_random_name()
    assert len(name.split("-")) == 2
    assert get_random_name(retry=1)[-1].isdigit()


def test_telemetry(tmp_path, monkeypatch):
    metric = build_metric("up", error="failed")
    assert metric["source"] == "harbor-compose"
    assert metric["action"] == "up"
    assert metric["error"] == "failed"
    monkeypatch.setenv("HARBOR_TELEMETRY", "0")
    assert write_metric(HarborConfig(str(tmp_path / "config")), "up") is None
