#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

import json
from os import path

from pytest import fixture

HERE = path.abspath(path.dirname(__file__))
FIXTURES_DIR = path.join(HERE, "fixtures")


def read_fixture(file_name: str):
    with open(path.join(FIXTURES_DIR, file_name)) as fixture_fd:
        return json.loads(fixture_fd.read())


@fixture(autouse=True)
def no_telemetry(monkeypatch):
    monkeypatch.setenv("HARBOR_TELEMETRY", "0")


@fixture()
def project_dir():
    return path.join(FIXTURES_DIR, "project")


@fixture()
def shipment_definition():
    return read_fixture("shipment_environment.json")


@fixture()
def load_fixture():
    return read_fixture
