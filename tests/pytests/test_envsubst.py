#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille<john@compose-x.io>

from pytest import fixture

from harbor_compose.common.envsubst import expandvars, interpolate


@fixture
def mock_env_vars(monkeypatch):
    monkeypatch.setenv("TOTO", "toto")
    monkeypatch.setenv("TATA", "tata")
    monkeypatch.setenv("EMPTY", "")
    monkeypatch.delenv("ABCD", raising=False)


def test_envsubst(mock_env_vars):
    """
    Function to test envsubst.

    [(ENV string, expected result)]
    """
    tests = [
        ("${TOTO}", "toto"),
        ("${TOTO}$TATA$TOTO", "tototatatoto"),
        ("$TOTO $TATA", "toto tata"),
        ("$TOTO -- $TATA", "toto -- tata"),
        ("${ABCD:-Cake}", "Cake"),
        ("${TOTO:-Cake}", "toto"),
        ("${EMPTY:-Cake}", "Cake"),
        ("${EMPTY-Cake}", ""),
        ("${ABCD}", ""),
        ("price: $$5", "price: $5"),
        (
            "$TOTO -- ${TATA:+SUCCESS} -- ${AWS::AccountId}",
            "toto -- SUCCESS -- ${AWS::AccountId}",
        ),
    ]
    for test in tests:
        assert expandvars(test[0]) == test[1]


def test_interpolate_with_mapping():
    content = {
        "services": {
            "web": {"image": "web:${TAG}", "ports": ["${PORT:-80}:3000"], "mem": 128}
        }
    }
    assert interpolate(content, {"TAG": "1.0.0"}) == {
        "services": {"web": {"image": "web:1.0.0", "ports": ["80:3000"], "mem": 128}}
    }
