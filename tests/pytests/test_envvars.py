#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import fixture, raises

from harbor_compose.exceptions import ProviderNotFound
from harbor_compose.shipment import HIDDEN, EnvVar, ShipmentEnvironment
from harbor_compose.shipment.envvars import (
    RESTART,
    EnvVarBuckets,
    copy_env_vars,
    env_var,
    env_var_hidden,
    find_env_var,
    is_log_shipping,
    is_special,
)


@fixture()
def shipment_env(shipment_definition):
    return ShipmentEnvironment(shipment_definition)


def test_special_and_log_shipping_names():
    assert is_special("CUSTOMER")
    assert is_special("barge")
    assert is_special(RESTART)
    assert not is_special("FOO")
    assert is_log_shipping("LOGS_ENDPOINT")
    assert is_log_shipping("ship_logs")
    assert not is_log_shipping("LOGS")


def test_classification_is_exhaustive_and_exclusive(shipment_env):
    source = (
        shipment_env.parent_shipment.env_vars
        + shipment_env.env_vars
        + shipment_env.containers[0].env_vars
    )
    buckets = EnvVarBuckets(source)
    assert len(source) == sum(
        len(bucket)
        for bucket in [
            buckets.basic,
            buckets.special,
            buckets.hidden,
            buckets.log_shipping,
        ]
    )
    names = [
        set(buckets.basic),
        set(buckets.special),
        set(buckets.hidden),
        set(buckets.log_shipping),
    ]
    for index, bucket in enumerate(names):
        for other in names[index + 1 :]:
            assert not bucket & other
    assert buckets.special["BARGE"] == "digital-sandbox"
    assert buckets.hidden == {"ENV_SECRET": "s3cr3t", "DB_PASSWORD": "p@ss"}
    assert set(buckets.log_shipping) == {"SHIP_LOGS", "LOGS_ENDPOINT"}
    assert set(buckets.basic) == {"SHIPMENT_VAR", "FOO", "PRICE"}


def test_dollar_escaping():
    destination = {}
    special = {}
    copy_env_vars(
        [env_var("PRICE", "$5"), env_var("PRODUCT", "$product")],
        destination,
        special=special,
    )
    assert destination == {"PRICE": "$$5"}
    assert special == {"PRODUCT": "$product"}


def test_unset_buckets_are_not_collected():
    destination = {}
    copy_env_vars(
        [env_var_hidden("SECRET", "value"), env_var("SHIP_LOGS", "logzio")],
        destination,
    )
    assert destination == {}


def test_find_env_var():
    env_vars = [env_var("FOO", "bar"), env_var_hidden("SECRET", "value")]
    assert find_env_var("SECRET", env_vars).type == HIDDEN
    assert find_env_var("secret", env_vars) is None
    assert EnvVarBuckets().basic == {}


def test_env_var_equality():
    assert EnvVar("FOO", "bar") == env_var("FOO", "bar")
    assert EnvVar("FOO", "bar") != env_var_hidden("FOO", "bar")


def test_ec2_provider(shipment_env):
    assert shipment_env.ec2_provider.replicas == 2
    shipment_env.providers = []
    with raises(ProviderNotFound):
        shipment_env.ec2_provider
