#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

import boto3
from botocore.stub import Stubber
from pytest import fixture, raises

from harbor_compose.common.aws import get_account_id, verify_account
from harbor_compose.exceptions import ConfigurationError

CALLER_IDENTITY = {
    "UserId": "AIDAEXAMPLEUSERID",
    "Account": "123456789012",
    "Arn": "arn:aws:iam::123456789012:user/jdoe",
}


@fixture()
def sts_client():
    return boto3.client(
        "sts",
        region_name="us-east-1",
        aws_access_key_id="AKIAEXAMPLE",
        aws_secret_access_key="secret",
    )


def test_get_account_id(sts_client):
    stubber = Stubber(sts_client)
    stubber.add_response("get_caller_identity", CALLER_IDENTITY, {})
    with stubber:
        assert get_account_id(client=sts_client) == "123456789012"


def test_verify_account(sts_client):
    stubber = Stubber(sts_client)
    stubber.add_response("get_caller_identity", CALLER_IDENTITY, {})
    stubber.add_response("get_caller_identity", CALLER_IDENTITY, {})
    stubber.add_client_error(
        "get_caller_identity", service_error_code="ExpiredToken", http_status_code=403
    )
    with stubber:
        assert verify_account("123456789012", client=sts_client) == "123456789012"
        with raises(ConfigurationError):
            verify_account("210987654321", client=sts_client)
        with raises(ConfigurationError):
            verify_account("123456789012", client=sts_client)
