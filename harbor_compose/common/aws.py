#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
AWS helpers used when migrating a shipment environment to ECS Fargate
"""

from __future__ import annotations

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from harbor_compose.common.logging import LOG
from harbor_compose.exceptions import ConfigurationError


def get_account_id(session=None, client=None) -> str:
    """
    :param boto3.session.Session session: session to create the STS client from
    :param client: an STS client to use instead
    :returns: the AWS account ID of the current credentials
    :rtype: str
    """
    if client is None:
        session = session or boto3.session.Session()
        client = session.client("sts")
    return client.get_caller_identity()["Account"]


def verify_account(expected_account_id: str, profile_name: str = None, client=None):
    """
    Makes sure the AWS credentials in use belong to the account the barge lives in.

    :param str expected_account_id:
    :param str profile_name: AWS profile to use
    :param client: an STS client to use instead
    :raises: ConfigurationError if the accounts differ or credentials cannot be used
    """
    try:
        session = (
            boto3.session.Session(profile_name=profile_name)
            if client is None
            else None
        )
        account_id = get_account_id(session=session, client=client)
    except (BotoCoreError, ClientError) as error:
        raise ConfigurationError(
            f"Unable to verify the AWS account in use: {error}"
        ) from error
    if account_id != expected_account_id:
        raise ConfigurationError(
            f"The AWS credentials in use belong to {account_id}, expected {expected_account_id}"
        )
    LOG.info(f"AWS account {account_id} verified")
    return account_id
