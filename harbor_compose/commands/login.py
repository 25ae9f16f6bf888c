#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
login and logout commands. Most commands call authenticate() first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.common.settings import HarborComposeSettings

import getpass

from harbor_compose.common.credentials import (
    Credentials,
    delete_credentials,
    read_credentials,
    write_credentials,
)
from harbor_compose.common.logging import LOG
from harbor_compose.exceptions import ApiError, AuthenticationError

LOGIN_MESSAGE = (
    "Login with your Argonauts Login ID to run harbor compose commands. "
    "If you don't have a Argonauts Login ID, please reach out in slack to the "
    "cloud architecture team."
)


def stored_credentials_are_valid(
    settings: HarborComposeSettings, credentials: Credentials
) -> bool:
    try:
        return settings.api.auth.check_token(credentials.username, credentials.token)
    except (ApiError, AuthenticationError) as error:
        print(f"Unable to verify token: {error}")
        return False


def authenticate(settings: HarborComposeSettings) -> Credentials:
    """
    Uses the stored credentials when the token is still valid, otherwise prompts for the
    username and password and stores the new token.

    :param HarborComposeSettings settings:
    :returns: the credentials now set on the settings
    :rtype: Credentials
    :raises: AuthenticationError when the login fails
    """
    credentials = read_credentials(settings.home_dir)
    if credentials and stored_credentials_are_valid(settings, credentials):
        LOG.debug(f"Using stored credentials of {credentials.username}")
        settings.set_credentials(credentials)
        return credentials

    print(LOGIN_MESSAGE)
    username = input("Username: ").strip()
    password = getpass.getpass("Password: ").strip()
    token = settings.api.auth.get_token(username, password)
    print("Login Succeeded")
    credentials = Credentials(username, token)
    write_credentials(credentials, settings.home_dir)
    settings.set_credentials(credentials)
    return credentials


def login(settings: HarborComposeSettings) -> None:
    try:
        authenticate(settings)
    except AuthenticationError:
        print("Login Failed")
        raise


def logout(settings: HarborComposeSettings) -> None:
    """
    Destroys the token and removes the credentials file.

    :raises: AuthenticationError when there are no stored credentials
    """
    credentials = read_credentials(settings.home_dir)
    if credentials is None:
        raise AuthenticationError("Not logged in, no credentials found")
    settings.api.auth.destroy_token(
        credentials.username.strip(), credentials.token.strip()
    )
    delete_credentials(settings.home_dir)
    settings.set_credentials(None)
    print("Logout Succeeded")
