#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Management of the ~/.harbor/credentials file
"""

from __future__ import annotations

import json
from os import chmod, makedirs, path, remove

from harbor_compose.common.config import HARBOR_HOME_DIR
from harbor_compose.common.logging import LOG
from harbor_compose.exceptions import AuthenticationError

CREDENTIALS_VERSION = "v1"


class Credentials:
    """
    The username and token persisted after a successful login
    """

    def __init__(self, username: str, token: str, version: str = CREDENTIALS_VERSION):
        self.version = version
        self.username = username
        self.token = token

    def __repr__(self):
        return f"{self.username}@{self.version}"

    def to_dict(self) -> dict:
        return {"version": self.version, "username": self.username, "token": self.token}


def credentials_path(home_dir: str = None) -> str:
    return path.join(home_dir or HARBOR_HOME_DIR, "credentials")


def read_credentials(home_dir: str = None):
    """
    :param str home_dir: override of the ~/.harbor directory
    :returns: the stored credentials, None if there are none
    :rtype: Credentials
    """
    file_path = credentials_path(home_dir)
    try:
        with open(file_path) as creds_fd:
            content = json.loads(creds_fd.read())
    except FileNotFoundError:
        LOG.debug(f"No credentials found at {file_path}")
        return None
    except json.JSONDecodeError as error:
        raise AuthenticationError(f"{file_path} is not valid JSON") from error
    return Credentials(
        content.get("username", ""),
        content.get("token", ""),
        content.get("version", CREDENTIALS_VERSION),
    )


def write_credentials(credentials: Credentials, home_dir: str = None) -> str:
    """
    Writes the credentials file, readable by the current user only.

    :returns: path to the credentials file
    """
    home_dir = home_dir or HARBOR_HOME_DIR
    makedirs(home_dir, mode=0o700, exist_ok=True)
    file_path = credentials_path(home_dir)
    with open(file_path, "w") as creds_fd:
        creds_fd.write(json.dumps(credentials.to_dict()))
    chmod(file_path, 0o600)
    return file_path


def delete_credentials(home_dir: str = None) -> bool:
    file_path = credentials_path(home_dir)
    try:
        remove(file_path)
    except FileNotFoundError:
        return False
    LOG.debug("Credentials file removed successfully.")
    return True
