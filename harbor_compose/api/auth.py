#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Client to the authentication API
"""

from __future__ import annotations

from compose_x_common.compose_x_common import keyisset

from harbor_compose.api.client import HarborApiClient
from harbor_compose.exceptions import ApiError, AuthenticationError

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128


class AuthClient(HarborApiClient):
    def post(self, path: str, payload: dict) -> dict:
        try:
            response = self.request(
                "POST", self.uri(path), payload=payload, authenticated=False
            )
        except ApiError as error:
            raise AuthenticationError(str(error)) from error
        return self.json(response)

    def get_token(self, username: str, password: str) -> str:
        """
        Exchanges the username and password for a token.

        :raises: AuthenticationError when the password length is invalid or the login failed
        :rtype: str
        """
        if not PASSWORD_MIN_LENGTH <= len(password.encode()) <= PASSWORD_MAX_LENGTH:
            raise AuthenticationError(
                f"Password is either less than the minimum of {PASSWORD_MIN_LENGTH} "
                f"or over the maximum number of {PASSWORD_MAX_LENGTH} characters"
            )
        result = self.post(
            "/v1/auth/gettoken", {"username": username, "password": password}
        )
        if not keyisset("success", result) or not keyisset("token", result):
            raise AuthenticationError(f"Login failed for {username}")
        return result["token"]

    def check_token(self, username: str, token: str) -> bool:
        if not token:
            return False
        result = self.post(
            "/v1/auth/checktoken", {"username": username, "token": token}
        )
        return keyisset("success", result)

    def destroy_token(self, username: str, token: str) -> bool:
        if not token:
            raise AuthenticationError("Empty token")
        result = self.post(
            "/v1/auth/destroytoken", {"username": username, "token": token}
        )
        return keyisset("success", result)
