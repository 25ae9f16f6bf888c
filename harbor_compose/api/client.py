#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Base client to the Harbor REST APIs. A requests.Session can be given to share connections
or to stub the HTTP calls.
"""

from __future__ import annotations

from urllib.parse import quote

import requests

from harbor_compose.common.logging import LOG
from harbor_compose.exceptions import ApiError

DEFAULT_TIMEOUT = 60


class HarborApiClient:
    """
    Base class of the API clients.

    :ivar str base_uri: root of the API, without trailing slash
    :ivar str username: sent as x-username when set
    :ivar str token: sent as x-token when set
    :ivar requests.Session session:
    """

    def __init__(
        self,
        base_uri: str,
        username: str = None,
        token: str = None,
        session: requests.Session = None,
    ):
        self.base_uri = base_uri.rstrip("/")
        self.username = username
        self.token = token
        self.session = session if session is not None else requests.Session()

    def __repr__(self):
        return f"{self.__class__.__name__}({self.base_uri})"

    def uri(self, template: str, **params) -> str:
        """
        Expands the path template with the URL-encoded params and prefixes it with the base URI

        >>> HarborApiClient("http://shipit").uri("/v1/shipment/{shipment}", shipment="my app")
        'http://shipit/v1/shipment/my%20app'
        """
        quoted = {key: quote(str(value), safe="") for key, value in params.items()}
        return f"{self.base_uri}{template.format(**quoted)}"

    @property
    def auth_headers(self) -> dict:
        if not self.token:
            return {}
        return {"x-username": self.username or "", "x-token": self.token}

    def request(
        self,
        method: str,
        uri: str,
        expected_codes: tuple = (200,),
        allowed_codes: tuple = (),
        payload=None,
        headers: dict = None,
        authenticated: bool = True,
    ) -> requests.Response:
        """
        Issues the HTTP request.

        :param str method: HTTP verb
        :param str uri: full URI
        :param tuple expected_codes: status codes considered successful
        :param tuple allowed_codes: other status codes returned to the caller without error
        :param payload: JSON body
        :param dict headers: extra headers
        :param bool authenticated: send the credentials headers
        :raises: ApiError for network errors and unexpected status codes
        :rtype: requests.Response
        """
        request_headers = dict(self.auth_headers) if authenticated else {}
        if headers:
            request_headers.update(headers)
        LOG.debug(f"{method} {uri}")
        try:
            response = self.session.request(
                method,
                uri,
                json=payload,
                headers=request_headers,
                timeout=DEFAULT_TIMEOUT,
            )
        except requests.exceptions.RequestException as error:
            raise ApiError(f"{method} {uri} failed: {error}") from error
        LOG.debug(f"{method} {uri} - status code = {response.status_code}")
        if response.status_code in expected_codes or response.status_code in allowed_codes:
            return response
        LOG.debug(response.text)
        raise ApiError(
            f"{method} {uri} returned {response.status_code}",
            status_code=response.status_code,
        )

    @staticmethod
    def json(response: requests.Response):
        """
        :raises: ApiError when the body is not JSON
        """
        try:
            return response.json()
        except ValueError as error:
            raise ApiError(
                f"{response.url} returned an invalid JSON document",
                status_code=response.status_code,
            ) from error
