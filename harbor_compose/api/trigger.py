#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Client to the trigger API, which applies the configuration of a shipment environment
"""

from __future__ import annotations

from harbor_compose.api.client import HarborApiClient
from harbor_compose.common.logging import LOG
from harbor_compose.shipment import EC2_PROVIDER


def get_trigger_messages(body) -> list:
    """
    The API returns either a single message or a list of messages.

    >>> get_trigger_messages({"message": "error"})
    ['error']
    >>> get_trigger_messages({"message": ["app.dev.services.ec2.dmtio.net:5000"]})
    ['app.dev.services.ec2.dmtio.net:5000']
    """
    if not isinstance(body, dict) or "message" not in body:
        return []
    message = body["message"]
    if isinstance(message, list):
        return [str(item) for item in message]
    return [str(message)]


class TriggerClient(HarborApiClient):
    def trigger(self, shipment: str, env: str) -> tuple:
        """
        :returns: whether the trigger succeeded, and the messages it returned
        :rtype: tuple[bool, list]
        """
        response = self.request(
            "POST",
            self.uri(
                f"/{{shipment}}/{{env}}/{EC2_PROVIDER}", shipment=shipment, env=env
            ),
            allowed_codes=tuple(range(400, 600)),
            authenticated=False,
        )
        if response.status_code != 200:
            LOG.error(f"trigger api returned a {response.status_code}")
            LOG.error(response.text)
            return False, []
        return True, get_trigger_messages(self.json(response))
