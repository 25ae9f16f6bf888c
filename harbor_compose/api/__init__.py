#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Clients to the Harbor REST APIs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.common.config import HarborConfig
    from harbor_compose.common.credentials import Credentials

import requests

from harbor_compose.api.auth import AuthClient
from harbor_compose.api.barges import BargesClient
from harbor_compose.api.customs import CatalogitClient, CustomsClient
from harbor_compose.api.helmit import HelmitClient
from harbor_compose.api.shipit import ShipitClient
from harbor_compose.api.trigger import TriggerClient


class HarborApi:
    """
    All the API clients, configured from the endpoints configuration and the user credentials.
    They share one requests.Session.
    """

    def __init__(
        self,
        config: HarborConfig,
        credentials: Credentials = None,
        session: requests.Session = None,
    ):
        self.config = config
        self.credentials = credentials
        self.session = session if session is not None else requests.Session()
        username = credentials.username if credentials else None
        token = credentials.token if credentials else None
        self.shipit = ShipitClient(config.shipit_uri, username, token, self.session)
        self.auth = AuthClient(config.auth_uri, session=self.session)
        self.catalogit = CatalogitClient(config.catalogit_uri, session=self.session)
        self.customs = CustomsClient(config.customs_uri, session=self.session)
        self.trigger = TriggerClient(config.trigger_uri, session=self.session)
        self.helmit = HelmitClient(config.helmit_uri, session=self.session)
        self.barges = BargesClient(config.barges_uri, session=self.session)
