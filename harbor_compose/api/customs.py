#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Clients to the catalogit and customs APIs, which keep the catalog of container images and
deploy them.
"""

from __future__ import annotations

from harbor_compose.api.client import HarborApiClient
from harbor_compose.common.logging import LOG
from harbor_compose.shipment import EC2_PROVIDER

BUILD_TOKEN_HEADER = "x-build-token"


class CatalogitClient(HarborApiClient):
    def catalog(self, name: str, image: str, version: str) -> str:
        """
        Catalogs a container image version

        :returns: the API response body
        :rtype: str
        """
        response = self.request(
            "POST",
            self.uri("/v1/containers"),
            payload={"name": name, "image": image, "version": version},
            authenticated=False,
        )
        LOG.debug(response.text)
        return response.text


class CustomsClient(HarborApiClient):
    def is_cataloged(self, name: str, version: str) -> bool:
        response = self.request(
            "GET",
            self.uri("/catalog/{name}/{version}/", name=name, version=version),
            allowed_codes=(404,),
            authenticated=False,
        )
        return response.status_code != 404

    def deploy(
        self,
        shipment: str,
        env: str,
        build_token: str,
        payload: dict,
        provider: str = EC2_PROVIDER,
    ) -> str:
        """
        Deploys, and catalogs if need be, a container image to a shipment environment.

        :param str shipment:
        :param str env:
        :param str build_token: token of the shipment environment
        :param dict payload: name, image, version of the container and whether to catalog it
        :param str provider:
        :rtype: str
        """
        response = self.request(
            "POST",
            self.uri(
                "/deploy/{shipment}/{env}/{provider}",
                shipment=shipment,
                env=env,
                provider=provider,
            ),
            payload=payload,
            headers={BUILD_TOKEN_HEADER: build_token},
            authenticated=False,
        )
        LOG.debug(response.text)
        return response.text

    def catalog(
        self,
        shipment: str,
        env: str,
        build_token: str,
        payload: dict,
        provider: str = EC2_PROVIDER,
    ) -> str:
        response = self.request(
            "POST",
            self.uri(
                "/catalog/{shipment}/{env}/{provider}",
                shipment=shipment,
                env=env,
                provider=provider,
            ),
            payload=payload,
            headers={BUILD_TOKEN_HEADER: build_token},
            authenticated=False,
        )
        LOG.debug(response.text)
        return response.text
