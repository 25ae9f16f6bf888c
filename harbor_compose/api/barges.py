#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Client to the barges API, which describes the AWS accounts and networks of the Harbor barges,
the Harbor groups, and serves migration files.
"""

from __future__ import annotations

from compose_x_common.compose_x_common import set_else_none

from harbor_compose.api.client import HarborApiClient


class Barge:
    """
    A Harbor cluster and the AWS account / network it runs in

    :ivar str name:
    :ivar str account_id: AWS account ID
    :ivar str account_name: AWS account alias
    :ivar str vpc: VPC ID
    :ivar list private_subnets:
    :ivar list public_subnets:
    """

    def __init__(self, definition: dict):
        self.name = set_else_none("name", definition, alt_value="")
        self.account_id = str(set_else_none("accountId", definition, alt_value=""))
        self.account_name = set_else_none("accountName", definition, alt_value="")
        self.vpc = set_else_none("vpc", definition, alt_value="")
        self.private_subnets = set_else_none("privateSubnets", definition, [])
        self.public_subnets = set_else_none("publicSubnets", definition, [])

    def __repr__(self):
        return self.name


class BargesClient(HarborApiClient):
    def get_barges(self) -> list:
        """
        :rtype: list[Barge]
        """
        response = self.request("GET", self.uri("/barges"), authenticated=False)
        body = self.json(response)
        return [Barge(barge) for barge in set_else_none("barges", body, [])]

    def get_barge(self, name: str):
        """
        :returns: the barge with that name, None if there is none
        :rtype: Barge
        """
        for barge in self.get_barges():
            if barge.name == name:
                return barge
        return None

    def get_group(self, group_id: str) -> dict:
        """
        :returns: the group members, as admins and users lists of e-mail addresses
        """
        response = self.request(
            "GET",
            self.uri("/harbor/groups/{group_id}", group_id=group_id),
            authenticated=False,
        )
        return self.json(response)

    def download_file(self, file_name: str) -> bytes:
        response = self.request(
            "GET", self.uri("/{file_name}", file_name=file_name), authenticated=False
        )
        return response.content
