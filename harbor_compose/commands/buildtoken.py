#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.common.settings import HarborComposeSettings

from tabulate import tabulate

from harbor_compose.commands import MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND
from harbor_compose.commands.login import authenticate
from harbor_compose.common import get_build_token_env_var


def list_build_tokens(settings: HarborComposeSettings) -> None:
    """
    Lists the build token of each shipment of harbor-compose.yml, with the name of the
    environment variable CI/CD services must set it in.
    """
    authenticate(settings)
    harbor_compose = settings.load_harbor_compose()
    if not harbor_compose.shipments:
        print("no shipments found")
        return
    rows = []
    for shipment_name, compose_shipment in harbor_compose.shipments.items():
        shipment_env = settings.api.shipit.get_shipment_environment(
            shipment_name, compose_shipment.env
        )
        token = (
            shipment_env.build_token
            if shipment_env
            else MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND
        )
        rows.append(
            [
                shipment_name,
                compose_shipment.env,
                get_build_token_env_var(shipment_name, compose_shipment.env),
                token,
            ]
        )
    print()
    print(
        tabulate(
            rows, ["SHIPMENT", "ENVIRONMENT", "CICD_ENVAR", "TOKEN"], tablefmt="plain"
        )
    )
    print()


BUILDTOKEN_ACTIONS = {"list": list_build_tokens, "ls": list_build_tokens}
