#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.common.settings import HarborComposeSettings

from harbor_compose.commands import MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND
from harbor_compose.commands.login import authenticate
from harbor_compose.common.files import ask_for_confirmation
from harbor_compose.common.logging import LOG
from harbor_compose.shipment import EC2_PROVIDER


def down(settings: HarborComposeSettings) -> None:
    """
    Stops the shipment environments by scaling them to 0 replicas, or deletes them when
    --delete is set.
    """
    authenticate(settings)
    api = settings.api
    harbor_compose = settings.load_harbor_compose()
    for shipment_name, compose_shipment in harbor_compose.shipments.items():
        env = compose_shipment.env
        if settings.delete:
            if not ask_for_confirmation(
                f"Delete {shipment_name} {env}? This cannot be undone."
            ):
                LOG.info(f"{shipment_name}::{env} - Skipping deletion")
                continue
            print(f"Deleting {shipment_name} {env} ...")
            api.shipit.delete_shipment_environment(shipment_name, env)
            print("done")
            continue

        print(f"Stopping {shipment_name} {env} ...")
        if api.shipit.get_shipment_environment(shipment_name, env) is None:
            print(MESSAGE_SHIPMENT_ENVIRONMENT_NOT_FOUND)
            continue
        api.shipit.update_provider(
            shipment_name, env, {"name": EC2_PROVIDER, "replicas": 0}
        )
        _, messages = api.trigger.trigger(shipment_name, env)
        for message in messages:
            print(message)
        print("done")
