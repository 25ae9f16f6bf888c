#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harbor_compose.common.settings import HarborComposeSettings

from harbor_compose.commands.login import authenticate
from harbor_compose.common import get_timestamp
from harbor_compose.shipment.envvars import RESTART, env_var


def restart(settings: HarborComposeSettings) -> None:
    """
    Restarts the shipment environments: HC_RESTART is set to the current time at the
    environment level, which changes the configuration, and the environments are triggered.
    """
    authenticate(settings)
    api = settings.api
    harbor_compose = settings.load_harbor_compose()
    for shipment_name, compose_shipment in harbor_compose.shipments.items():
        env = compose_shipment.env
        print(f"restarting shipment: {shipment_name} {env} ...")
        api.shipit.save_env_var(shipment_name, env, env_var(RESTART, get_timestamp()))
        _, messages = api.trigger.trigger(shipment_name, env)
        for message in messages:
            print(message)
        print("done")
