#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Build providers, which prepare a project to be built locally or by a CI service
"""

from __future__ import annotations

from harbor_compose.build_providers.circleci import CircleCIv1, CircleCIv2
from harbor_compose.build_providers.codeship import Codeship
from harbor_compose.build_providers.local import LocalBuild
from harbor_compose.build_providers.provider import BuildProvider
from harbor_compose.exceptions import BuildProviderNotFound

BUILD_PROVIDERS = {
    provider.name: provider for provider in [LocalBuild, CircleCIv1, CircleCIv2, Codeship]
}


def get_build_provider(name: str) -> BuildProvider:
    """
    :param str name: name of the provider, case insensitive
    :raises: BuildProviderNotFound
    """
    if name.lower() not in BUILD_PROVIDERS:
        raise BuildProviderNotFound(f"no build provider found for: {name}")
    return BUILD_PROVIDERS[name.lower()]()
