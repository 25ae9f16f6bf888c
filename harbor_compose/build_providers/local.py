#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from harbor_compose.build_providers.provider import BuildProvider


class LocalBuild(BuildProvider):
    """
    Builds the images on the local machine. Only the build context is set.
    """

    name = "local"
