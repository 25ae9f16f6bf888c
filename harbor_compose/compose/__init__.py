#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
docker-compose and harbor-compose files and their transformation from/to Harbor shipments
"""
