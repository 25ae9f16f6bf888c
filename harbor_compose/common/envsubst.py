#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Variables interpolation for docker-compose files, following the docker-compose rules:
$VAR, ${VAR}, ${VAR:-default}, ${VAR-default}, ${VAR:+alt} and $$ as a literal $.
"""

from __future__ import annotations

import os
import re

from harbor_compose.common.logging import LOG

ENV_VAR_REGEXP = re.compile(r"\$\$|\$(\w+)|\$\{([^}]*)\}")
BRACED_REGEXP = re.compile(r"^(\w+)(?:(:?[-+])(.*))?$", re.DOTALL)
IF_UNDEFINED = ("-", ":-")
IF_DEFINED = ("+", ":+")


def expandvars(value: str, mapping: dict = None) -> str:
    """
    Expands the variables found in value.

    :param str value: the string to interpolate
    :param dict mapping: variables to use. Defaults to os.environ
    :returns: the interpolated string
    """
    if mapping is None:
        mapping = os.environ

    def replace_var(match):
        if match.group(0) == "$$":
            return "$"
        if match.group(1):
            return lookup(match.group(1))
        braced = BRACED_REGEXP.match(match.group(2))
        if not braced:
            LOG.warning(f"Invalid interpolation format {match.group(0)}")
            return match.group(0)
        name, operator, alt_value = braced.groups()
        if operator is None:
            return lookup(name)
        is_set = name in mapping
        if operator.startswith(":"):
            is_set = bool(mapping.get(name))
        if operator in IF_UNDEFINED:
            return mapping[name] if is_set else expandvars(alt_value, mapping)
        if operator in IF_DEFINED:
            return expandvars(alt_value, mapping) if is_set else ""
        return match.group(0)

    def lookup(name):
        if name not in mapping:
            LOG.warning(f"The {name} variable is not set. Defaulting to a blank string.")
            return ""
        return mapping[name]

    return ENV_VAR_REGEXP.sub(replace_var, value)


def interpolate(content, mapping: dict = None):
    """
    Recursively interpolates every string found in a loaded YAML document

    :param content: dict, list or scalar
    :param dict mapping:
    """
    if isinstance(content, dict):
        return {key: interpolate(value, mapping) for key, value in content.items()}
    elif isinstance(content, list):
        return [interpolate(value, mapping) for value in content]
    elif isinstance(content, str):
        return expandvars(content, mapping)
    return content
