#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
JSON schemas of the compose files read by harbor-compose
"""

from __future__ import annotations

from json import loads

import jsonschema
from importlib_resources import files as pkg_files

from harbor_compose.common.logging import LOG
from harbor_compose.exceptions import ConfigurationError

DOCKER_COMPOSE_SPEC = "docker-compose.spec.json"
HARBOR_COMPOSE_SPEC = "harbor-compose.spec.json"


def load_schema(spec_name: str) -> dict:
    source = pkg_files("harbor_compose").joinpath("specs").joinpath(spec_name)
    return loads(source.read_text())


def validate_content(content, spec_name: str, file_name: str = None) -> None:
    """
    Validates loaded YAML content against one of the schemas

    :param content: the loaded document
    :param str spec_name: file name of the schema
    :param str file_name: the validated file, for error messages
    :raises: ConfigurationError
    """
    LOG.debug(f"Validating {file_name} against input schema {spec_name}")
    try:
        jsonschema.validate(content, load_schema(spec_name))
    except jsonschema.exceptions.ValidationError as error:
        location = ".".join(str(part) for part in error.absolute_path)
        raise ConfigurationError(
            f"{file_name or 'input'} - {location or 'root'}: {error.message}"
        ) from error
