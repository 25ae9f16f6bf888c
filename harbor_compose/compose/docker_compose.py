#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Loading and writing docker-compose.yml files (format v2).
"""

from __future__ import annotations

from os import environ, path

import yaml
from compose_x_common.compose_x_common import keyisset, set_else_none

from harbor_compose.common.envsubst import interpolate
from harbor_compose.common.files import parse_env_file
from harbor_compose.common.logging import LOG
from harbor_compose.exceptions import ConfigurationError
from harbor_compose.specs import DOCKER_COMPOSE_SPEC, validate_content

DOCKER_COMPOSE_FILE = "docker-compose.yml"
DEFAULT_VERSION = "2"
DOTENV_FILE = ".env"


def set_environment_dict_from_list(environment: list) -> dict:
    """
    Transforms a list of KEY=value strings into a dict. A KEY without value maps to None.

    :param list environment:
    :rtype: dict
    """
    env_vars_to_map = {}
    for key in environment:
        if not isinstance(key, str):
            raise TypeError(key, "is not a string")
        if "=" in key:
            name, value = key.split("=", 1)
            env_vars_to_map[name] = value
        else:
            env_vars_to_map[key] = None
    return env_vars_to_map


def parse_port(port) -> tuple:
    """
    Parses a compose port mapping.

    :param port: "80:3000", "3000", 3000, "127.0.0.1:80:3000" or "80:3000/tcp"
    :returns: public port, container port
    :rtype: tuple
    :raises: ConfigurationError for an invalid mapping
    """
    parts = str(port).split("/", 1)[0].split(":")
    try:
        if len(parts) == 1:
            return int(parts[0]), int(parts[0])
        return int(parts[-2]), int(parts[-1])
    except ValueError as error:
        raise ConfigurationError(f"invalid port {port}") from error


class DockerComposeService:
    """
    A docker-compose service. Environment values are kept as strings.

    :ivar str name:
    :ivar build: build context, None when the service is not built locally
    :ivar str image:
    :ivar list ports: port mappings, public:internal
    :ivar dict environment: the environment section of the service
    :ivar list env_file: env files the service reads
    :ivar str base_dir: directory env files are relative to
    """

    def __init__(self, name: str, definition: dict = None, base_dir: str = None):
        definition = definition or {}
        self.name = name
        self.base_dir = base_dir or path.abspath(".")
        self.build = set_else_none("build", definition)
        self.image = set_else_none("image", definition, alt_value="")
        self.ports = [str(port) for port in set_else_none("ports", definition, [])]
        environment = set_else_none("environment", definition, alt_value={})
        if isinstance(environment, list):
            environment = set_environment_dict_from_list(environment)
        self.environment = {
            key: (str(value) if value is not None else None)
            for key, value in environment.items()
        }
        env_files = set_else_none("env_file", definition, alt_value=[])
        self.env_file = [env_files] if isinstance(env_files, str) else list(env_files)

    def __repr__(self):
        return self.name

    def env_file_path(self, env_file: str) -> str:
        return path.normpath(path.join(self.base_dir, env_file))

    @property
    def resolved_environment(self) -> dict:
        """
        The variables docker-compose would give to the container: env files first, then
        the environment section. Variables declared without a value are taken from the
        shell, and dropped when unset.

        :raises: ConfigurationError when an env file is missing
        """
        resolved = {}
        for env_file in self.env_file:
            file_path = self.env_file_path(env_file)
            try:
                resolved.update(parse_env_file(file_path))
            except FileNotFoundError as error:
                raise ConfigurationError(
                    f"Service {self.name} - env_file {file_path} not found"
                ) from error
        for key, value in self.environment.items():
            if value is None:
                if key in environ:
                    resolved[key] = environ[key]
                continue
            resolved[key] = value
        return resolved

    def find_env_file(self, suffix: str):
        """
        :returns: the first env_file of the service whose name ends with suffix
        :rtype: str
        """
        for env_file in self.env_file:
            if env_file.endswith(suffix):
                return env_file
        return None

    @property
    def first_port(self) -> tuple:
        if not self.ports:
            raise ConfigurationError(
                f"Service {self.name} - At least one port mapping is required in docker compose file."
            )
        return parse_port(self.ports[0])

    def to_dict(self) -> dict:
        definition = {}
        if self.build:
            definition["build"] = self.build
        definition["image"] = self.image
        if self.ports:
            definition["ports"] = list(self.ports)
        if self.environment:
            definition["environment"] = dict(self.environment)
        if self.env_file:
            definition["env_file"] = list(self.env_file)
        return definition


class DockerCompose:
    """
    A docker-compose.yml file. Services keep their declaration order.
    """

    def __init__(self, version: str = DEFAULT_VERSION, services: dict = None):
        self.version = version
        self.services = services if services is not None else {}

    @classmethod
    def from_content(
        cls, content: dict, base_dir: str = None, file_name: str = None
    ) -> DockerCompose:
        """
        Builds the object from a loaded docker-compose document, interpolating variables
        with the shell environment and the .env file found in base_dir.
        """
        base_dir = base_dir or path.abspath(".")
        validate_content(content, DOCKER_COMPOSE_SPEC, file_name)
        version = str(set_else_none("version", content, alt_value=DEFAULT_VERSION))
        if not version.startswith(DEFAULT_VERSION):
            raise ConfigurationError(
                f"{file_name or 'docker-compose'} - only docker-compose format v2 is supported"
            )
        content = interpolate(content, get_interpolation_mapping(base_dir))
        services = {}
        if keyisset("services", content):
            for name, definition in content["services"].items():
                services[name] = DockerComposeService(name, definition, base_dir)
        return cls(version, services)

    @classmethod
    def from_file(cls, file_path: str) -> DockerCompose:
        content = load_yaml_file(file_path)
        return cls.from_content(
            content, path.dirname(path.abspath(file_path)), file_path
        )

    def get_service(self, name: str) -> DockerComposeService:
        if name not in self.services:
            raise ConfigurationError(
                f"Container {name} defined in the harbor compose file cannot be found in the docker compose file"
            )
        return self.services[name]

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "services": {
                name: service.to_dict() for name, service in self.services.items()
            },
        }

    def to_yaml(self) -> str:
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def write(self, file_path: str) -> None:
        LOG.debug(f"writing docker-compose file to {file_path}")
        with open(file_path, "w") as compose_fd:
            compose_fd.write(self.to_yaml())


def get_interpolation_mapping(base_dir: str) -> dict:
    """
    Variables available for interpolation: the .env file, overridden by the shell environment
    """
    mapping = {}
    dotenv = path.join(base_dir, DOTENV_FILE)
    if path.exists(dotenv):
        mapping.update(parse_env_file(dotenv))
    mapping.update(environ)
    return mapping


def load_yaml_file(file_path: str):
    """
    :raises: ConfigurationError if the file is missing or not valid YAML
    """
    try:
        with open(file_path) as yaml_fd:
            content = yaml.safe_load(yaml_fd.read())
    except FileNotFoundError as error:
        raise ConfigurationError(f"{file_path} not found") from error
    except yaml.YAMLError as error:
        raise ConfigurationError(f"{file_path} is not valid YAML: {error}") from error
    if content is None:
        raise ConfigurationError(f"{file_path} is empty")
    return content
