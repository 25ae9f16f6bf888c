#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Functions and classes to write files to the local filesystem, prompting before overwriting.
"""

from __future__ import annotations

from os import chmod, makedirs, path

from dotenv import dotenv_values

from harbor_compose.common.logging import LOG

YES_ANSWERS = ["y", "yes"]
NO_ANSWERS = ["n", "no"]
SENSITIVE_FILES = [".terraform"]


def ask_for_confirmation(question: str = None) -> bool:
    """
    Prompts the user until a yes or no answer is given. End of input counts as no.

    :param str question: optional text displayed before reading the answer
    :rtype: bool
    """
    prompt = f"{question} " if question else ""
    while True:
        try:
            response = input(prompt)
        except EOFError:
            return False
        response = response.strip().lower()
        if response in YES_ANSWERS:
            return True
        if response in NO_ANSWERS:
            return False
        print("Please type yes or no and then press enter:")


def prompt_and_get_response(question: str, default_response: str) -> str:
    try:
        response = input(question).strip()
    except EOFError:
        response = ""
    return response if response else default_response


def can_write(file_path: str) -> bool:
    """
    Returns True if the file does not exist yet or if the user accepts to overwrite it.
    """
    if not path.exists(file_path):
        return True
    return ask_for_confirmation(f"{file_path} already exists. Overwrite?")


class FileArtifact:
    """
    Class to handle files produced by harbor-compose, such as CI/CD configuration files or scripts.

    :ivar str file_path: relative or absolute path of the file to write
    :ivar str file_contents: the content of the file
    :ivar int file_mode: permissions to set on the file once written
    """

    default_mode = 0o644

    def __init__(self, file_path: str, file_contents: str, file_mode: int = None):
        self.file_path = file_path
        self.file_contents = file_contents
        self.file_mode = file_mode if file_mode is not None else self.default_mode

    def __repr__(self):
        return self.file_path

    def write(self, prompt: bool = True) -> bool:
        """
        Writes the artifact, creating the parent directories if needed.

        :param bool prompt: ask before overwriting an existing file
        :returns: whether the file was written
        :rtype: bool
        """
        dir_name = path.dirname(self.file_path)
        if dir_name:
            makedirs(dir_name, exist_ok=True)
        if prompt and not can_write(self.file_path):
            LOG.debug(f"Skipping {self.file_path}")
            return False
        with open(self.file_path, "w") as artifact_fd:
            artifact_fd.write(self.file_contents)
        chmod(self.file_path, self.file_mode)
        LOG.debug(f"Wrote {self.file_path} with mode {oct(self.file_mode)}")
        return True


def write_artifacts(artifacts: list) -> None:
    for artifact in artifacts:
        artifact.write()


def output_file(content: str, file_path: str) -> bool:
    """
    Writes content to file_path unless the file already holds the same content.
    Prompts before overwriting a file whose content differs.

    :rtype: bool
    """
    if path.exists(file_path):
        with open(file_path) as existing_fd:
            existing = existing_fd.read()
        if existing == content:
            LOG.debug(f"{file_path} hasn't changed")
            return False
        if not ask_for_confirmation(f"{file_path} already exists. Overwrite?"):
            return False
    with open(file_path, "w") as output_fd:
        output_fd.write(content)
    print(f"wrote {file_path}")
    return True


def serialize_env_file(env_vars: dict) -> str:
    """
    Renders a KEY=value line per variable, sorted by key.

    :param dict env_vars:
    :rtype: str
    """
    return "".join(f"{key}={env_vars[key]}\n" for key in sorted(env_vars.keys()))


def write_env_file(env_vars: dict, file_path: str) -> None:
    LOG.debug(f"writing {len(env_vars)} env vars to {file_path}")
    with open(file_path, "w") as env_fd:
        env_fd.write(serialize_env_file(env_vars))


def output_env_file(env_vars: dict, file_path: str) -> bool:
    """
    Same as output_file for env files. Nothing happens when there are no variables.
    """
    if not env_vars or not file_path:
        return False
    return output_file(serialize_env_file(env_vars), file_path)


def parse_env_file(file_path: str) -> dict:
    """
    Parses an env file into a dict, in file order. Quotes and ``export`` prefixes are handled as
    docker-compose does, values are not interpolated. A name without value maps to "".

    :param str file_path:
    :rtype: dict
    :raises: FileNotFoundError
    """
    with open(file_path) as env_fd:
        env_vars = dotenv_values(stream=env_fd, interpolate=False)
    return {key: value if value is not None else "" for key, value in env_vars.items()}


def parse_env_var_names(file_path: str) -> list:
    """
    :returns: the names of the variables declared in the env file, in file order
    :rtype: list
    """
    return list(parse_env_file(file_path).keys())


def append_to_file(file_path: str, lines: list) -> None:
    """
    Appends lines to an existing file (e.g. .gitignore) or creates it.
    """
    if path.exists(file_path):
        with open(file_path, "a") as append_fd:
            for line in lines:
                append_fd.write(f"\n{line}")
    else:
        with open(file_path, "w") as append_fd:
            append_fd.write("".join(f"{line}\n" for line in lines))


def ignore_sensitive_files(files: list) -> None:
    """
    Adds files that must not be committed nor sent to the docker build context to the ignore files.
    """
    for ignore_file in [".gitignore", ".dockerignore"]:
        append_to_file(ignore_file, files)
