#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Docker image reference parsing
"""

from __future__ import annotations

DEFAULT_TAG = "latest"


def split_image(image: str) -> tuple:
    """
    Splits an image reference into repository and tag. A registry port (host:5000/repo)
    is not mistaken for a tag.

    :param str image:
    :returns: repository, tag
    :rtype: tuple
    """
    last_slash = image.rfind("/")
    last_colon = image.rfind(":")
    if last_colon > last_slash:
        return image[:last_colon], image[last_colon + 1 :]
    return image, DEFAULT_TAG


def parse_image(image: str) -> tuple:
    """
    >>> parse_image("repo:1.2.3-rc1")
    ('repo', '1.2.3', 'rc1')
    >>> parse_image("repo")
    ('repo', 'latest', '')

    :param str image:
    :returns: repository, version, prerelease
    :rtype: tuple
    """
    repository, tag = split_image(image)
    version, _, prerelease = tag.partition("-")
    return repository, version, prerelease


def get_image_tag(image: str) -> str:
    return split_image(image)[1]
