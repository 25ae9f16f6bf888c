#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Custom exceptions for harbor-compose
"""


class HarborComposeException(Exception):
    """
    Top class for harbor-compose Exceptions
    """

    def __init__(self, msg, *args):
        super().__init__(msg, *args)


class ConfigurationError(HarborComposeException):
    """
    Raised when a compose file, env file or configuration file cannot be used as-is
    """


class ValidationError(HarborComposeException):
    """
    Raised when the desired state of a shipment environment is not acceptable
    """


class ProviderNotFound(HarborComposeException):
    """
    Raised when a shipment environment has no ec2 provider
    """


class ShipmentNotFound(HarborComposeException):
    """
    Raised when a shipment environment does not exist
    """


class BuildProviderNotFound(HarborComposeException):
    """
    Raised when looking up a build provider that is not registered
    """


class BuildTokenMissing(HarborComposeException):
    """
    Raised when the build token environment variable for a shipment environment is not set
    """


class AuthenticationError(HarborComposeException):
    """
    Raised when login, logout or token verification fails
    """


class ApiError(HarborComposeException):
    """
    Raised when a Harbor API returns an unexpected status code or cannot be reached

    :ivar int status_code: HTTP status code, None when the request never completed
    """

    def __init__(self, msg, *args, status_code: int = None):
        super().__init__(msg, *args)
        self.status_code = status_code
