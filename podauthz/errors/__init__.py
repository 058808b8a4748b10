# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Error types and error codes for PodAuthz.

The denial raised (forbidden, unauthorized or not found) determines how much
a requester learns about the existence of the target resource.
"""

from enum import Enum
from typing import Any, Dict, Iterable, Optional


class ErrorCode(str, Enum):
    """Standard error codes used across PodAuthz."""
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RESOLUTION_FAILED = "resolution_failed"
    CONFIGURATION_ERROR = "configuration_error"
    INTERNAL_ERROR = "internal_error"

    def __str__(self) -> str:
        return self.value


UNAUTHORIZED = ErrorCode.UNAUTHORIZED
FORBIDDEN = ErrorCode.FORBIDDEN
NOT_FOUND = ErrorCode.NOT_FOUND
RESOLUTION_FAILED = ErrorCode.RESOLUTION_FAILED
CONFIGURATION_ERROR = ErrorCode.CONFIGURATION_ERROR
INTERNAL_ERROR = ErrorCode.INTERNAL_ERROR


class AuthzError(Exception):
    """Base exception for all PodAuthz errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            'error': self.error_code.value,
            'message': self.message,
            'details': self.details
        }

        if self.cause:
            result['cause'] = str(self.cause)

        return result

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"


class ForbiddenError(AuthzError):
    """Raised when an authenticated agent lacks a required access mode."""

    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, FORBIDDEN, details)


class UnauthorizedError(AuthzError):
    """
    Raised when an anonymous agent lacks a required access mode.

    Carries every requested mode and the resource path so the caller can build
    an authentication challenge for the whole operation.
    """

    def __init__(
        self,
        modes: Iterable[Any],
        path: str,
        message: str = "Unauthorized",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, UNAUTHORIZED, details)
        self.modes = list(modes)
        self.path = path

        self.details['modes'] = [getattr(mode, 'value', mode) for mode in self.modes]
        self.details['path'] = path


class NotFoundError(AuthzError):
    """Raised when a read-entitled agent targets a resource that does not exist."""

    def __init__(self, message: str = "Not Found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, NOT_FOUND, details)


class ResolutionError(AuthzError):
    """Raised by collaborators that fail to resolve grants or registries."""

    def __init__(
        self,
        message: str,
        client: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message, RESOLUTION_FAILED, details, cause)
        self.client = client

        if client:
            self.details['client'] = client


class ConfigurationError(AuthzError):
    """Raised when there's a configuration error."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, CONFIGURATION_ERROR, details)
        self.config_key = config_key
        self.config_value = config_value

        if config_key:
            self.details['config_key'] = config_key
        if config_value is not None:
            self.details['config_value'] = str(config_value)


# Error mapping for HTTP status codes
ERROR_CODE_TO_HTTP_STATUS = {
    UNAUTHORIZED: 401,
    FORBIDDEN: 403,
    NOT_FOUND: 404,
    RESOLUTION_FAILED: 500,
    CONFIGURATION_ERROR: 500,
    INTERNAL_ERROR: 500,
}


def get_http_status(error_code: ErrorCode) -> int:
    """Get HTTP status code for an error code."""
    return ERROR_CODE_TO_HTTP_STATUS.get(error_code, 500)


def create_error_response(error: AuthzError) -> Dict[str, Any]:
    """Create a standardized error response."""
    return {
        'error': error.error_code.value,
        'message': error.message,
        'details': error.details,
        'http_status': get_http_status(error.error_code)
    }


__all__ = [
    'ErrorCode',
    'AuthzError',
    'ForbiddenError',
    'UnauthorizedError',
    'NotFoundError',
    'ResolutionError',
    'ConfigurationError',
    'get_http_status',
    'create_error_response',
]
