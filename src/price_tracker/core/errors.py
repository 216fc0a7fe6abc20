"""Error taxonomy for the tracker client.

Every failure crossing a workflow boundary is a :class:`TrackerError` subclass
carrying a machine readable :class:`ErrorCode`. Workflows never let these
escape; they are written into the single :class:`ErrorSlot` instead.
"""

from __future__ import annotations

import logging
from enum import Enum

LOGGER = logging.getLogger(__name__)

EMPTY_URL_MESSAGE = "URL cannot be empty"
DUPLICATE_PRODUCT_MESSAGE = "Product already exists"
FETCH_FAILED_MESSAGE = "Error fetching products"
ADD_FAILED_MESSAGE = "Error adding product"
RECHECK_FAILED_MESSAGE = "Error rechecking price"


class ErrorCode(str, Enum):
    """Standardized error codes.

    Format: CATEGORY_SPECIFIC_ERROR
    """

    # ---- Validation Errors ----
    VALIDATION_EMPTY_URL = "VALIDATION_EMPTY_URL"
    VALIDATION_DUPLICATE_URL = "VALIDATION_DUPLICATE_URL"
    VALIDATION_INVALID_BOUND = "VALIDATION_INVALID_BOUND"
    VALIDATION_REJECTED = "VALIDATION_REJECTED"

    # ---- Network Errors ----
    NET_REQUEST_FAILED = "NET_REQUEST_FAILED"
    NET_BAD_STATUS = "NET_BAD_STATUS"
    NET_INVALID_RESPONSE = "NET_INVALID_RESPONSE"

    # ---- State Errors ----
    STATE_DUPLICATE_ID = "STATE_DUPLICATE_ID"

    # ---- Configuration Errors ----
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"


class TrackerError(RuntimeError):
    """Base class for every error raised by the tracker client."""

    default_code: ErrorCode = ErrorCode.NET_REQUEST_FAILED

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.status_code = status_code


class ValidationError(TrackerError):
    """User input or backend-rejected input. The message is shown verbatim."""

    default_code = ErrorCode.VALIDATION_REJECTED


class NetworkError(TrackerError):
    """Transport failure or unusable backend response."""

    default_code = ErrorCode.NET_REQUEST_FAILED


class StateError(TrackerError):
    """Invariant violation inside the client state. Logged, never shown."""

    default_code = ErrorCode.STATE_DUPLICATE_ID


class ConfigurationError(TrackerError):
    """Raised at startup when required settings are missing or invalid."""

    default_code = ErrorCode.CONFIG_MISSING


class ErrorSlot:
    """Single user-visible error message. The last reported error wins."""

    def __init__(self) -> None:
        self._error: TrackerError | None = None

    @property
    def message(self) -> str:
        return self._error.message if self._error else ""

    @property
    def error(self) -> TrackerError | None:
        return self._error

    def report(self, error: TrackerError) -> None:
        if isinstance(error, StateError):
            # Invariant violations are for operators, not users.
            LOGGER.error("State error suppressed from UI: %s", error.message)
            return
        LOGGER.info("Surfacing error %s: %s", error.code.value, error.message)
        self._error = error

    def clear(self) -> None:
        self._error = None

    def __bool__(self) -> bool:
        return self._error is not None


__all__ = [
    "ADD_FAILED_MESSAGE",
    "ConfigurationError",
    "DUPLICATE_PRODUCT_MESSAGE",
    "EMPTY_URL_MESSAGE",
    "ErrorCode",
    "ErrorSlot",
    "FETCH_FAILED_MESSAGE",
    "NetworkError",
    "RECHECK_FAILED_MESSAGE",
    "StateError",
    "TrackerError",
    "ValidationError",
]
