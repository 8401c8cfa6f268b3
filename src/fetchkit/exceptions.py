"""Exception hierarchy for fetchkit.

All exceptions inherit from :class:`FetchkitError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`fetchkit.exit_codes`.
The CLI entry point catches ``FetchkitError`` and exits with that code.

Subclass hierarchy::

    FetchkitError (exit 1)
    +-- TemplateError      (exit 3)
    +-- RequestError       (exit 5)
    +-- TransportError     (exit 6)
    |   +-- RequestCancelled (exit 130)
    +-- SchemaError        (exit 7)
    +-- EffectError        (exit 10)
    +-- ConfigError        (exit 1)

Callers of generated fetchers only ever see :class:`TemplateError` and
:class:`RequestError`. :class:`TransportError` and :class:`RequestCancelled`
travel between a transport and the fetcher that drives it.
"""

from __future__ import annotations

from typing import Any, Optional

from fetchkit.exit_codes import (
    EXIT_CANCELLED,
    EXIT_EFFECT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_REQUEST_FAILED,
    EXIT_SCHEMA_ERROR,
    EXIT_TEMPLATE_ERROR,
    EXIT_TRANSPORT_ERROR,
)

UNKNOWN_ERROR = "Unknown error"
"""Normalized error value used when a failure carries no usable detail."""

CANCELED_CODE = "ERR_CANCELED"
"""Error code carried by :class:`RequestCancelled`."""


class FetchkitError(Exception):
    """Base exception for all fetchkit errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class TemplateError(FetchkitError):
    """Raised when a required path parameter is missing from ``params``."""

    exit_code = EXIT_TEMPLATE_ERROR


class SchemaError(FetchkitError):
    """Raised for a malformed endpoint schema (empty or duplicate methods)."""

    exit_code = EXIT_SCHEMA_ERROR


class EffectError(FetchkitError):
    """Raised when a named effect cannot be found or loaded."""

    exit_code = EXIT_EFFECT_ERROR


class ConfigError(FetchkitError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class TransportError(FetchkitError):
    """A failure reported by a transport before normalization.

    Args:
        message: The transport's own description of the failure, or ``None``
            when it has none.
        response_body: Decoded response body, when the server answered.
        status_code: HTTP status code, when the server answered.
        code: Short machine-readable failure code (``ERR_NETWORK``,
            ``ERR_BAD_RESPONSE``, ...).
    """

    exit_code = EXIT_TRANSPORT_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        response_body: Any = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message or "")
        self.message = message
        self.response_body = response_body
        self.status_code = status_code
        self.code = code


class RequestCancelled(TransportError):
    """Raised by a transport when the call's abort signal fired."""

    exit_code = EXIT_CANCELLED

    def __init__(self, message: str = "canceled"):
        super().__init__(message, code=CANCELED_CODE)


class RequestError(FetchkitError):
    """A failed call, carrying the normalized error value.

    ``error`` is the value consumers branch on: the structured ``error``
    field of the response body when there is one, otherwise the transport
    message, otherwise :data:`UNKNOWN_ERROR`.

    Args:
        error: The normalized error value (a string or a structured payload).
        status_code: HTTP status code of the failed response, if any.
    """

    exit_code = EXIT_REQUEST_FAILED

    def __init__(self, error: Any, status_code: Optional[int] = None):
        super().__init__(error if isinstance(error, str) else repr(error))
        self.error = error
        self.status_code = status_code
