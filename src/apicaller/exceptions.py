"""Exception hierarchy for apicaller.

All exceptions inherit from :class:`ApicallerError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apicaller.exit_codes`.
The dispatcher's :meth:`~apicaller.client.Dispatcher.execute` converts any
``ApicallerError`` into a failed :class:`~apicaller.client.Result`, and the
CLI entry point turns it into a process exit code.

Subclass hierarchy::

    ApicallerError (exit 1)
    +-- InvalidUsageError     (exit 2)
    +-- RequestCreationError  (exit 3)
    +-- NetworkError          (exit 4)
    +-- DecodeError           (exit 5)
    +-- ConfigError           (exit 1)

Reverse-parsing a URL never raises: an unrecognised URL is reported as
``None`` by :func:`~apicaller.request.parse`.
"""

from apicaller.exit_codes import (
    EXIT_DECODE_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NETWORK_FAILURE,
    EXIT_REQUEST_CREATION_FAILED,
)


class ApicallerError(Exception):
    """Base exception for all apicaller errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApicallerError):
    """Raised for unknown endpoints or malformed CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class RequestCreationError(ApicallerError):
    """Raised when a request's URL cannot be constructed (malformed base or component)."""

    exit_code = EXIT_REQUEST_CREATION_FAILED


class NetworkError(ApicallerError):
    """Raised on transport failures, non-2xx responses, or an empty response body.

    When the failure came from the transport layer the original
    :class:`httpx.HTTPError` is available as ``__cause__``.
    """

    exit_code = EXIT_NETWORK_FAILURE


class DecodeError(ApicallerError):
    """Raised when response bytes (fresh or cached) do not match the expected shape."""

    exit_code = EXIT_DECODE_FAILURE


class ConfigError(ApicallerError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
