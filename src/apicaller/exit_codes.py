"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apicaller.exceptions.ApicallerError` subclass.
Shell wrappers can inspect the exit code to tell a malformed request from
a network failure without parsing stderr.

Example::

    $ apicaller get one users 42
    $ echo $?
    4   # EXIT_NETWORK_FAILURE -- the server could not be reached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments (unknown endpoint, unparseable URL)."""

EXIT_REQUEST_CREATION_FAILED = 3
"""The request URL could not be formed from its endpoint and components."""

EXIT_NETWORK_FAILURE = 4
"""The transport failed, the server answered non-2xx, or the body was empty."""

EXIT_DECODE_FAILURE = 5
"""The response body (fresh or cached) did not match the expected shape."""
