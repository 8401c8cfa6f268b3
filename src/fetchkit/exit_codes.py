"""Numeric process exit codes used by the ``fetchkit`` CLI.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~fetchkit.exceptions.FetchkitError` subclass.
Shell wrappers can inspect the exit code to tell a malformed schema from a
failed request without parsing stderr.

Example::

    $ fetchkit call /users/:id get --param id=42
    $ echo $?
    5   # EXIT_REQUEST_FAILED -- the server rejected the call
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_TEMPLATE_ERROR = 3
"""A required path parameter was missing while resolving the URL."""

EXIT_REQUEST_FAILED = 5
"""The call failed; the normalized error was printed to stderr."""

EXIT_TRANSPORT_ERROR = 6
"""A raw transport failure escaped normalization."""

EXIT_SCHEMA_ERROR = 7
"""The endpoint schema could not be loaded or is malformed."""

EXIT_EFFECT_ERROR = 10
"""A named effect could not be found or loaded."""

EXIT_CANCELLED = 130
"""The in-flight call was aborted (Ctrl-C)."""
