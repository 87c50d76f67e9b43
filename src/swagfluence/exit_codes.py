"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~swagfluence.exceptions.SwagfluenceError` subclass.
CI jobs that publish documentation can inspect the exit code to tell a
broken spec apart from an unreachable Confluence instance.

Example::

    $ swagfluence convert ./openapi.json
    $ echo $?
    7   # EXIT_SPEC_ERROR -- the spec could not be loaded or resolved
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_PUBLISH_ERROR = 5
"""Confluence rejected a page create, update, or search request."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_SPEC_ERROR = 7
"""The API specification could not be loaded, parsed, or resolved."""

EXIT_CANCELLED = 130
"""The run was interrupted (SIGINT/SIGTERM) between two endpoints."""
