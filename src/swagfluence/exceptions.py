"""Exception hierarchy for swagfluence.

All exceptions inherit from :class:`SwagfluenceError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`swagfluence.exit_codes`.
The top-level error handler in :func:`swagfluence.app.main` catches
``SwagfluenceError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SwagfluenceError (exit 1)
    +-- ConfigError                     (exit 1)
    +-- PublishError                    (exit 5)
    +-- ConnectionError_                (exit 6)
    +-- SpecParseError                  (exit 7)
    +-- ResolutionError                 (exit 7)
    |   +-- UnsupportedReferenceFormat
    |   +-- DefinitionNotFound
    |   +-- PropertyResolutionFailed
    |   +-- ItemsResolutionFailed
    +-- ConversionCancelled             (exit 130)
"""

from __future__ import annotations

from swagfluence.exit_codes import (
    EXIT_CANCELLED,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_PUBLISH_ERROR,
    EXIT_SPEC_ERROR,
)


class SwagfluenceError(Exception):
    """Base exception for all swagfluence errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`swagfluence.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(SwagfluenceError):
    """Raised for configuration problems (invalid project file, bad timeout value)."""

    exit_code = EXIT_GENERIC_FAILURE


class PublishError(SwagfluenceError):
    """Raised when the Confluence REST API answers with an unexpected status."""

    exit_code = EXIT_PUBLISH_ERROR


class ConnectionError_(SwagfluenceError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecParseError(SwagfluenceError):
    """Raised when the API spec cannot be loaded, parsed, or fails validation."""

    exit_code = EXIT_SPEC_ERROR


class ConversionCancelled(SwagfluenceError):
    """Raised when a conversion run is cancelled between two endpoints."""

    exit_code = EXIT_CANCELLED


# --- Schema resolution ---


class ResolutionError(SwagfluenceError):
    """Base class for failures while dereferencing a schema.

    A resolution error is fatal to the single resolve call that raised it,
    never to the whole run. Callers decide whether to skip the schema or
    abort the page.
    """

    exit_code = EXIT_SPEC_ERROR


class UnsupportedReferenceFormat(ResolutionError):
    """Raised for a ``$ref`` that is neither ``#/definitions/...`` nor ``#/components/schemas/...``."""

    def __init__(self, ref: str):
        super().__init__(f"unsupported $ref format: {ref}")
        self.ref = ref


class DefinitionNotFound(ResolutionError):
    """Raised when a well-formed ``$ref`` names a definition missing from its table."""

    def __init__(self, ref: str, name: str):
        super().__init__(f"definition not found: {name} ({ref})")
        self.ref = ref
        self.name = name


class PropertyResolutionFailed(ResolutionError):
    """Raised when one property of an object schema cannot be resolved.

    Attributes:
        field_name: The property whose schema failed.
        cause: The underlying :class:`ResolutionError`.
    """

    def __init__(self, field_name: str, cause: ResolutionError):
        super().__init__(f"failed to resolve property {field_name}: {cause}")
        self.field_name = field_name
        self.cause = cause


class ItemsResolutionFailed(ResolutionError):
    """Raised when the element schema of an array cannot be resolved."""

    def __init__(self, cause: ResolutionError):
        super().__init__(f"failed to resolve items: {cause}")
        self.cause = cause
