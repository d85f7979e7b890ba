"""Exception hierarchy for ticketron.

All exceptions inherit from :class:`TicketronError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`ticketron.exit_codes`.
The top-level error handler in :func:`ticketron.app.main` catches
``TicketronError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    TicketronError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- APIKeyNotFoundError      (exit 3)
    +-- ServerError              (exit 5)
    |   +-- ResponseDecodeError  (exit 5)
    +-- ConnectionError_         (exit 6)
    +-- LLMError                 (exit 8)
    +-- LLMResponseError         (exit 8)
    |   +-- NormalizationFailure
    |   +-- MalformedJSON
    |   +-- MissingRequiredField
    +-- ConfigError              (exit 1)
    +-- ProjectMappingError      (exit 1)
    +-- ProjectionError          (exit 1)
"""

from ticketron.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_LLM_ERROR,
    EXIT_SERVER_ERROR,
)


class TicketronError(Exception):
    """Base exception for all ticketron errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`ticketron.exit_codes`. The entry point catches
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


class InvalidUsageError(TicketronError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class APIKeyNotFoundError(TicketronError):
    """Raised when no LLM API key is stored and none is set in the environment."""

    exit_code = EXIT_AUTH_FAILURE


class ServerError(TicketronError):
    """Raised when the MCP server answers with an error status.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status returned by the server.
        unparseable: ``True`` when the error body carried no usable
            ``{"error": ...}`` message.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None, unparseable: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.unparseable = unparseable


class ResponseDecodeError(ServerError):
    """Raised when a success response from the MCP server cannot be decoded."""


class ConnectionError_(TicketronError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class LLMError(TicketronError):
    """Raised when the completion API call fails or returns no choices."""

    exit_code = EXIT_LLM_ERROR


class LLMResponseError(TicketronError):
    """Base class for failures turning a model completion into a ticket draft."""

    exit_code = EXIT_LLM_ERROR


class NormalizationFailure(LLMResponseError):
    """No JSON object candidate could be located in the model's answer."""


class MalformedJSON(LLMResponseError):
    """A JSON candidate was found but could not be parsed into the expected object."""


class MissingRequiredField(LLMResponseError):
    """The parsed answer lacks a mandatory field.

    Args:
        field_name: The first missing field, in the fixed check order
            ``summary`` then ``project_name_suggestion``.
    """

    def __init__(self, field_name: str):
        super().__init__(f"LLM response is missing a required field: {field_name}")
        self.field_name = field_name


class ConfigError(TicketronError):
    """Raised for configuration problems (unreadable files, invalid YAML, bad paths)."""

    exit_code = EXIT_GENERIC_FAILURE


class ProjectMappingError(TicketronError):
    """Raised when a project suggestion matches no entry in ``links.yaml``."""

    exit_code = EXIT_GENERIC_FAILURE


class ProjectionError(TicketronError):
    """Raised when field projection meets a record type it has no descriptors for."""

    exit_code = EXIT_GENERIC_FAILURE
