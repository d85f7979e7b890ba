"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~ticketron.exceptions.TicketronError` subclass.
Shell wrappers can inspect the exit code to tell a rejected API key from an
unreachable MCP server without parsing stderr.

Example::

    $ tix search "project = WEB"
    $ echo $?
    6   # EXIT_CONNECTION_ERROR -- the MCP server could not be reached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The LLM API key is missing or was rejected."""

EXIT_SERVER_ERROR = 5
"""The MCP server returned an error or a response that could not be decoded."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_LLM_ERROR = 8
"""The language model could not be reached or its answer could not be used."""
