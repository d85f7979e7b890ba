"""ticketron -- Create and search Jira issues from the command line.

The ``tix`` command turns a one-line natural language request into a Jira
issue: a language model drafts the summary and description, the suggested
project is mapped to a Jira key through ``links.yaml``, and the issue is
created through a Jira MCP server. ``tix search`` runs JQL against the same
server and renders the results as text, JSON, YAML, or TSV.

Typical workflow::

    tix config init                      # write default config files
    tix config set-key sk-...            # store the LLM API key
    tix create "fix the login redirect loop on staging"
    tix search "project = BE" -o tsv -f key,fields.summary

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Config directory, YAML loading, and API key storage.
    tickets: Project mapping and issue type resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
