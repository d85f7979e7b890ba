"""Search command -- run JQL through the MCP server and render the results."""

from __future__ import annotations

from typing import Optional

import typer

from ticketron.projection.encoder import RenderMode


def search_command(
    query: Optional[list[str]] = typer.Argument(None, help="JQL query (words are joined with spaces)."),
    jql: Optional[str] = typer.Option(None, "--jql", help="JQL query; takes precedence over arguments."),
    max_results: int = typer.Option(20, "--max-results", help="Maximum number of results to return."),
    output: RenderMode = typer.Option(
        RenderMode.TEXT, "--output", "-o", help="Output format: text, json, yaml or tsv."
    ),
    output_fields: Optional[str] = typer.Option(
        None,
        "--output-fields",
        "-f",
        help="Comma-separated field paths for json/yaml/tsv (e.g. key,fields.status.name).",
    ),
) -> None:
    """Search Jira issues with JQL.

    Without ``--output-fields``, JSON prints the full response, YAML the
    issue list, and TSV the key, summary, status and type columns.

    Example::

        tix search "project = BE AND status = 'In Progress'"
        tix search --jql "assignee = currentUser()" -o tsv -f key,fields.summary
    """
    from ticketron.client.mcp import MCPClient
    from ticketron.config import load_config
    from ticketron.exceptions import InvalidUsageError
    from ticketron.models import SearchIssuesRequest
    from ticketron.output import debug, print_data, warning
    from ticketron.projection.encoder import render_search
    from ticketron.projection.projector import parse_field_list

    if jql:
        query_text = jql
    elif query:
        query_text = " ".join(query)
    else:
        raise InvalidUsageError(
            "No JQL query provided. Pass it as arguments or with --jql."
        )

    fields = parse_field_list(output_fields)
    if output_fields is not None and not fields:
        warning("--output-fields contained no field names, using the defaults")

    config = load_config()
    with MCPClient(config.mcp_server_url) as mcp:
        response = mcp.search_issues(SearchIssuesRequest(jql=query_text, max_results=max_results))
    debug(f"Search returned {len(response.issues)} of {response.total} issues")

    print_data(render_search(response, output, fields))
