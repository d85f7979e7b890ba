"""Create command -- turn a natural language request into a Jira issue.

Implements ``tix create``. The request text is sent to the configured
language model together with ``system_prompt.txt`` and ``context.md``; the
model's suggested project is mapped to a Jira key through ``links.yaml``
and the issue is created on the MCP server.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

import typer

from ticketron.output import debug, info, print_data


class CreateFormat(str, Enum):
    """Output encodings for a created issue."""

    TEXT = "text"
    JSON = "json"


def create_command(
    text: list[str] = typer.Argument(..., help="Natural language description of the issue."),
    issue_type: Optional[str] = typer.Option(
        None, "--type", "-t", help="Issue type (e.g. Task, Bug); overrides the project default."
    ),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Show the issue and ask before creating it."
    ),
    output: CreateFormat = typer.Option(
        CreateFormat.TEXT, "--output", "-o", help="Output format: text or json."
    ),
) -> None:
    """Create a Jira issue from a natural language request.

    Example::

        tix create "login page loops forever on staging" -t Bug
        tix create -i -o json "add retry to the billing webhook"
    """
    from ticketron.client.mcp import MCPClient
    from ticketron.config import get_api_key, load_config, load_context, load_links, load_system_prompt
    from ticketron.exceptions import ConfigError, InvalidUsageError
    from ticketron.llm.client import OpenAIClient
    from ticketron.projection.encoder import render_created
    from ticketron.tickets import build_create_request

    user_input = " ".join(text).strip()
    if not user_input:
        raise InvalidUsageError("Issue description cannot be empty")

    config = load_config()
    if config.llm.provider != "openai":
        raise ConfigError(f"Unsupported LLM provider: '{config.llm.provider}' (only 'openai' is supported)")

    api_key = get_api_key()
    system_prompt = load_system_prompt()
    context = load_context()
    links = load_links()

    info("Generating issue details...")
    with OpenAIClient(
        api_key,
        config.llm.openai.model_name,
        config.llm.openai.base_url,
    ) as llm:
        draft = llm.generate_ticket_details(user_input, system_prompt, context)
    debug(f"Ticket draft: {draft.model_dump()}")

    request = build_create_request(draft, links, issue_type)
    debug(f"Create request: {request.model_dump(by_alias=True)}")

    if interactive and not _confirm(request):
        info("Aborted.")
        raise typer.Exit()

    with MCPClient(config.mcp_server_url) as mcp:
        created = mcp.create_issue(request)

    print_data(render_created(created, output.value))


def _confirm(request) -> bool:
    """Print the pending issue to stderr and ask for a y/yes answer."""
    typer.echo("\n--- Issue Details ---", err=True)
    typer.echo(f"Project Key: {request.project_key}", err=True)
    typer.echo(f"Issue Type:  {request.issue_type}", err=True)
    typer.echo(f"Summary:     {request.summary}", err=True)
    typer.echo(f"Description:\n{request.description}", err=True)
    typer.echo("---------------------", err=True)
    return typer.confirm("Create this issue?", default=False, err=True)
