"""Config commands -- create, inspect, and locate configuration files.

Provides the ``tix config`` sub-command group. Files live in the
directory returned by :func:`~ticketron.config.get_config_dir`; the LLM
API key is kept apart from ``config.yaml`` in the credential store.
"""

from __future__ import annotations

from typing import Optional

import typer

from ticketron.output import info, print_data, success, suggest


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("init")
def config_init() -> None:
    """Write default config files that do not exist yet.

    Existing files are left untouched, so running it twice is safe.

    Example::

        tix config init
    """
    from ticketron.config import create_default_files, get_config_dir

    created = create_default_files()
    for path in created:
        success(f"Created {path}")
    if not created:
        info(f"All config files already exist in {get_config_dir()}")
    suggest("Edit links.yaml to map project names to Jira keys, then run 'tix config set-key'.")


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration (files plus environment overrides).

    The API key itself is never printed; only whether one is available.
    """
    from ticketron.config import get_api_key, load_config
    from ticketron.exceptions import APIKeyNotFoundError

    config = load_config()
    lines = [
        "Current Ticketron Configuration:",
        f"  MCP Server URL: {config.mcp_server_url}",
        f"  LLM Provider:   {config.llm.provider}",
    ]
    if config.llm.provider == "openai":
        lines.append(f"    OpenAI Model: {config.llm.openai.model_name}")
        if config.llm.openai.base_url:
            lines.append(f"    OpenAI BaseURL: {config.llm.openai.base_url}")
    else:
        lines.append(f"    (No specific settings shown for provider '{config.llm.provider}')")

    try:
        get_api_key()
        key_status = "Set (use 'tix config set-key' to change)"
    except APIKeyNotFoundError:
        key_status = "Not Set (use 'tix config set-key' to set)"
    lines.append(f"  LLM API Key:    {key_status}")

    print_data("\n".join(lines))


@config_app.command("locate")
def config_locate() -> None:
    """Print the config directory and the status of each config file."""
    from ticketron.config import (
        CONFIG_FILENAME,
        CONTEXT_FILENAME,
        LINKS_FILENAME,
        SYSTEM_PROMPT_FILENAME,
        get_config_dir,
    )

    config_dir = get_config_dir()
    lines = [f"Configuration directory: {config_dir}"]
    for name in (CONFIG_FILENAME, LINKS_FILENAME, SYSTEM_PROMPT_FILENAME, CONTEXT_FILENAME):
        path = config_dir / name
        status = "found" if path.is_file() else "missing"
        lines.append(f"  {path} ({status})")
    print_data("\n".join(lines))


@config_app.command("set-key")
def config_set_key(
    api_key: Optional[str] = typer.Argument(
        None, help="LLM API key. Prompted for (hidden) when omitted."
    ),
) -> None:
    """Store the LLM API key in the credential store.

    Example::

        tix config set-key sk-...
        tix config set-key          # prompts without echoing
    """
    from ticketron.config import set_api_key

    if api_key is None:
        api_key = typer.prompt("API key", hide_input=True)
    path = set_api_key(api_key)
    success(f"API key stored in {path}")
