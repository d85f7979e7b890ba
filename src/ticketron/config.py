"""Configuration directory, YAML config files, and API key storage.

This module handles all persistent state for ticketron:

* **Directory layout** -- ``$TICKETRON_CONFIG_DIR`` or ``~/.ticketron``,
  created with ``0700`` permissions. See :func:`get_config_dir`.
* **Config files** -- ``config.yaml`` (:class:`~ticketron.models.AppConfig`),
  ``links.yaml`` (:class:`~ticketron.models.LinksConfig`),
  ``system_prompt.txt`` and ``context.md``. Missing files fall back to
  defaults or empty values; :func:`create_default_files` writes commented
  starting points.
* **Environment overrides** -- ``TICKETRON_*`` variables take precedence
  over ``config.yaml`` (see :data:`ENV_OVERRIDES`).
* **API key** -- :func:`get_api_key` reads the credential store file, then
  ``TICKETRON_LLM_API_KEY``.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from ticketron.exceptions import APIKeyNotFoundError, ConfigError, InvalidUsageError
from ticketron.models import AppConfig, LinksConfig
from ticketron.output import debug

CONFIG_DIR_ENV_VAR = "TICKETRON_CONFIG_DIR"
API_KEY_ENV_VAR = "TICKETRON_LLM_API_KEY"

CONFIG_FILENAME = "config.yaml"
LINKS_FILENAME = "links.yaml"
SYSTEM_PROMPT_FILENAME = "system_prompt.txt"
CONTEXT_FILENAME = "context.md"
CREDENTIALS_FILENAME = "credentials.json"

_DEFAULT_DIR_NAME = ".ticketron"
_CREDENTIAL_KEY = "llm_api_key"

# Environment variable -> nested key path inside config.yaml.
ENV_OVERRIDES: dict[str, tuple[str, ...]] = {
    "TICKETRON_MCP_SERVER_URL": ("mcp_server_url",),
    "TICKETRON_LLM_PROVIDER": ("llm", "provider"),
    "TICKETRON_LLM_OPENAI_MODEL_NAME": ("llm", "openai", "model_name"),
    "TICKETRON_LLM_OPENAI_BASE_URL": ("llm", "openai", "base_url"),
}


# --- Directory ---


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    Uses ``$TICKETRON_CONFIG_DIR`` when set, otherwise ``~/.ticketron``.

    Raises:
        ConfigError: If the path exists but is not a directory, or cannot
            be created.
    """
    env_value = os.environ.get(CONFIG_DIR_ENV_VAR, "")
    path = Path(env_value).expanduser() if env_value else Path.home() / _DEFAULT_DIR_NAME

    if path.exists():
        if not path.is_dir():
            raise ConfigError(f"Config path {path} exists but is not a directory")
        return path
    try:
        path.mkdir(mode=0o700, parents=True)
    except OSError as exc:
        raise ConfigError(f"Cannot create config directory {path}: {exc}") from exc
    debug(f"Created config directory {path}")
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. When *mode* is
    given it is applied before any content is written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        if mode is not None:
            os.chmod(tmp_path, mode)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def _read_text(path: Path) -> Optional[str]:
    """Return the file's text, ``None`` if it does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc


def _read_yaml_mapping(path: Path) -> Optional[dict[str, Any]]:
    text = _read_text(path)
    if text is None:
        return None
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}")
    return data


# --- Config files ---


def load_config() -> AppConfig:
    """Load ``config.yaml`` and apply ``TICKETRON_*`` environment overrides.

    A missing file yields the defaults of :class:`~ticketron.models.AppConfig`.

    Raises:
        ConfigError: If the file is unreadable, not valid YAML, or fails
            validation.
    """
    path = get_config_dir() / CONFIG_FILENAME
    data = _read_yaml_mapping(path)
    if data is None:
        debug(f"Config file {path} not found, using defaults and environment")
        data = {}

    for env_var, keys in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            _set_nested(data, keys, value)

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    debug(f"Resolved config: {config.model_dump(mode='json')}")
    return config


def _set_nested(data: dict[str, Any], keys: tuple[str, ...], value: str) -> None:
    target = data
    for key in keys[:-1]:
        child = target.get(key)
        if not isinstance(child, dict):
            child = {}
            target[key] = child
        target = child
    target[keys[-1]] = value


def load_links() -> LinksConfig:
    """Load ``links.yaml``; a missing file yields no project links.

    Raises:
        ConfigError: If the file is unreadable, not valid YAML, or fails
            validation.
    """
    path = get_config_dir() / LINKS_FILENAME
    data = _read_yaml_mapping(path)
    if data is None:
        debug(f"Links file {path} not found, no project links configured")
        return LinksConfig()
    if data.get("projects") is None:
        data["projects"] = []
    try:
        return LinksConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid links file at {path}: {exc}") from exc


def load_system_prompt() -> str:
    """Return the contents of ``system_prompt.txt``, or ``""`` if missing."""
    return _read_text(get_config_dir() / SYSTEM_PROMPT_FILENAME) or ""


def load_context() -> str:
    """Return the contents of ``context.md``, or ``""`` if missing."""
    return _read_text(get_config_dir() / CONTEXT_FILENAME) or ""


def context_path() -> Path:
    """Path to ``context.md`` inside the config directory."""
    return get_config_dir() / CONTEXT_FILENAME


# --- Default files ---

DEFAULT_CONFIG_YAML = """\
# User-specific configuration for the Ticketron CLI (tix)
# Located at ~/.ticketron/config.yaml

# URL for the Jira MCP server used for interacting with Jira.
mcp_server_url: "http://localhost:8080" # Default, user should change if needed

# Configuration for the Large Language Model (LLM) used by Ticketron.
llm:
  # Specify the LLM provider to use. Only "openai" is currently supported.
  provider: "openai"

  # Settings specific to the OpenAI provider
  openai:
    # Name or identifier of the OpenAI model to use.
    model_name: "gpt-4o" # Example: gpt-4, gpt-4o, gpt-3.5-turbo
    # Optional: Specify a custom base URL for the OpenAI API (e.g., for proxies)
    # base_url: ""

# The API key is not stored here. Use `tix config set-key` or set
# TICKETRON_LLM_API_KEY.
"""

DEFAULT_LINKS_YAML = """\
# ~/.ticketron/links.yaml
# Defines mappings between user-friendly project aliases and JIRA project keys.
# Also allows specifying a default issue type per project.
projects:
  - name: "My Project Alias" # User-friendly name used for matching (case-insensitive)
    key: "PROJ"             # The actual JIRA project key
    default_issue_type: "Task" # Optional: Default issue type for this project
  - name: "Backend Team"
    key: "BE"
  # Add more projects as needed
"""

DEFAULT_SYSTEM_PROMPT = """\
You are an expert assistant specialized in creating JIRA tickets from user requests.
Your task is to process the user's input, which may include their raw request and potentially additional context provided separately, and generate a structured JIRA issue.

Input:
- User's natural language request.
- Optional: Additional context (e.g., from a context.md file).

Output:
Generate ONLY a JSON object containing the following fields:
- "summary": A concise and informative JIRA issue summary based on the user request.
- "description": A detailed JIRA issue description, formatted using markdown where appropriate, elaborating on the user request.
- "project_name_suggestion": A suggested JIRA project name, matching a project name defined in links.yaml.

CRITICAL: Your response MUST contain ONLY the valid JSON object. Do not include any introductory text, explanations, apologies, or any other text outside the JSON structure itself.
"""

DEFAULT_CONTEXT_MD = """\
# LLM Context for Ticketron JIRA Ticket Generation
# -------------------------------------------------
# This file provides optional, persistent context to the LLM.
# Populate the sections below with details relevant to your current work
# to help the LLM generate more accurate and context-aware JIRA tickets.

## Current Focus / Active Projects
# Add high-level goals, active epics, sprints, or project names.
# Example:
# - Currently focused on the "User Authentication" epic (PROJ-123).
# - Sprint goal: Complete backend integration for SSO.


## Key Technologies / Components
# List relevant technologies, services, repositories, or code components.
# Example:
# - Backend: Python (FastAPI), PostgreSQL
# - Services: AuthSvc, NotificationSvc


## Common Acronyms / Jargon
# Define project-specific terms, acronyms, or team names.
# Example:
# - SSO: Single Sign-On
# - TKT: Ticketron


## Recent Activity / Decisions
# Note down recent significant events, decisions, or blockers.
# Example:
# - Blocked: Waiting for API keys for the external payment gateway.
"""

_DEFAULT_FILES: tuple[tuple[str, str, int], ...] = (
    (CONFIG_FILENAME, DEFAULT_CONFIG_YAML, 0o600),
    (LINKS_FILENAME, DEFAULT_LINKS_YAML, 0o600),
    (SYSTEM_PROMPT_FILENAME, DEFAULT_SYSTEM_PROMPT, 0o644),
    (CONTEXT_FILENAME, DEFAULT_CONTEXT_MD, 0o644),
)


def create_default_files() -> list[Path]:
    """Write the default config files that do not exist yet.

    Existing files are never touched.

    Returns:
        The paths that were created, in a fixed order.

    Raises:
        ConfigError: If a file cannot be written.
    """
    config_dir = get_config_dir()
    created: list[Path] = []
    for name, content, mode in _DEFAULT_FILES:
        path = config_dir / name
        if path.exists():
            debug(f"{path} already exists, leaving it alone")
            continue
        try:
            _atomic_write(path, content, mode=mode)
        except OSError as exc:
            raise ConfigError(f"Cannot write default file {path}: {exc}") from exc
        created.append(path)
    return created


# --- API key ---


def credentials_path() -> Path:
    """Path to the credential store file inside the config directory."""
    return get_config_dir() / CREDENTIALS_FILENAME


def _load_credentials() -> dict[str, Any]:
    path = credentials_path()
    text = _read_text(path)
    if text is None:
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid credential store at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid credential store at {path}: expected an object")
    return data


def get_api_key() -> str:
    """Return the LLM API key.

    Checked in order: the credential store file, then the
    ``TICKETRON_LLM_API_KEY`` environment variable.

    Raises:
        APIKeyNotFoundError: If neither source holds a key.
    """
    stored = _load_credentials().get(_CREDENTIAL_KEY)
    if isinstance(stored, str) and stored:
        debug("API key loaded from credential store")
        return stored

    env_value = os.environ.get(API_KEY_ENV_VAR, "")
    if env_value:
        debug(f"API key loaded from {API_KEY_ENV_VAR}")
        return env_value

    raise APIKeyNotFoundError(
        f"LLM API key not found in the credential store or environment variable {API_KEY_ENV_VAR}"
    )


def set_api_key(api_key: str) -> Path:
    """Store *api_key* in the credential store with ``0600`` permissions.

    Returns:
        The credential store path.

    Raises:
        InvalidUsageError: If *api_key* is empty or whitespace.
    """
    if not api_key.strip():
        raise InvalidUsageError("API key cannot be empty")
    data = _load_credentials()
    data[_CREDENTIAL_KEY] = api_key
    path = credentials_path()
    _atomic_write(path, json.dumps(data, indent=2) + "\n", mode=0o600)
    return path
