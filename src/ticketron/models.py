"""Canonical Pydantic models shared across all ticketron modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- loaded from YAML files in the config directory:
    :class:`OpenAIConfig`, :class:`LLMConfig`, :class:`AppConfig`,
    :class:`ProjectLink`, and :class:`LinksConfig`.

**MCP server wire models** -- request and response bodies exchanged with the
Jira MCP server, with field aliases matching the server's JSON keys:
    :class:`CreateIssueRequest`, :class:`CreateIssueResponse`,
    :class:`SearchIssuesRequest`, :class:`SearchIssuesResponse`,
    :class:`Issue`, :class:`IssueFields`, :class:`Status`,
    :class:`IssueType`, and :class:`ErrorResponse`.

**LLM output** -- :class:`TicketDraft`, the validated result of parsing a
model completion.

Records that users can address with ``--output-fields`` paths are
registered with :func:`~ticketron.projection.descriptors.record_type`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ticketron.projection.descriptors import record_type


# --- Configuration ---


class OpenAIConfig(BaseModel):
    """Settings for the OpenAI-compatible completion provider.

    The API key is deliberately absent; see
    :func:`~ticketron.config.get_api_key`.
    """

    model_name: str = Field(default="gpt-4o", description="Chat completion model")
    base_url: str = Field(default="", description="Custom API base URL (proxies, gateways)")


class LLMConfig(BaseModel):
    """Language model provider selection plus provider-specific settings."""

    provider: str = Field(default="openai", description="LLM provider name")
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)


class AppConfig(BaseModel):
    """Top-level configuration loaded from ``config.yaml``.

    Missing keys fall back to these defaults; environment variables
    prefixed ``TICKETRON_`` override file values (see
    :func:`~ticketron.config.load_config`).
    """

    mcp_server_url: str = Field(default="http://localhost:8080", description="Jira MCP server URL")
    llm: LLMConfig = Field(default_factory=LLMConfig)


class ProjectLink(BaseModel):
    """Maps a friendly project name (matched case-insensitively) to a Jira key."""

    name: str
    key: str
    default_issue_type: Optional[str] = None


class LinksConfig(BaseModel):
    """Contents of ``links.yaml``."""

    projects: list[ProjectLink] = Field(default_factory=list)


# --- MCP server wire models ---


class CreateIssueRequest(BaseModel):
    """Body of ``POST /create_jira_issue``."""

    model_config = ConfigDict(populate_by_name=True)

    project_key: str = Field(alias="projectKey")
    summary: str
    description: str = ""
    issue_type: str = Field(alias="issueType")


class CreateIssueResponse(BaseModel):
    """Success body of ``POST /create_jira_issue`` (HTTP 201)."""

    model_config = ConfigDict(populate_by_name=True)

    key: str
    id: str = ""
    self_url: str = Field(default="", alias="self")


class SearchIssuesRequest(BaseModel):
    """Body of ``POST /search_jira_issues``."""

    model_config = ConfigDict(populate_by_name=True)

    jql: str
    max_results: Optional[int] = Field(default=None, alias="maxResults")
    start_at: Optional[int] = Field(default=None, alias="startAt")


@record_type
class Status(BaseModel):
    """Workflow status of an issue."""

    name: str = ""


@record_type
class IssueType(BaseModel):
    """Issue type (Task, Bug, Story...)."""

    name: str = ""


@record_type
class IssueFields(BaseModel):
    """Core fields of a Jira issue.

    ``status`` and ``issue_type`` are optional references: the server may
    omit them, in which case paths through them do not resolve.
    """

    model_config = ConfigDict(populate_by_name=True)

    summary: str = ""
    status: Optional[Status] = None
    issue_type: Optional[IssueType] = Field(default=None, alias="issuetype")
    description: Optional[str] = None


@record_type
class Issue(BaseModel):
    """A single Jira issue as returned by search or ``GET /jira_issue/{key}``."""

    model_config = ConfigDict(populate_by_name=True)

    key: str
    id: str = ""
    self_url: str = Field(default="", alias="self")
    fields: IssueFields = Field(default_factory=IssueFields)


@record_type
class SearchIssuesResponse(BaseModel):
    """Success body of ``POST /search_jira_issues``."""

    model_config = ConfigDict(populate_by_name=True)

    start_at: int = Field(default=0, alias="startAt")
    max_results: int = Field(default=0, alias="maxResults")
    total: int = 0
    issues: list[Issue] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error body returned by the MCP server on non-success statuses."""

    error: str = ""


# --- LLM output ---


class TicketDraft(BaseModel):
    """Ticket details extracted from a language model completion.

    Built once per ``tix create`` invocation by
    :func:`~ticketron.llm.parser.parse_llm_response` and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    summary: str
    description: str = ""
    project_suggestion: str
