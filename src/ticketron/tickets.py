"""Turn a :class:`~ticketron.models.TicketDraft` into a create-issue request.

The model only suggests a project *name*; :func:`map_suggestion_to_key`
looks it up in ``links.yaml``. :func:`resolve_issue_type` applies the
``--type`` flag, the link's default, then :data:`DEFAULT_ISSUE_TYPE`.
"""

from __future__ import annotations

from typing import Optional

from ticketron.exceptions import ProjectMappingError
from ticketron.models import CreateIssueRequest, LinksConfig, ProjectLink, TicketDraft

DEFAULT_ISSUE_TYPE = "Task"


def map_suggestion_to_key(suggestion: str, links: LinksConfig) -> tuple[str, ProjectLink]:
    """Find the project link whose name matches *suggestion* case-insensitively.

    Returns:
        The Jira project key and the matching link.

    Raises:
        ProjectMappingError: If no link matches.
    """
    wanted = suggestion.casefold()
    for link in links.projects:
        if link.name.casefold() == wanted:
            return link.key, link
    raise ProjectMappingError(
        f"Project suggestion '{suggestion}' does not match any project in links.yaml"
    )


def resolve_issue_type(flag_type: Optional[str], link: Optional[ProjectLink]) -> str:
    if flag_type:
        return flag_type
    if link is not None and link.default_issue_type:
        return link.default_issue_type
    return DEFAULT_ISSUE_TYPE


def build_create_request(
    draft: TicketDraft, links: LinksConfig, flag_type: Optional[str] = None
) -> CreateIssueRequest:
    """Map the draft's project and pick its issue type."""
    project_key, link = map_suggestion_to_key(draft.project_suggestion, links)
    return CreateIssueRequest(
        project_key=project_key,
        summary=draft.summary,
        description=draft.description,
        issue_type=resolve_issue_type(flag_type, link),
    )
