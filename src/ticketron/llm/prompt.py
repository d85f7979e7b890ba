"""Build the single user message sent to the completion provider."""

from __future__ import annotations

_JSON_INSTRUCTIONS = (
    "Based on the user request and context, generate a response in the following JSON format ONLY:\n"
    "{\n"
    '  "summary": "<A concise summary of the ticket/task>",\n'
    '  "description": "<A detailed description of the ticket/task>",\n'
    '  "project_name_suggestion": "<A suggested project name based on the request>"\n'
    "}\n"
    "Ensure the output is a single, valid JSON object and nothing else."
)


def construct_prompt(user_input: str, system_prompt: str, context: str) -> str:
    """Combine the system prompt, optional context and the user's request.

    The ``Relevant Context:`` section is omitted when *context* is empty.
    The prompt always ends with the JSON format instructions naming the
    ``summary``, ``description`` and ``project_name_suggestion`` keys.
    """
    parts = [system_prompt, "\n\n"]
    if context:
        parts += ["Relevant Context:\n", context, "\n\n"]
    parts += ["User Request:\n", user_input, "\n\n", _JSON_INSTRUCTIONS]
    return "".join(parts)
