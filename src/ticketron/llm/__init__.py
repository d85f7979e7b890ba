"""Language model integration: prompt construction, completion client, and response parsing."""

from ticketron.llm.client import OpenAIClient
from ticketron.llm.parser import normalize_response, parse_llm_response, validate_response
from ticketron.llm.prompt import construct_prompt

__all__ = [
    "OpenAIClient",
    "construct_prompt",
    "normalize_response",
    "parse_llm_response",
    "validate_response",
]
