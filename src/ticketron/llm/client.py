"""OpenAI-compatible chat completion client.

:class:`OpenAIClient` wraps :class:`httpx.Client` and exposes a single
operation, :meth:`OpenAIClient.generate_ticket_details`, which builds the
prompt, posts it to ``{base_url}/chat/completions`` and hands the first
choice's content to :func:`~ticketron.llm.parser.parse_llm_response`.

Transport failures and non-2xx statuses raise
:class:`~ticketron.exceptions.LLMError`; problems with the completion text
itself raise a :class:`~ticketron.exceptions.LLMResponseError` subclass.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from ticketron.exceptions import LLMError
from ticketron.llm.parser import parse_llm_response
from ticketron.llm.prompt import construct_prompt
from ticketron.models import TicketDraft
from ticketron.output import get_output

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o"


class OpenAIClient:
    """Synchronous client for the OpenAI chat completions API.

    Use as a context manager so the underlying transport is closed.

    Args:
        api_key: Bearer token sent in the ``Authorization`` header.
        model_name: Chat model; an empty value falls back to
            :data:`DEFAULT_MODEL` with a warning.
        base_url: API root for proxies or compatible gateways; empty means
            :data:`DEFAULT_BASE_URL`.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, used by tests.

    Example::

        with OpenAIClient(api_key, "gpt-4o") as llm:
            draft = llm.generate_ticket_details("fix login", prompt, context)
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL,
        base_url: str = "",
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not model_name:
            get_output().warning(f"No model name configured, defaulting to {DEFAULT_MODEL}")
            model_name = DEFAULT_MODEL
        self._api_key = api_key
        self._model_name = model_name
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def model_name(self) -> str:
        """The model requested in every completion."""
        return self._model_name

    def __enter__(self) -> OpenAIClient:
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=self._timeout,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Accept": "application/json",
            },
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def generate_ticket_details(
        self, user_input: str, system_prompt: str, context: str
    ) -> TicketDraft:
        """Ask the model for ticket details and parse its answer.

        Raises:
            LLMError: On network failure, a non-2xx status, or a response
                without choices.
            LLMResponseError: If the completion text cannot be turned into
                a :class:`~ticketron.models.TicketDraft`.
        """
        output = get_output()
        prompt = construct_prompt(user_input, system_prompt, context)
        output.debug(f"Constructed prompt ({len(prompt)} chars) for model {self._model_name}")

        payload = {
            "model": self._model_name,
            "messages": [{"role": "user", "content": prompt}],
        }
        body = self._post("/chat/completions", payload)

        raw = _first_choice_content(body)
        output.debug(f"Raw completion: {raw}")
        return parse_llm_response(raw)

    def _post(self, path: str, payload: dict[str, Any]) -> Any:
        assert self._client is not None, "Client not initialised -- use as context manager"
        output = get_output()
        output.debug(f"POST {self._base_url}{path}")
        try:
            response = self._client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise LLMError(f"Completion request failed: {exc}") from exc

        output.debug(f"Completion API answered HTTP {response.status_code}")
        if response.status_code >= 400:
            raise LLMError(f"Completion API returned HTTP {response.status_code}: {_error_detail(response)}")
        try:
            return response.json()
        except ValueError as exc:
            raise LLMError(f"Completion API returned a non-JSON body: {exc}") from exc


def _first_choice_content(body: Any) -> str:
    choices = body.get("choices") if isinstance(body, dict) else None
    if not choices or not isinstance(choices[0], dict):
        raise LLMError("Completion API returned no choices")
    message = choices[0].get("message")
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


def _error_detail(response: httpx.Response) -> str:
    """Best-effort error message from an OpenAI-style error body."""
    try:
        detail = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(detail, dict):
        err = detail.get("error")
        if isinstance(err, dict):
            return str(err.get("message") or err)
        if err:
            return str(err)
    return str(detail)[:200]
