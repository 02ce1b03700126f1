"""Minimal client for an OpenAI-compatible chat-completion API."""

from __future__ import annotations

import logging
from typing import Any

import requests

from .config import API_BASE_URL, DEFAULT_MAX_TOKENS, REQUEST_TIMEOUT
from .errors import APIError
from .models import ChatCompletionOptions

logger = logging.getLogger(__name__)

_OPTIONAL_FIELDS = ("temperature", "top_p", "frequency_penalty", "presence_penalty")


def _error_message(response: requests.Response) -> str:
    """Pull error.message out of a JSON error body, else describe the status."""
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        message = None
    return message or f"HTTP {response.status_code}: {response.reason}"


class _Completions:
    def __init__(self, client: OpenAIClient):
        self._client = client

    def create(self, options: ChatCompletionOptions | dict[str, Any]) -> dict[str, Any]:
        """POST a chat completion and return the parsed JSON body as-is.

        Raises APIError on a non-2xx response; transport errors from
        requests propagate unchanged.
        """
        if not isinstance(options, ChatCompletionOptions):
            options = ChatCompletionOptions.model_validate(options)

        payload: dict[str, Any] = {
            "model": options.model,
            "messages": [m.model_dump(exclude_none=True) for m in options.messages],
            "max_tokens": options.max_tokens or DEFAULT_MAX_TOKENS,
        }
        for field in _OPTIONAL_FIELDS:
            value = getattr(options, field)
            if value is not None:
                payload[field] = value

        logger.debug(
            "POST chat/completions model=%s messages=%d",
            options.model,
            len(options.messages),
        )
        response = self._client._request("POST", "/v1/chat/completions", json=payload)
        if not response.ok:
            raise APIError(_error_message(response), status_code=response.status_code)
        return response.json()


class _Chat:
    def __init__(self, client: OpenAIClient):
        self.completions = _Completions(client)


class _Models:
    def __init__(self, client: OpenAIClient):
        self._client = client

    def list(self) -> dict[str, Any]:
        response = self._client._request("GET", "/v1/models")
        if not response.ok:
            raise APIError("Failed to fetch models", status_code=response.status_code)
        return response.json()


class OpenAIClient:
    """Bearer-authenticated wrapper around the completions and models endpoints."""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.api_key = api_key
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.chat = _Chat(self)
        self.models = _Models(self)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        return self.session.request(
            method,
            self.base_url + path,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
            **kwargs,
        )


def create_client(
    api_key: str,
    base_url: str | None = None,
    session: requests.Session | None = None,
) -> OpenAIClient:
    """Build a client. No I/O and no check of the key's shape."""
    return OpenAIClient(api_key, base_url=base_url, session=session)


def validate_api_key(
    api_key: str,
    base_url: str | None = None,
    session: requests.Session | None = None,
) -> bool:
    """Return True if the models endpoint accepts the key.

    Any failure counts as invalid, including keys that cannot be sent in a
    header at all.
    """
    try:
        create_client(api_key, base_url=base_url, session=session).models.list()
    except Exception as exc:
        logger.info("API key validation failed: %s", exc)
        return False
    return True
