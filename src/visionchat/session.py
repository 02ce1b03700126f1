"""Send pipeline: user turn → one completion request → one assistant turn."""

from __future__ import annotations

import base64
import logging
import mimetypes
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import requests

from .client import OpenAIClient, create_client
from .config import IMAGE_DETAIL, SYSTEM_PROMPT
from .errors import APIError, format_error_message
from .models import (
    ChatCompletionOptions,
    ChatMessage,
    ContentPart,
    ImagePart,
    ImageURL,
    Message,
    PendingTurn,
    TextPart,
)
from .store import ConversationStore, new_id

logger = logging.getLogger(__name__)


def build_user_content(text: str, images: Iterable[str] = ()) -> list[ContentPart] | None:
    """Text part (if any) followed by one high-detail image part per URL."""
    parts: list[ContentPart] = []
    if text.strip():
        parts.append(TextPart(text=text.strip()))
    for url in images:
        parts.append(ImagePart(image_url=ImageURL(url=url, detail=IMAGE_DETAIL)))
    return parts or None


def image_data_url(path: str | Path) -> str:
    """Read a local image into a base64 data URL."""
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    if not mime or not mime.startswith("image/"):
        mime = "image/jpeg"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def format_answer(completion: dict[str, Any], show_usage: bool = True) -> str:
    answer = (completion["choices"][0]["message"].get("content") or "").strip()
    if not show_usage:
        return answer
    total_tokens = (completion.get("usage") or {}).get("total_tokens") or 0
    return f"{answer}    [{total_tokens}]"


class ChatSession:
    """Binds a ConversationStore to an API key and a completion client."""

    def __init__(
        self,
        store: ConversationStore,
        api_key: str,
        client_factory: Callable[[str], OpenAIClient] = create_client,
        system_prompt: str | None = SYSTEM_PROMPT,
        include_history: bool = False,
        show_usage: bool = True,
    ):
        self.store = store
        self.api_key = api_key
        self.client_factory = client_factory
        self.system_prompt = system_prompt
        self.include_history = include_history
        self.show_usage = show_usage

    def begin(self, text: str, images: Iterable[str] = ()) -> PendingTurn | None:
        """Append the user turn and describe the request to issue for it."""
        content = build_user_content(text, images)
        if content is None:
            return None

        conv = self.store.current_conversation or self.store.create_conversation()
        history = list(conv.messages) if self.include_history else []
        self.store.add_message(Message(id=new_id(), role="user", content=content))

        messages: list[ChatMessage] = []
        if self.system_prompt:
            messages.append(ChatMessage(role="system", content=self.system_prompt))
        messages.extend(ChatMessage(role=m.role, content=m.content) for m in history)
        messages.append(ChatMessage(role="user", content=content))

        return PendingTurn(
            conversation_id=conv.id,
            model=self.store.selected_model,
            messages=messages,
        )

    def complete(self, pending: PendingTurn) -> Message | None:
        """Issue the request once and append the outcome as an assistant turn.

        Failures become an inline error message. The reply is dropped if the
        issuing conversation is no longer current when the request settles.
        """
        client = self.client_factory(self.api_key)
        try:
            completion = client.chat.completions.create(
                ChatCompletionOptions(model=pending.model, messages=pending.messages)
            )
            content = format_answer(completion, show_usage=self.show_usage)
        except (APIError, requests.RequestException) as exc:
            logger.warning("Completion failed for %s: %s", pending.conversation_id, exc)
            content = format_error_message(exc, pending.model)
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            logger.warning("Malformed completion response: %r", exc)
            content = format_error_message(exc, pending.model)
        except Exception as exc:
            logger.warning(
                "Completion failed for %s", pending.conversation_id, exc_info=True
            )
            content = format_error_message(exc, pending.model)

        reply = Message(id=new_id(), role="assistant", content=content)
        if not self.store.add_message_to(pending.conversation_id, reply):
            return None
        return reply

    def send(self, text: str, images: Iterable[str] = ()) -> Message | None:
        pending = self.begin(text, images)
        if pending is None:
            return None
        return self.complete(pending)
