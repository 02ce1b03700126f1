"""In-memory conversation state: the conversation list, current conversation and selected model."""

from __future__ import annotations

import logging
import time

from pydantic import TypeAdapter

from .config import DEFAULT_MODEL, IMAGE_TITLE, NEW_CHAT_TITLE, TITLE_MAX_CHARS
from .models import Conversation, Message, MessageContent, TextPart

logger = logging.getLogger(__name__)

_content_adapter = TypeAdapter(MessageContent)
_last_id = 0


def new_id() -> str:
    """Return a creation-time identifier (epoch milliseconds), unique within the process."""
    global _last_id
    _last_id = max(time.time_ns() // 1_000_000, _last_id + 1)
    return str(_last_id)


def message_text(message: Message) -> str:
    """Text used for titles: string content, else the first text part, else "Image"."""
    if isinstance(message.content, str):
        return message.content
    for part in message.content:
        if isinstance(part, TextPart):
            return part.text
    return IMAGE_TITLE


def make_title(text: str) -> str:
    if len(text) > TITLE_MAX_CHARS:
        return text[:TITLE_MAX_CHARS] + "..."
    return text


class ConversationStore:
    """Session state for one chat client process.

    The current conversation is held by id and always resolved against the
    conversation list, so it is either None or a member of that list.
    Operations that need a current conversation return False instead of
    raising when there is none.
    """

    def __init__(self, selected_model: str = DEFAULT_MODEL):
        self.conversations: list[Conversation] = []
        self.selected_model = selected_model
        self._current_id: str | None = None

    @property
    def current_conversation(self) -> Conversation | None:
        if self._current_id is None:
            return None
        return self.get_conversation(self._current_id)

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        for conv in self.conversations:
            if conv.id == conversation_id:
                return conv
        return None

    def set_selected_model(self, model: str):
        self.selected_model = model

    def create_conversation(self) -> Conversation:
        """Insert an empty conversation at the head of the list and make it current."""
        conv = Conversation(
            id=new_id(),
            title=NEW_CHAT_TITLE,
            messages=[],
            model=self.selected_model,
        )
        self.conversations.insert(0, conv)
        self._current_id = conv.id
        logger.debug("Created conversation %s (model=%s)", conv.id, conv.model)
        return conv

    def add_message(self, message: Message) -> bool:
        """Append a message to the current conversation.

        The first user message of an empty conversation sets its title.
        """
        conv = self.current_conversation
        if conv is None:
            logger.debug("add_message skipped: no current conversation")
            return False

        if not conv.messages and message.role == "user":
            conv.title = make_title(message_text(message))
        conv.messages.append(message)
        return True

    def add_message_to(self, conversation_id: str, message: Message) -> bool:
        """Append only if conversation_id is still the current conversation."""
        conv = self.current_conversation
        if conv is None or conv.id != conversation_id:
            logger.debug(
                "Discarding message for conversation %s: no longer current",
                conversation_id,
            )
            return False
        return self.add_message(message)

    def update_last_message(self, content: MessageContent) -> bool:
        """Replace the content of the last message, keeping its id and role."""
        conv = self.current_conversation
        if conv is None or not conv.messages:
            logger.debug("update_last_message skipped: nothing to update")
            return False

        content = _content_adapter.validate_python(content)
        conv.messages[-1] = conv.messages[-1].model_copy(update={"content": content})
        return True

    def select_conversation(self, conversation_id: str) -> bool:
        conv = self.get_conversation(conversation_id)
        if conv is None:
            logger.debug("select_conversation skipped: unknown id %s", conversation_id)
            return False

        self._current_id = conv.id
        self.selected_model = conv.model
        return True

    def delete_conversation(self, conversation_id: str) -> bool:
        before = len(self.conversations)
        self.conversations = [c for c in self.conversations if c.id != conversation_id]
        if self._current_id == conversation_id:
            self._current_id = None
        return len(self.conversations) != before

    def clear_current_conversation(self) -> bool:
        conv = self.current_conversation
        if conv is None:
            logger.debug("clear_current_conversation skipped: no current conversation")
            return False

        conv.messages = []
        conv.title = NEW_CHAT_TITLE
        return True

    def answer_lines(self) -> list[str]:
        """Non-blank lines of the current conversation's text answers, newest first."""
        conv = self.current_conversation
        if conv is None:
            return []

        lines = [
            line
            for msg in conv.messages
            if msg.role == "assistant" and isinstance(msg.content, str)
            for line in msg.content.split("\n")
            if line.strip()
        ]
        lines.reverse()
        return lines
