"""Data models for conversations and the chat-completion wire format."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageURL(BaseModel):
    url: str
    detail: Literal["low", "high", "auto"] | None = None


class ImagePart(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: ImageURL


ContentPart = Annotated[Union[TextPart, ImagePart], Field(discriminator="type")]
MessageContent = Union[str, list[ContentPart]]


class Message(BaseModel):
    """One turn in a conversation. The role is fixed once created."""

    id: str
    role: Literal["user", "assistant"] = Field(frozen=True)
    content: MessageContent


class Conversation(BaseModel):
    id: str
    title: str
    messages: list[Message] = []
    model: str


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: MessageContent


class ChatCompletionOptions(BaseModel):
    model: str
    messages: list[ChatMessage]
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None


class PendingTurn(BaseModel):
    """An outstanding request, tagged with the conversation that issued it."""

    conversation_id: str
    model: str
    messages: list[ChatMessage] = []


class ModelInfo(BaseModel):
    id: str
    name: str
    description: str
