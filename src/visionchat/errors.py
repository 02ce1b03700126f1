"""Error type for API failures and the mapping to user-facing messages."""

from __future__ import annotations

GENERIC_ERROR = "Something went wrong. Please try again."
ERROR_PREFIX = "⚠️ Error: "


class APIError(Exception):
    """Non-2xx response from the completion API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def describe_error(exc: BaseException, model: str) -> str:
    """Collapse any failure into the message shown in the conversation.

    The HTTP status is checked when the error carries one; otherwise the
    message text is matched by substring.
    """
    message = str(exc)
    status = getattr(exc, "status_code", None)
    status_text = str(status) if status is not None else ""

    def mentions(*codes: str) -> bool:
        return any(code == status_text or code in message for code in codes)

    if mentions("401") or "Unauthorized" in message:
        return "Invalid API key. Please check your API key and try again."
    if mentions("429"):
        return "Rate limit exceeded. Please wait a moment and try again."
    if mentions("500", "502", "503"):
        return "OpenAI server error. Please try again later."
    if "model" in message:
        return f'Model "{model}" is not available. Please select a different model.'
    return message or GENERIC_ERROR


def format_error_message(exc: BaseException, model: str) -> str:
    return ERROR_PREFIX + describe_error(exc, model)
