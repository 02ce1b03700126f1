from __future__ import annotations

import pytest

from visionchat.errors import APIError, describe_error, format_error_message


@pytest.mark.parametrize(
    "exc, expected",
    [
        (APIError("Incorrect API key", status_code=401), "Invalid API key. Please check your API key and try again."),
        (Exception("HTTP 401: Unauthorized"), "Invalid API key. Please check your API key and try again."),
        (APIError("slow down", status_code=429), "Rate limit exceeded. Please wait a moment and try again."),
        (APIError("HTTP 503: Service Unavailable", status_code=503), "OpenAI server error. Please try again later."),
        (APIError("The model `gpt-9` does not exist", status_code=404), 'Model "gpt-9" is not available. Please select a different model.'),
        (Exception("Network request failed"), "Network request failed"),
        (Exception(""), "Something went wrong. Please try again."),
    ],
)
def test_describe_error(exc, expected):
    assert describe_error(exc, "gpt-9") == expected


def test_format_error_message_prefix():
    assert format_error_message(Exception("boom"), "gpt-4o") == "⚠️ Error: boom"
