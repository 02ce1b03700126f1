from __future__ import annotations

import json
from http.client import responses as reasons
from urllib.parse import urlparse

import pytest
import requests
from requests.adapters import BaseAdapter

BASE_URL = "https://api.test"


class StubAdapter(BaseAdapter):
    """Transport adapter answering from canned (method, path) routes."""

    def __init__(self):
        super().__init__()
        self.routes: dict[tuple[str, str], dict] = {}
        self.sent: list[requests.PreparedRequest] = []

    def add(self, method, path, status=200, body=None, raw=None, exc=None):
        self.routes[(method, path)] = {
            "status": status, "body": body, "raw": raw, "exc": exc,
        }

    def send(self, request, **kwargs):
        self.sent.append(request)
        # http.client sends header values as latin-1
        for value in request.headers.values():
            value.encode("latin-1")
        route = self.routes[(request.method, urlparse(request.url).path)]
        if route["exc"] is not None:
            raise route["exc"]

        response = requests.Response()
        response.status_code = route["status"]
        response.reason = reasons.get(route["status"], "")
        if route["raw"] is not None:
            response._content = route["raw"]
        else:
            response._content = json.dumps(route["body"] or {}).encode()
            response.headers["Content-Type"] = "application/json"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass

    def last_json(self) -> dict:
        return json.loads(self.sent[-1].body)


@pytest.fixture
def adapter():
    return StubAdapter()


@pytest.fixture
def http_session(adapter):
    session = requests.Session()
    session.mount("https://", adapter)
    return session


def completion_body(content="4", total_tokens=12):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {
            "prompt_tokens": total_tokens - 2,
            "completion_tokens": 2,
            "total_tokens": total_tokens,
        },
    }
