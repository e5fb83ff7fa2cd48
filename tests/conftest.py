"""Shared fixtures: a scripted HTTP transport and ready-made configs."""

from typing import Any, Callable, Dict, List, Optional, Union

import pytest

from fivefan.config import CloudBackendConfig, Config, LocalBackendConfig
from fivefan.errors import TransportError
from fivefan.transport import TransportResponse

LOCAL_URL = "http://local.test:11434"
CLOUD_URL = "https://cloud.test/openai"

Scripted = Union[TransportResponse, Exception, Callable[[dict], TransportResponse]]


class FakeTransport:
    """Records every request and answers from per-URL scripts.

    A route maps a URL to one answer or a list of answers consumed in
    order (the last one repeats). URLs without a route raise a refused
    connection, like an unreachable host.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = dict(routes or {})
        self.calls: List[dict] = []

    def route(self, url: str, answer: Any) -> None:
        self.routes[url] = answer

    def request(self, url, method="GET", headers=None, body=None, timeout=30.0):
        call = {"url": url, "method": method, "headers": headers or {}, "body": body,
                "timeout": timeout}
        self.calls.append(call)

        if url not in self.routes:
            raise TransportError(f"{method} {url} failed: connection refused")

        answer = self.routes[url]
        if isinstance(answer, list):
            answer = answer.pop(0) if len(answer) > 1 else answer[0]
        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(call)
        return answer

    def calls_to(self, url: str) -> List[dict]:
        return [c for c in self.calls if c["url"] == url]


def ok(body: Any = None, status: int = 200) -> TransportResponse:
    return TransportResponse(status=status, body=body)


def local_generated(text: str) -> TransportResponse:
    return ok({"model": "llama3.2:3b", "response": text, "done": True})


def cloud_generated(text: str) -> TransportResponse:
    return ok({"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]})


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def local_settings():
    return LocalBackendConfig(url=LOCAL_URL)


@pytest.fixture
def cloud_settings():
    return CloudBackendConfig(url=CLOUD_URL, api_key="sk-test")


@pytest.fixture
def config():
    return Config({
        "logging": {"level": "CRITICAL", "console": False},
        "llm": {
            "provider": "auto",
            "local": {"url": LOCAL_URL},
            "cloud": {"url": CLOUD_URL, "api_key": "sk-test"},
        },
    })
