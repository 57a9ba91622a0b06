from __future__ import annotations

import json

import pytest
import requests


class FakeResponse:
    def __init__(self, status_code=200, text="", reason="", content=b""):
        self.status_code = status_code
        self.text = text
        self.reason = reason
        self.content = content
        self.closed = False

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)

    def close(self):
        self.closed = True


class FakeHTTP:
    """Stands in for `requests.request` / `requests.get` and records every call."""

    def __init__(self):
        self.calls: list[dict] = []
        self.gets: list[str] = []
        self.response = FakeResponse(200, "{}")
        self.source = FakeResponse(200, content=b"")
        self.error: Exception | None = None
        self.get_error: Exception | None = None

    def request(self, method, url, **kwargs):
        if self.error is not None:
            raise self.error
        files = {}
        for name, (fname, value) in (kwargs.get("files") or {}).items():
            files[name] = (fname, value if value is None or isinstance(value, (str, bytes)) else value.read())
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": kwargs.get("headers"),
                "auth": kwargs.get("auth"),
                "data": kwargs.get("data"),
                "files": files,
            }
        )
        return self.response

    def get(self, url, **kwargs):
        self.gets.append(url)
        if self.get_error is not None:
            raise self.get_error
        return self.source


@pytest.fixture(autouse=True)
def packagecloud_env(monkeypatch):
    monkeypatch.setenv("PACKAGECLOUD_TOKEN", "secret-token")
    monkeypatch.delenv("PACKAGECLOUD_USER", raising=False)


@pytest.fixture
def http(monkeypatch):
    fake = FakeHTTP()
    monkeypatch.setattr(requests, "request", fake.request)
    monkeypatch.setattr(requests, "get", fake.get)
    return fake


@pytest.fixture(autouse=True)
def restore_logger_handlers():
    from packagecloud_utils import packagecloud_helper

    yield
    for handler in list(packagecloud_helper.logger.handlers):
        packagecloud_helper.logger.removeHandler(handler)
        handler.close()
    packagecloud_helper.configure_logger()
