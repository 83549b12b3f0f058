"""
Shared fixtures.

The API is exercised through a fake requests session so no test touches the
network. PERSIST_DIR points at a throwaway directory before the package is
imported, so nothing is written next to the source tree.
"""

import copy
import json
import os
import tempfile

import pytest
import requests

os.environ.setdefault("PERSIST_DIR", tempfile.mkdtemp(prefix="hcp-tests-"))

from clients.housecall_pro.transport import HousecallProApi  # noqa: E402


class FakeResponse:
    def __init__(self, status_code=200, json_body=None, text=None):
        self.status_code = status_code
        if json_body is not None:
            self.text = json.dumps(json_body)
        else:
            self.text = text or ""
        self.content = self.text.encode()

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Replays queued responses (or raises queued exceptions) and records every call."""

    def __init__(self, responses=None):
        self.headers = {}
        self.responses = list(responses or [])
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def request(self, method, url, **kwargs):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "params": copy.deepcopy(kwargs.get("params")),
                "json": copy.deepcopy(kwargs.get("json")),
                "timeout": kwargs.get("timeout"),
            }
        )
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


def ok(body=None, status_code=200):
    return FakeResponse(status_code=status_code, json_body=body if body is not None else {})


def page(items, next_cursor=None, has_more=False):
    meta = {"has_more": has_more}
    if next_cursor is not None:
        meta["next_cursor"] = next_cursor
    return ok({"data": items, "meta": meta})


class MemoryStaticData:
    def __init__(self, webhook_id=None):
        self.webhook_id = webhook_id

    def get_webhook_id(self):
        return self.webhook_id

    def set_webhook_id(self, webhook_id):
        self.webhook_id = str(webhook_id)

    def clear_webhook_id(self):
        existed = self.webhook_id is not None
        self.webhook_id = None
        return existed


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def api(session):
    return HousecallProApi("test-key", base_url="https://api.example.test/v1", session=session)


@pytest.fixture
def db_file(tmp_path):
    return tmp_path / "housecall_pro.duckdb"
