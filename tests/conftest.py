#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shared fixtures for the Freebox API tests.

FakeSession stands in for the requests.Session of a Client: each route is a
(method, path) pair answered from a queue of FakeResponse objects or
exceptions. The last queued answer is repeated once the queue is drained.

License: MIT
"""

import json

import pytest

from freebox_api_utils.client import Client

BASE_URL = "http://mafreebox.freebox.fr"
APP_ID = "org.example.testapp"
APP_VERSION = "1.0"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self._text = text
        self.json_calls = 0

    def json(self):
        self.json_calls += 1
        if self._text is not None:
            return json.loads(self._text)
        return self._payload


class FakeSession:
    def __init__(self):
        self.headers = {}
        self.routes = {}
        self.calls = []
        self.closed = False

    def add(self, method, path, *answers):
        self.routes.setdefault((method, path), []).extend(answers)

    def request(self, method, url, data=None, timeout=None):
        assert url.startswith(BASE_URL)
        path = url[len(BASE_URL):]
        self.calls.append((method, path, data))
        queue = self.routes[(method, path)]
        answer = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def paths(self, method=None):
        return [path for m, path, _ in self.calls if method is None or m == method]

    def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def make_client(fake_session):
    """Build a Client wired to fake_session"""
    def _make(**options):
        options.setdefault("poll_interval", 0)
        client = Client(app_id=APP_ID, app_version=APP_VERSION, **options)
        client._session = fake_session
        return client
    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def v3_session(fake_session):
    """A session whose device reports API version 3.0"""
    fake_session.add("GET", "/api_version", FakeResponse(200, {"api_version": "3.0", "device_name": "Freebox Server"}))
    return fake_session
