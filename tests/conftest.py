"""Shared fixtures: a continuation spy and a fake response."""

import pytest


class NextSpy:
    """Counts how many times the continuation was called."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


class FakeResponse:
    """Records the status code and body sent through status(code).send(msg)."""

    def __init__(self):
        self.code = 0
        self.body = None
        self.sends = 0

    def status(self, code):
        self.code = code
        return self

    def send(self, message):
        self.body = message
        self.sends += 1


@pytest.fixture
def next_spy():
    return NextSpy()


@pytest.fixture
def response():
    return FakeResponse()


@pytest.fixture
def run(next_spy, response):
    """Run a definition's handler against a request; returns (request, response, spy)."""
    from request_model import model

    def _run(definition, request, output="model"):
        handler = model(definition, output)
        handler(request, response, next_spy)
        return request, response, next_spy

    return _run
