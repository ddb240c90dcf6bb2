"""Shared fixtures for devtools tests."""

from typing import Dict, List, Union
from unittest.mock import MagicMock

import pytest
import requests

from devtools.checks import Endpoint, PingResult


class FakeProber:
    """Ping prober returning canned results (or raising) per target."""

    def __init__(self, results: Dict[str, Union[PingResult, Exception]]):
        self.results = results
        self.calls: List[str] = []

    def __call__(self, target: str) -> PingResult:
        self.calls.append(target)
        result = self.results[target]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def make_prober():
    return FakeProber


@pytest.fixture
def make_response():
    def _make(status_code: int) -> MagicMock:
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        return response

    return _make


@pytest.fixture
def fake_session():
    """requests.Session stand-in; configure .get per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def alive_result():
    return PingResult(
        alive=True,
        packet_loss="0.000",
        output="1 packets transmitted, 1 received, 0% packet loss, time 0ms",
    )


@pytest.fixture
def dead_result():
    return PingResult(
        alive=False,
        packet_loss="100.000",
        output="1 packets transmitted, 0 received, 100% packet loss, time 0ms",
    )


@pytest.fixture
def ping_endpoint():
    return Endpoint(name="db-host", type="ping", target="10.0.0.5")


@pytest.fixture
def fetch_endpoint():
    return Endpoint(name="svc-a", type="fetch", target="http://ok.example")
