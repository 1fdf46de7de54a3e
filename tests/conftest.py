"""Shared pytest fixtures for XQL query client tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import pytest

from xql_query.adapters import TransportResponse


class ScriptedTransport:
    """Deterministic transport replaying scripted responses per endpoint.

    Attributes:
        calls: Recorded `(endpoint, payload)` pairs in call order.
    """

    def __init__(self, responses: dict[str, list[TransportResponse]]):
        self._responses = {endpoint: list(sequence) for endpoint, sequence in responses.items()}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def transport_post(self, endpoint: str, payload: dict[str, Any]) -> TransportResponse:
        self.calls.append((endpoint, payload))
        sequence = self._responses.get(endpoint)
        if not sequence:
            raise AssertionError(f"unexpected call to {endpoint}")
        return sequence.pop(0)

    def calls_to(self, endpoint: str) -> list[dict[str, Any]]:
        return [payload for called_endpoint, payload in self.calls if called_endpoint == endpoint]


def json_response(body: Any, status_code: int = 200) -> TransportResponse:
    """Build a transport response carrying a JSON body."""

    return TransportResponse(status_code=status_code, content=json.dumps(body).encode("utf-8"))


def poll_reply(status: str, results: dict[str, Any] | None = None) -> TransportResponse:
    """Build one get-results response with the given status and results."""

    reply: dict[str, Any] = {"status": status}
    if results is not None:
        reply["results"] = results
    return json_response({"reply": reply})


@pytest.fixture
def scripted_transport() -> Callable[[dict[str, list[TransportResponse]]], ScriptedTransport]:
    """Return a factory building scripted transports."""

    return ScriptedTransport
