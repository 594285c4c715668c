"""Shared helpers for building fake API exchanges."""

from __future__ import annotations

import json
import threading
from typing import Any
from unittest.mock import Mock

import requests

BASE_URI = "https://api.example.test/v1"


def make_response(status: int, body: Any = None, *, text: str | None = None) -> requests.Response:
    """Build a real Response carrying a JSON (or raw text) body."""

    resp = requests.Response()
    resp.status_code = status
    raw = text if text is not None else json.dumps(body if body is not None else {})
    resp._content = raw.encode("utf-8")
    resp.encoding = "utf-8"
    resp.headers["Content-Type"] = "application/json"
    return resp


class RecordingWait:
    """Stands in for the backoff sleep and records each requested delay."""

    def __init__(self, *, cancel_on_call: int | None = None) -> None:
        self.delays: list[float] = []
        self._cancel_on_call = cancel_on_call

    def __call__(self, seconds: float, cancel_event: threading.Event | None) -> bool:
        self.delays.append(seconds)
        if self._cancel_on_call is not None and len(self.delays) >= self._cancel_on_call:
            if cancel_event is not None:
                cancel_event.set()
            return True
        return False


def sent_json(session: Mock, call_index: int = -1) -> Any:
    """Return the JSON body passed to the session for a recorded call."""

    return session.request.call_args_list[call_index].kwargs.get("json")


def entity(entity_id: int, **fields: Any) -> dict[str, Any]:
    """Wire-shaped record with the shared base fields filled in."""

    body: dict[str, Any] = {
        "id": entity_id,
        "createdAt": "2025-01-01T00:00:00Z",
        "updatedAt": "2025-01-01T00:00:00Z",
        "disabledAt": None,
    }
    body.update(fields)
    return body
