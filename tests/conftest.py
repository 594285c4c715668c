"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import Mock

import pytest
import requests

from globalmoo.client import Client
from globalmoo.config import ClientSettings
from tests.support import BASE_URI, RecordingWait

_SETTINGS_ENV = (
    "GMOO_API_KEY",
    "GMOO_API_URI",
    "GMOO_VALIDATE_TLS",
    "GMOO_TIMEOUT_SECONDS",
    "GMOO_LOG_LEVEL",
)


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> ClientSettings:
    """Provide settings isolated from the environment and any local `.env` file."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    return ClientSettings(_env_file=None)


@pytest.fixture
def session() -> Mock:
    """Provide a mocked requests session."""
    return Mock(spec=requests.Session)


@pytest.fixture
def recording_wait() -> RecordingWait:
    """Provide a fake backoff clock."""
    return RecordingWait()


@pytest.fixture
def client(session: Mock, settings: ClientSettings, recording_wait: RecordingWait) -> Client:
    """Provide a client wired to the mocked session."""
    return Client(
        api_key="test-key",
        base_uri=BASE_URI,
        session=session,
        settings=settings,
        wait=recording_wait,
    )


@pytest.fixture
def respond(session: Mock) -> Callable[..., None]:
    """Queue responses (or exceptions) for the mocked session, in call order."""

    def _respond(*outcomes: requests.Response | Exception) -> None:
        session.request.side_effect = list(outcomes)

    return _respond
