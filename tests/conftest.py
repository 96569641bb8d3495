import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from toget.transport import RawResponse  # noqa: E402


class FakeTransport:
    """Records every invocation and answers through the callback."""

    def __init__(self, response=None, error=None, *, deliver=True):
        self.response = response
        self.error = error
        self.deliver = deliver
        self.calls = []
        self.callbacks = []
        self.handle = object()

    def __call__(self, options, callback=None):
        self.calls.append(dict(options))
        self.callbacks.append(callback)
        if self.deliver and callback is not None:
            callback(self.error, self.response)
        return self.handle


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    for name in ("TOGET_TIMEOUT_MS", "TOGET_MAX_WORKERS", "TOGET_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def ok_transport():
    return FakeTransport(RawResponse(status_code=200, headers={"content-type": "application/json"}, body={"id": 1}))


@pytest.fixture
def fake_transport_cls():
    return FakeTransport
