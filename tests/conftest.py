from __future__ import annotations

import json
import threading
import time
from collections import deque

import pytest

from trackpad_relay.security.auth import AuthManager
from trackpad_relay.security.rate_limiter import RateLimiter
from trackpad_relay.server.sessions import Session

TOKEN = "5f0c6a2e-3b1d-4c8e-9a7f-0d2b4e6f8a10"


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class RecordingPointer:
    def __init__(self):
        self.calls: list[tuple] = []
        self._lock = threading.Lock()

    def _rec(self, *call):
        with self._lock:
            self.calls.append(call)

    def move_to(self, x, y):
        self._rec("move_to", x, y)

    def move_by(self, dx, dy):
        self._rec("move_by", dx, dy)

    def click(self, button, kind):
        self._rec("click", button, kind)

    def scroll(self, dx, dy):
        self._rec("scroll", dx, dy)


class SlowPointer(RecordingPointer):
    def move_by(self, dx, dy):
        time.sleep(0.3)
        super().move_by(dx, dy)


class BrokenPointer(RecordingPointer):
    def click(self, button, kind):
        raise RuntimeError("event tap unavailable")


class FakeSocket:
    """Stand-in for a Starlette WebSocket: ASGI receive messages in, text frames out."""

    def __init__(self, frames=()):
        self.incoming: deque[dict] = deque()
        for f in frames:
            if isinstance(f, bytes):
                self.incoming.append({"type": "websocket.receive", "bytes": f})
            else:
                if not isinstance(f, str):
                    f = json.dumps(f)
                self.incoming.append({"type": "websocket.receive", "text": f})
        self.sent: list[str] = []
        self.close_code: int | None = None

    async def receive(self) -> dict:
        if self.incoming:
            return self.incoming.popleft()
        return {"type": "websocket.disconnect", "code": 1000}

    async def send_text(self, data: str) -> None:
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.close_code = code

    @property
    def responses(self) -> list[dict]:
        return [json.loads(s) for s in self.sent]


@pytest.fixture
def auth() -> AuthManager:
    return AuthManager(TOKEN)


@pytest.fixture
def pointer() -> RecordingPointer:
    return RecordingPointer()


@pytest.fixture
def make_session(auth, pointer):
    def _make(frames=(), *, limiter=None, device=None, timeout=1.0):
        ws = FakeSocket(frames)
        session = Session(
            ws=ws,
            auth=auth,
            rate_limiter=limiter or RateLimiter(1000, clock=FakeClock()),
            pointer=device or pointer,
            remote_address="192.168.1.20:51000",
            dispatch_timeout_s=timeout,
        )
        return session, ws

    return _make
