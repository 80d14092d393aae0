from __future__ import annotations

import asyncio
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum, auto

from fastapi import WebSocket, WebSocketDisconnect, status

from trackpad_relay.protocol.codec import InvalidFormat, decode_command, encode_response
from trackpad_relay.protocol.constants import (
    MSG_ALREADY_AUTHENTICATED,
    MSG_AUTH_REQUIRED,
    MSG_AUTHENTICATED,
    MSG_INVALID_FORMAT,
    MSG_INVALID_TOKEN,
)
from trackpad_relay.protocol.messages import Auth, Command, PointerCommand, RelayResponse
from trackpad_relay.security.auth import AuthManager
from trackpad_relay.security.rate_limiter import RateLimiter

from .pointer import PointerDevice, apply_command

log = logging.getLogger(__name__)


class SessionState(Enum):
    CONNECTED = auto()
    AUTHENTICATING = auto()
    ACTIVE = auto()
    CLOSED = auto()


@dataclass(eq=False)
class Session:
    """
    One client connection, from accept to close.

    CONNECTED -> AUTHENTICATING -> ACTIVE -> CLOSED. Frames are handled one at
    a time in arrival order; the next frame is not read until the previous
    command has been answered, dropped or dispatched.
    """

    ws: WebSocket
    auth: AuthManager
    rate_limiter: RateLimiter
    pointer: PointerDevice
    remote_address: str = "unknown"
    dispatch_timeout_s: float = 0.25
    debug_log_msgs: bool = False

    state: SessionState = SessionState.CONNECTED
    # Flips to True once; never reverts, even after CLOSED.
    authenticated: bool = False
    dispatched: int = 0
    # One worker: device calls run serially, in frame order.
    _executor: ThreadPoolExecutor = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pointer")

    def _transition(self, new_state: SessionState, reason: str) -> None:
        if self.state is SessionState.CLOSED or new_state is self.state:
            return
        log.debug("[%s] %s -> %s (%s)", self.remote_address, self.state.name, new_state.name, reason)
        self.state = new_state

    async def run(self) -> None:
        """Read loop. Returns once the session is CLOSED, whatever the cause."""
        self._transition(SessionState.AUTHENTICATING, "connected")
        log.info("Client connected from %s", self.remote_address)
        try:
            while self.state is not SessionState.CLOSED:
                message = await self.ws.receive()
                if message["type"] == "websocket.disconnect":
                    self._transition(SessionState.CLOSED, "peer disconnected")
                    break
                text = message.get("text")
                if text is None:
                    # binary frames are not part of the protocol
                    continue

                response = await self.handle_text(text)
                if response is not None:
                    await self.ws.send_text(encode_response(response))
                if self.state is SessionState.CLOSED:
                    await self.ws.close(code=status.WS_1008_POLICY_VIOLATION)
        except WebSocketDisconnect:
            pass
        except Exception:
            log.exception("Transport failure for %s", self.remote_address)
        finally:
            self._transition(SessionState.CLOSED, "connection closed")
            self._executor.shutdown(wait=False, cancel_futures=True)
            log.info("Client disconnected: %s", self.remote_address)

    async def handle_text(self, text: str) -> RelayResponse | None:
        """Process one text frame; return the response to send, if any."""
        if self.state is SessionState.CLOSED:
            return None
        try:
            cmd = decode_command(text)
        except InvalidFormat as e:
            log.debug("[%s] invalid frame: %s", self.remote_address, e)
            return RelayResponse.error(MSG_INVALID_FORMAT)

        if self.debug_log_msgs:
            log.debug("[%s] in type=%s", self.remote_address, cmd.type)

        if not self.authenticated:
            return self._authenticate(cmd)

        if isinstance(cmd, Auth):
            return RelayResponse.ok(MSG_ALREADY_AUTHENTICATED)

        if not self.rate_limiter.allow():
            # no reply on drop
            log.debug("[%s] rate limit exceeded; dropped %s", self.remote_address, cmd.type)
            return None

        await self._dispatch(cmd)
        return None

    def _authenticate(self, cmd: Command) -> RelayResponse:
        if not isinstance(cmd, Auth):
            log.warning("Command before auth from %s; closing", self.remote_address)
            self._transition(SessionState.CLOSED, "authentication required")
            return RelayResponse.error(MSG_AUTH_REQUIRED)

        if not self.auth.validate(cmd.token):
            log.warning("Auth failed from %s", self.remote_address)
            self._transition(SessionState.CLOSED, "invalid token")
            return RelayResponse.error(MSG_INVALID_TOKEN)

        self.authenticated = True
        self._transition(SessionState.ACTIVE, "authenticated")
        log.info("Client authenticated: %s", self.remote_address)
        return RelayResponse.ok(MSG_AUTHENTICATED)

    def _apply_if_current(self, cmd: PointerCommand, deadline: float) -> bool:
        # Runs on the session worker. A command whose wait already timed out,
        # or whose session has closed, is skipped rather than applied late.
        if self.state is SessionState.CLOSED or time.monotonic() > deadline:
            return False
        apply_command(self.pointer, cmd)
        return True

    async def _dispatch(self, cmd: PointerCommand) -> None:
        loop = asyncio.get_running_loop()
        deadline = time.monotonic() + self.dispatch_timeout_s
        try:
            # On timeout wait_for cancels the future, which also cancels the job if it has not started.
            applied = await asyncio.wait_for(
                loop.run_in_executor(self._executor, self._apply_if_current, cmd, deadline),
                timeout=self.dispatch_timeout_s,
            )
        except asyncio.TimeoutError:
            log.warning(
                "[%s] pointer %s took longer than %.3fs; dropped",
                self.remote_address,
                cmd.type,
                self.dispatch_timeout_s,
            )
            return
        except Exception:
            log.exception("[%s] pointer %s failed; dropped", self.remote_address, cmd.type)
            return
        if applied:
            self.dispatched += 1
        else:
            log.warning("[%s] pointer %s went stale in the queue; dropped", self.remote_address, cmd.type)


class SessionRegistry:
    """
    Live sessions, for health reporting. Sessions never share state through it.

    Guarded by a thread lock: the sync `/healthz` handler reads it from the
    threadpool while connection tasks add and discard.
    """

    def __init__(self) -> None:
        self._sessions: set[Session] = set()
        self._lock = threading.Lock()

    def add(self, session: Session) -> None:
        with self._lock:
            self._sessions.add(session)

    def discard(self, session: Session) -> None:
        with self._lock:
            self._sessions.discard(session)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
