from __future__ import annotations

import logging
from typing import Callable

from fastapi import FastAPI, WebSocket, status

from trackpad_relay.security.auth import AuthManager, TokenStore
from trackpad_relay.security.network_guard import is_local as default_is_local
from trackpad_relay.security.rate_limiter import RateLimiter

from .config import Settings, get_settings
from .pointer import DryRunPointerDevice, PointerDevice
from .sessions import Session, SessionRegistry

log = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    auth: AuthManager | None = None,
    rate_limiter: RateLimiter | None = None,
    pointer: PointerDevice | None = None,
    is_local: Callable[[str | None], bool] = default_is_local,
) -> FastAPI:
    """
    Build the relay app. Collaborators are injected; anything omitted is built from `settings`.

    `rate_limiter` is the server-wide budget; with `rate_limit_scope="connection"`
    each session gets its own limiter instead and this one is unused.
    """
    settings = settings or get_settings()
    if auth is None:
        auth = AuthManager(settings.auth_token, TokenStore(settings.token_path))
    if rate_limiter is None:
        rate_limiter = RateLimiter(settings.max_events_per_second)
    if pointer is None:
        pointer = DryRunPointerDevice()
    registry = SessionRegistry()

    app = FastAPI(title="trackpad-relay")
    app.state.settings = settings
    app.state.auth = auth
    app.state.rate_limiter = rate_limiter
    app.state.sessions = registry

    @app.get("/healthz")
    def healthz():
        return {"ok": True, "sessions": len(registry)}

    async def relay(ws: WebSocket):
        host = ws.client.host if ws.client else None
        peer = f"{host}:{ws.client.port}" if ws.client else "unknown"

        # Guard before the handshake completes: non-local peers never see a protocol frame.
        if not is_local(host):
            log.warning("Rejected non-local connection from %s", peer)
            await ws.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        await ws.accept()
        if settings.rate_limit_scope == "connection":
            limiter = RateLimiter(settings.max_events_per_second)
        else:
            limiter = rate_limiter

        session = Session(
            ws=ws,
            auth=auth,
            rate_limiter=limiter,
            pointer=pointer,
            remote_address=peer,
            dispatch_timeout_s=settings.dispatch_timeout_s,
            debug_log_msgs=settings.debug_log_msgs,
        )
        registry.add(session)
        try:
            await session.run()
        finally:
            registry.discard(session)

    app.add_api_websocket_route("/ws", relay)
    app.add_api_websocket_route("/", relay)
    return app
