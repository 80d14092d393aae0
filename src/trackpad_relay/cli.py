from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from trackpad_relay import __version__
from trackpad_relay.protocol.codec import encode_command
from trackpad_relay.protocol.messages import Auth
from trackpad_relay.security.auth import AuthManager, TokenStore
from trackpad_relay.security.rate_limiter import RateLimiter
from trackpad_relay.server.app import create_app
from trackpad_relay.server.config import Settings
from trackpad_relay.server.pointer import DryRunPointerDevice, PointerDevice, PynputPointerDevice

log = logging.getLogger("trackpad_relay")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="trackpad-relay",
        description="WebSocket server that relays trackpad/cursor commands from a companion device.",
    )
    ap.add_argument("-p", "--port", type=int, default=None, help="Port to listen on (default 8080).")
    ap.add_argument("--host", default=None, help="Interface to bind (default 0.0.0.0).")
    ap.add_argument(
        "-t",
        "--token",
        default=None,
        help="Authentication token. Loaded from the token file, or generated, if not provided.",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    ap.add_argument("--dry-run", action="store_true", help="Log pointer commands instead of moving the cursor.")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.port is not None:
        overrides["port"] = args.port
    if args.host is not None:
        overrides["host"] = args.host
    if args.token:
        overrides["auth_token"] = args.token
    if args.verbose:
        overrides["verbose"] = True
    return Settings(**overrides)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _pointer_device(dry_run: bool) -> PointerDevice:
    if dry_run:
        return DryRunPointerDevice()
    try:
        return PynputPointerDevice()
    except ImportError as e:
        raise SystemExit(
            "Missing dependency: pynput. Install with `pip install trackpad-relay[pointer]` or use --dry-run."
        ) from e


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    configure_logging(settings.verbose)

    auth = AuthManager(settings.auth_token, TokenStore(settings.token_path))
    print(f"Auth token: {auth.current_token}")
    print("   Send this as the first WebSocket message:")
    print(f"   {encode_command(Auth(token=auth.current_token))}")
    print("")

    app = create_app(
        settings,
        auth=auth,
        rate_limiter=RateLimiter(settings.max_events_per_second),
        pointer=_pointer_device(args.dry_run),
    )

    log.info("Trackpad Relay listening on ws://%s:%d", settings.host, settings.port)
    # uvicorn answers WebSocket pings itself and exits non-zero if it cannot bind.
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.verbose else "info",
        ws="websockets",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
