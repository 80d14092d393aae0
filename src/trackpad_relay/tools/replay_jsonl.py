from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

import websockets

from trackpad_relay.protocol.codec import decode_command, decode_response, encode_command
from trackpad_relay.protocol.messages import Auth, Command


class AuthRejected(RuntimeError):
    pass


def load_events(jsonl_path: Path) -> list[tuple[int | None, Command]]:
    """
    Read recorded commands.

    Expected JSONL format:
      - recorded: {"ts": <ms>, "msg": {...}}
      - or raw messages per line: {...}

    Every message is validated through the codec; `auth` lines are skipped
    since the replayer authenticates itself.
    """
    events: list[tuple[int | None, Command]] = []
    for line in jsonl_path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        obj = json.loads(line)
        ts: int | None = None
        if isinstance(obj, dict) and isinstance(obj.get("msg"), dict):
            raw_ts = obj.get("ts")
            ts = int(raw_ts) if isinstance(raw_ts, (int, float)) else None
            obj = obj["msg"]
        cmd = decode_command(json.dumps(obj))
        if isinstance(cmd, Auth):
            continue
        events.append((ts, cmd))
    return events


async def replay(
    ws_url: str,
    token: str,
    jsonl_path: Path,
    *,
    speed: float = 1.0,
    default_dt_ms: int = 0,
) -> int:
    """Authenticate, then stream recorded pointer commands. Returns the number sent."""
    events = load_events(jsonl_path)

    async with websockets.connect(ws_url) as ws:
        await ws.send(encode_command(Auth(token=token)))
        resp = decode_response(await ws.recv())
        if not resp.success:
            raise AuthRejected(resp.message or "authentication failed")

        sent = 0
        prev_ts: int | None = None
        for ts, cmd in events:
            if ts is not None and prev_ts is not None:
                dt_ms = max(0, ts - prev_ts)
            else:
                dt_ms = default_dt_ms

            prev_ts = ts if ts is not None else prev_ts
            if dt_ms:
                await asyncio.sleep((dt_ms / 1000.0) / max(0.01, speed))

            await ws.send(encode_command(cmd))
            sent += 1
        return sent


def main() -> None:
    ap = argparse.ArgumentParser(description="Replay pointer command JSONL into a trackpad-relay server.")
    ap.add_argument("--ws", required=True, help="WebSocket URL, e.g. ws://192.168.1.20:8080/ws")
    ap.add_argument("--token", required=True, help="Shared auth token")
    ap.add_argument("--in", dest="inp", required=True, help="Input JSONL path")
    ap.add_argument("--speed", type=float, default=1.0, help="Speed multiplier (2.0 = 2x faster)")
    ap.add_argument("--default-dt-ms", type=int, default=0, help="Delay between messages if no timestamps")
    args = ap.parse_args()

    try:
        sent = asyncio.run(
            replay(
                args.ws,
                args.token,
                Path(args.inp),
                speed=args.speed,
                default_dt_ms=args.default_dt_ms,
            )
        )
    except AuthRejected as e:
        raise SystemExit(f"[replay] auth rejected: {e}") from e
    print(f"[replay] sent {sent} command(s)")


if __name__ == "__main__":
    main()
