from __future__ import annotations

import json

from pydantic import ValidationError

from .constants import T_AUTH, T_CLICK, T_MOVE_BY, T_MOVE_TO, T_SCROLL
from .messages import Auth, Click, Command, MoveBy, MoveTo, RelayResponse, Scroll

# Discriminator -> variant. Decoding switches on "type" explicitly.
_VARIANTS: dict[str, type[Command]] = {
    T_AUTH: Auth,
    T_MOVE_TO: MoveTo,
    T_MOVE_BY: MoveBy,
    T_CLICK: Click,
    T_SCROLL: Scroll,
}


class InvalidFormat(ValueError):
    """Frame is not JSON, has no/unknown `type`, or a variant field is missing or mistyped."""


def _dumps(obj: dict) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def _load_object(text: str | bytes) -> dict:
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidFormat(f"frame is not UTF-8: {e}") from e
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        # No payload echo; frames come from the network.
        raise InvalidFormat(f"invalid JSON: {e.msg}") from e
    if not isinstance(obj, dict):
        raise InvalidFormat(f"expected a JSON object, got {type(obj).__name__}")
    return obj


def decode_command(text: str | bytes) -> Command:
    obj = _load_object(text)
    t = obj.get("type")
    if not isinstance(t, str):
        raise InvalidFormat("missing 'type' discriminator")
    model = _VARIANTS.get(t)
    if model is None:
        raise InvalidFormat(f"unknown message type {t!r}")
    try:
        return model.model_validate(obj)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise InvalidFormat(f"bad fields for {t!r}: {fields}") from e


def encode_command(cmd: Command) -> str:
    return _dumps(cmd.model_dump(by_alias=True))


def encode_response(resp: RelayResponse) -> str:
    return _dumps({"success": resp.success, "message": resp.message})


def decode_response(text: str | bytes) -> RelayResponse:
    obj = _load_object(text)
    try:
        return RelayResponse.model_validate(obj)
    except ValidationError as e:
        raise InvalidFormat(f"bad response: {e.error_count()} error(s)") from e
