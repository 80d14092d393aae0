from .codec import InvalidFormat, decode_command, decode_response, encode_command, encode_response
from .constants import T_AUTH, T_CLICK, T_MOVE_BY, T_MOVE_TO, T_SCROLL
from .messages import (
    Auth,
    Click,
    Command,
    MoveBy,
    MoveTo,
    PointerCommand,
    RelayResponse,
    Scroll,
)

__all__ = [
    "T_AUTH",
    "T_MOVE_TO",
    "T_MOVE_BY",
    "T_CLICK",
    "T_SCROLL",
    "Auth",
    "MoveTo",
    "MoveBy",
    "Click",
    "Scroll",
    "Command",
    "PointerCommand",
    "RelayResponse",
    "InvalidFormat",
    "decode_command",
    "decode_response",
    "encode_command",
    "encode_response",
]
