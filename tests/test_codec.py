import json

import pytest

from trackpad_relay.protocol import (
    Auth,
    Click,
    InvalidFormat,
    MoveBy,
    MoveTo,
    RelayResponse,
    Scroll,
    decode_command,
    decode_response,
    encode_command,
    encode_response,
)


def test_decode_move_by():
    cmd = decode_command('{"type":"moveBy","dx":10.5,"dy":-3.2}')
    assert cmd == MoveBy(dx=10.5, dy=-3.2)


def test_decode_move_to_accepts_integers():
    cmd = decode_command('{"type":"moveTo","x":100,"y":200}')
    assert isinstance(cmd, MoveTo)
    assert (cmd.x, cmd.y) == (100.0, 200.0)


def test_decode_click_maps_click_type():
    cmd = decode_command('{"type":"click","button":"left","clickType":"click"}')
    assert cmd == Click(button="left", kind="click")


def test_decode_auth():
    assert decode_command('{"type":"auth","token":"my-secret"}') == Auth(token="my-secret")


def test_decode_scroll():
    assert decode_command(b'{"type":"scroll","dx":0,"dy":-5}') == Scroll(dx=0, dy=-5)


def test_unknown_fields_are_ignored():
    cmd = decode_command('{"type":"moveBy","dx":1,"dy":2,"seq":7}')
    assert cmd == MoveBy(dx=1, dy=2)


@pytest.mark.parametrize(
    "cmd",
    [
        Auth(token="tök-1"),
        MoveTo(x=-12.25, y=1080.5),
        MoveBy(dx=10.5, dy=-3.2),
        Click(button="center", kind="down"),
        Scroll(dx=-0.5, dy=120.0),
    ],
)
def test_round_trip(cmd):
    assert decode_command(encode_command(cmd)) == cmd


def test_click_encodes_wire_field_name():
    wire = json.loads(encode_command(Click(button="right", kind="up")))
    assert wire == {"type": "click", "button": "right", "clickType": "up"}


@pytest.mark.parametrize(
    "raw",
    [
        '{"type":"bogus"}',
        "not json",
        "",
        "[1, 2]",
        '"auth"',
        '{"token":"x"}',
        '{"type":5}',
        '{"type":"auth"}',
        '{"type":"auth","token":123}',
        '{"type":"moveTo","x":1}',
        '{"type":"moveTo","x":"10","y":2}',
        '{"type":"moveBy","dx":NaN,"dy":0}',
        '{"type":"scroll","dx":null,"dy":0}',
        '{"type":"click","button":"middle","clickType":"click"}',
        '{"type":"click","button":"left","clickType":"double"}',
    ],
)
def test_invalid_frames(raw):
    with pytest.raises(InvalidFormat):
        decode_command(raw)


def test_invalid_utf8():
    with pytest.raises(InvalidFormat):
        decode_command(b"\xff\xfe{}")


def test_invalid_format_is_a_value_error():
    assert issubclass(InvalidFormat, ValueError)


def test_commands_are_immutable():
    cmd = MoveBy(dx=1, dy=2)
    with pytest.raises(Exception):
        cmd.dx = 5


def test_encode_response():
    assert json.loads(encode_response(RelayResponse.ok())) == {"success": True, "message": None}
    assert json.loads(encode_response(RelayResponse.error("Invalid token"))) == {
        "success": False,
        "message": "Invalid token",
    }


def test_decode_response():
    assert decode_response('{"success":true,"message":"Authenticated"}') == RelayResponse.ok("Authenticated")
    assert decode_response('{"success":false}') == RelayResponse(success=False)
    with pytest.raises(InvalidFormat):
        decode_response('{"message":"x"}')
