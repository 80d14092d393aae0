from __future__ import annotations

import logging
from typing import Protocol

from trackpad_relay.protocol.messages import (
    Click,
    ClickKind,
    MouseButton,
    MoveBy,
    MoveTo,
    PointerCommand,
    Scroll,
)

log = logging.getLogger(__name__)


class PointerDevice(Protocol):
    """Host-side cursor/mouse capability. Calls are expected to be fast; the session bounds them anyway."""

    def move_to(self, x: float, y: float) -> None: ...

    def move_by(self, dx: float, dy: float) -> None: ...

    def click(self, button: MouseButton, kind: ClickKind) -> None: ...

    def scroll(self, dx: float, dy: float) -> None: ...


def apply_command(device: PointerDevice, cmd: PointerCommand) -> None:
    """Forward one validated pointer command, unchanged, to `device`."""
    if isinstance(cmd, MoveTo):
        device.move_to(cmd.x, cmd.y)
    elif isinstance(cmd, MoveBy):
        device.move_by(cmd.dx, cmd.dy)
    elif isinstance(cmd, Click):
        device.click(cmd.button, cmd.kind)
    elif isinstance(cmd, Scroll):
        device.scroll(cmd.dx, cmd.dy)
    else:
        raise TypeError(f"not a pointer command: {cmd!r}")


class DryRunPointerDevice:
    """Logs every call and touches nothing. Used with --dry-run and on headless hosts."""

    # Discrete events log at INFO; high-frequency deltas (move_by, scroll) at DEBUG.

    def move_to(self, x: float, y: float) -> None:
        log.info("move_to x=%s y=%s", x, y)

    def move_by(self, dx: float, dy: float) -> None:
        log.debug("move_by dx=%s dy=%s", dx, dy)

    def click(self, button: MouseButton, kind: ClickKind) -> None:
        log.info("click button=%s kind=%s", button, kind)

    def scroll(self, dx: float, dy: float) -> None:
        log.debug("scroll dx=%s dy=%s", dx, dy)


class PynputPointerDevice:
    """
    Real cursor control via pynput (macOS Quartz, Windows SendInput, X11).

    pynput is an optional extra (`pip install trackpad-relay[pointer]`) and
    needs a display, so it is imported here rather than at module load.
    On macOS the process also needs the Accessibility permission.
    """

    def __init__(self) -> None:
        from pynput.mouse import Button, Controller

        self._mouse = Controller()
        self._buttons = {
            "left": Button.left,
            "right": Button.right,
            "center": Button.middle,
        }

    def move_to(self, x: float, y: float) -> None:
        self._mouse.position = (x, y)

    def move_by(self, dx: float, dy: float) -> None:
        self._mouse.move(dx, dy)

    def click(self, button: MouseButton, kind: ClickKind) -> None:
        b = self._buttons[button]
        if kind == "down":
            self._mouse.press(b)
        elif kind == "up":
            self._mouse.release(b)
        else:
            self._mouse.click(b)

    def scroll(self, dx: float, dy: float) -> None:
        self._mouse.scroll(dx, dy)
