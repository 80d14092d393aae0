from __future__ import annotations

from typing import Literal, Optional, TypeAlias, Union

from pydantic import BaseModel, ConfigDict, Field

MouseButton: TypeAlias = Literal["left", "right", "center"]
ClickKind: TypeAlias = Literal["down", "up", "click"]  # "click" = down + up


class _Frame(BaseModel):
    # Strict: "10" is not a number; NaN and inf are rejected.
    model_config = ConfigDict(
        frozen=True,
        strict=True,
        allow_inf_nan=False,
        populate_by_name=True,
        extra="ignore",
    )


class Auth(_Frame):
    type: Literal["auth"] = "auth"
    token: str


class MoveTo(_Frame):
    type: Literal["moveTo"] = "moveTo"
    x: float
    y: float


class MoveBy(_Frame):
    type: Literal["moveBy"] = "moveBy"
    dx: float
    dy: float


class Click(_Frame):
    type: Literal["click"] = "click"
    button: MouseButton
    kind: ClickKind = Field(alias="clickType")


class Scroll(_Frame):
    type: Literal["scroll"] = "scroll"
    dx: float
    dy: float


class RelayResponse(_Frame):
    success: bool
    message: Optional[str] = None

    @classmethod
    def ok(cls, message: str | None = None) -> RelayResponse:
        return cls(success=True, message=message)

    @classmethod
    def error(cls, message: str) -> RelayResponse:
        return cls(success=False, message=message)


PointerCommand: TypeAlias = Union[MoveTo, MoveBy, Click, Scroll]
Command: TypeAlias = Union[Auth, MoveTo, MoveBy, Click, Scroll]
