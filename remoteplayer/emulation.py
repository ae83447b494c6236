"""Controller state, joystick input translation and emulated Xbox 360 pads."""

from __future__ import annotations

import struct
import time
from dataclasses import dataclass, replace
from enum import IntFlag
from typing import ClassVar, Optional, Protocol, Union

JOYSTICK_DEAD_ZONE = 8000
MICROSOFT_VENDOR_ID = 0x045E
XBOX360_PRODUCT_ID = 0x028E

_STATE_FORMAT = struct.Struct("<H4h2B")


class XusbButton(IntFlag):
    """Button bits of an Xbox 360 (XUSB) gamepad report."""

    DPAD_UP = 0x0001
    DPAD_DOWN = 0x0002
    DPAD_LEFT = 0x0004
    DPAD_RIGHT = 0x0008
    START = 0x0010
    BACK = 0x0020
    LEFT_THUMB = 0x0040
    RIGHT_THUMB = 0x0080
    LEFT_SHOULDER = 0x0100
    RIGHT_SHOULDER = 0x0200
    GUIDE = 0x0400
    A = 0x1000
    B = 0x2000
    X = 0x4000
    Y = 0x8000


class HatDirection(IntFlag):
    """Bits of a joystick hat (d-pad) position."""

    CENTERED = 0x00
    UP = 0x01
    RIGHT = 0x02
    DOWN = 0x04
    LEFT = 0x08


HAT_CASES = (HatDirection.DOWN, HatDirection.RIGHT, HatDirection.LEFT, HatDirection.UP)

_SDL_BUTTONS = {
    0: XusbButton.A,
    1: XusbButton.B,
    2: XusbButton.X,
    3: XusbButton.Y,
    4: XusbButton.BACK,
    5: XusbButton.GUIDE,
    6: XusbButton.START,
    7: XusbButton.LEFT_THUMB,
    8: XusbButton.RIGHT_THUMB,
    9: XusbButton.LEFT_SHOULDER,
    10: XusbButton.RIGHT_SHOULDER,
}

_HAT_BUTTONS = {
    HatDirection.UP: XusbButton.DPAD_UP,
    HatDirection.RIGHT: XusbButton.DPAD_RIGHT,
    HatDirection.DOWN: XusbButton.DPAD_DOWN,
    HatDirection.LEFT: XusbButton.DPAD_LEFT,
}


def sdl_button_to_xusb(button: int) -> XusbButton:
    """Map a joystick button index to its XUSB bit; unknown buttons map to no bit."""
    return _SDL_BUTTONS.get(button, XusbButton(0))


def hat_to_xusb(hat: int) -> XusbButton:
    """Map a single hat direction to its d-pad bit; anything else maps to no bit."""
    return _HAT_BUTTONS.get(hat, XusbButton(0))


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name}={value} is outside [{low}, {high}]")


def _wrap16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


@dataclass(frozen=True)
class ControllerState:
    """Buttons, sticks and triggers of one controller, as sent on the wire."""

    buttons: int = 0
    lx: int = 0
    ly: int = 0
    rx: int = 0
    ry: int = 0
    lt: int = 0
    rt: int = 0

    SIZE: ClassVar[int] = _STATE_FORMAT.size

    def __post_init__(self) -> None:
        _check_range("buttons", self.buttons, 0, 0xFFFF)
        for name in ("lx", "ly", "rx", "ry"):
            _check_range(name, getattr(self, name), -0x8000, 0x7FFF)
        for name in ("lt", "rt"):
            _check_range(name, getattr(self, name), 0, 0xFF)

    def pack(self) -> bytes:
        """Encode the state as its fixed-size little-endian wire form."""
        return _STATE_FORMAT.pack(
            int(self.buttons), self.lx, self.ly, self.rx, self.ry, self.lt, self.rt
        )

    @classmethod
    def unpack(cls, data: bytes) -> "ControllerState":
        """Decode a state from exactly SIZE bytes."""
        if len(data) != cls.SIZE:
            raise ValueError(f"expected {cls.SIZE} bytes, got {len(data)}")
        return cls(*_STATE_FORMAT.unpack(data))


@dataclass(frozen=True)
class XusbReport:
    """Report fed to a virtual Xbox 360 pad."""

    buttons: int = 0
    left_trigger: int = 0
    right_trigger: int = 0
    thumb_lx: int = 0
    thumb_ly: int = 0
    thumb_rx: int = 0
    thumb_ry: int = 0

    @classmethod
    def from_state(cls, state: ControllerState) -> "XusbReport":
        # The right stick axes are crossed over on purpose, as the pad expects.
        return cls(
            buttons=int(state.buttons),
            left_trigger=state.lt,
            right_trigger=state.rt,
            thumb_lx=state.lx,
            thumb_ly=state.ly,
            thumb_rx=state.ry,
            thumb_ry=state.rx,
        )


@dataclass(frozen=True)
class AxisMotion:
    axis: int
    value: int


@dataclass(frozen=True)
class ButtonDown:
    button: int


@dataclass(frozen=True)
class ButtonUp:
    button: int


@dataclass(frozen=True)
class HatMotion:
    value: int


JoystickEvent = Union[AxisMotion, ButtonDown, ButtonUp, HatMotion]


class ReportTarget(Protocol):
    def update(self, report: XusbReport) -> None: ...


class ReportBuffer:
    """In-memory pad target that keeps every report it receives."""

    def __init__(self) -> None:
        self.reports: list[XusbReport] = []

    def update(self, report: XusbReport) -> None:
        self.reports.append(report)

    @property
    def last(self) -> Optional[XusbReport]:
        return self.reports[-1] if self.reports else None


class EmulatedController:
    """A virtual Xbox 360 pad that forwards controller states to a report target."""

    def __init__(
        self,
        target: Optional[ReportTarget] = None,
        state: Optional[ControllerState] = None,
        *,
        vendor_id: int = MICROSOFT_VENDOR_ID,
        product_id: int = XBOX360_PRODUCT_ID,
        plug_in_delay: float = 0.0,
    ) -> None:
        self.target: ReportTarget = target if target is not None else ReportBuffer()
        self.vendor_id = vendor_id
        self.product_id = product_id
        if plug_in_delay > 0:
            time.sleep(plug_in_delay)
        self._state = state if state is not None else ControllerState()
        self._report = XusbReport.from_state(self._state)

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def report(self) -> XusbReport:
        return self._report

    def update_state(self, state: ControllerState) -> None:
        """Take a new state and push the matching report to the target."""
        self._state = state
        self._report = XusbReport.from_state(state)
        self.target.update(self._report)

    def refresh(self) -> None:
        """Push the current report again without changing it."""
        self.target.update(self._report)


class Joystick:
    """Tracks the controller state of one physical joystick from its events."""

    def __init__(self, index: int = 0) -> None:
        self.index = index
        self.state = ControllerState()

    def update_state(self, event: JoystickEvent) -> None:
        state = self.state
        match event:
            case AxisMotion(axis=axis, value=value):
                self.state = self._apply_axis(state, axis % 6, value)
            case ButtonDown(button=button):
                bits = int(state.buttons) | int(sdl_button_to_xusb(button))
                self.state = replace(state, buttons=bits & 0xFFFF)
            case ButtonUp(button=button):
                bits = int(state.buttons) & ~int(sdl_button_to_xusb(button))
                self.state = replace(state, buttons=bits & 0xFFFF)
            case HatMotion(value=value):
                bits = int(state.buttons)
                for direction in HAT_CASES:
                    mask = int(hat_to_xusb(direction))
                    bits = bits | mask if value & direction else bits & ~mask
                self.state = replace(state, buttons=bits & 0xFFFF)

    @staticmethod
    def _apply_axis(state: ControllerState, axis: int, value: int) -> ControllerState:
        outside = value < -JOYSTICK_DEAD_ZONE or value > JOYSTICK_DEAD_ZONE
        match axis:
            case 0:
                return replace(state, lx=value)
            case 1:
                # Up is negative on the device; inverting wraps like a 16-bit value.
                return replace(state, ly=_wrap16(-value - 1))
            case 2:
                return replace(state, ry=value if outside else 0)
            case 3:
                return replace(state, rx=value if outside else 0)
            case 4:
                return replace(state, lt=value & 0xFF)
            case 5:
                return replace(state, rt=value & 0xFF)
        return state