import pytest

from remoteplayer.emulation import (
    AxisMotion,
    ButtonDown,
    ButtonUp,
    ControllerState,
    EmulatedController,
    HatDirection,
    HatMotion,
    Joystick,
    ReportBuffer,
    XusbButton,
    XusbReport,
    hat_to_xusb,
    sdl_button_to_xusb,
)


@pytest.mark.parametrize(
    "state",
    [
        ControllerState(),
        ControllerState(buttons=int(XusbButton.A | XusbButton.DPAD_UP), lx=-32768, ly=32767),
        ControllerState(rx=8001, ry=-8001, lt=255, rt=1),
    ],
)
def test_pack_unpack_round_trip(state):
    data = state.pack()
    assert len(data) == ControllerState.SIZE
    assert ControllerState.unpack(data) == state


def test_wire_size_is_fixed():
    data = ControllerState(lx=1, lt=2).pack()
    assert len(data) == 12
    assert ControllerState.SIZE == len(data)


def test_unpack_rejects_wrong_length():
    with pytest.raises(ValueError):
        ControllerState.unpack(b"\x00" * (ControllerState.SIZE + 1))


def test_state_rejects_out_of_range_values():
    with pytest.raises(ValueError):
        ControllerState(lx=32768)
    with pytest.raises(ValueError):
        ControllerState(lt=256)


@pytest.mark.parametrize(
    "index, expected",
    [
        (0, XusbButton.A),
        (3, XusbButton.Y),
        (5, XusbButton.GUIDE),
        (9, XusbButton.LEFT_SHOULDER),
        (10, XusbButton.RIGHT_SHOULDER),
    ],
)
def test_button_mapping(index, expected):
    assert sdl_button_to_xusb(index) == expected


def test_unknown_button_maps_to_nothing():
    assert int(sdl_button_to_xusb(11)) == int(sdl_button_to_xusb(-1)) == int(XusbButton(0))


def test_hat_mapping():
    assert hat_to_xusb(HatDirection.UP) == XusbButton.DPAD_UP
    assert hat_to_xusb(HatDirection.LEFT) == XusbButton.DPAD_LEFT
    assert not hat_to_xusb(HatDirection.UP | HatDirection.RIGHT)


def test_left_stick_x_and_axis_wraparound():
    stick = Joystick()
    stick.update_state(AxisMotion(0, 1234))
    assert stick.state.lx == 1234
    stick.update_state(AxisMotion(6, -4321))
    assert stick.state.lx == -4321


def test_left_stick_y_is_inverted_with_wrap():
    stick = Joystick()
    stick.update_state(AxisMotion(1, 32767))
    assert stick.state.ly == -32768
    stick.update_state(AxisMotion(1, -32768))
    assert stick.state.ly == 32767


def test_right_stick_dead_zone():
    stick = Joystick()
    stick.update_state(AxisMotion(2, 8000))
    assert stick.state.ry == 0
    stick.update_state(AxisMotion(2, 8001))
    assert stick.state.ry == 8001
    stick.update_state(AxisMotion(3, -8001))
    assert stick.state.rx == -8001
    stick.update_state(AxisMotion(3, -8000))
    assert stick.state.rx == 0


def test_triggers_keep_low_byte():
    stick = Joystick()
    stick.update_state(AxisMotion(4, 255))
    assert stick.state.lt == 255
    stick.update_state(AxisMotion(5, 256))
    assert stick.state.rt == 0


def test_buttons_press_and_release():
    stick = Joystick()
    stick.update_state(ButtonDown(0))
    stick.update_state(ButtonDown(1))
    assert stick.state.buttons == XusbButton.A | XusbButton.B
    stick.update_state(ButtonUp(0))
    assert stick.state.buttons == XusbButton.B


def test_hat_sets_and_clears_dpad_only():
    stick = Joystick()
    stick.update_state(ButtonDown(2))
    stick.update_state(HatMotion(HatDirection.UP | HatDirection.RIGHT))
    assert stick.state.buttons == XusbButton.X | XusbButton.DPAD_UP | XusbButton.DPAD_RIGHT
    stick.update_state(HatMotion(HatDirection.CENTERED))
    assert stick.state.buttons == XusbButton.X


def test_report_crosses_right_stick_axes():
    state = ControllerState(rx=100, ry=-200, lt=7, rt=9)
    report = XusbReport.from_state(state)
    assert report.thumb_rx == state.ry
    assert report.thumb_ry == state.rx
    assert (report.left_trigger, report.right_trigger) == (state.lt, state.rt)


def test_emulated_controller_pushes_reports():
    buffer = ReportBuffer()
    pad = EmulatedController(buffer)
    assert buffer.last is None
    state = ControllerState(buttons=int(XusbButton.START), lx=500)
    pad.update_state(state)
    assert pad.state == state
    assert buffer.last == XusbReport.from_state(state)
    pad.refresh()
    assert buffer.reports == [XusbReport.from_state(state)] * 2


def test_emulated_controller_initial_state_and_ids():
    initial = ControllerState(ly=42)
    pad = EmulatedController(state=initial)
    assert pad.state == initial
    assert pad.report == XusbReport.from_state(initial)
    assert (pad.vendor_id, pad.product_id) == (0x045E, 0x028E)