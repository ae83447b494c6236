import pytest

from remoteplayer.emulation import (
    AxisMotion,
    ButtonDown,
    ButtonUp,
    EmulatedController,
    ReportBuffer,
    XusbButton,
)
from remoteplayer.mirror import Mirror, main


def test_default_mirror_has_two_copies():
    mirror = Mirror()
    assert len(mirror.controllers) == 2


def test_feed_copies_button_to_every_controller():
    mirror = Mirror()
    state = mirror.feed(ButtonDown(0))
    assert state.buttons == XusbButton.A
    assert all(c.state == state for c in mirror.controllers)
    assert all(c.target.last.buttons == XusbButton.A for c in mirror.controllers)


def test_feed_release_clears_button():
    mirror = Mirror()
    mirror.feed(ButtonDown(1))
    state = mirror.feed(ButtonUp(1))
    assert state.buttons == 0
    assert all(c.report.buttons == 0 for c in mirror.controllers)


def test_feed_none_pushes_same_report_again():
    mirror = Mirror(copies=1)
    mirror.feed(ButtonDown(3))
    mirror.feed(None)
    reports = mirror.controllers[0].target.reports
    assert len(reports) == 2
    assert reports[0] == reports[1]


def test_feed_axis_respects_dead_zone_and_crossed_report():
    mirror = Mirror()
    assert mirror.feed(AxisMotion(2, 100)).ry == 0
    state = mirror.feed(AxisMotion(2, 20000))
    assert state.ry == 20000
    assert all(c.report.thumb_rx == 20000 for c in mirror.controllers)


def test_custom_factory_is_used_for_each_copy():
    buffers = []

    def factory():
        buffer = ReportBuffer()
        buffers.append(buffer)
        return EmulatedController(buffer)

    mirror = Mirror(copies=3, controller_factory=factory)
    state = mirror.feed(ButtonDown(0))
    assert state.buttons == XusbButton.A
    assert len(mirror.controllers) == 3
    assert all(c.target is b for c, b in zip(mirror.controllers, buffers))
    assert all(c.state == state for c in mirror.controllers)
    assert all(len(b.reports) == 1 for b in buffers)


def test_zero_copies_rejected():
    with pytest.raises(ValueError):
        Mirror(copies=0)


def test_main_rejects_arguments(capsys):
    assert main(["extra"]) == 1
    assert "Correct Usage" in capsys.readouterr().out