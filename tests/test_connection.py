import io
import socket
import threading
import time

import pytest

from remoteplayer.connection import UdpClient, UdpServer
from remoteplayer.emulation import (
    ControllerState,
    EmulatedController,
    ReportBuffer,
    XusbButton,
    XusbReport,
)


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def server():
    srv = UdpServer(0, lambda: EmulatedController(ReportBuffer()), host="127.0.0.1", out=io.StringIO())
    yield srv
    srv.close()


def test_new_endpoint_gets_controller(server):
    state = ControllerState(buttons=int(XusbButton.A), lx=-100)
    assert server.handle_datagram(state.pack(), ("10.0.0.1", 5000))
    assert server.num_clients() == 1
    pad = server.controllers[("10.0.0.1", 5000)]
    assert pad.state == state
    assert pad.target.last == XusbReport.from_state(state)


def test_same_endpoint_reuses_controller(server):
    endpoint = ("10.0.0.1", 5000)
    server.handle_datagram(ControllerState().pack(), endpoint)
    first = server.controllers[endpoint]
    server.handle_datagram(ControllerState(rt=9).pack(), endpoint)
    assert server.controllers[endpoint] is first
    assert first.state.rt == 9
    server.handle_datagram(ControllerState().pack(), ("10.0.0.2", 5000))
    assert server.num_clients() == 2


def test_new_client_is_announced():
    out = io.StringIO()
    with UdpServer(0, host="127.0.0.1", out=out) as srv:
        srv.handle_datagram(ControllerState().pack(), ("10.0.0.1", 5000))
    assert "New client: 10.0.0.1 : 5000" in out.getvalue()


def test_wrong_size_is_refused(server):
    assert not server.handle_datagram(b"\x00" * 3, ("10.0.0.1", 5000))
    assert server.num_clients() == 0


def test_turned_off_server_refuses(server):
    server.turn_off()
    assert not server.running
    assert not server.handle_datagram(ControllerState().pack(), ("10.0.0.1", 5000))


def test_invalid_port_raises():
    with pytest.raises(ValueError):
        UdpServer("not-a-port")


def test_client_reaches_server(server):
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    sent = ControllerState(buttons=int(XusbButton.B), ry=9000, lt=200)
    with UdpClient("127.0.0.1", str(server.address[1])) as client:
        assert client.send_state(sent)

        def arrived():
            pads = list(server.controllers.values())
            return len(pads) == 1 and pads[0].state == sent

        assert _wait_for(arrived)
    server.turn_off()
    thread.join(timeout=5)
    assert not thread.is_alive()


def test_bad_datagram_stops_receiving(server):
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as raw:
        raw.sendto(b"x", ("127.0.0.1", server.address[1]))
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert server.num_clients() == 0


def test_client_does_nothing_after_turn_off(server):
    client = UdpClient("127.0.0.1", server.address[1])
    client.turn_off()
    assert not client.running
    assert client.send_state(ControllerState()) is False