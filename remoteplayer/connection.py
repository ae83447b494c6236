"""UDP transport of controller states between clients and a server."""

from __future__ import annotations

import socket
import sys
import threading
from typing import Callable, Optional, TextIO, Tuple, Union

from .emulation import ControllerState, EmulatedController

RECV_BUFFER_SIZE = 1024
_POLL_INTERVAL = 0.1

Endpoint = Tuple[str, int]


class UdpServer:
    """Receives controller states and drives one emulated controller per sender."""

    def __init__(
        self,
        port: Union[str, int],
        controller_factory: Optional[Callable[[], EmulatedController]] = None,
        *,
        host: str = "0.0.0.0",
        out: Optional[TextIO] = None,
    ) -> None:
        port_number = int(port)
        self._factory = controller_factory or EmulatedController
        self._out = out
        self._controllers: dict[Endpoint, EmulatedController] = {}
        self._running = threading.Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._sock.bind((host, port_number))
        except OSError:
            self._sock.close()
            raise
        self._running.set()

    @property
    def address(self) -> Endpoint:
        return self._sock.getsockname()

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def controllers(self) -> dict[Endpoint, EmulatedController]:
        return dict(self._controllers)

    def handle_datagram(self, data: bytes, endpoint: Endpoint) -> bool:
        """Apply one datagram; return False when it is refused."""
        if not self.running or len(data) != ControllerState.SIZE:
            return False
        controller = self._controllers.get(endpoint)
        if controller is None:
            print(
                f"New client: {endpoint[0]} : {endpoint[1]}",
                file=self._out or sys.stdout,
                flush=True,
            )
            controller = self._factory()
            self._controllers[endpoint] = controller
        controller.update_state(ControllerState.unpack(data))
        return True

    def serve_forever(self) -> None:
        """Receive until turned off, the socket closes or a datagram is refused."""
        try:
            self._sock.settimeout(_POLL_INTERVAL)
        except OSError:
            return
        while self.running:
            try:
                data, endpoint = self._sock.recvfrom(RECV_BUFFER_SIZE)
            except socket.timeout:
                continue
            except OSError:
                break
            if not self.handle_datagram(data, endpoint):
                break

    def num_clients(self) -> int:
        return len(self._controllers)

    def turn_off(self) -> None:
        self._running.clear()
        self._sock.close()

    def close(self) -> None:
        self.turn_off()

    def __enter__(self) -> "UdpServer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class UdpClient:
    """Sends controller states to a server; starts by sending an empty state."""

    def __init__(
        self,
        host: str,
        port: Union[str, int],
        *,
        err: Optional[TextIO] = None,
    ) -> None:
        infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_DGRAM)
        self.endpoint: Endpoint = infos[0][4]
        self._err = err
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._running = threading.Event()
        self._running.set()
        self.send_state(ControllerState())

    @property
    def running(self) -> bool:
        return self._running.is_set()

    def send_state(self, state: ControllerState) -> bool:
        """Send a state; return False if nothing was sent."""
        if not self.running or self._sock.fileno() == -1:
            return False
        try:
            self._sock.sendto(state.pack(), self.endpoint)
        except OSError as exc:
            print(f"Send failed: {exc}", file=self._err or sys.stderr)
            return False
        return True

    def turn_off(self) -> None:
        self._running.clear()
        self._sock.close()

    def close(self) -> None:
        self.turn_off()

    def __enter__(self) -> "UdpClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()