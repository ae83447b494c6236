"""Server that turns incoming controller states into emulated pads."""

from __future__ import annotations

import sys
import threading
from typing import Optional, Sequence

from .client import run_commands
from .connection import UdpServer
from .emulation import EmulatedController, XusbReport

USAGE = "Correct Usage: remoteplayer-server <port>"


class _LatestReport:
    """Pad target that keeps only the newest report."""

    def __init__(self) -> None:
        self.report: Optional[XusbReport] = None

    def update(self, report: XusbReport) -> None:
        self.report = report


def _new_controller() -> EmulatedController:
    return EmulatedController(_LatestReport())


def parse_port(text: str) -> int:
    """Parse a UDP port number."""
    try:
        port = int(text)
    except (TypeError, ValueError):
        raise ValueError(f"invalid port: {text!r}") from None
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port out of range: {port}")
    return port


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(USAGE)
        return 1
    try:
        port = parse_port(args[0])
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        server = UdpServer(port, controller_factory=_new_controller)
    except OSError as exc:
        print(f"Could not listen on port {port}: {exc}", file=sys.stderr)
        return 1

    with server:
        commands = threading.Thread(
            target=run_commands,
            args=(sys.stdin, server.turn_off, sys.stdout),
            daemon=True,
        )
        commands.start()
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            return 0
        commands.join()
    return 0