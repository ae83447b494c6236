"""Client that reads a local joystick and streams its state to a server."""

from __future__ import annotations

import os
import sys
import threading
from typing import Callable, Iterable, Optional, Sequence, TextIO

import pygame

from .connection import UdpClient
from .emulation import (
    AxisMotion,
    ButtonDown,
    ButtonUp,
    HatDirection,
    HatMotion,
    Joystick,
    JoystickEvent,
)

USAGE = "Correct Usage: remoteplayer-client <ip:port>"

_AXIS_MAX = 0x7FFF
_AXIS_MIN = -0x8000


def parse_address(addr: str) -> tuple[str, str]:
    """Split ``ip:port`` at the first colon into host and port text."""
    host, sep, port = addr.partition(":")
    if not sep:
        raise ValueError("port missing use <ip:port>")
    return host, port


def _axis_value(value: float) -> int:
    if value >= 0:
        return min(round(value * _AXIS_MAX), _AXIS_MAX)
    return max(round(value * -_AXIS_MIN), _AXIS_MIN)


def _hat_bits(x: int, y: int) -> HatDirection:
    bits = HatDirection.CENTERED
    if x > 0:
        bits |= HatDirection.RIGHT
    elif x < 0:
        bits |= HatDirection.LEFT
    if y > 0:
        bits |= HatDirection.UP
    elif y < 0:
        bits |= HatDirection.DOWN
    return bits


def translate_event(event: pygame.event.Event) -> Optional[JoystickEvent]:
    """Turn a joystick event from the event queue into a controller event."""
    kind = event.type
    if kind == pygame.JOYAXISMOTION:
        return AxisMotion(event.axis, _axis_value(event.value))
    if kind == pygame.JOYBUTTONDOWN:
        return ButtonDown(event.button)
    if kind == pygame.JOYBUTTONUP:
        return ButtonUp(event.button)
    if kind == pygame.JOYHATMOTION:
        x, y = event.value
        return HatMotion(int(_hat_bits(x, y)))
    return None


def run_commands(stream: Iterable[str], on_exit: Callable[[], None], out: TextIO) -> bool:
    """Read commands until ``exit``; return True if ``exit`` was given."""
    print("Enter Commands Here:", file=out)
    out.write(">> ")
    out.flush()
    for line in stream:
        if line.rstrip("\r\n") == "exit":
            on_exit()
            return True
        print("Unknown Command", file=out)
        out.write(">> ")
        out.flush()
    return False


def _open_joysticks() -> list:
    pygame.init()
    if not pygame.display.get_init():
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        pygame.display.init()
    pygame.joystick.init()
    pygame.event.pump()
    return [pygame.joystick.Joystick(i) for i in range(pygame.joystick.get_count())]


def _stream(client: UdpClient, stick: Joystick) -> None:
    while client.running:
        events = pygame.event.get()
        if not events:
            pygame.time.wait(5)
            continue
        for event in events:
            translated = translate_event(event)
            if translated is not None:
                stick.update_state(translated)
            client.send_state(stick.state)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(USAGE)
        return 1
    try:
        host, port = parse_address(args[0])
    except ValueError as exc:
        print(exc)
        return 1

    print(f"Connecting to: {host}:{port}")

    try:
        joysticks = _open_joysticks()
    except pygame.error as exc:
        print(f"Joystick support could not initialize: {exc}", file=sys.stderr)
        return 1

    try:
        if not joysticks:
            print("Game controller could not be opened", file=sys.stderr)
            return 0
        for device in joysticks:
            print(
                f"gamecontroller opened, device id: {device.get_instance_id()}, "
                f"{device.get_name()}"
            )
        try:
            client = UdpClient(host, port)
        except OSError as exc:
            print(f"Could not reach {host}:{port}: {exc}", file=sys.stderr)
            return 1
        with client:
            commands = threading.Thread(
                target=run_commands,
                args=(sys.stdin, client.turn_off, sys.stdout),
                daemon=True,
            )
            commands.start()
            try:
                _stream(client, Joystick(0))
            except KeyboardInterrupt:
                return 0
            commands.join()
    finally:
        pygame.quit()
    return 0