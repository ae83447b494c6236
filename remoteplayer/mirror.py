"""Mirror one physical joystick onto several emulated pads."""

from __future__ import annotations

import os
import sys
from typing import Callable, Optional, Sequence

import pygame

from .client import translate_event
from .emulation import (
    ControllerState,
    EmulatedController,
    Joystick,
    JoystickEvent,
    XusbReport,
)


class _LatestReport:
    """Pad target that keeps only the newest report."""

    def __init__(self) -> None:
        self.report: Optional[XusbReport] = None

    def update(self, report: XusbReport) -> None:
        self.report = report


class Mirror:
    """Copies every input of one joystick to each of its emulated controllers."""

    def __init__(
        self,
        copies: int = 2,
        controller_factory: Optional[Callable[[], EmulatedController]] = None,
        joystick_index: int = 0,
    ) -> None:
        if copies < 1:
            raise ValueError("a mirror needs at least one emulated controller")
        factory = controller_factory or EmulatedController
        self.joystick = Joystick(joystick_index)
        self.controllers = [factory() for _ in range(copies)]

    def feed(self, event: Optional[JoystickEvent]) -> ControllerState:
        """Apply an event (or none) and push the resulting state to every copy."""
        if event is not None:
            self.joystick.update_state(event)
        state = self.joystick.state
        for controller in self.controllers:
            controller.update_state(state)
        return state


def _open_first_joystick():
    pygame.init()
    if not pygame.display.get_init():
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        pygame.display.init()
    pygame.joystick.init()
    pygame.event.pump()
    if pygame.joystick.get_count() == 0:
        return None
    return pygame.joystick.Joystick(0)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if args:
        print("Correct Usage: remoteplayer-mirror")
        return 1
    try:
        device = _open_first_joystick()
    except pygame.error as exc:
        print(f"Joystick support could not initialize: {exc}", file=sys.stderr)
        return 1
    try:
        if device is None:
            print("Game controller could not be opened", file=sys.stderr)
            return 0
        print(
            f"gamecontroller opened, device id: {device.get_instance_id()}, "
            f"{device.get_name()}"
        )
        print("Press Ctrl+C to stop.")
        mirror = Mirror(controller_factory=lambda: EmulatedController(_LatestReport()))
        try:
            while True:
                events = pygame.event.get()
                if not events:
                    pygame.time.wait(5)
                    continue
                for event in events:
                    if event.type == pygame.QUIT:
                        return 0
                    mirror.feed(translate_event(event))
        except KeyboardInterrupt:
            return 0
    finally:
        pygame.quit()