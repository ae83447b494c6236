"""On-screen controller viewer: shows sticks, buttons, d-pad and triggers live."""

from __future__ import annotations

import math
import os
import sys
from dataclasses import dataclass, field
from typing import Optional, Sequence

import pygame

from .client import translate_event
from .emulation import (
    HAT_CASES,
    JOYSTICK_DEAD_ZONE,
    AxisMotion,
    ButtonDown,
    ButtonUp,
    HatMotion,
    JoystickEvent,
)

SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 960
WINDOW_TITLE = "Remote Test"

STICK_RADIUS = 40
LEFT_STICK_X = SCREEN_WIDTH // 3
RIGHT_STICK_X = (2 * SCREEN_WIDTH) // 3
STICK_Y = (3 * SCREEN_HEIGHT) // 4

SPACING = 30
DPAD_SIZE = 20
DOT_SIZE = 10
CIRCLE_RESOLUTION = 200
DEFAULT_BUTTON_COUNT = 15

AXIS_MAX = 32767.0
TRIGGER_MIN = -32768
TRIGGER_MAX = 32767

BLACK = (0x00, 0x00, 0x00)
WHITE = (0xFF, 0xFF, 0xFF)
RED = (0xFF, 0x00, 0x00)
CROSS_COLOR = (124, 178, 232)
CIRCLE_COLOR = (255, 102, 102)
SQUARE_COLOR = (0xF6, 0x9D, 0xC8)
TRIANGLE_COLOR = (64, 226, 160)

FACE_CENTER = ((3 * SCREEN_WIDTH) // 4, SCREEN_HEIGHT // 2)
FACE_RADIUS = 15
DPAD_ORIGIN = (SCREEN_WIDTH // 4, SCREEN_HEIGHT // 2)
HOME_CENTER = (SCREEN_WIDTH // 2, (3 * SCREEN_HEIGHT) // 4)
HOME_RADIUS = 20

LEFT_TRIGGER_RECT = (SCREEN_WIDTH // 4 - 20, SCREEN_HEIGHT // 4, 60, 40)
RIGHT_TRIGGER_RECT = ((3 * SCREEN_WIDTH) // 4 - 20, SCREEN_HEIGHT // 4, 60, 40)
LEFT_SHOULDER_RECT = (SCREEN_WIDTH // 4 - 20, SCREEN_HEIGHT // 4 + 60, 60, 20)
RIGHT_SHOULDER_RECT = ((3 * SCREEN_WIDTH) // 4 - 20, SCREEN_HEIGHT // 4 + 60, 60, 20)
SHARE_RECT = (SCREEN_WIDTH // 2 - SCREEN_WIDTH // 10, SCREEN_HEIGHT // 2, 20, 10)
OPTIONS_RECT = (SCREEN_WIDTH // 2 + SCREEN_WIDTH // 10, SCREEN_HEIGHT // 2, 20, 10)

Point = tuple[int, int]


def scale_axis(value: int) -> float:
    """Scale a raw axis value to about [-1, 1], with the dead zone mapped to 0."""
    if value < -JOYSTICK_DEAD_ZONE or value > JOYSTICK_DEAD_ZONE:
        return value / AXIS_MAX
    return 0.0


def trigger_alpha(value: int) -> int:
    """Opacity (0-255) of a trigger drawn for a raw trigger axis value."""
    if not TRIGGER_MIN <= value <= TRIGGER_MAX:
        raise ValueError(f"trigger value {value} is outside [{TRIGGER_MIN}, {TRIGGER_MAX}]")
    fraction = (value - TRIGGER_MIN) / (2 * -TRIGGER_MIN)
    return int(fraction * 255)


def circle_points(cx: int, cy: int, radius: int) -> list[Point]:
    """Points on the outline of a circle."""
    step = 2 * math.pi / CIRCLE_RESOLUTION
    return [
        (int(cx + radius * math.cos(i * step)), int(cy + radius * math.sin(i * step)))
        for i in range(CIRCLE_RESOLUTION)
    ]


def circle_fill_lines(cx: int, cy: int, radius: int) -> list[tuple[Point, Point]]:
    """Vertical line segments that together fill a circle."""
    step = 2 * math.pi / CIRCLE_RESOLUTION
    lines = []
    for i in range(CIRCLE_RESOLUTION // 2):
        angle = i * step
        x = int(cx + radius * math.cos(angle))
        y1 = int(cy + radius * math.sin(angle))
        y2 = int(cy - radius * math.sin(angle))
        lines.append(((x, y1), (x, y2)))
    return lines


def joystick_dot_rect(
    dot_x: float, dot_y: float, pos_x: int, pos_y: int, radius: int
) -> tuple[float, float, int, int]:
    """Rectangle of the dot showing a stick position inside its circle."""
    half = DOT_SIZE // 2
    return (
        dot_x * radius + pos_x - half,
        dot_y * radius + pos_y - half,
        DOT_SIZE,
        DOT_SIZE,
    )


@dataclass
class ViewerState:
    """What the viewer currently shows for one joystick."""

    ls_x: float = 0.0
    ls_y: float = 0.0
    rs_x: float = 0.0
    rs_y: float = 0.0
    left_trigger: int = TRIGGER_MIN
    right_trigger: int = TRIGGER_MIN
    buttons_held: list[bool] = field(
        default_factory=lambda: [False] * DEFAULT_BUTTON_COUNT
    )
    hats_held: list[bool] = field(default_factory=lambda: [False] * len(HAT_CASES))

    def button(self, index: int) -> bool:
        return 0 <= index < len(self.buttons_held) and self.buttons_held[index]

    def _set_button(self, index: int, held: bool) -> None:
        if index < 0:
            return
        if index >= len(self.buttons_held):
            self.buttons_held.extend([False] * (index + 1 - len(self.buttons_held)))
        self.buttons_held[index] = held

    def handle_event(self, event: Optional[JoystickEvent]) -> None:
        """Apply one joystick event; anything else is ignored."""
        match event:
            case AxisMotion(axis=0, value=value):
                self.ls_x = scale_axis(value)
            case AxisMotion(axis=1, value=value):
                self.ls_y = scale_axis(value)
            case AxisMotion(axis=2, value=value):
                self.rs_x = scale_axis(value)
            case AxisMotion(axis=3, value=value):
                self.rs_y = scale_axis(value)
            case AxisMotion(axis=4, value=value):
                self.left_trigger = value
            case AxisMotion(axis=5, value=value):
                self.right_trigger = value
            case ButtonDown(button=button):
                self._set_button(button, True)
            case ButtonUp(button=button):
                self._set_button(button, False)
            case HatMotion(value=value):
                self.hats_held = [bool(value & direction) for direction in HAT_CASES]


def _draw_circle(surface: pygame.Surface, color, cx: int, cy: int, radius: int) -> None:
    for point in circle_points(cx, cy, radius):
        surface.set_at(point, color)


def _fill_circle(surface: pygame.Surface, color, cx: int, cy: int, radius: int) -> None:
    for start, end in circle_fill_lines(cx, cy, radius):
        pygame.draw.line(surface, color, start, end)


def _draw_background(surface: pygame.Surface) -> None:
    surface.fill(BLACK)
    dx, dy = DPAD_ORIGIN
    dpad = [
        (dx, dy - SPACING),
        (dx - SPACING, dy),
        (dx + SPACING, dy),
        (dx, dy + SPACING),
    ]
    fx, fy = FACE_CENTER
    faces = [
        (fx, fy - SPACING),
        (fx - SPACING, fy),
        (fx + SPACING, fy),
        (fx, fy + SPACING),
    ]
    for (px, py), (cx, cy) in zip(dpad, faces):
        pygame.draw.rect(surface, WHITE, pygame.Rect(px, py, DPAD_SIZE, DPAD_SIZE), 1)
        _draw_circle(surface, WHITE, cx, cy, FACE_RADIUS)
    for rect in (
        LEFT_TRIGGER_RECT,
        RIGHT_TRIGGER_RECT,
        LEFT_SHOULDER_RECT,
        RIGHT_SHOULDER_RECT,
        SHARE_RECT,
        OPTIONS_RECT,
    ):
        pygame.draw.rect(surface, WHITE, pygame.Rect(rect), 1)
    _draw_circle(surface, WHITE, *HOME_CENTER, HOME_RADIUS)
    _draw_circle(surface, WHITE, LEFT_STICK_X, STICK_Y, STICK_RADIUS)
    _draw_circle(surface, WHITE, RIGHT_STICK_X, STICK_Y, STICK_RADIUS)


def _draw_dot(surface: pygame.Surface, dot_x: float, dot_y: float, pos_x: int) -> None:
    x, y, w, h = joystick_dot_rect(dot_x, dot_y, pos_x, STICK_Y, STICK_RADIUS)
    pygame.draw.rect(surface, RED, pygame.Rect(round(x), round(y), w, h))


def _draw_buttons(surface: pygame.Surface, state: ViewerState) -> None:
    fx, fy = FACE_CENTER
    faces = (
        (0, CROSS_COLOR, (fx, fy + SPACING)),
        (1, CIRCLE_COLOR, (fx + SPACING, fy)),
        (2, SQUARE_COLOR, (fx - SPACING, fy)),
        (3, TRIANGLE_COLOR, (fx, fy - SPACING)),
    )
    for index, color, (cx, cy) in faces:
        if state.button(index):
            _fill_circle(surface, color, cx, cy, FACE_RADIUS)
    if state.button(4):
        pygame.draw.rect(surface, WHITE, pygame.Rect(SHARE_RECT))
    if state.button(5):
        _fill_circle(surface, WHITE, *HOME_CENTER, HOME_RADIUS)
    if state.button(6):
        pygame.draw.rect(surface, WHITE, pygame.Rect(OPTIONS_RECT))
    if state.button(9):
        pygame.draw.rect(surface, WHITE, pygame.Rect(LEFT_SHOULDER_RECT))
    if state.button(10):
        pygame.draw.rect(surface, WHITE, pygame.Rect(RIGHT_SHOULDER_RECT))


def _draw_hats(surface: pygame.Surface, state: ViewerState) -> None:
    dx, dy = DPAD_ORIGIN
    offsets = ((0, SPACING), (SPACING, 0), (-SPACING, 0), (0, -SPACING))
    for held, (ox, oy) in zip(state.hats_held, offsets):
        if held:
            pygame.draw.rect(
                surface, WHITE, pygame.Rect(dx + ox, dy + oy, DPAD_SIZE, DPAD_SIZE)
            )


def _draw_trigger(surface: pygame.Surface, rect, value: int) -> None:
    area = pygame.Rect(rect)
    overlay = pygame.Surface(area.size, pygame.SRCALPHA)
    overlay.fill((*WHITE, trigger_alpha(value)))
    surface.blit(overlay, area.topleft)


def draw(surface: pygame.Surface, state: ViewerState) -> None:
    """Render one full frame of the viewer onto a surface."""
    _draw_background(surface)
    _draw_dot(surface, state.ls_x, state.ls_y, LEFT_STICK_X)
    _draw_dot(surface, state.rs_x, state.rs_y, RIGHT_STICK_X)
    _draw_buttons(surface, state)
    _draw_hats(surface, state)
    _draw_trigger(surface, LEFT_TRIGGER_RECT, state.left_trigger)
    _draw_trigger(surface, RIGHT_TRIGGER_RECT, state.right_trigger)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if args:
        print("Correct Usage: remoteplayer-viewer")
        return 1
    try:
        pygame.init()
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(WINDOW_TITLE)
        pygame.joystick.init()
    except pygame.error as exc:
        print(f"Viewer failed to initialize: {exc}", file=sys.stderr)
        pygame.quit()
        return 1

    try:
        device = None
        if pygame.joystick.get_count() > 0:
            device = pygame.joystick.Joystick(0)
            print(
                f"gamecontroller opened, device id: {device.get_instance_id()}, "
                f"{device.get_name()}"
            )
        else:
            print("Warning no joysticks connected!", file=sys.stderr)

        button_count = device.get_numbuttons() if device is not None else DEFAULT_BUTTON_COUNT
        state = ViewerState(buttons_held=[False] * button_count)
        clock = pygame.time.Clock()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    continue
                translated = translate_event(event)
                if isinstance(translated, ButtonDown):
                    print(f"Button being held: {translated.button}")
                state.handle_event(translated)
            draw(screen, state)
            pygame.display.flip()
            clock.tick(60)
    except KeyboardInterrupt:
        pass
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__" and os.environ.get("REMOTEPLAYER_VIEWER_DISABLED") is None:
    sys.exit(main())