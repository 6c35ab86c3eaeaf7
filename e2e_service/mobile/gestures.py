"""
Touch gesture synthesis for horizontal swipes.

A swipe is four pointer actions on one touch pointer: move to the start point
instantly, press, move to the end point over `duration_ms`, release. The
driver plays the whole sequence in a single `/actions` call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .appium_http_client import UiDriver
from .errors import ElementNotFound
from .locators import Locator, NotFound, locate

DEFAULT_SWIPE_DURATION_MS = 1000
DEFAULT_POINTER_ID = "finger"


class SwipeDirection(Enum):
    LEFT = "left"
    RIGHT = "right"


class ActionKind(Enum):
    MOVE = "move"
    PRESS = "press"
    RELEASE = "release"


@dataclass(frozen=True)
class Region:
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_rect(cls, rect: dict[str, Any]) -> "Region":
        missing = [k for k in ("x", "y", "width", "height") if k not in rect]
        if missing:
            raise ValueError(f"rect is missing key(s): {', '.join(missing)}")
        return cls(x=int(rect["x"]), y=int(rect["y"]), width=int(rect["width"]), height=int(rect["height"]))


@dataclass(frozen=True)
class GestureStep:
    pointer_id: str
    kind: ActionKind
    x: Optional[int] = None
    y: Optional[int] = None
    duration_ms: int = 0

    def to_w3c(self) -> dict[str, Any]:
        if self.kind is ActionKind.MOVE:
            return {
                "type": "pointerMove",
                "duration": self.duration_ms,
                "origin": "viewport",
                "x": self.x,
                "y": self.y,
            }
        if self.kind is ActionKind.PRESS:
            return {"type": "pointerDown", "button": 0}
        return {"type": "pointerUp", "button": 0}


@dataclass(frozen=True)
class GestureSpec:
    steps: tuple[GestureStep, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("a gesture needs at least one step")
        pressed: dict[str, bool] = {}
        for idx, step in enumerate(self.steps):
            if step.duration_ms < 0:
                raise ValueError(f"step {idx}: duration_ms must be >= 0")
            if step.kind is ActionKind.MOVE:
                if step.x is None or step.y is None:
                    raise ValueError(f"step {idx}: move needs both x and y")
            elif step.kind is ActionKind.PRESS:
                if pressed.get(step.pointer_id):
                    raise ValueError(f"step {idx}: pointer {step.pointer_id!r} pressed twice without release")
                pressed[step.pointer_id] = True
            else:
                if not pressed.get(step.pointer_id):
                    raise ValueError(f"step {idx}: pointer {step.pointer_id!r} released without press")
                pressed[step.pointer_id] = False
        dangling = sorted(p for p, down in pressed.items() if down)
        if dangling:
            raise ValueError(f"pointer(s) never released: {', '.join(dangling)}")

    @property
    def pointer_ids(self) -> list[str]:
        seen: list[str] = []
        for step in self.steps:
            if step.pointer_id not in seen:
                seen.append(step.pointer_id)
        return seen

    def _moves(self) -> list[GestureStep]:
        return [s for s in self.steps if s.kind is ActionKind.MOVE]

    @property
    def start(self) -> tuple[int, int]:
        first = self._moves()[0]
        return first.x, first.y

    @property
    def end(self) -> tuple[int, int]:
        last = self._moves()[-1]
        return last.x, last.y

    @property
    def duration_ms(self) -> int:
        return sum(s.duration_ms for s in self.steps)

    def to_w3c_actions(self) -> list[dict[str, Any]]:
        """Build the `actions` array of a W3C `POST /session/{id}/actions` body."""
        sources = []
        for pointer_id in self.pointer_ids:
            sources.append(
                {
                    "type": "pointer",
                    "id": pointer_id,
                    "parameters": {"pointerType": "touch"},
                    "actions": [s.to_w3c() for s in self.steps if s.pointer_id == pointer_id],
                }
            )
        return sources


def _check_fraction(value: float, *, name: str) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")


def synthesize_swipe(
    region: Region,
    direction: SwipeDirection,
    *,
    duration_ms: int = DEFAULT_SWIPE_DURATION_MS,
    start_fraction: float = 0.8,
    end_fraction: float = 0.2,
    pointer_id: str = DEFAULT_POINTER_ID,
) -> GestureSpec:
    """
    Drag horizontally across `region` along its vertical center.

    For a leftward swipe the finger starts at `start_fraction` of the width and
    ends at `end_fraction`; a rightward swipe mirrors the two. Offsets are
    truncated to whole pixels.

    Short durations can be read as a fling by the app; keep the default unless
    the target list needs it.
    """
    if region.width <= 0 or region.height <= 0:
        raise ValueError(f"region must have a positive size, got {region.width}x{region.height}")
    if duration_ms <= 0:
        raise ValueError("duration_ms must be > 0")
    _check_fraction(start_fraction, name="start_fraction")
    _check_fraction(end_fraction, name="end_fraction")
    if start_fraction <= end_fraction:
        raise ValueError("start_fraction must be greater than end_fraction")

    if direction is SwipeDirection.LEFT:
        from_fraction, to_fraction = start_fraction, end_fraction
    else:
        from_fraction, to_fraction = end_fraction, start_fraction

    start_x = region.x + int(region.width * from_fraction)
    end_x = region.x + int(region.width * to_fraction)
    y = region.y + region.height // 2
    if start_x == end_x:
        raise ValueError(
            f"region is {region.width}px wide; too narrow for a swipe between "
            f"{start_fraction} and {end_fraction} of its width"
        )

    return GestureSpec(
        steps=(
            GestureStep(pointer_id, ActionKind.MOVE, x=start_x, y=y, duration_ms=0),
            GestureStep(pointer_id, ActionKind.PRESS),
            GestureStep(pointer_id, ActionKind.MOVE, x=end_x, y=y, duration_ms=duration_ms),
            GestureStep(pointer_id, ActionKind.RELEASE),
        )
    )


def dispatch_gesture(driver: UiDriver, spec: GestureSpec) -> None:
    driver.perform_actions(spec.to_w3c_actions())


def swipe_element(
    driver: UiDriver,
    locator: Locator,
    direction: SwipeDirection,
    *,
    duration_ms: int = DEFAULT_SWIPE_DURATION_MS,
    expectation: Optional[str] = None,
) -> GestureSpec:
    """Swipe across the first element matching `locator`."""
    result = locate(driver, locator, expectation=expectation or "Swipe area")
    if isinstance(result, NotFound):
        raise ElementNotFound(locator=locator, expectation=result.expectation, detail="nothing to swipe on")
    region = Region.from_rect(driver.get_element_rect(result.element))
    spec = synthesize_swipe(region, direction, duration_ms=duration_ms)
    dispatch_gesture(driver, spec)
    return spec
