"""Tests for swipe gesture synthesis and dispatch."""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))
from fake_driver import FakeAppiumClient
from e2e_service.mobile.errors import ElementNotFound
from e2e_service.mobile.gestures import (
    ActionKind,
    GestureSpec,
    GestureStep,
    Region,
    SwipeDirection,
    swipe_element,
    synthesize_swipe,
)
from e2e_service.mobile.locators import xpath


def test_left_swipe_matches_reference_region():
    """A 1000x200 region swiped left drags from (800,100) to (200,100) over 1s."""
    spec = synthesize_swipe(Region(x=0, y=0, width=1000, height=200), SwipeDirection.LEFT)

    assert spec.start == (800, 100)
    assert spec.end == (200, 100)
    assert spec.duration_ms == 1000
    assert [s.kind for s in spec.steps] == [
        ActionKind.MOVE,
        ActionKind.PRESS,
        ActionKind.MOVE,
        ActionKind.RELEASE,
    ]
    assert spec.steps[0].duration_ms == 0
    assert spec.steps[2].duration_ms == 1000


def test_right_swipe_mirrors_left():
    spec = synthesize_swipe(Region(x=0, y=0, width=1000, height=200), SwipeDirection.RIGHT)
    assert spec.start == (200, 100)
    assert spec.end == (800, 100)


@pytest.mark.parametrize(
    "region",
    [
        Region(x=37, y=512, width=333, height=91),
        Region(x=0, y=1200, width=1080, height=640),
        Region(x=250, y=0, width=7, height=3),
    ],
)
@pytest.mark.parametrize("direction", [SwipeDirection.LEFT, SwipeDirection.RIGHT])
def test_swipe_stays_inside_region(region, direction):
    spec = synthesize_swipe(region, direction)
    start_offset = spec.start[0] - region.x
    end_offset = spec.end[0] - region.x

    assert 0 <= start_offset < region.width
    assert 0 <= end_offset < region.width
    assert spec.start[1] == spec.end[1] == region.y + region.height // 2
    if direction is SwipeDirection.LEFT:
        assert start_offset > end_offset
    else:
        assert start_offset < end_offset


@pytest.mark.parametrize("direction", [SwipeDirection.LEFT, SwipeDirection.RIGHT])
def test_swipe_rejects_region_too_narrow_to_move(direction):
    with pytest.raises(ValueError, match="1px wide"):
        synthesize_swipe(Region(x=0, y=0, width=1, height=1), direction)


def test_swipe_offsets_are_relative_to_region_origin():
    spec = synthesize_swipe(Region(x=40, y=300, width=1000, height=200), SwipeDirection.LEFT)
    assert spec.start == (840, 400)
    assert spec.end == (240, 400)


def test_swipe_rejects_bad_arguments():
    region = Region(x=0, y=0, width=100, height=100)
    with pytest.raises(ValueError):
        synthesize_swipe(Region(x=0, y=0, width=0, height=10), SwipeDirection.LEFT)
    with pytest.raises(ValueError):
        synthesize_swipe(region, SwipeDirection.LEFT, duration_ms=0)
    with pytest.raises(ValueError):
        synthesize_swipe(region, SwipeDirection.LEFT, start_fraction=1.5)
    with pytest.raises(ValueError):
        synthesize_swipe(region, SwipeDirection.LEFT, start_fraction=0.2, end_fraction=0.8)


def test_gesture_spec_requires_release_after_press():
    with pytest.raises(ValueError, match="never released"):
        GestureSpec(
            steps=(
                GestureStep("finger", ActionKind.MOVE, x=1, y=1),
                GestureStep("finger", ActionKind.PRESS),
            )
        )
    with pytest.raises(ValueError, match="released without press"):
        GestureSpec(steps=(GestureStep("finger", ActionKind.RELEASE),))
    with pytest.raises(ValueError, match="pressed twice"):
        GestureSpec(
            steps=(
                GestureStep("finger", ActionKind.PRESS),
                GestureStep("finger", ActionKind.PRESS),
                GestureStep("finger", ActionKind.RELEASE),
            )
        )


def test_w3c_payload_shape():
    spec = synthesize_swipe(Region(x=0, y=0, width=1000, height=200), SwipeDirection.LEFT)
    payload = spec.to_w3c_actions()

    assert len(payload) == 1
    source = payload[0]
    assert source["type"] == "pointer"
    assert source["id"] == "finger"
    assert source["parameters"] == {"pointerType": "touch"}
    assert source["actions"] == [
        {"type": "pointerMove", "duration": 0, "origin": "viewport", "x": 800, "y": 100},
        {"type": "pointerDown", "button": 0},
        {"type": "pointerMove", "duration": 1000, "origin": "viewport", "x": 200, "y": 100},
        {"type": "pointerUp", "button": 0},
    ]


def test_swipe_element_dispatches_once_over_element_rect():
    driver = FakeAppiumClient()
    area = xpath("//android.view.View[1]")
    driver.add(area, "el-area", rect={"x": 0, "y": 500, "width": 1000, "height": 200})

    spec = swipe_element(driver, area, SwipeDirection.LEFT)

    assert spec.start == (800, 600)
    assert len(driver.performed) == 1
    assert driver.performed[0] == spec.to_w3c_actions()


def test_swipe_element_missing_area_fails_before_dispatch():
    driver = FakeAppiumClient()
    with pytest.raises(ElementNotFound) as exc_info:
        swipe_element(driver, xpath("//missing"), SwipeDirection.LEFT)
    assert driver.performed == []
    assert "//missing" in str(exc_info.value)


def test_region_from_rect_requires_all_keys():
    assert Region.from_rect({"x": "1", "y": 2, "width": 3, "height": 4}) == Region(1, 2, 3, 4)
    with pytest.raises(ValueError, match="height"):
        Region.from_rect({"x": 1, "y": 2, "width": 3})
