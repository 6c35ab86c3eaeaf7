from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .appium_http_client import AppiumHTTPError, UiDriver, WebDriverElementRef
from .errors import ElementNotFound, WaitTimeoutError
from .gestures import DEFAULT_SWIPE_DURATION_MS, SwipeDirection, swipe_element
from .locators import Found, Locator, locate

DEFAULT_WAIT_TIMEOUT_S = 10.0
DEFAULT_POLL_S = 0.5
DEFAULT_MAX_SWIPES = 10

_STALE_ELEMENT = "stale element reference"

ElementPredicate = Callable[[UiDriver, WebDriverElementRef], bool]


def is_displayed(driver: UiDriver, element: WebDriverElementRef) -> bool:
    return driver.is_element_displayed(element)


def text_contains(substring: str) -> ElementPredicate:
    def _predicate(driver: UiDriver, element: WebDriverElementRef) -> bool:
        return substring in driver.get_element_text(element)

    return _predicate


@dataclass(frozen=True)
class WaitCondition:
    locator: Locator
    predicate: ElementPredicate = is_displayed
    expectation: str = "element to be visible"


@dataclass(frozen=True)
class SwipeSearchResult:
    element: WebDriverElementRef
    swipes: int


def _matching(driver: UiDriver, condition: WaitCondition) -> list[WebDriverElementRef]:
    elements = driver.find_elements(using=condition.locator.using, value=condition.locator.value)
    matched: list[WebDriverElementRef] = []
    for element in elements:
        try:
            if condition.predicate(driver, element):
                matched.append(element)
        except AppiumHTTPError as e:
            # The tree redrew between lookup and check; the next poll re-resolves.
            if e.webdriver_error != _STALE_ELEMENT:
                raise
    return matched


def wait_until(
    driver: UiDriver,
    condition: WaitCondition,
    *,
    timeout_s: float = DEFAULT_WAIT_TIMEOUT_S,
    poll_s: float = DEFAULT_POLL_S,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> list[WebDriverElementRef]:
    """
    Poll until `condition` holds for at least one element, returning every
    element that satisfies it.

    The locator is re-resolved on each check. The last check happens at the
    deadline, so a timeout is never reported early.
    """
    if timeout_s < 0:
        raise ValueError("timeout_s must be >= 0")
    if poll_s <= 0:
        raise ValueError("poll_s must be > 0")

    deadline = clock() + timeout_s
    attempts = 0
    while True:
        attempts += 1
        matched = _matching(driver, condition)
        if matched:
            return matched
        remaining = deadline - clock()
        if remaining <= 0:
            raise WaitTimeoutError(
                locator=condition.locator,
                expectation=condition.expectation,
                timeout_s=timeout_s,
                attempts=attempts,
            )
        sleep(min(poll_s, remaining))


def wait_until_visible(
    driver: UiDriver,
    locator: Locator,
    *,
    expectation: Optional[str] = None,
    timeout_s: float = DEFAULT_WAIT_TIMEOUT_S,
    poll_s: float = DEFAULT_POLL_S,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> WebDriverElementRef:
    condition = WaitCondition(
        locator=locator,
        predicate=is_displayed,
        expectation=f"{expectation} to be visible" if expectation else "element to be visible",
    )
    return wait_until(driver, condition, timeout_s=timeout_s, poll_s=poll_s, clock=clock, sleep=sleep)[0]


def swipe_until_visible(
    driver: UiDriver,
    target: Locator,
    *,
    swipe_area: Locator,
    direction: SwipeDirection = SwipeDirection.LEFT,
    max_attempts: int = DEFAULT_MAX_SWIPES,
    duration_ms: int = DEFAULT_SWIPE_DURATION_MS,
    expectation: Optional[str] = None,
) -> SwipeSearchResult:
    """
    Swipe over `swipe_area` until `target` resolves, at most `max_attempts` times.

    The search only moves in `direction`; content swiped past is not revisited.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    swipes = 0
    while True:
        result = locate(driver, target, expectation=expectation)
        if isinstance(result, Found):
            return SwipeSearchResult(element=result.element, swipes=swipes)
        if swipes >= max_attempts:
            raise ElementNotFound(
                locator=target,
                expectation=expectation,
                detail=f"still missing after {swipes} {direction.value} swipe(s)",
            )
        swipe_element(driver, swipe_area, direction, duration_ms=duration_ms)
        swipes += 1
