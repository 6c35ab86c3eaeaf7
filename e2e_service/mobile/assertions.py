from __future__ import annotations

from typing import Optional

from .appium_http_client import UiDriver, WebDriverElementRef
from .locators import Locator, locate, locate_within, require


def assert_visible(
    driver: UiDriver,
    locator: Locator,
    expectation: str,
    *,
    within: Optional[WebDriverElementRef] = None,
) -> WebDriverElementRef:
    """
    Resolve `locator` once and check the element is displayed.

    Raises ElementNotFound when nothing matches and AssertionError when the
    element exists but is hidden.
    """
    if within is None:
        result = locate(driver, locator, expectation=expectation)
    else:
        result = locate_within(driver, within, locator, expectation=expectation)
    element = require(result)
    if not driver.is_element_displayed(element):
        raise AssertionError(f"{expectation} is not visible! ({locator.describe()})")
    return element


def assert_is_above(driver: UiDriver, upper: Locator, lower: Locator) -> None:
    upper_rect = driver.get_element_rect(require(locate(driver, upper)))
    lower_rect = driver.get_element_rect(require(locate(driver, lower)))
    upper_bottom = upper_rect["y"] + upper_rect["height"]
    lower_top = lower_rect["y"]
    if upper_bottom > lower_top:
        raise AssertionError(
            "Expected node to be above other node.\n"
            f"This node bottom: {upper_bottom}, Other node top: {lower_top}"
        )


def navigate_back(driver: UiDriver, times: int = 1) -> None:
    if times < 1:
        raise ValueError("times must be >= 1")
    for _ in range(times):
        driver.back()
