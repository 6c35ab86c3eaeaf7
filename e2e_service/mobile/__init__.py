"""
Appium helpers for driving the ThesisApp UI.

The client talks W3C WebDriver over HTTP; gestures, waits and assertions only
depend on the `UiDriver` protocol so they can run against a fake driver.
"""

from .appium_http_client import AppiumHTTPClient, AppiumHTTPError, UiDriver, WebDriverElementRef
from .errors import ElementNotFound, WaitTimeoutError
from .gestures import GestureSpec, Region, SwipeDirection, swipe_element, synthesize_swipe
from .locators import Found, Locator, NotFound, accessibility_id, content_desc_view, locate, text_view, xpath
from .waits import WaitCondition, swipe_until_visible, wait_until, wait_until_visible

__all__ = [
    "AppiumHTTPClient",
    "AppiumHTTPError",
    "UiDriver",
    "WebDriverElementRef",
    "ElementNotFound",
    "WaitTimeoutError",
    "GestureSpec",
    "Region",
    "SwipeDirection",
    "swipe_element",
    "synthesize_swipe",
    "Found",
    "Locator",
    "NotFound",
    "accessibility_id",
    "content_desc_view",
    "locate",
    "text_view",
    "xpath",
    "WaitCondition",
    "swipe_until_visible",
    "wait_until",
    "wait_until_visible",
]
