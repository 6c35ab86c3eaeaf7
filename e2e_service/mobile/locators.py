from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn, Optional, Union

from .appium_http_client import UiDriver, WebDriverElementRef
from .errors import ElementNotFound


@dataclass(frozen=True)
class Locator:
    using: str
    value: str

    def __post_init__(self) -> None:
        if not self.using or not self.using.strip():
            raise ValueError("locator 'using' must be a non-empty string")
        if not self.value or not self.value.strip():
            raise ValueError("locator 'value' must be a non-empty string")

    def describe(self) -> str:
        return f"using={self.using!r} value={self.value!r}"


def _xpath_literal(text: str) -> str:
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


def xpath(expression: str) -> Locator:
    return Locator(using="xpath", value=expression)


def accessibility_id(description: str) -> Locator:
    return Locator(using="accessibility id", value=description)


def text_view(text: str, *, contains: bool = False, index: Optional[int] = None) -> Locator:
    """
    XPath for an `android.widget.TextView` by its text.

    `index` selects the n-th match (1-based) across the whole document, the
    same as wrapping the expression in parentheses in XPath.
    """
    literal = _xpath_literal(text)
    if contains:
        expression = f"//android.widget.TextView[contains(@text, {literal})]"
    else:
        expression = f"//android.widget.TextView[@text={literal}]"
    if index is not None:
        if index < 1:
            raise ValueError("index is 1-based and must be >= 1")
        expression = f"({expression})[{index}]"
    return xpath(expression)


def content_desc_view(description: str) -> Locator:
    """XPath for a Compose `android.view.View` carrying a content description."""
    return xpath(f"//android.view.View[@content-desc={_xpath_literal(description)}]")


@dataclass(frozen=True)
class Found:
    element: WebDriverElementRef
    locator: Locator

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class NotFound:
    locator: Locator
    expectation: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    def raise_error(self) -> NoReturn:
        raise ElementNotFound(locator=self.locator, expectation=self.expectation)


LocateResult = Union[Found, NotFound]


def locate(driver: UiDriver, locator: Locator, *, expectation: Optional[str] = None) -> LocateResult:
    """Resolve `locator` once against the live UI tree, without waiting."""
    elements = driver.find_elements(using=locator.using, value=locator.value)
    if not elements:
        return NotFound(locator=locator, expectation=expectation)
    return Found(element=elements[0], locator=locator)


def locate_within(
    driver: UiDriver,
    parent: WebDriverElementRef,
    locator: Locator,
    *,
    expectation: Optional[str] = None,
) -> LocateResult:
    elements = driver.find_child_elements(parent, using=locator.using, value=locator.value)
    if not elements:
        return NotFound(locator=locator, expectation=expectation)
    return Found(element=elements[0], locator=locator)


def require(result: LocateResult) -> WebDriverElementRef:
    if isinstance(result, NotFound):
        result.raise_error()
    return result.element
