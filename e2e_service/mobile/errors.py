from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .locators import Locator


class ElementNotFound(RuntimeError):
    """A locator resolved to zero elements when it was queried."""

    def __init__(
        self,
        *,
        locator: Locator,
        expectation: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        message = f"{expectation or 'Element'} does not exist! ({locator.describe()})"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.locator = locator
        self.expectation = expectation
        self.detail = detail


class WaitTimeoutError(RuntimeError):
    """A wait condition never held before its deadline."""

    def __init__(
        self,
        *,
        locator: Locator,
        expectation: str,
        timeout_s: float,
        attempts: int,
    ) -> None:
        super().__init__(
            f"Timed out after {timeout_s:g}s ({attempts} check(s)) waiting for "
            f"{expectation} ({locator.describe()})"
        )
        self.locator = locator
        self.expectation = expectation
        self.timeout_s = timeout_s
        self.attempts = attempts
