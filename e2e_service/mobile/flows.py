from __future__ import annotations

import contextlib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Sequence

from .android_accessibility import extract_accessible_strings
from .appium_http_client import AppiumHTTPClient, UiDriver, WebDriverElementRef
from .assertions import assert_visible
from .config import E2EConfig, load_capabilities
from .locators import Locator
from .waits import wait_until_visible


@dataclass(frozen=True)
class MobileSmokeTestResult:
    session_id: str
    screenshot_path: Path
    page_source_path: Path


@dataclass(frozen=True)
class ScreenCheck:
    locator: Locator
    expectation: str


def _timestamp() -> str:
    return datetime.now().strftime("%Y%m%d-%H%M%S")


@contextlib.contextmanager
def appium_session(config: E2EConfig) -> Iterator[AppiumHTTPClient]:
    """
    Open one Appium session for the configured app and always tear it down.
    """
    capabilities_payload = load_capabilities(config.require_capabilities_path())
    client = AppiumHTTPClient(config.appium_server_url)
    client.create_session(capabilities_payload)
    try:
        # explicit polling owns every wait; a nonzero implicit wait makes each miss block
        client.set_implicit_wait(config.implicit_wait_s)
        yield client
    finally:
        client.delete_session()


def run_screen_checks(driver: UiDriver, checks: Sequence[ScreenCheck]) -> list[WebDriverElementRef]:
    """Assert every check in order; stops at the first failure."""
    found: list[WebDriverElementRef] = []
    for check in checks:
        found.append(assert_visible(driver, check.locator, check.expectation))
        print(f"{check.expectation} exists!")
    return found


def run_mobile_smoke_test(
    config: E2EConfig,
    *,
    wait_for_enter_before_capture: bool = False,
) -> MobileSmokeTestResult:
    """
    Create a session, save a screenshot and the UI XML (/source), then tear down.

    Quickest way to confirm the Appium server, the emulator and the installed
    APK all line up before running the suite.
    """
    out_dir = config.artifacts_dir
    out_dir.mkdir(parents=True, exist_ok=True)

    with appium_session(config) as client:
        if wait_for_enter_before_capture:
            input("\nAppium session started. Navigate in the emulator, then press Enter to capture...")

        stamp = _timestamp()
        screenshot_path = out_dir / f"thesisapp_screenshot_{stamp}.png"
        page_source_path = out_dir / f"thesisapp_page_source_{stamp}.xml"
        screenshot_path.write_bytes(client.get_screenshot_png_bytes())
        page_source_path.write_text(client.get_page_source(), encoding="utf-8")

        return MobileSmokeTestResult(
            session_id=client.session_id or "",
            screenshot_path=screenshot_path,
            page_source_path=page_source_path,
        )


def run_mobile_accessibility_dump(
    config: E2EConfig,
    *,
    max_strings: int = 200,
    wait_for_enter_before_capture: bool = False,
) -> list[str]:
    with appium_session(config) as client:
        if wait_for_enter_before_capture:
            input("\nAppium session started. Navigate in the emulator, then press Enter to dump strings...")
        return extract_accessible_strings(client.get_page_source(), limit=max_strings)


def inspect_locator(
    config: E2EConfig,
    locator: Locator,
    *,
    timeout_s: Optional[float] = None,
) -> dict[str, int]:
    """Wait for `locator` to become visible and return its rect."""
    with appium_session(config) as client:
        element = wait_until_visible(
            client,
            locator,
            expectation="Inspected element",
            timeout_s=config.wait_timeout_s if timeout_s is None else timeout_s,
        )
        return client.get_element_rect(element)
