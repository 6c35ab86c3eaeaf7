#!/usr/bin/env python3
"""
CLI entry point for the ThesisApp UI test kit.
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from e2e_service.mobile.config import E2EConfig  # noqa: E402


def _prompt_config() -> E2EConfig:
    config = E2EConfig.from_env()
    appium_server_url = (
        input(f"Appium server URL [{config.appium_server_url}]: ").strip() or config.appium_server_url
    )
    default_caps = config.capabilities_json_path or "e2e_service/mobile_examples/android_capabilities.example.json"
    capabilities_json_path = input(f"Capabilities JSON path [{default_caps}]: ").strip() or default_caps
    return E2EConfig(
        appium_server_url=appium_server_url,
        capabilities_json_path=capabilities_json_path,
        implicit_wait_s=config.implicit_wait_s,
        wait_timeout_s=config.wait_timeout_s,
        artifacts_dir=config.artifacts_dir,
    )


def _ask_pause(what: str) -> bool:
    return input(f"Pause before {what} to let you navigate? [y/N]: ").strip().lower() in {"y", "yes"}


def main():
    """
    Menu for the manual helpers: capture artifacts, dump labels, inspect a locator.
    """
    print("=" * 60)
    print("ThesisApp UI test kit (Appium / UiAutomator2)")
    print("=" * 60)
    print("\nOptions:")
    print("1. Smoke test (screenshot + UI XML)")
    print("2. Dump accessible strings on the current screen")
    print("3. Inspect a locator (wait until visible, print its rect)")
    print("4. Exit")

    choice = input("\nEnter your choice (1-4): ").strip()

    if choice == "1":
        from e2e_service.mobile.flows import run_mobile_smoke_test

        config = _prompt_config()
        result = run_mobile_smoke_test(config, wait_for_enter_before_capture=_ask_pause("capture"))
        print("\n✓ Smoke test completed")
        print(f"  Session: {result.session_id}")
        print(f"  Screenshot: {result.screenshot_path}")
        print(f"  Page source: {result.page_source_path}")
    elif choice == "2":
        from e2e_service.mobile.flows import run_mobile_accessibility_dump

        config = _prompt_config()
        strings = run_mobile_accessibility_dump(
            config,
            max_strings=200,
            wait_for_enter_before_capture=_ask_pause("dump"),
        )
        print("\n=== Accessible strings ===")
        if not strings:
            print("(none found)")
        for i, s in enumerate(strings, 1):
            print(f"{i:>3}. {s}")
    elif choice == "3":
        from e2e_service.mobile.errors import WaitTimeoutError
        from e2e_service.mobile.flows import inspect_locator
        from e2e_service.mobile.locators import Locator

        config = _prompt_config()
        using = input("Locator strategy [xpath]: ").strip() or "xpath"
        value = input("Locator value (e.g. //android.widget.TextView[@text='Home']): ").strip()
        if not value:
            print("Locator value is required.")
            return

        try:
            rect = inspect_locator(config, Locator(using=using, value=value))
        except WaitTimeoutError as e:
            print(f"\n✗ {e}")
            sys.exit(1)
        print(f"\n✓ Visible at x={rect['x']} y={rect['y']} size={rect['width']}x{rect['height']}")
    elif choice == "4":
        print("Exiting...")
        sys.exit(0)
    else:
        print("Invalid choice. Please choose 1-4.")


if __name__ == "__main__":
    main()
