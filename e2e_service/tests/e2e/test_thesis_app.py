"""
End-to-end checks against a running ThesisApp build.

Needs an Appium server and an emulator with the debug APK; set
THESISAPP_CAPABILITIES_JSON (and optionally APPIUM_SERVER_URL) to run. The
expected data (Team A, the "erwrwrw" task, ...) must already exist in the
signed-in account.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3]))
from e2e_service.mobile.assertions import assert_visible, navigate_back
from e2e_service.mobile.config import E2EConfig
from e2e_service.mobile.flows import ScreenCheck, appium_session, run_screen_checks
from e2e_service.mobile.gestures import SwipeDirection
from e2e_service.mobile.locators import content_desc_view, locate, require, text_view, xpath
from e2e_service.mobile.waits import swipe_until_visible, wait_until_visible

pytestmark = pytest.mark.e2e

COMPOSE_ROOT = "//androidx.compose.ui.platform.ComposeView/android.view.View/android.view.View/android.view.View[1]"

HOME = text_view("Home")
PROFILE = text_view("Profile")
TEAM_A = text_view("Team A")
SEARCHED_TEAM = text_view("vsdfsd")
CREATE_TEAM = content_desc_view("Create Team")
CREATE_TASK = content_desc_view("Create Task")
TEAMS_ROW = xpath(f"{COMPOSE_ROOT}/android.view.View[1]")
HOME_TASK_CARD = xpath(f"{COMPOSE_ROOT}/android.view.View[3]/android.view.View[1]")
TEAM_TASK_CARD = xpath(f"{COMPOSE_ROOT}/android.view.View[2]/android.view.View[1]")

TASK_NAME = "erwrwrw"
TASK_DESCRIPTION = "ewrwrw"


@pytest.fixture(scope="session")
def e2e_config():
    config = E2EConfig.from_env()
    if not config.capabilities_json_path:
        pytest.skip("THESISAPP_CAPABILITIES_JSON not set; live UI tests need an Appium session")
    return config


@pytest.fixture(scope="session")
def driver(e2e_config):
    with appium_session(e2e_config) as client:
        yield client


@pytest.fixture
def wait_timeout_s(e2e_config):
    return e2e_config.wait_timeout_s


@pytest.mark.parametrize(
    "check",
    [
        ScreenCheck(text_view("Welcome, ", contains=True), "'Welcome' title"),
        ScreenCheck(text_view("My Teams"), "'My Teams' title"),
        ScreenCheck(text_view("Tasks"), "'Tasks' title"),
        ScreenCheck(CREATE_TEAM, "'Create Team' button"),
        ScreenCheck(HOME, "'Home' button"),
        ScreenCheck(PROFILE, "'Profile' button"),
        ScreenCheck(content_desc_view("Sort tasks"), "'Sort Tasks' button"),
    ],
    ids=lambda c: c.expectation.strip("'").split("'")[0],
)
def test_home_screen_element_exists(driver, check):
    run_screen_checks(driver, [check])


def test_profile_button_switch(driver):
    driver.click(require(locate(driver, PROFILE, expectation="'Profile' button")))
    run_screen_checks(driver, [ScreenCheck(text_view("AF"), "Initials")])
    driver.click(require(locate(driver, HOME, expectation="'Home' button")))


def test_create_team_button_switch(driver):
    driver.click(require(locate(driver, CREATE_TEAM, expectation="'Create Team' button")))
    run_screen_checks(driver, [ScreenCheck(text_view("Create New Team"), "'Create New Team' title")])
    navigate_back(driver)


def test_find_team_scrolling(driver, wait_timeout_s):
    wait_until_visible(driver, TEAM_A, expectation="'Team A'", timeout_s=wait_timeout_s)

    swipe_until_visible(
        driver,
        SEARCHED_TEAM,
        swipe_area=TEAMS_ROW,
        direction=SwipeDirection.LEFT,
        max_attempts=10,
        expectation="The team searched",
    )
    run_screen_checks(driver, [ScreenCheck(SEARCHED_TEAM, "The team")])

    driver.click(require(locate(driver, HOME, expectation="'Home' button")))


def test_team_click_switch(driver):
    team_name = assert_visible(driver, TEAM_A, "Team name")
    driver.click(team_name)

    run_screen_checks(
        driver,
        [
            ScreenCheck(TEAM_A, "Team name (title)"),
            ScreenCheck(text_view("3 members"), "Team members"),
            ScreenCheck(CREATE_TASK, "'createTaskButton'"),
        ],
    )
    navigate_back(driver)


def test_create_task_button(driver):
    driver.click(require(locate(driver, TEAM_A, expectation="Team name")))
    driver.click(require(locate(driver, CREATE_TASK, expectation="'Create Task' button")))

    run_screen_checks(
        driver,
        [
            ScreenCheck(text_view("Create New Task"), "Title"),
            ScreenCheck(xpath(f"{COMPOSE_ROOT}/android.widget.EditText[1]"), "Task Name box"),
            ScreenCheck(text_view("Task Name"), "Task Name text"),
            ScreenCheck(xpath(f"{COMPOSE_ROOT}/android.widget.EditText[2]"), "Task Description box"),
            ScreenCheck(text_view("Task Description"), "Task Description text"),
            ScreenCheck(content_desc_view("Save Task"), "Save Task Button"),
        ],
    )
    navigate_back(driver, times=2)


def _check_task_card_and_open(driver, card_locator, wait_timeout_s):
    wait_until_visible(driver, card_locator, expectation="Task card", timeout_s=wait_timeout_s)
    view = assert_visible(driver, card_locator, "View")

    task = assert_visible(driver, text_view(TASK_NAME), "Task", within=view)
    assert_visible(driver, text_view("To Do"), "Task status", within=view)
    assert_visible(driver, text_view(TASK_DESCRIPTION), "Task description", within=view)
    assert_visible(driver, text_view("0 assigned members", index=1), "Task members", within=view)

    driver.click(task)

    run_screen_checks(
        driver,
        [
            ScreenCheck(text_view(TASK_NAME), "Task name"),
            ScreenCheck(text_view(TASK_DESCRIPTION, index=1), "Task description (task page)"),
            ScreenCheck(text_view("To Do"), "Task status (task page)"),
            ScreenCheck(text_view("Description"), "'Description'"),
            ScreenCheck(text_view(TASK_DESCRIPTION, index=2), "Task description 2 (task page)"),
            ScreenCheck(text_view("Assigned Members"), "'Assigned Members'"),
            ScreenCheck(text_view("0 members assigned"), "Task members (task page)"),
        ],
    )


def test_open_task_from_main_page(driver, wait_timeout_s):
    driver.click(require(locate(driver, HOME, expectation="'Home' button")))
    wait_until_visible(driver, text_view(TASK_NAME), expectation=f"'{TASK_NAME}'", timeout_s=wait_timeout_s)

    _check_task_card_and_open(driver, HOME_TASK_CARD, wait_timeout_s)
    navigate_back(driver)


def test_open_task_from_team_page(driver, wait_timeout_s):
    driver.click(assert_visible(driver, TEAM_A, "Team name"))

    _check_task_card_and_open(driver, TEAM_TASK_CARD, wait_timeout_s)
    navigate_back(driver, times=2)
