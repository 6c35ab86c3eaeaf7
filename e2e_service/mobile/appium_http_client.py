from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import requests


W3C_ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"


class AppiumHTTPError(RuntimeError):
    def __init__(
        self,
        *,
        message: str,
        method: str,
        url: str,
        status_code: Optional[int] = None,
        response_json: Optional[dict[str, Any]] = None,
        response_text: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response_json = response_json
        self.response_text = response_text

    @property
    def webdriver_error(self) -> Optional[str]:
        """W3C error code from the response body, e.g. "stale element reference"."""
        if not isinstance(self.response_json, dict):
            return None
        value = _extract_webdriver_value(self.response_json)
        if isinstance(value, dict) and isinstance(value.get("error"), str):
            return value["error"]
        return None


@dataclass(frozen=True)
class WebDriverElementRef:
    element_id: str


class UiDriver(Protocol):
    """The subset of the driver that gestures, waits and assertions rely on."""

    def find_elements(self, *, using: str, value: str) -> list[WebDriverElementRef]: ...

    def find_child_elements(
        self, parent: WebDriverElementRef, *, using: str, value: str
    ) -> list[WebDriverElementRef]: ...

    def click(self, element: WebDriverElementRef) -> None: ...

    def perform_actions(self, actions: list[dict[str, Any]]) -> None: ...

    def back(self) -> None: ...

    def get_element_rect(self, element: WebDriverElementRef) -> dict[str, int]: ...

    def is_element_displayed(self, element: WebDriverElementRef) -> bool: ...

    def get_element_text(self, element: WebDriverElementRef) -> str: ...


def _extract_webdriver_value(payload: dict[str, Any]) -> Any:
    # W3C responses wrap the result in {"value": ...}
    if "value" in payload:
        return payload["value"]
    return payload


def _extract_element_id(element_obj: Any) -> str:
    if not isinstance(element_obj, dict):
        raise ValueError(f"Unexpected element payload type: {type(element_obj)}")

    if element_obj.get(W3C_ELEMENT_KEY):
        return str(element_obj[W3C_ELEMENT_KEY])

    # Legacy JSONWire key
    if element_obj.get("ELEMENT"):
        return str(element_obj["ELEMENT"])

    raise ValueError(f"Could not extract element id from payload keys: {list(element_obj.keys())}")


def _parse_rect(value: Any) -> Optional[dict[str, int]]:
    if not isinstance(value, dict):
        return None
    required = ("x", "y", "width", "height")
    if not all(k in value for k in required):
        return None
    return {k: int(value[k]) for k in required}


class AppiumHTTPClient:
    """
    Appium client speaking the W3C WebDriver HTTP endpoints directly.

    Only the calls the UI tests need are implemented. The client holds at most
    one session; `create_session()` must be called before anything else and
    `delete_session()` is safe to call more than once.
    """

    def __init__(
        self,
        server_url: str,
        *,
        timeout_s: float = 30.0,
        http_session: Optional[requests.Session] = None,
    ) -> None:
        if not server_url:
            raise ValueError("server_url is required")
        self.server_url = server_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session_id: Optional[str] = None
        self._session = http_session if http_session is not None else requests.Session()

    def _request(self, method: str, path: str, *, json: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        url = f"{self.server_url}{path}"
        try:
            response = self._session.request(method, url, json=json, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise AppiumHTTPError(
                message=f"Failed to call Appium server: {e}",
                method=method,
                url=url,
            ) from e

        response_text = None
        response_json: Optional[dict[str, Any]] = None
        try:
            response_json = response.json()
        except ValueError:
            response_text = response.text

        if response.status_code >= 400:
            details = None
            if isinstance(response_json, dict):
                value = _extract_webdriver_value(response_json)
                if isinstance(value, dict):
                    details = value.get("error") or value.get("message")
            raise AppiumHTTPError(
                message=f"Appium HTTP {response.status_code} for {method} {path}"
                + (f": {details}" if details else ""),
                method=method,
                url=url,
                status_code=response.status_code,
                response_json=response_json if isinstance(response_json, dict) else None,
                response_text=response_text,
            )

        if not isinstance(response_json, dict):
            raise AppiumHTTPError(
                message=f"Appium returned non-JSON response for {method} {path}",
                method=method,
                url=url,
                status_code=response.status_code,
                response_text=response_text,
            )

        return response_json

    def _session_request(
        self, method: str, path: str, *, json: Optional[dict[str, Any]] = None
    ) -> tuple[Any, dict[str, Any]]:
        self._require_session()
        response = self._request(method, f"/session/{self.session_id}{path}", json=json)
        return _extract_webdriver_value(response), response

    def _shape_error(self, method: str, path: str, expected: str, response: dict[str, Any]) -> AppiumHTTPError:
        return AppiumHTTPError(
            message=f"Unexpected {path} response shape (expected {expected})",
            method=method,
            url=f"{self.server_url}/session/{self.session_id}{path}",
            response_json=response,
        )

    def create_session(self, session_payload: dict[str, Any]) -> str:
        """
        Create an Appium session.

        `session_payload` must be a valid WebDriver session creation payload:
          {"capabilities": {"alwaysMatch": {...}, "firstMatch": [{}]}}

        No defaults are guessed; an invalid payload fails loudly.
        """
        if not isinstance(session_payload, dict) or not session_payload:
            raise ValueError("session_payload must be a non-empty dict")
        if self.session_id:
            raise RuntimeError(f"Session {self.session_id} is still active; delete it first")

        response = self._request("POST", "/session", json=session_payload)

        # Either {"value": {"sessionId": ...}} (W3C) or {"sessionId": ...} (legacy)
        value = _extract_webdriver_value(response)
        session_id = None
        if isinstance(value, dict):
            session_id = value.get("sessionId")
        session_id = session_id or response.get("sessionId")

        if not session_id:
            raise AppiumHTTPError(
                message="Appium did not return a sessionId in the create_session response",
                method="POST",
                url=f"{self.server_url}/session",
                response_json=response,
            )

        self.session_id = str(session_id)
        return self.session_id

    def delete_session(self) -> None:
        if not self.session_id:
            return
        session_id = self.session_id
        try:
            self._request("DELETE", f"/session/{session_id}")
        finally:
            self.session_id = None

    def set_implicit_wait(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("implicit wait must be >= 0")
        self._session_request("POST", "/timeouts", json={"implicit": int(seconds * 1000)})

    def get_page_source(self) -> str:
        value, response = self._session_request("GET", "/source")
        if not isinstance(value, str):
            raise self._shape_error("GET", "/source", "string", response)
        return value

    def get_screenshot_png_bytes(self) -> bytes:
        value, response = self._session_request("GET", "/screenshot")
        if not isinstance(value, str):
            raise self._shape_error("GET", "/screenshot", "base64 string", response)
        try:
            return base64.b64decode(value)
        except ValueError as e:
            raise AppiumHTTPError(
                message=f"Failed to decode screenshot base64: {e}",
                method="GET",
                url=f"{self.server_url}/session/{self.session_id}/screenshot",
                response_json=response,
            ) from e

    def _parse_elements(self, path: str, value: Any, response: dict[str, Any]) -> list[WebDriverElementRef]:
        if not isinstance(value, list):
            raise self._shape_error("POST", path, "list", response)
        return [WebDriverElementRef(element_id=_extract_element_id(item)) for item in value]

    def find_elements(self, *, using: str, value: str) -> list[WebDriverElementRef]:
        if not using or not value:
            raise ValueError("'using' and 'value' are required to find elements")
        payload, response = self._session_request("POST", "/elements", json={"using": using, "value": value})
        return self._parse_elements("/elements", payload, response)

    def find_child_elements(
        self, parent: WebDriverElementRef, *, using: str, value: str
    ) -> list[WebDriverElementRef]:
        if not using or not value:
            raise ValueError("'using' and 'value' are required to find elements")
        path = f"/element/{parent.element_id}/elements"
        payload, response = self._session_request("POST", path, json={"using": using, "value": value})
        return self._parse_elements(path, payload, response)

    def get_element_text(self, element: WebDriverElementRef) -> str:
        path = f"/element/{element.element_id}/text"
        value, response = self._session_request("GET", path)
        if not isinstance(value, str):
            raise self._shape_error("GET", path, "string", response)
        return value

    def get_element_rect(self, element: WebDriverElementRef) -> dict[str, int]:
        path = f"/element/{element.element_id}/rect"
        value, response = self._session_request("GET", path)
        rect = _parse_rect(value)
        if rect is None:
            raise self._shape_error("GET", path, "object with x/y/width/height", response)
        return rect

    def is_element_displayed(self, element: WebDriverElementRef) -> bool:
        path = f"/element/{element.element_id}/displayed"
        value, response = self._session_request("GET", path)
        if not isinstance(value, bool):
            raise self._shape_error("GET", path, "boolean", response)
        return value

    def click(self, element: WebDriverElementRef) -> None:
        self._session_request("POST", f"/element/{element.element_id}/click", json={})

    def perform_actions(self, actions: list[dict[str, Any]]) -> None:
        """Dispatch W3C input sources; returns once the server finished playback."""
        if not isinstance(actions, list) or not actions:
            raise ValueError("actions must be a non-empty list of input sources")
        self._session_request("POST", "/actions", json={"actions": actions})

    def back(self) -> None:
        self._session_request("POST", "/back", json={})

    def _require_session(self) -> None:
        if not self.session_id:
            raise RuntimeError("No active Appium session. Call create_session() first.")
