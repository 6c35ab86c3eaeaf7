from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from .env import ensure_dotenv_loaded

DEFAULT_APPIUM_SERVER_URL = "http://127.0.0.1:4723"


def load_json_file(path: str | Path) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"JSON file not found: {file_path}")
    if file_path.is_dir():
        raise IsADirectoryError(f"Expected a JSON file but found a directory: {file_path}")

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected top-level JSON object in {file_path}")
    return data


def require_key(obj: dict[str, Any], key: str, *, context: str) -> Any:
    if key not in obj:
        raise ValueError(f"Missing required key '{key}' in {context}")
    return obj[key]


def load_capabilities(path: str | Path) -> dict[str, Any]:
    """Load a WebDriver new-session payload; it must carry a `capabilities` object."""
    payload = load_json_file(path)
    capabilities = require_key(payload, "capabilities", context=str(path))
    if not isinstance(capabilities, dict):
        raise ValueError(f"'capabilities' must be an object in {path}")
    return payload


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {raw!r}")
    return value


@dataclass(frozen=True)
class E2EConfig:
    appium_server_url: str = DEFAULT_APPIUM_SERVER_URL
    capabilities_json_path: Optional[str] = None
    implicit_wait_s: float = 0.0
    wait_timeout_s: float = 10.0
    artifacts_dir: Path = Path("artifacts")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "E2EConfig":
        if environ is None:
            ensure_dotenv_loaded()
            environ = os.environ
        caps = (environ.get("THESISAPP_CAPABILITIES_JSON") or "").strip()
        return cls(
            appium_server_url=(environ.get("APPIUM_SERVER_URL") or "").strip() or DEFAULT_APPIUM_SERVER_URL,
            capabilities_json_path=caps or None,
            implicit_wait_s=_env_float(environ, "THESISAPP_IMPLICIT_WAIT_S", 0.0),
            wait_timeout_s=_env_float(environ, "THESISAPP_WAIT_TIMEOUT_S", 10.0),
            artifacts_dir=Path(environ.get("THESISAPP_ARTIFACTS_DIR") or "artifacts").resolve(),
        )

    def require_capabilities_path(self) -> str:
        if not self.capabilities_json_path:
            raise ValueError("THESISAPP_CAPABILITIES_JSON is not set; point it at a capabilities JSON file")
        return self.capabilities_json_path
