from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Optional

_KEY_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_QUOTES = ("'", '"')


def _repo_root() -> Path:
    # e2e_service/mobile/env.py -> repo root is two levels up
    return Path(__file__).resolve().parents[2]


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    # unquoted values may carry a trailing " # comment"
    return value.split(" #", 1)[0].rstrip()


def parse_dotenv(text: str) -> dict[str, str]:
    """
    Parse `.env` text into a dict; later assignments win.

    Accepts `KEY=VALUE`, `export KEY=VALUE`, quoted values and `#` comments.
    Lines that are not an assignment to a shell-style identifier are skipped.
    """
    pairs: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not _KEY_RE.fullmatch(key):
            continue
        pairs[key] = _unquote(value.strip())
    return pairs


def load_dotenv(*, path: Optional[str | Path] = None, override: bool = False) -> dict[str, str]:
    """
    Copy `.env` pairs into os.environ and return the ones that were applied.

    Variables already set in the environment (e.g. by CI) win unless
    `override=True`. A missing file is not an error.
    """
    dotenv_path = Path(path).expanduser().resolve() if path is not None else (_repo_root() / ".env")
    if not dotenv_path.is_file():
        if dotenv_path.is_dir():
            raise RuntimeError(f".env path is a directory: {dotenv_path}")
        return {}

    applied = {
        key: value
        for key, value in parse_dotenv(dotenv_path.read_text(encoding="utf-8")).items()
        if override or key not in os.environ
    }
    os.environ.update(applied)
    return applied


@lru_cache(maxsize=None)
def ensure_dotenv_loaded() -> None:
    """Load the repo-root .env at most once per process."""
    load_dotenv()
