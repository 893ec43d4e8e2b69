"""
Environment-backed configuration.

Values come from the process environment, optionally seeded from a `.env`
file at the repo root or the current working directory.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_STORAGE_PATH = Path.home() / ".movieshelf" / "storage.json"


def load_env(*, override: bool = False) -> Path | None:
    """Load the first `.env` found and return its path (or None when there is none)."""
    for path in (Path(__file__).resolve().parents[2] / ".env", Path.cwd() / ".env"):
        if path.is_file():
            load_dotenv(dotenv_path=path, override=override)
            return path
    return None


def env_str(name: str) -> str | None:
    value = (os.getenv(name) or "").strip()
    return value or None


def get_redis_url() -> str | None:
    return env_str("REDIS_URL")


def get_storage_path() -> Path:
    raw = env_str("MOVIESHELF_STORAGE_PATH")
    return Path(raw).expanduser() if raw else DEFAULT_STORAGE_PATH
