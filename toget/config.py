"""Configuration helpers and .env loading for toget."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Mapping, Optional

from dotenv import load_dotenv

from . import __version__

DEFAULT_ENV_FILES: tuple[Path, ...] = (
    Path(".env"),
    Path("config/.env"),
)

DEFAULT_MAX_WORKERS = 4


@lru_cache(maxsize=1)
def load_environment(*, extra_files: Iterable[Path] | None = None) -> dict[str, str]:
    """Load environment variables from .env files once per process."""

    candidates = list(DEFAULT_ENV_FILES)
    if extra_files:
        candidates = [*candidates, *extra_files]

    for path in candidates:
        try:
            if path.exists():
                load_dotenv(path, override=False)
        except OSError:
            continue

    load_dotenv(override=False)
    return dict(os.environ)


def _int_setting(env: Mapping[str, str], name: str) -> Optional[int]:
    value = env.get(name)
    if value is None or value.strip() == "":
        return None
    try:
        number = int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable '{name}' must be an integer, got {value!r}") from exc
    if number <= 0:
        raise ValueError(f"Environment variable '{name}' must be positive, got {number}")
    return number


@dataclass(frozen=True)
class Settings:
    """Defaults applied by the bundled requests transport."""

    timeout_ms: Optional[int] = None
    max_workers: int = DEFAULT_MAX_WORKERS
    user_agent: str = f"toget/{__version__}"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        max_workers = _int_setting(env, "TOGET_MAX_WORKERS")
        return cls(
            timeout_ms=_int_setting(env, "TOGET_TIMEOUT_MS"),
            max_workers=max_workers or DEFAULT_MAX_WORKERS,
            user_agent=env.get("TOGET_USER_AGENT") or f"toget/{__version__}",
        )


def load_settings() -> Settings:
    load_environment()
    return Settings.from_env()


__all__ = ["DEFAULT_ENV_FILES", "Settings", "load_environment", "load_settings"]
