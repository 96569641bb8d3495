"""Process-wide table mapping HTTP status codes to canonical names."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from .exceptions import StatusTableError

LOGGER = logging.getLogger(__name__)

STATUS_TABLE_PATH = Path(__file__).resolve().parent / "status_codes.json"


@lru_cache(maxsize=None)
def load_status_codes(path: Path = STATUS_TABLE_PATH) -> Mapping[int, str]:
    """Read the status table once and return a read-only view of it."""

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise StatusTableError(f"Unable to load status table from {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise StatusTableError(f"Status table {path} must be a JSON object")

    table: dict[int, str] = {}
    for code, name in raw.items():
        try:
            table[int(code)] = str(name)
        except ValueError as exc:
            raise StatusTableError(f"Invalid status code {code!r} in {path}") from exc

    LOGGER.debug("Loaded %d status codes from %s", len(table), path)
    return MappingProxyType(table)


# Loaded at import so a broken table fails loudly before any request is built.
STATUS_CODES: Mapping[int, str] = load_status_codes()

# (code, name) pairs in ascending code order, shared by every Response.
STATUS_NAMES: tuple[tuple[int, str], ...] = tuple(sorted(STATUS_CODES.items()))


def status_name(code: int) -> Optional[str]:
    return STATUS_CODES.get(code)


def status_flags(code: int) -> Mapping[str, bool]:
    """Return ``{name: code == known_code}`` for every known status."""

    return MappingProxyType({name: code == known for known, name in STATUS_NAMES})


__all__ = [
    "STATUS_CODES",
    "STATUS_NAMES",
    "STATUS_TABLE_PATH",
    "load_status_codes",
    "status_flags",
    "status_name",
]
