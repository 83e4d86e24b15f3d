"""Per-user persistence for the HTTP layer.

Each user gets a directory under ``DATA_DIR/users`` holding the three
assessment records as JSON files.  Swapping this for a database-backed
key-value store only requires another ``KeyValueStore`` implementation.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from discovery_core.store import JsonFileStore, ResultStore


DATA_ROOT = Path(os.getenv("DATA_DIR", "data")).resolve()
USERS_DIR = DATA_ROOT / "users"

_SAFE_ID = re.compile(r"[^A-Za-z0-9_-]")


def _ensure_dirs() -> None:
    USERS_DIR.mkdir(parents=True, exist_ok=True)


def user_dir(user_id: str) -> Path:
    safe = _SAFE_ID.sub("_", user_id.strip()) or "_"
    return USERS_DIR / safe


def store_for(user_id: str) -> ResultStore:
    _ensure_dirs()
    return ResultStore(JsonFileStore(user_dir(user_id)))
