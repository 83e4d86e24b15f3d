"""Persistence boundary for assessment results, progress and respondent profile.

Everything the engine persists goes through three string records in a
key-value store.  Reads never raise on missing or corrupt data: they fall
back to "nothing saved yet" so a broken record simply restarts the flow.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .types import ModuleResult, Progress

log = logging.getLogger(__name__)

RESULTS_KEY = "assessment.results"
PROGRESS_KEY = "assessment.progress"
PROFILE_KEY = "assessment.profile"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


_LOCK = threading.Lock()


class JsonFileStore:
    """One ``<key>.json`` file per record under ``root``."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            log.warning("unreadable record file %s", path.name)
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        with _LOCK:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".tmp")
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)

    def remove(self, key: str) -> None:
        path = self._path(key)
        with _LOCK:
            if path.exists():
                path.unlink()


def _decode(raw: Optional[str], default: Any) -> Any:
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        log.warning("discarding unreadable record")
        return default


class ResultStore:
    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def load_results(self) -> Dict[str, ModuleResult]:
        raw = _decode(self.kv.get(RESULTS_KEY), {})
        if not isinstance(raw, dict):
            return {}
        out: Dict[str, ModuleResult] = {}
        for module_id, payload in raw.items():
            try:
                out[str(module_id)] = ModuleResult.from_dict(payload)
            except (KeyError, TypeError, ValueError):
                log.warning("skipping malformed result for module %s", module_id)
        return out

    def save_result(self, module_id: str, result: ModuleResult) -> None:
        results = self.load_results()
        results[module_id] = result
        payload = {mid: res.to_dict() for mid, res in results.items()}
        self.kv.set(RESULTS_KEY, json.dumps(payload, sort_keys=True))
        log.debug("saved result module=%s type=%s", module_id, result.type)

    def load_progress(self) -> Progress:
        raw = _decode(self.kv.get(PROGRESS_KEY), None)
        if not isinstance(raw, dict):
            return Progress()
        try:
            return Progress.from_dict(raw)
        except (TypeError, ValueError):
            log.warning("progress record malformed; starting fresh")
            return Progress()

    def save_progress(self, progress: Progress) -> None:
        self.kv.set(PROGRESS_KEY, json.dumps(progress.to_dict(), sort_keys=True))

    def load_profile(self) -> Dict[str, Any]:
        raw = _decode(self.kv.get(PROFILE_KEY), {})
        return raw if isinstance(raw, dict) else {}

    def save_profile(self, profile: Dict[str, Any]) -> None:
        self.kv.set(PROFILE_KEY, json.dumps(profile, sort_keys=True))

    def reset(self) -> None:
        self.kv.remove(RESULTS_KEY)
        self.kv.remove(PROGRESS_KEY)
