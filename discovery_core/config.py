from __future__ import annotations
import os, json, pathlib


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


MODULE_ORDER: tuple[str, ...] = ("A", "B", "C", "D")

INTEREST_POINTS: int = 2

STRENGTH_POINTS: int = 2
SPEED_BONUS: int = 1
SPEED_LIMIT_MS: float = 10_000.0

SKILL_BASE: int = 3
SKILL_LONG_ANSWER: int = 4
SKILL_MAX: int = 5
SKILL_LENGTH_RATIO: float = 0.8
SKILL_SCALE: float = 2.0
CONNECTIVE_MARKERS: tuple[str, ...] = ("because", "Therefore", "However")

COMFORT_ITEM_MAX: int = 2
COMFORT_SCALE: float = 10.0

BURNOUT_STRENGTH_MIN: float = 6.0
BURNOUT_COMFORT_MAX: float = 3.0

CLUSTER_INTEREST_MIN: float = 6.0
CLUSTER_STRENGTH_MIN: float = 5.0
CLUSTER_COMFORT_MIN: float = 5.0
CLUSTER_LIMIT: int = 2

TIER_ADVANCED_MIN: float = 8.0
TIER_DEVELOP_MIN: float = 5.0

PROFILE_AGE_MIN: int = 13
PROFILE_AGE_MAX: int = 19

REPORT_TEEN_OPPORTUNITIES: int = 5
REPORT_PARENT_OPPORTUNITIES: int = 3

SESSION_IDLE_TTL_SEC: int = 3600

DEBUG_TRACE: bool = False
TRACE_FIELDS: tuple[str, ...] = (
    "module",
    "item_id",
    "option",
    "words",
    "elapsed_ms",
    "points",
)
# // env overrides for ops; scoring thresholds are fixed.
DEBUG_TRACE = _env_bool("DEBUG_TRACE", False)
REPORT_TEEN_OPPORTUNITIES = _env_int("REPORT_TEEN_OPPORTUNITIES", REPORT_TEEN_OPPORTUNITIES)
REPORT_PARENT_OPPORTUNITIES = _env_int("REPORT_PARENT_OPPORTUNITIES", REPORT_PARENT_OPPORTUNITIES)
SESSION_IDLE_TTL_SEC = _env_int("SESSION_IDLE_TTL_SEC", SESSION_IDLE_TTL_SEC)


def load_config() -> dict:
    cfg = {}
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except Exception: cfg = {}
    e = os.environ
    if e.get("BANK_PATH"): cfg["BANK_PATH"] = e.get("BANK_PATH")
    if e.get("DATA_DIR"): cfg["DATA_DIR"] = e.get("DATA_DIR")
    return cfg
