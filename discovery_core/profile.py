from __future__ import annotations
from typing import Any, Dict, Optional
import logging

from .config import PROFILE_AGE_MIN, PROFILE_AGE_MAX
from .session import utcnow_iso
from .store import ResultStore
from .types import Progress

log = logging.getLogger(__name__)


class ProfileError(ValueError):
    pass


def validate_profile(
    age: Any,
    parent_email: Optional[str] = None,
    consent: bool = False,
    name: Optional[str] = None,
) -> Dict[str, Any]:
    try:
        age_num = int(str(age).strip())
    except (TypeError, ValueError):
        raise ProfileError(f"Please enter an age between {PROFILE_AGE_MIN} and {PROFILE_AGE_MAX}.") from None
    if age_num < PROFILE_AGE_MIN or age_num > PROFILE_AGE_MAX:
        raise ProfileError(f"Please enter an age between {PROFILE_AGE_MIN} and {PROFILE_AGE_MAX}.")
    if not consent:
        raise ProfileError("Please agree to the terms to continue.")
    email = (parent_email or "").strip()
    if email and "@" not in email:
        raise ProfileError("Please enter a valid email address or leave it blank.")
    return {
        "age": age_num,
        "parentEmail": email or None,
        "name": (name or "").strip() or None,
        "startedAt": utcnow_iso(),
    }


def start_assessment(store: ResultStore, profile: Dict[str, Any]) -> Progress:
    """Drop earlier results and begin again at module A."""

    store.reset()
    store.save_profile(profile)
    progress = Progress()
    store.save_progress(progress)
    log.info("assessment started age=%s", profile.get("age"))
    return progress
