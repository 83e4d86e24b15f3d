from __future__ import annotations
from typing import Dict, Mapping, Optional
import logging

from .config import (
    INTEREST_POINTS,
    STRENGTH_POINTS,
    SPEED_BONUS,
    SPEED_LIMIT_MS,
    SKILL_BASE,
    SKILL_LONG_ANSWER,
    SKILL_MAX,
    SKILL_LENGTH_RATIO,
    SKILL_SCALE,
    CONNECTIVE_MARKERS,
    COMFORT_ITEM_MAX,
    COMFORT_SCALE,
    DEBUG_TRACE,
    TRACE_FIELDS,
)
from .question_bank import DOMAINS
from .types import Item, ModuleDef, ModuleResult, Option, Response

log = logging.getLogger(__name__)

Responses = Mapping[str, Response]


def _emit_trace(**values: object) -> None:
    if not DEBUG_TRACE:
        return
    ordered = [f"{key}={values[key]}" for key in TRACE_FIELDS if key in values]
    if ordered:
        log.info("trace %s", " ".join(ordered))


def _blank() -> Dict[str, float]:
    return {d: 0 for d in DOMAINS}


def _selected(item: Item, resp: Optional[Response]) -> Optional[Option]:
    if resp is None or resp.option is None:
        return None
    idx = int(resp.option)
    if idx < 0 or idx >= len(item.options):
        return None
    return item.options[idx]


def word_count(text: Optional[str]) -> int:
    return len((text or "").split())


def score_interest(responses: Responses, module: ModuleDef) -> ModuleResult:
    scores = _blank()
    for item in module.items:
        opt = _selected(item, responses.get(item.id))
        if opt is None or opt.domain not in scores:
            continue
        scores[opt.domain] += INTEREST_POINTS
        _emit_trace(module=module.id, item_id=item.id, option=responses[item.id].option, points=INTEREST_POINTS)
    return ModuleResult(type="interest", scores=scores)


def score_strength(responses: Responses, module: ModuleDef) -> ModuleResult:
    """Correct answers earn 2 points; answers under the speed limit earn a 1 point bonus."""

    scores = _blank()
    for item in module.items:
        resp = responses.get(item.id)
        opt = _selected(item, resp)
        if opt is None or not opt.correct or opt.domain not in scores:
            continue
        points = STRENGTH_POINTS
        elapsed = resp.elapsed_ms
        if elapsed is not None and float(elapsed) < SPEED_LIMIT_MS:
            points += SPEED_BONUS
        scores[opt.domain] += points
        _emit_trace(module=module.id, item_id=item.id, option=resp.option, elapsed_ms=elapsed, points=points)
    return ModuleResult(type="strength", scores=scores)


def score_task(task: Item, text: Optional[str]) -> int:
    """Crude 3..5 rating: length against max_words plus a reasoning-marker bonus."""

    body = text or ""
    score = SKILL_BASE
    if word_count(body) >= task.max_words * SKILL_LENGTH_RATIO:
        score = SKILL_LONG_ANSWER
    if any(marker in body for marker in CONNECTIVE_MARKERS):
        score += 1
    return min(score, SKILL_MAX)


def score_skill(responses: Responses, module: ModuleDef) -> ModuleResult:
    sums = _blank()
    counts = {d: 0 for d in DOMAINS}
    for task in module.items:
        resp = responses.get(task.id)
        if resp is None or resp.text is None or task.domain not in sums:
            continue
        points = score_task(task, resp.text)
        sums[task.domain] += points
        counts[task.domain] += 1
        _emit_trace(module=module.id, item_id=task.id, words=word_count(resp.text), points=points)

    scores = _blank()
    for d in DOMAINS:
        if counts[d] > 0:
            scores[d] = sums[d] / counts[d] * SKILL_SCALE
    return ModuleResult(type="skill", scores=scores)


def score_comfort(responses: Responses, module: ModuleDef) -> ModuleResult:
    # one scalar for every domain: friction items carry no domain tags
    total = 0
    max_total = 0
    for item in module.items:
        opt = _selected(item, responses.get(item.id))
        if opt is None:
            continue
        total += opt.score
        max_total += COMFORT_ITEM_MAX
        _emit_trace(module=module.id, item_id=item.id, option=responses[item.id].option, points=opt.score)
    comfort = (total / max_total) * COMFORT_SCALE if max_total > 0 else 0.0
    return ModuleResult(type="comfort", scores={d: comfort for d in DOMAINS}, score=comfort)


def score_module(module: ModuleDef, responses: Responses) -> ModuleResult:
    if module.kind == "forced-choice":
        result = score_interest(responses, module)
    elif module.kind == "timed-choice":
        result = score_strength(responses, module)
    elif module.kind == "open-ended":
        result = score_skill(responses, module)
    elif module.kind == "friction":
        result = score_comfort(responses, module)
    else:
        raise ValueError(f"unknown module kind {module.kind!r}")
    log.debug("scored module=%s type=%s scores=%s", module.id, result.type, result.scores)
    return result
