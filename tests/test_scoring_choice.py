from __future__ import annotations

import pytest

from discovery_core.question_bank import DOMAINS
from discovery_core.scoring import score_interest, score_module, score_strength
from discovery_core.types import ModuleDef, Response

from tests.conftest import build_synthetic_bank


def _correct_idx(item) -> int:
    return next(i for i, opt in enumerate(item.options) if opt.correct)


def test_all_creative_interest_hits_ten(bank):
    module = bank.modules["A"]
    responses = {}
    for item in module.items:
        idx = next(i for i, opt in enumerate(item.options) if opt.domain == "C")
        responses[item.id] = Response(item_id=item.id, option=idx)

    res = score_interest(responses, module)

    assert res.type == "interest"
    assert res.scores["C"] == 10
    assert all(res.scores[d] == 0 for d in DOMAINS if d != "C")


def test_interest_values_stay_even_and_bounded(bank):
    module = bank.modules["A"]
    responses = {
        item.id: Response(item_id=item.id, option=n % len(item.options))
        for n, item in enumerate(module.items)
    }
    res = score_interest(responses, module)

    assert sum(res.scores.values()) == 2 * len(module.items)
    for value in res.scores.values():
        assert value in {0, 2, 4, 6, 8, 10}


def test_all_correct_and_fast_strength_totals_fifteen(bank):
    module = bank.modules["B"]
    responses = {
        item.id: Response(item_id=item.id, option=_correct_idx(item), elapsed_ms=2_000)
        for item in module.items
    }
    res = score_strength(responses, module)

    assert res.type == "strength"
    assert sum(res.scores.values()) == 15
    assert res.scores == {"A": 9, "C": 3, "S": 0, "P": 3}


def test_slow_correct_answers_lose_speed_bonus(bank):
    module = bank.modules["B"]
    responses = {
        item.id: Response(item_id=item.id, option=_correct_idx(item), elapsed_ms=10_000)
        for item in module.items
    }
    res = score_strength(responses, module)
    assert sum(res.scores.values()) == 10


def test_missing_elapsed_earns_no_bonus(bank):
    module = bank.modules["B"]
    item = module.items[0]
    res = score_strength({item.id: Response(item_id=item.id, option=_correct_idx(item))}, module)
    assert res.scores["A"] == 2


def test_incorrect_answers_add_nothing_even_when_fast(bank):
    module = bank.modules["B"]
    responses = {}
    for item in module.items:
        wrong = next(i for i, opt in enumerate(item.options) if not opt.correct)
        responses[item.id] = Response(item_id=item.id, option=wrong, elapsed_ms=500)
    res = score_strength(responses, module)
    assert all(v == 0 for v in res.scores.values())


def test_out_of_range_option_is_ignored():
    module = build_synthetic_bank().modules["A"]
    item = module.items[0]
    res = score_interest({item.id: Response(item_id=item.id, option=99)}, module)
    assert all(v == 0 for v in res.scores.values())


def test_unknown_module_kind_is_rejected():
    module = ModuleDef(id="X", kind="essay", title="bogus")
    with pytest.raises(ValueError):
        score_module(module, {})
