from __future__ import annotations

from typing import Callable

import pytest

from discovery_core.question_bank import DOMAINS, load_bank, parse_bank
from discovery_core.session import ModuleSession
from discovery_core.store import MemoryStore, ResultStore
from discovery_core.types import Bank, Item, Response


def build_synthetic_bank(
    *,
    domains: list[str] | None = None,
    items_per_module: int = 2,
    min_words: int = 5,
    max_words: int = 10,
) -> Bank:
    """Create a small deterministic bank with one module of each kind."""

    target_domains = domains or list(DOMAINS)
    interest = [
        {
            "id": f"A{i + 1}",
            "prompt": f"Pick one #{i}",
            "options": [{"text": f"{d} option", "domain": d} for d in target_domains],
        }
        for i in range(items_per_module)
    ]
    strength = [
        {
            "id": f"B{i + 1}",
            "prompt": f"Quick task #{i}",
            "options": [
                {"text": "right", "domain": target_domains[i % len(target_domains)], "correct": True},
                {"text": "wrong", "domain": None, "correct": False},
            ],
        }
        for i in range(items_per_module)
    ]
    skill = [
        {
            "id": f"C{i + 1}",
            "title": f"Task {i}",
            "prompt": f"Write about {target_domains[i % len(target_domains)]}",
            "min_words": min_words,
            "max_words": max_words,
            "domain": target_domains[i % len(target_domains)],
        }
        for i in range(items_per_module)
    ]
    friction = [
        {
            "id": f"D{i + 1}",
            "prompt": f"How does it feel #{i}",
            "options": [
                {"text": "great", "friction": "low", "score": 2},
                {"text": "meh", "friction": "medium", "score": 1},
                {"text": "awful", "friction": "high", "score": 0},
            ],
        }
        for i in range(items_per_module)
    ]
    clusters = [
        {
            "id": f"K{d}",
            "name": f"{d} cluster",
            "domains": [d],
            "description": f"Work that leans {d}",
            "careers": {
                "explore": [f"{d} explore {n}" for n in range(6)],
                "develop": [f"{d} develop {n}" for n in range(6)],
                "advanced": [f"{d} advanced {n}" for n in range(6)],
            },
        }
        for d in target_domains
    ]
    return parse_bank(
        {
            "version": "test",
            "modules": [
                {"id": "A", "kind": "forced-choice", "title": "Interest", "items": interest},
                {"id": "B", "kind": "timed-choice", "title": "Strength", "items": strength},
                {"id": "C", "kind": "open-ended", "title": "Skill", "items": skill},
                {"id": "D", "kind": "friction", "title": "Comfort", "items": friction},
            ],
            "clusters": clusters,
        }
    )


def words(n: int, marker: str | None = None) -> str:
    body = ["word"] * n
    if marker:
        body[0] = marker
    return " ".join(body)


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def tick(self, ms: float) -> None:
        self.now += ms


def run_module(
    module_id: str,
    store: ResultStore,
    bank: Bank,
    answer: Callable[[Item], Response],
    clock: Callable[[], float] | None = None,
):
    sess = ModuleSession(module_id, store, bank=bank, clock=clock)
    result = None
    while True:
        item = sess.current_item()
        if item is None:
            break
        result = sess.advance(answer(item))
    return result


def pick_domain(domain: str) -> Callable[[Item], Response]:
    def _answer(item: Item) -> Response:
        for idx, opt in enumerate(item.options):
            if opt.domain == domain:
                return Response(item_id=item.id, option=idx)
        return Response(item_id=item.id, option=0)

    return _answer


@pytest.fixture
def bank() -> Bank:
    return load_bank()


@pytest.fixture
def synthetic_bank() -> Bank:
    return build_synthetic_bank()


@pytest.fixture
def store() -> ResultStore:
    return ResultStore(MemoryStore())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_000.0)
