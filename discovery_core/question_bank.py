from __future__ import annotations
import json, importlib.resources as ir
from pathlib import Path
from typing import Any, Dict, Optional

from .config import MODULE_ORDER, load_config
from .types import Bank, CareerCluster, Item, ModuleDef, Option, RESULT_TYPE_BY_KIND

DOMAINS = ["A", "C", "S", "P"]
DOMAIN_LABELS = {
    "A": "Analytical",
    "C": "Creative",
    "S": "Social / Empathic",
    "P": "Physical / Action",
}
TIERS = ("explore", "develop", "advanced")


def _read_raw(path: Optional[str]) -> Dict[str, Any]:
    if path is None:
        path = load_config().get("BANK_PATH")
    if path:
        data = Path(path).read_text(encoding="utf-8")
    else:
        data = ir.files(__package__).joinpath("data").joinpath("bank.json").read_text(encoding="utf-8")
    return json.loads(data)


def _parse_item(kind: str, raw: Dict[str, Any]) -> Item:
    options = [
        Option(
            text=str(o.get("text", "")),
            domain=o.get("domain"),
            correct=bool(o.get("correct", False)),
            friction=o.get("friction"),
            score=int(o.get("score", 0) or 0),
        )
        for o in raw.get("options") or []
    ]
    return Item(
        id=str(raw["id"]),
        kind=kind,
        prompt=str(raw.get("prompt") or raw.get("question") or ""),
        options=options,
        title=raw.get("title"),
        domain=raw.get("domain"),
        min_words=int(raw.get("min_words", 0) or 0),
        max_words=int(raw.get("max_words", 0) or 0),
    )


def _parse_module(raw: Dict[str, Any]) -> ModuleDef:
    kind = str(raw.get("kind", ""))
    if kind not in RESULT_TYPE_BY_KIND:
        raise ValueError(f"module {raw.get('id')!r} has unknown kind {kind!r}")
    return ModuleDef(
        id=str(raw["id"]),
        kind=kind,
        title=str(raw.get("title", "")),
        items=[_parse_item(kind, it) for it in raw.get("items") or []],
        subtitle=str(raw.get("subtitle", "")),
        description=str(raw.get("description", "")),
    )


def parse_bank(raw: Dict[str, Any]) -> Bank:
    modules = {m.id: m for m in (_parse_module(r) for r in raw.get("modules") or [])}
    clusters = [
        CareerCluster(
            id=str(c["id"]),
            name=str(c.get("name", "")),
            domains=[str(d) for d in c.get("domains") or []],
            description=str(c.get("description", "")),
            careers={tier: list((c.get("careers") or {}).get(tier) or []) for tier in TIERS},
        )
        for c in raw.get("clusters") or []
    ]
    labels = dict(DOMAIN_LABELS)
    labels.update(raw.get("domains") or {})
    return Bank(version=str(raw.get("version", "")), modules=modules, clusters=clusters, domain_labels=labels)


def load_bank(path: Optional[str] = None) -> Bank:
    return parse_bank(_read_raw(path))


def get_module(module_id: str, bank: Optional[Bank] = None) -> ModuleDef:
    b = bank or load_bank()
    if module_id not in b.modules:
        raise KeyError(f"unknown module {module_id!r}")
    return b.modules[module_id]


def next_module(module_id: str) -> Optional[str]:
    idx = MODULE_ORDER.index(module_id)
    return MODULE_ORDER[idx + 1] if idx + 1 < len(MODULE_ORDER) else None
