from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from .config import MODULE_ORDER
from .question_bank import DOMAINS, TIERS, load_bank
from .types import Bank, ModuleDef

FRICTION_LEVELS: tuple[str, ...] = ("low", "medium", "high")
FRICTION_SCORES: tuple[int, ...] = (0, 1, 2)


def _audit_module(module: ModuleDef, warnings: list[str]) -> dict[str, int]:
    counts = {d: 0 for d in DOMAINS}
    for item in module.items:
        if module.kind == "open-ended":
            if item.domain not in DOMAINS:
                warnings.append(f"{module.id}/{item.id} routes to unknown domain {item.domain!r}")
            else:
                counts[item.domain] += 1
            if item.min_words <= 0 or item.min_words > item.max_words:
                warnings.append(f"{module.id}/{item.id} word bounds {item.min_words}..{item.max_words} are invalid")
            continue

        if not item.options:
            warnings.append(f"{module.id}/{item.id} has no options")
            continue

        if module.kind == "forced-choice":
            for idx, opt in enumerate(item.options):
                if opt.domain not in DOMAINS:
                    warnings.append(f"{module.id}/{item.id} option {idx} has unknown domain {opt.domain!r}")
                else:
                    counts[opt.domain] += 1
        elif module.kind == "timed-choice":
            correct = [opt for opt in item.options if opt.correct]
            if len(correct) != 1:
                warnings.append(f"{module.id}/{item.id} has {len(correct)} correct options (expected 1)")
            for opt in correct:
                if opt.domain not in DOMAINS:
                    warnings.append(f"{module.id}/{item.id} correct option has unknown domain {opt.domain!r}")
                else:
                    counts[opt.domain] += 1
        elif module.kind == "friction":
            for idx, opt in enumerate(item.options):
                if opt.friction not in FRICTION_LEVELS:
                    warnings.append(f"{module.id}/{item.id} option {idx} has friction {opt.friction!r}")
                if opt.score not in FRICTION_SCORES:
                    warnings.append(f"{module.id}/{item.id} option {idx} has score {opt.score} (not 0..2)")
    return counts


def audit_bank(bank: Bank) -> dict[str, object]:
    warnings: list[str] = []
    coverage: dict[str, dict[str, int]] = {}
    totals = {"modules": 0, "items": 0, "clusters": len(bank.clusters)}

    for module_id in MODULE_ORDER:
        if module_id not in bank.modules:
            warnings.append(f"module {module_id} is missing")
    for module in bank.modules.values():
        totals["modules"] += 1
        totals["items"] += len(module.items)
        if not module.items:
            warnings.append(f"module {module.id} has no items")
        coverage[module.id] = _audit_module(module, warnings)

    for cluster in bank.clusters:
        if not cluster.domains:
            warnings.append(f"cluster {cluster.id} has no domains")
        for d in cluster.domains:
            if d not in DOMAINS:
                warnings.append(f"cluster {cluster.id} uses unknown domain {d!r}")
        for tier in TIERS:
            if not cluster.careers.get(tier):
                warnings.append(f"cluster {cluster.id} has no {tier} opportunities")

    return {"version": bank.version, "coverage": coverage, "warnings": warnings, "totals": totals}


def print_report(summary: dict[str, object]) -> None:
    coverage: dict[str, dict[str, int]] = summary["coverage"]  # type: ignore[assignment]
    print(f"=== Bank {summary.get('version')} ===")
    for module_id in sorted(coverage):
        row = "  ".join(f"{d}:{n:2d}" for d, n in coverage[module_id].items())
        print(f"Module {module_id}: {row}")

    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")

    print("\nTotals:", summary["totals"])


def write_summary(summary: dict[str, object], path: Path) -> str:
    text = json.dumps(summary, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
    return text


def main(argv: Optional[list[str]] = None) -> int:
    bank = load_bank(argv[0] if argv else None)
    summary = audit_bank(bank)
    print_report(summary)
    return 2 if summary["warnings"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
