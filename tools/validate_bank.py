from __future__ import annotations
import argparse, os
from pathlib import Path
from discovery_core.audit_bank import audit_bank, print_report, write_summary
from discovery_core.question_bank import load_bank, DOMAINS

# Minimum items routing to each domain per module; defaults match the current bank
TARGETS = {
    "A": int(os.getenv("TARGET_INTEREST_MIN", 1)),
    "B": int(os.getenv("TARGET_STRENGTH_MIN", 0)),
    "C": int(os.getenv("TARGET_SKILL_MIN", 0)),
}

def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("bank", nargs="?", default=None, help="bank.json to check (defaults to the packaged bank)")
    ap.add_argument("--out", default=None, help="also write the audit summary as JSON")
    a = ap.parse_args(argv)
    summary = audit_bank(load_bank(a.bank))
    print_report(summary)

    print(f"\nTargets per domain: {TARGETS}\n")
    short = 0
    for module_id, need in TARGETS.items():
        counts = summary["coverage"].get(module_id, {})
        gaps = {d: need - counts.get(d, 0) for d in DOMAINS if counts.get(d, 0) < need}
        if gaps:
            short += 1
            print(f"Module {module_id}: → Add " + ", ".join(f"{d} {n}" for d, n in gaps.items()))
        else:
            print(f"Module {module_id}: ✓ Meets targets")

    if a.out:
        write_summary(summary, Path(a.out))
        print(f"Summary written to {a.out}")

    return 2 if summary["warnings"] or short else 0

if __name__ == "__main__":
    raise SystemExit(main())
