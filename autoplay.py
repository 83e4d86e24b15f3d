# autoplay.py
from __future__ import annotations
import argparse, os, random, datetime, logging
from typing import Optional
from discovery_core.config import MODULE_ORDER
from discovery_core.profile import start_assessment, validate_profile
from discovery_core.question_bank import DOMAINS, load_bank
from discovery_core.report import generate_from_store
from discovery_core.report_html import export_report_html
from discovery_core.session import ModuleSession
from discovery_core.store import MemoryStore, ResultStore
from discovery_core.types import Item, Response as R

FILLER = "I would try it step by step and see what works for me and my friends".split()

def _text_of(n_words: int, with_marker: bool) -> str:
    words = (["because"] if with_marker else []) + [FILLER[i % len(FILLER)] for i in range(n_words)]
    return " ".join(words[:max(n_words, 1)])

def _choice_for(item: Item, persona: str, rng: random.Random) -> int:
    for i, opt in enumerate(item.options):
        if opt.domain == persona: return i
    return rng.randrange(len(item.options))

def _answer_for(item: Item, persona: str, comfort: str, rng: random.Random) -> R:
    if item.kind == "forced-choice":
        return R(item_id=item.id, option=_choice_for(item, persona, rng))
    if item.kind == "timed-choice":
        correct = [i for i, o in enumerate(item.options) if o.correct]
        mine = any(item.options[i].domain == persona for i in correct)
        if mine: return R(item_id=item.id, option=correct[0], elapsed_ms=2500.0)
        wrong = [i for i in range(len(item.options)) if i not in correct] or [0]
        return R(item_id=item.id, option=rng.choice(wrong), elapsed_ms=12000.0)
    if item.kind == "open-ended":
        if item.domain == persona: return R(item_id=item.id, text=_text_of(item.max_words, True))
        return R(item_id=item.id, text=_text_of(item.min_words, False))
    want = 2 if comfort == "high" else 0
    for i, opt in enumerate(item.options):
        if opt.score == want: return R(item_id=item.id, option=i)
    return R(item_id=item.id, option=0)

def run(persona: str, comfort: str, seed: Optional[int], out_dir: str = "reports"):
    rng = random.Random(seed or 1234); bank = load_bank()
    store = ResultStore(MemoryStore())
    start_assessment(store, validate_profile(15, parent_email="parent@example.com", consent=True, name=f"auto-{persona}"))

    answered = 0
    for module_id in MODULE_ORDER:
        sess = ModuleSession(module_id, store, bank=bank)
        while True:
            it = sess.current_item()
            if it is None: break
            sess.advance(_answer_for(it, persona, comfort, rng)); answered += 1
    if answered <= 0: raise RuntimeError("Driver answered 0 items.")

    report = generate_from_store(store, bank=bank)
    ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    os.makedirs(out_dir, exist_ok=True)
    base = f"auto_{persona}_{comfort}_{ts}"
    paths = [
        export_report_html(report, os.path.join(out_dir, f"{base}_{view}.html"), view=view)
        for view in ("teen", "parent")
    ]
    print(f"Primary: {report.primary_domain}  clusters: {[c.id for c in report.clusters]}  risks: {[r.domain for r in report.burnout_risks]}")
    for p in paths: print(f"Report: {p}")
    return report

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--persona", choices=DOMAINS, default="A")
    ap.add_argument("--comfort", choices=["high", "low"], default="high")
    ap.add_argument("--seed", type=int, default=1337)
    ap.add_argument("--out", default="reports")
    ap.add_argument("-v", "--verbose", action="store_true")
    a = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if a.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    run(a.persona, a.comfort, a.seed, a.out)

if __name__ == "__main__":
    main()
