from __future__ import annotations
import os, datetime, time, logging
from discovery_core.config import MODULE_ORDER, load_config
from discovery_core.profile import ProfileError, start_assessment, validate_profile
from discovery_core.question_bank import load_bank
from discovery_core.report import generate_from_store
from discovery_core.report_html import export_report_html
from discovery_core.session import ModuleSession
from discovery_core.store import JsonFileStore, ResultStore
from discovery_core.types import Response
def ask(prompt: str, options=None) -> str:
    if options:
        print(prompt)
        for i,opt in enumerate(options): print(f"  [{i}] {opt}")
        while True:
            v = input("Your choice (index): ").strip()
            if v.isdigit() and int(v) < len(options): return v
            print("Enter a number index.")
    else:
        return input(prompt + " ").strip()
def intake(store: ResultStore) -> None:
    while True:
        age = ask("Your age (13-19):")
        email = ask("Parent email (optional, Enter to skip):")
        consent = ask("Do you agree to the terms? [y/N]:").lower().startswith("y")
        try:
            profile = validate_profile(age, parent_email=email, consent=consent)
        except ProfileError as e:
            print(e); continue
        start_assessment(store, profile); return
def run_module(module_id: str, store: ResultStore, bank) -> None:
    sess = ModuleSession(module_id, store, bank=bank, clock=lambda: time.perf_counter() * 1000.0)
    print(f"\n=== Module {sess.module.id}: {sess.module.title} ===")
    if sess.module.description: print(sess.module.description)
    while True:
        item = sess.current_item()
        if item is None: break
        head = f"[{sess.state.item_index + 1}/{sess.total}]"
        if item.kind == "open-ended":
            print(f"{head} {item.title}\n{item.prompt}  ({item.min_words}-{item.max_words} words)")
            resp = Response(item_id=item.id, text=ask(">"))
        else:
            resp = Response(item_id=item.id, option=int(ask(f"{head} {item.prompt}", [o.text for o in item.options])))
        sess.record(resp)
        if not sess.can_advance():
            print(f"Please write at least {item.min_words} words."); continue
        sess.advance()
def main():
    logging.basicConfig(level=logging.DEBUG if os.getenv("DEBUG_TRACE") else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    print("Teen Self-Discovery Assessment")
    root = load_config().get("DATA_DIR") or "data"
    store = ResultStore(JsonFileStore(os.path.join(root, "cli")))
    bank = load_bank()
    progress = store.load_progress()
    if progress.is_complete or not progress.completed or ask("Continue where you left off? [Y/n]:").lower().startswith("n"):
        intake(store); progress = store.load_progress()
    for module_id in MODULE_ORDER:
        if module_id in progress.completed: continue
        run_module(module_id, store, bank)
    report = generate_from_store(store, bank=bank); os.makedirs("reports", exist_ok=True)
    ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    teen = export_report_html(report, os.path.join("reports", f"report_teen_{ts}.html"), view="teen")
    parent = export_report_html(report, os.path.join("reports", f"report_parent_{ts}.html"), view="parent")
    print(f"Done. Reports saved to: {teen} and {parent}")
if __name__ == "__main__": main()
