from __future__ import annotations
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import logging, time, uuid, typing as t

# ---- Engine imports ----
from discovery_core.config import SESSION_IDLE_TTL_SEC
from discovery_core.profile import ProfileError, start_assessment, validate_profile
from discovery_core.question_bank import load_bank
from discovery_core.report import generate_from_store
from discovery_core.report_html import VIEWS, render
from discovery_core.session import InvalidTransition, ModuleSession, utcnow_iso
from discovery_core.types import Item, Response
from .storage import store_for

log = logging.getLogger(__name__)

BANK = load_bank()

SESS: dict[str, ModuleSession] = {}
SESSION_INFO: dict[str, dict[str, t.Any]] = {}

app = FastAPI(title="Teen Discovery API")


@app.get("/")
def root():
    return {"status": "ok", "service": "teen-discovery-api"}


ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8081",  # expo dev
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class ProfileReq(BaseModel):
    age: int | str
    consent: bool = False
    parent_email: str | None = None
    name: str | None = None

class AnswerReq(BaseModel):
    item_id: str | None = None
    option: int | None = None
    text: str | None = None
    elapsed_ms: float | None = None

# ---- Helpers ----
def _serialize_item(sess: ModuleSession, it: Item | None):
    if it is None: return None
    out: dict[str, t.Any] = {
        "id": it.id,
        "kind": it.kind,
        "prompt": it.prompt,
        "index": sess.state.item_index,
        "total": sess.total,
        "progress": round(sess.progress_fraction(), 4),
    }
    if it.kind == "open-ended":
        out.update({"title": it.title, "min_words": it.min_words, "max_words": it.max_words})
    else:
        # domains and answer keys stay server-side
        out["options"] = [opt.text for opt in it.options]
    return out


def _prune_sessions(now: float | None = None) -> None:
    # idle = no request within SESSION_IDLE_TTL_SEC
    now = time.monotonic() if now is None else now
    stale = [s for s, info in SESSION_INFO.items() if now - info.get("touched", now) > SESSION_IDLE_TTL_SEC]
    for sid in stale:
        _drop_session(sid)
    if stale:
        log.info("dropped %d idle sessions", len(stale))


def _session(sid: str) -> ModuleSession:
    _prune_sessions()
    sess = SESS.get(sid)
    if not sess:
        raise HTTPException(404, "session not found")
    SESSION_INFO[sid]["touched"] = time.monotonic()
    return sess


def _drop_session(sid: str) -> None:
    SESS.pop(sid, None)
    SESSION_INFO.pop(sid, None)


def _drop_user_sessions(user_id: str) -> None:
    for sid in [s for s, info in SESSION_INFO.items() if info.get("user_id") == user_id]:
        _drop_session(sid)

# ---- Health ----
@app.get("/health")
def health():
    return {
        "bank_version": BANK.version,
        "modules": sorted(BANK.modules),
        "active_sessions": len(SESS),
    }

# ---- Assessment lifecycle ----
@app.post("/users/{user_id}/assessment/start")
def start_user_assessment(user_id: str, req: ProfileReq):
    try:
        profile = validate_profile(req.age, parent_email=req.parent_email, consent=req.consent, name=req.name)
    except ProfileError as e:
        raise HTTPException(422, str(e))
    _drop_user_sessions(user_id)
    progress = start_assessment(store_for(user_id), profile)
    return {"profile": profile, "progress": progress.to_dict()}


@app.get("/users/{user_id}/assessment/progress")
def get_progress(user_id: str):
    store = store_for(user_id)
    return {"progress": store.load_progress().to_dict(), "profile": store.load_profile()}


@app.delete("/users/{user_id}/assessment")
def reset_assessment(user_id: str):
    _drop_user_sessions(user_id)
    store_for(user_id).reset()
    return {"ok": True}

# ---- Module sessions ----
@app.post("/users/{user_id}/modules/{module_id}/session")
def start_module(user_id: str, module_id: str):
    _prune_sessions()
    try:
        sess = ModuleSession(module_id, store_for(user_id), bank=BANK)
    except KeyError:
        raise HTTPException(404, "module not found")
    sid = str(uuid.uuid4())
    SESS[sid] = sess
    SESSION_INFO[sid] = {
        "user_id": user_id,
        "module_id": sess.module.id,
        "started_at": utcnow_iso(),
        "touched": time.monotonic(),
    }
    log.info("module session started sid=%s user=%s module=%s", sid, user_id, sess.module.id)
    return {
        "session_id": sid,
        "module": {
            "id": sess.module.id,
            "kind": sess.module.kind,
            "title": sess.module.title,
            "subtitle": sess.module.subtitle,
            "description": sess.module.description,
        },
        "item": _serialize_item(sess, sess.current_item()),
    }


@app.get("/session/{sid}/item")
def get_item(sid: str):
    sess = _session(sid)
    return {"item": _serialize_item(sess, sess.current_item()), "done": sess.state.complete}


@app.post("/session/{sid}/answer")
def answer(sid: str, req: AnswerReq):
    sess = _session(sid)
    item = sess.current_item()
    if item is None:
        raise HTTPException(409, "module already complete")
    resp = Response(item_id=req.item_id or item.id, option=req.option, text=req.text, elapsed_ms=req.elapsed_ms)
    try:
        sess.record(resp)
        if not sess.can_advance():
            # keep the draft; the client stays on this item
            return {"done": False, "item": _serialize_item(sess, item), "can_advance": False}
        result = sess.advance()
    except InvalidTransition as e:
        raise HTTPException(409, str(e))

    if result is None:
        nxt = sess.current_item()
        return {"done": False, "item": _serialize_item(sess, nxt), "can_advance": sess.can_advance()}

    _drop_session(sid)
    return {"done": True, "item": None, "can_advance": False, "result": result.to_dict()}

# ---- Reports ----
@app.get("/users/{user_id}/report")
def get_report(user_id: str):
    return generate_from_store(store_for(user_id), bank=BANK).to_dict()


@app.get("/users/{user_id}/report/html", response_class=HTMLResponse)
def get_report_html(user_id: str, view: str = Query("teen", description="teen | parent")):
    if view not in VIEWS:
        raise HTTPException(422, f"unknown view {view!r}")
    report = generate_from_store(store_for(user_id), bank=BANK)
    return HTMLResponse(render(report, view))
