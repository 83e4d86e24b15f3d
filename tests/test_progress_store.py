from __future__ import annotations

import json

import pytest

from discovery_core.store import (
    PROFILE_KEY,
    PROGRESS_KEY,
    RESULTS_KEY,
    JsonFileStore,
    MemoryStore,
    ResultStore,
)
from discovery_core.types import ModuleResult, Progress

from tests.conftest import pick_domain, run_module


def test_missing_records_read_as_fresh_state():
    store = ResultStore(MemoryStore())
    assert store.load_results() == {}
    assert store.load_profile() == {}
    progress = store.load_progress()
    assert progress == Progress()
    assert progress.current_module == "A"


def test_corrupt_records_fall_back_to_defaults():
    kv = MemoryStore({RESULTS_KEY: "{not json", PROGRESS_KEY: "[1, 2", PROFILE_KEY: "42"})
    store = ResultStore(kv)
    assert store.load_results() == {}
    assert store.load_progress() == Progress()
    assert store.load_profile() == {}


def test_malformed_result_entries_are_skipped():
    kv = MemoryStore(
        {
            RESULTS_KEY: json.dumps(
                {
                    "A": {"type": "interest", "scores": {"A": 2, "C": 0, "S": 0, "P": 0}},
                    "B": {"scores": {"A": 1}},
                    "C": "nope",
                }
            )
        }
    )
    results = ResultStore(kv).load_results()
    assert list(results) == ["A"]
    assert results["A"].scores["A"] == 2.0


def test_progress_record_uses_camel_case_keys():
    kv = MemoryStore()
    store = ResultStore(kv)
    store.save_progress(Progress(current_module="C", completed=["A", "B"]))

    raw = json.loads(kv.data[PROGRESS_KEY])
    assert raw == {"currentModule": "C", "completed": ["A", "B"], "isComplete": False, "completedAt": None}


def test_duplicate_completed_entries_collapse_on_read():
    kv = MemoryStore({PROGRESS_KEY: json.dumps({"currentModule": "B", "completed": ["A", "A"]})})
    assert ResultStore(kv).load_progress().completed == ["A"]


def test_save_result_merges_with_existing():
    store = ResultStore(MemoryStore())
    store.save_result("A", ModuleResult(type="interest", scores={"A": 4, "C": 6, "S": 0, "P": 0}))
    store.save_result("D", ModuleResult(type="comfort", scores={"A": 8, "C": 8, "S": 8, "P": 8}, score=8))

    results = store.load_results()
    assert set(results) == {"A", "D"}
    assert results["D"].score == 8.0


def test_reset_keeps_profile():
    store = ResultStore(MemoryStore())
    store.save_profile({"age": 15})
    store.save_result("A", ModuleResult(type="interest", scores={"A": 2}))
    store.save_progress(Progress(current_module="B", completed=["A"]))

    store.reset()

    assert store.load_results() == {}
    assert store.load_progress() == Progress()
    assert store.load_profile() == {"age": 15}


def test_json_file_store_round_trip(tmp_path):
    root = tmp_path / "user"
    store = ResultStore(JsonFileStore(root))
    store.save_progress(Progress(current_module="B", completed=["A"]))
    store.save_result("A", ModuleResult(type="interest", scores={"A": 10, "C": 0, "S": 0, "P": 0}))

    assert (root / f"{PROGRESS_KEY}.json").exists()
    assert not list(root.glob("*.tmp"))

    again = ResultStore(JsonFileStore(root))
    assert again.load_progress().completed == ["A"]
    assert again.load_results()["A"].scores["A"] == 10.0

    again.reset()
    assert not (root / f"{RESULTS_KEY}.json").exists()
    assert again.load_progress() == Progress()


def test_json_file_store_ignores_corrupt_file(tmp_path):
    (tmp_path / f"{PROGRESS_KEY}.json").write_text("garbage", encoding="utf-8")
    store = ResultStore(JsonFileStore(tmp_path))
    assert store.load_progress() == Progress()


def test_json_file_store_ignores_undecodable_bytes(tmp_path):
    (tmp_path / f"{PROGRESS_KEY}.json").write_bytes(b"\xff\xfe{garbage")
    (tmp_path / f"{RESULTS_KEY}.json").write_bytes(b"\xff\xfe{garbage")
    store = ResultStore(JsonFileStore(tmp_path))
    assert store.load_progress() == Progress()
    assert store.load_results() == {}


def test_completing_module_over_undecodable_progress_keeps_records_in_step(tmp_path, synthetic_bank):
    (tmp_path / f"{PROGRESS_KEY}.json").write_bytes(b"\xff\xfe{garbage")
    store = ResultStore(JsonFileStore(tmp_path))

    run_module("A", store, synthetic_bank, pick_domain("C"))

    assert list(store.load_results()) == ["A"]
    assert store.load_progress().completed == ["A"]


@pytest.mark.parametrize(
    "record",
    [
        {"currentModule": "Z", "completed": [], "isComplete": False},
        {"currentModule": "B", "completed": ["Q"], "isComplete": False},
        {"currentModule": "B", "completed": ["A"], "isComplete": "false"},
        {"currentModule": "B", "completed": "A", "isComplete": False},
        {"currentModule": "D", "completed": ["A", "B", "C", "D"], "isComplete": True, "completedAt": 17},
    ],
)
def test_invalid_progress_fields_read_as_fresh_state(record):
    kv = MemoryStore({PROGRESS_KEY: json.dumps(record)})
    assert ResultStore(kv).load_progress() == Progress()


def test_valid_progress_record_is_kept():
    record = {"currentModule": "D", "completed": ["A", "B", "C", "D"], "isComplete": True, "completedAt": "2026-01-01T00:00:00+00:00"}
    progress = ResultStore(MemoryStore({PROGRESS_KEY: json.dumps(record)})).load_progress()
    assert progress.is_complete is True
    assert progress.completed == ["A", "B", "C", "D"]
