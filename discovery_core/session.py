# discovery_core/session.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Dict, Optional
import logging, time

from .question_bank import get_module, next_module
from .scoring import score_module, word_count
from .store import ResultStore
from .types import Bank, Item, ModuleDef, ModuleResult, Response


log = logging.getLogger(__name__)


class InvalidTransition(RuntimeError):
    """Raised when the runner is driven outside its state machine."""


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class SessionState:
    module_id: str
    item_index: int = 0
    responses: Dict[str, Response] = field(default_factory=dict)
    shown_at: Dict[str, float] = field(default_factory=dict)
    complete: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "module_id": self.module_id,
            "item_index": self.item_index,
            "responses": {k: vars(v).copy() for k, v in self.responses.items()},
            "shown_at": dict(self.shown_at),
            "complete": self.complete,
        }


class ModuleSession:
    """Walks one module item by item and persists its result on the last step."""

    def __init__(
        self,
        module_id: str,
        store: ResultStore,
        bank: Optional[Bank] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.module: ModuleDef = get_module(module_id, bank)
        self.store = store
        self.clock = clock or _monotonic_ms
        self.state = SessionState(module_id=self.module.id)
        self.result: Optional[ModuleResult] = None

    @property
    def total(self) -> int:
        return len(self.module.items)

    @property
    def timed(self) -> bool:
        return self.module.kind == "timed-choice"

    def _stamp(self, item: Item) -> None:
        if self.timed and item.id not in self.state.shown_at:
            self.state.shown_at[item.id] = self.clock()

    def _require_open(self) -> None:
        if self.state.complete:
            raise InvalidTransition(f"module {self.module.id} is already complete")

    def current_item(self) -> Optional[Item]:
        if self.state.complete or self.state.item_index >= self.total:
            return None
        item = self.module.items[self.state.item_index]
        self._stamp(item)
        return item

    def progress_fraction(self) -> float:
        if self.total == 0:
            return 1.0
        return min(self.state.item_index + 1, self.total) / self.total

    def record(self, response: Response) -> None:
        self._require_open()
        item = self.current_item()
        if item is None:
            raise InvalidTransition(f"module {self.module.id} has no item to answer")
        if response.item_id != item.id:
            raise InvalidTransition(f"response for {response.item_id!r} while showing {item.id!r}")
        if self.timed and response.elapsed_ms is None:
            response = replace(response, elapsed_ms=self.clock() - self.state.shown_at[item.id])
        self.state.responses[item.id] = response

    def can_advance(self) -> bool:
        if self.state.complete or self.state.item_index >= self.total:
            return False
        item = self.module.items[self.state.item_index]
        resp = self.state.responses.get(item.id)
        if resp is None:
            return False
        if self.module.kind == "open-ended":
            return word_count(resp.text) >= item.min_words
        return resp.option is not None and 0 <= int(resp.option) < len(item.options)

    def advance(self, response: Optional[Response] = None) -> Optional[ModuleResult]:
        """Accept the current item and move on; returns the result after the last item."""

        self._require_open()
        if response is not None:
            self.record(response)
        if not self.can_advance():
            raise InvalidTransition(f"module {self.module.id} item {self.state.item_index + 1} is not answered")
        if self.state.item_index < self.total - 1:
            self.state.item_index += 1
            return None
        return self.complete()

    def complete(self) -> ModuleResult:
        self._require_open()
        if not self.can_advance():
            raise InvalidTransition(f"module {self.module.id} cannot complete before its last item is answered")
        if self.state.item_index != self.total - 1:
            raise InvalidTransition(f"module {self.module.id} cannot complete at item {self.state.item_index + 1} of {self.total}")

        result = score_module(self.module, self.state.responses)
        self.store.save_result(self.module.id, result)

        progress = self.store.load_progress()
        if self.module.id not in progress.completed:
            progress.completed.append(self.module.id)
        nxt = next_module(self.module.id)
        if nxt is not None:
            progress.current_module = nxt
        else:
            progress.is_complete = True
            progress.completed_at = utcnow_iso()
        self.store.save_progress(progress)

        self.state.complete = True
        self.result = result
        log.info(
            "module complete module=%s type=%s next=%s completed=%s",
            self.module.id,
            result.type,
            nxt,
            progress.completed,
        )
        return result
