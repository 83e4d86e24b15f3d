from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Literal

from .config import MODULE_ORDER

Domain = Literal["A", "C", "S", "P"]
ModuleKind = Literal["forced-choice", "timed-choice", "open-ended", "friction"]
ResultType = Literal["interest", "strength", "skill", "comfort"]
SkillTier = Literal["explore", "develop", "advanced"]

RESULT_TYPE_BY_KIND: Dict[str, str] = {
    "forced-choice": "interest",
    "timed-choice": "strength",
    "open-ended": "skill",
    "friction": "comfort",
}

@dataclass
class Option:
    text: str
    domain: Optional[str] = None
    correct: bool = False
    friction: Optional[str] = None
    score: int = 0

@dataclass
class Item:
    id: str; kind: str; prompt: str
    options: List[Option] = field(default_factory=list)
    title: Optional[str] = None
    domain: Optional[str] = None
    min_words: int = 0
    max_words: int = 0

@dataclass
class ModuleDef:
    id: str; kind: str; title: str
    items: List[Item] = field(default_factory=list)
    subtitle: str = ""
    description: str = ""

    @property
    def result_type(self) -> str:
        return RESULT_TYPE_BY_KIND[self.kind]

    def item(self, item_id: str) -> Optional[Item]:
        for it in self.items:
            if it.id == item_id:
                return it
        return None

@dataclass
class CareerCluster:
    id: str; name: str
    domains: List[str]
    description: str = ""
    careers: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def primary_domain(self) -> str:
        return self.domains[0]

@dataclass
class Bank:
    version: str
    modules: Dict[str, ModuleDef]
    clusters: List[CareerCluster]
    domain_labels: Dict[str, str] = field(default_factory=dict)

@dataclass
class Response:
    item_id: str
    option: Optional[int] = None
    text: Optional[str] = None
    elapsed_ms: Optional[float] = None

@dataclass
class ModuleResult:
    type: str
    scores: Dict[str, float]
    score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type, "scores": dict(self.scores)}
        if self.score is not None:
            out["score"] = self.score
        return out

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ModuleResult":
        scores = {str(k): float(v) for k, v in dict(raw["scores"]).items()}
        score = raw.get("score")
        return cls(type=str(raw["type"]), scores=scores, score=None if score is None else float(score))

@dataclass
class Progress:
    current_module: str = "A"
    completed: List[str] = field(default_factory=list)
    is_complete: bool = False
    completed_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentModule": self.current_module,
            "completed": list(self.completed),
            "isComplete": self.is_complete,
            "completedAt": self.completed_at,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Progress":
        current = raw.get("currentModule", "A")
        if current not in MODULE_ORDER:
            raise ValueError(f"unknown current module {current!r}")
        entries = raw.get("completed", [])
        if not isinstance(entries, list):
            raise ValueError("completed must be a list")
        completed: List[str] = []
        for mid in entries:
            if mid not in MODULE_ORDER:
                raise ValueError(f"unknown completed module {mid!r}")
            if mid not in completed:
                completed.append(mid)
        is_complete = raw.get("isComplete", False)
        if not isinstance(is_complete, bool):
            raise ValueError("isComplete must be a boolean")
        completed_at = raw.get("completedAt")
        if completed_at is not None and not isinstance(completed_at, str):
            raise ValueError("completedAt must be a string")
        return cls(
            current_module=current,
            completed=completed,
            is_complete=is_complete,
            completed_at=completed_at,
        )

@dataclass
class DomainScores:
    interest: float = 0.0
    strength: float = 0.0
    skill: float = 0.0
    comfort: float = 0.0

    def total(self) -> float:
        # comfort stays out of the ranking total
        return self.interest + self.strength + self.skill

@dataclass
class BurnoutRisk:
    domain: str; domain_name: str; strength: float; comfort: float

@dataclass
class ClusterMatch:
    id: str; name: str
    domains: List[str]
    description: str
    skill_level: str
    opportunities: List[str]

@dataclass
class Report:
    profile: Dict[str, Any]
    scores: Dict[str, DomainScores]
    sorted_domains: List[str]
    primary_domain: str
    secondary_domain: Optional[str]
    clusters: List[ClusterMatch]
    burnout_risks: List[BurnoutRisk]
    generated_at: str
    completed_modules: List[str] = field(default_factory=list)
    is_complete: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation shared by both report views."""

        return {
            "profile": self.profile,
            "scores": {d: vars(s).copy() for d, s in self.scores.items()},
            "sortedDomains": list(self.sorted_domains),
            "primaryDomain": self.primary_domain,
            "secondaryDomain": self.secondary_domain,
            "clusters": [
                {
                    "id": c.id,
                    "name": c.name,
                    "domains": list(c.domains),
                    "description": c.description,
                    "skillLevel": c.skill_level,
                    "opportunities": list(c.opportunities),
                }
                for c in self.clusters
            ],
            "burnoutRisks": [
                {"domain": r.domain, "domainName": r.domain_name, "strength": r.strength, "comfort": r.comfort}
                for r in self.burnout_risks
            ],
            "generatedAt": self.generated_at,
            "completedModules": list(self.completed_modules),
            "isComplete": self.is_complete,
        }
