# discovery_core/report.py
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional
import logging

from .config import (
    BURNOUT_STRENGTH_MIN,
    BURNOUT_COMFORT_MAX,
    CLUSTER_INTEREST_MIN,
    CLUSTER_STRENGTH_MIN,
    CLUSTER_COMFORT_MIN,
    CLUSTER_LIMIT,
    TIER_ADVANCED_MIN,
    TIER_DEVELOP_MIN,
    MODULE_ORDER,
)
from .question_bank import DOMAINS, DOMAIN_LABELS, load_bank
from .store import ResultStore
from .types import Bank, BurnoutRisk, ClusterMatch, DomainScores, ModuleResult, Report

log = logging.getLogger(__name__)

# module id -> DomainScores attribute it fills
_COLUMN_BY_MODULE = {"A": "interest", "B": "strength", "C": "skill", "D": "comfort"}


def build_profile(results: Mapping[str, ModuleResult]) -> Dict[str, DomainScores]:
    profile = {d: DomainScores() for d in DOMAINS}
    for module_id, column in _COLUMN_BY_MODULE.items():
        res = results.get(module_id)
        if res is None:
            continue
        for d in DOMAINS:
            setattr(profile[d], column, float(res.scores.get(d, 0) or 0))
    return profile


def rank_domains(profile: Mapping[str, DomainScores]) -> List[str]:
    # sorted() is stable, so equal totals keep A, C, S, P order
    return sorted(DOMAINS, key=lambda d: profile[d].total(), reverse=True)


def burnout_risks(profile: Mapping[str, DomainScores], labels: Optional[Mapping[str, str]] = None) -> List[BurnoutRisk]:
    names = labels or DOMAIN_LABELS
    out: List[BurnoutRisk] = []
    for d in DOMAINS:
        s = profile[d]
        if s.strength >= BURNOUT_STRENGTH_MIN and s.comfort <= BURNOUT_COMFORT_MAX:
            out.append(BurnoutRisk(domain=d, domain_name=names.get(d, d), strength=s.strength, comfort=s.comfort))
    return out


def skill_tier(skill: float) -> str:
    if skill >= TIER_ADVANCED_MIN:
        return "advanced"
    if skill >= TIER_DEVELOP_MIN:
        return "develop"
    return "explore"


def eligible_clusters(profile: Mapping[str, DomainScores], bank: Bank) -> List[ClusterMatch]:
    """First eligible clusters in catalog order, capped at ``CLUSTER_LIMIT``."""

    out: List[ClusterMatch] = []
    for cluster in bank.clusters:
        s = profile.get(cluster.primary_domain)
        if s is None:
            continue
        if (
            s.interest >= CLUSTER_INTEREST_MIN
            and s.strength >= CLUSTER_STRENGTH_MIN
            and s.comfort >= CLUSTER_COMFORT_MIN
        ):
            tier = skill_tier(s.skill)
            out.append(
                ClusterMatch(
                    id=cluster.id,
                    name=cluster.name,
                    domains=list(cluster.domains),
                    description=cluster.description,
                    skill_level=tier,
                    opportunities=list(cluster.careers.get(tier, [])),
                )
            )
    return out[:CLUSTER_LIMIT]


def generate_report(
    results: Mapping[str, ModuleResult],
    profile_meta: Optional[Dict[str, Any]] = None,
    bank: Optional[Bank] = None,
    now: Optional[datetime] = None,
) -> Report:
    b = bank or load_bank()
    profile = build_profile(results)
    ranked = rank_domains(profile)
    completed = [m for m in MODULE_ORDER if m in results]
    report = Report(
        profile=profile_meta if profile_meta is not None else {},
        scores=profile,
        sorted_domains=ranked,
        primary_domain=ranked[0],
        secondary_domain=ranked[1] if len(ranked) > 1 else None,
        clusters=eligible_clusters(profile, b),
        burnout_risks=burnout_risks(profile, b.domain_labels),
        generated_at=(now or datetime.now(timezone.utc)).isoformat(),
        completed_modules=completed,
        is_complete=len(completed) == len(MODULE_ORDER),
    )
    log.debug(
        "report primary=%s secondary=%s clusters=%s risks=%s complete=%s",
        report.primary_domain,
        report.secondary_domain,
        [c.id for c in report.clusters],
        [r.domain for r in report.burnout_risks],
        report.is_complete,
    )
    return report


def generate_from_store(store: ResultStore, bank: Optional[Bank] = None, now: Optional[datetime] = None) -> Report:
    return generate_report(store.load_results(), store.load_profile(), bank=bank, now=now)
