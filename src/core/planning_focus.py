"""
FILE: src/core/planning_focus.py
Planning Focus Ranker.

score = value weight + goal weight + timing weight + risk weight, over the
applicable planning domains only. Ties resolve by CANONICAL_DOMAIN_ORDER and
priority tiers come from score separation (TierThresholds), not position.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from src.core.common.rules import Condition, Rule, evaluate_rules, fired_effects
from src.core.domain_mappings import (
    CANONICAL_DOMAIN_ORDER,
    DOMAIN_LABELS,
    DOMAIN_ORDER_INDEX,
    GOAL_PRIORITY_POINTS,
    VALUE_CATEGORY_LABELS,
    VALUE_RANK_MULTIPLIERS,
    domains_for_goal,
    domains_for_value,
    mapping_weight,
)
from src.core.models import (
    FocusAreaRanking,
    FocusPriority,
    GoalCategory,
    InsightsOptions,
    PlanningDomain,
    PlanningFocusResult,
    Profile,
    TierThresholds,
)
from src.core.narratives import (
    FOCUS_CONTEXT_PHRASES,
    PRIORITY_WORDS,
    focus_explanation,
    focus_reason,
)
from src.core.profile_facts import (
    FACT_PREDICATES,
    ProfileFacts,
    build_profile_facts,
    coerce_options,
    coerce_profile,
    resolve_as_of,
)

logger = logging.getLogger(__name__)

VALUE_BASE_POINTS = Decimal("2")
NON_NEGOTIABLE_BONUS = Decimal("1")
UNRATED_GOAL_POINTS = Decimal("1")
NEAR_TERM_GOAL_BONUS = Decimal("2")
TOP_PRIORITY_COUNT = 3
CONNECTION_LIMIT = 3
EXPLANATION_REASON_COUNT = 2
_EXPLAINING_KINDS = frozenset({"VALUE", "GOAL", "RISK"})
_SCORE_QUANT = Decimal("0.01")


@dataclass(frozen=True)
class DomainBonus:
    domain: PlanningDomain
    points: Decimal
    kind: str
    reason: str


@dataclass(frozen=True)
class _Contribution:
    kind: str
    points: Decimal
    reason: str
    order: int


D = PlanningDomain

# Conditional domains; a domain missing from this table always applies.
APPLICABILITY_RULES: Mapping[PlanningDomain, Tuple[Rule[PlanningDomain], ...]] = MappingProxyType(
    {
        D.BENEFITS_OPTIMIZATION: (
            Rule("FEDERAL_EMPLOYMENT", (Condition("federal_employee"),), D.BENEFITS_OPTIMIZATION),
            Rule(
                "EMPLOYER_BENEFITS",
                (Condition("has_employer_benefits"),),
                D.BENEFITS_OPTIMIZATION,
            ),
        ),
        D.BUSINESS_CAREER: (
            Rule(
                "CAREER_GOAL",
                (Condition("has_goal_category", GoalCategory.CAREER_GROWTH),),
                D.BUSINESS_CAREER,
            ),
        ),
    }
)

_NEAR = (Condition("near_retirement"),)
_APPROACHING = (Condition("approaching_retirement"), Condition("near_retirement", negate=True))

TIMING_BONUS_RULES: Tuple[Rule[DomainBonus], ...] = (
    Rule(
        "NEAR_RETIREMENT_INCOME",
        _NEAR,
        DomainBonus(D.RETIREMENT_INCOME, Decimal("5"), "TIMING", ""),
    ),
    Rule(
        "NEAR_RETIREMENT_HEALTHCARE",
        _NEAR,
        DomainBonus(D.HEALTHCARE_LTC, Decimal("3"), "TIMING", ""),
    ),
    Rule(
        "NEAR_RETIREMENT_TAX",
        _NEAR,
        DomainBonus(D.TAX_OPTIMIZATION, Decimal("2"), "TIMING", ""),
    ),
    Rule(
        "APPROACHING_RETIREMENT_INCOME",
        _APPROACHING,
        DomainBonus(D.RETIREMENT_INCOME, Decimal("3"), "TIMING", ""),
    ),
    Rule(
        "APPROACHING_RETIREMENT_HEALTHCARE",
        _APPROACHING,
        DomainBonus(D.HEALTHCARE_LTC, Decimal("1"), "TIMING", ""),
    ),
)

CONTEXT_BONUS_RULES: Tuple[Rule[DomainBonus], ...] = (
    Rule(
        "PARTNERED_ESTATE",
        (Condition("partnered"),),
        DomainBonus(D.ESTATE_LEGACY, Decimal("1"), "CONTEXT", FOCUS_CONTEXT_PHRASES["PARTNERED"]),
    ),
)


def applicable_domains(facts: ProfileFacts) -> Tuple[List[PlanningDomain], List[PlanningDomain]]:
    applicable: List[PlanningDomain] = []
    excluded: List[PlanningDomain] = []
    for domain in CANONICAL_DOMAIN_ORDER:
        rules = APPLICABILITY_RULES.get(domain)
        if rules is None or evaluate_rules(rules, facts, FACT_PREDICATES):
            applicable.append(domain)
        else:
            excluded.append(domain)
    return applicable, excluded


def priority_tier(score: Decimal, top_score: Decimal, thresholds: TierThresholds) -> FocusPriority:
    gap = top_score - score
    if score >= thresholds.critical_floor and gap <= thresholds.critical_margin:
        return "CRITICAL"
    if score >= thresholds.high_floor and gap <= thresholds.high_margin:
        return "HIGH"
    if score >= thresholds.moderate_floor:
        return "MODERATE"
    return "LOW"


class _DomainLedger:
    def __init__(self) -> None:
        self.contributions: List[_Contribution] = []
        self.value_connections: List[str] = []
        self.goal_connections: List[str] = []
        self.risk_factors: List[str] = []

    def add(self, kind: str, points: Decimal, reason: str) -> None:
        if points <= 0:
            return
        self.contributions.append(_Contribution(kind, points, reason, len(self.contributions)))

    @property
    def score(self) -> Decimal:
        return sum((item.points for item in self.contributions), Decimal("0"))

    def reasons(self) -> List[str]:
        best_by_kind: Dict[str, _Contribution] = {}
        for item in sorted(self.contributions, key=lambda item: (-item.points, item.order)):
            best_by_kind.setdefault(item.kind, item)
        # value, goal and risk contributors explain first; timing and context fill in
        primary = [item for kind, item in best_by_kind.items() if kind in _EXPLAINING_KINDS]
        secondary = [item for kind, item in best_by_kind.items() if kind not in _EXPLAINING_KINDS]
        chosen = (primary + secondary)[:EXPLANATION_REASON_COUNT]
        return [item.reason for item in sorted(chosen, key=lambda item: (-item.points, item.order))]


def _add_unique(items: List[str], item: str) -> None:
    if item not in items and len(items) < CONNECTION_LIMIT:
        items.append(item)


def _lower_first(text: str) -> str:
    return text[:1].lower() + text[1:] if text else text


def _collect_contributions(
    facts: ProfileFacts, domains: List[PlanningDomain]
) -> Dict[PlanningDomain, _DomainLedger]:
    ledgers = {domain: _DomainLedger() for domain in domains}

    for position, value in enumerate(facts.top_values):
        multiplier = VALUE_RANK_MULTIPLIERS[position]
        non_negotiable = facts.is_non_negotiable(value)
        reason = focus_reason(
            "VALUE_NON_NEGOTIABLE" if non_negotiable else "VALUE",
            value=value.title,
            category=VALUE_CATEGORY_LABELS[value.category],
        )
        for index, domain in enumerate(domains_for_value(value.category)):
            ledger = ledgers.get(domain)
            if ledger is None:
                continue
            weight = mapping_weight(index)
            points = VALUE_BASE_POINTS * multiplier * weight
            if non_negotiable:
                points += NON_NEGOTIABLE_BONUS * weight
            ledger.add("VALUE", points, reason)
            _add_unique(ledger.value_connections, value.title)

    for goal in facts.goals:
        base = (
            GOAL_PRIORITY_POINTS[goal.priority]
            if goal.priority is not None
            else UNRATED_GOAL_POINTS
        )
        near_term = goal.time_horizon == "SHORT" and goal.priority in {"HIGH", "MEDIUM"}
        goal_reason = focus_reason(
            "GOAL",
            priority=PRIORITY_WORDS.get(goal.priority or "NA", "unrated"),
            goal=goal.label,
        )
        timing_reason = focus_reason("TIMING_GOAL", goal=goal.label)
        for index, domain in enumerate(domains_for_goal(goal.category)):
            ledger = ledgers.get(domain)
            if ledger is None or base <= 0:
                continue
            weight = mapping_weight(index)
            ledger.add("GOAL", base * weight, goal_reason)
            if near_term:
                ledger.add("TIMING", NEAR_TERM_GOAL_BONUS * weight, timing_reason)
            _add_unique(ledger.goal_connections, goal.label)

    for bonus in fired_effects(TIMING_BONUS_RULES, facts, FACT_PREDICATES):
        ledger = ledgers.get(bonus.domain)
        if ledger is not None:
            reason = focus_reason("TIMING_RETIREMENT", years=facts.years_to_retirement)
            ledger.add(bonus.kind, bonus.points, reason)

    for bonus in fired_effects(CONTEXT_BONUS_RULES, facts, FACT_PREDICATES):
        ledger = ledgers.get(bonus.domain)
        if ledger is not None:
            ledger.add(bonus.kind, bonus.points, focus_reason("CONTEXT", context=bonus.reason))

    for flag in facts.risk_flags:
        ledger = ledgers.get(flag.domain)
        if ledger is None:
            continue
        ledger.add("RISK", flag.bonus, focus_reason("RISK", risk=_lower_first(flag.label)))
        _add_unique(ledger.risk_factors, flag.label)

    return ledgers


def rank_facts(facts: ProfileFacts, *, generated_at: str) -> PlanningFocusResult:
    domains, excluded = applicable_domains(facts)
    ledgers = _collect_contributions(facts, domains)
    scores = {domain: ledgers[domain].score.quantize(_SCORE_QUANT) for domain in domains}
    ordered = sorted(domains, key=lambda domain: (-scores[domain], DOMAIN_ORDER_INDEX[domain]))
    top_score = scores[ordered[0]] if ordered else Decimal("0")
    thresholds = facts.options.tier_thresholds

    rankings: List[FocusAreaRanking] = []
    for position, domain in enumerate(ordered, start=1):
        ledger = ledgers[domain]
        rankings.append(
            FocusAreaRanking(
                domain=domain,
                priority=priority_tier(scores[domain], top_score, thresholds),
                rank=position,
                explanation=focus_explanation(DOMAIN_LABELS[domain], ledger.reasons()),
                value_connections=list(ledger.value_connections),
                goal_connections=list(ledger.goal_connections),
                risk_factors=list(ledger.risk_factors),
                score=scores[domain],
            )
        )

    top_priorities = [item.domain for item in rankings if item.score > 0][:TOP_PRIORITY_COUNT]
    logger.debug(
        "Planning focus ranked. scores=%s excluded=%s",
        {domain.value: str(scores[domain]) for domain in ordered},
        [domain.value for domain in excluded],
    )
    return PlanningFocusResult(
        rankings=rankings,
        top_priorities=top_priorities,
        excluded_domains=excluded,
        generated_at=generated_at,
    )


def rank_planning_focus(
    profile: Profile | Dict[str, Any],
    options: Optional[InsightsOptions | Dict[str, Any]] = None,
    *,
    as_of: Optional[datetime] = None,
) -> PlanningFocusResult:
    resolved_profile = coerce_profile(profile)
    resolved_options = coerce_options(options)
    moment = resolve_as_of(as_of)
    facts = build_profile_facts(resolved_profile, resolved_options, as_of=moment)
    return rank_facts(facts, generated_at=moment.isoformat())
