"""
FILE: src/core/action_recommendations.py
Action Recommendation Generator.

Templates qualify per applicable domain (conditions, rank gate, and at least
one value/goal/risk connection). Selection is round-robin across domains in
focus-rank order up to `max_actions`; a selected action pulls its qualifying
dependencies in first. The rank gate is relaxed when fewer than
`min_actions` qualify. Actions are never invented to reach the floor.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Deque, Dict, List, Mapping, Optional, Tuple

from src.core.action_templates import ActionTemplate, template_order, templates_for_domain
from src.core.common.action_dependencies import (
    dependency_closure,
    link_action_dependencies,
    order_by_dependencies,
)
from src.core.common.rules import check_condition, conditions_hold
from src.core.domain_mappings import (
    GOAL_PRIORITY_POINTS,
    domains_for_goal,
    domains_for_value,
)
from src.core.models import (
    ActionRecommendation,
    ActionRecommendations,
    ActionUrgency,
    FinancialGoal,
    FocusAreaRanking,
    InsightsOptions,
    PlanningDomain,
    PlanningFocusResult,
    Profile,
    RankedValue,
)
from src.core.narratives import action_what, action_why, years_phrase
from src.core.profile_facts import (
    FACT_PREDICATES,
    ProfileFacts,
    RiskFlag,
    build_profile_facts,
    coerce_options,
    coerce_profile,
    resolve_as_of,
)

logger = logging.getLogger(__name__)

URGENCY_ORDER: Mapping[str, int] = {
    "IMMEDIATE": 0,
    "NEAR_TERM": 1,
    "MEDIUM_TERM": 2,
    "ONGOING": 3,
}
TOP_ACTION_COUNT = 5
TOP_ACTION_URGENCIES = frozenset({"IMMEDIATE", "NEAR_TERM"})
RETIREMENT_TIMED_DOMAINS = frozenset(
    {
        PlanningDomain.RETIREMENT_INCOME,
        PlanningDomain.HEALTHCARE_LTC,
        PlanningDomain.TAX_OPTIMIZATION,
    }
)
_UNRATED_GOAL_POINTS = Decimal("1")


@dataclass(frozen=True)
class _DomainConnection:
    ranking: FocusAreaRanking
    best_value: Optional[RankedValue]
    best_goal: Optional[FinancialGoal]
    risk_flags: Tuple[RiskFlag, ...]
    has_short_goal: bool
    non_negotiable: bool

    @property
    def connected(self) -> bool:
        return bool(
            self.ranking.value_connections
            or self.ranking.goal_connections
            or self.ranking.risk_factors
        )


@dataclass(frozen=True)
class _Candidate:
    template: ActionTemplate
    connection: _DomainConnection
    urgency: ActionUrgency
    addressed: Tuple[RiskFlag, ...]
    effective_urgency: int = 0

    @property
    def id(self) -> str:
        return self.template.id

    def sort_key(self) -> Tuple[int, int, int, int, int, int]:
        return (
            self.effective_urgency,
            0 if self.connection.non_negotiable else 1,
            self.connection.ranking.rank,
            0 if self.addressed else 1,
            URGENCY_ORDER[self.urgency],
            template_order(self.template.id),
        )


def _raise_urgency(current: ActionUrgency, floor: ActionUrgency) -> ActionUrgency:
    return floor if URGENCY_ORDER[floor] < URGENCY_ORDER[current] else current


def _goal_points(goal: FinancialGoal) -> Decimal:
    if goal.priority is None:
        return _UNRATED_GOAL_POINTS
    return GOAL_PRIORITY_POINTS[goal.priority]


def _connection_for(facts: ProfileFacts, ranking: FocusAreaRanking) -> _DomainConnection:
    domain = ranking.domain
    values = [value for value in facts.top_values if domain in domains_for_value(value.category)]
    goals = [
        (index, goal)
        for index, goal in enumerate(facts.goals)
        if domain in domains_for_goal(goal.category) and goal.priority != "NA"
    ]
    best_goal = (
        min(goals, key=lambda item: (-_goal_points(item[1]), item[0]))[1] if goals else None
    )
    return _DomainConnection(
        ranking=ranking,
        best_value=values[0] if values else None,
        best_goal=best_goal,
        risk_flags=facts.risk_flags_for(domain),
        has_short_goal=any(goal.time_horizon == "SHORT" for _, goal in goals),
        non_negotiable=any(facts.is_non_negotiable(value) for value in values),
    )


def _template_applies(template: ActionTemplate, facts: ProfileFacts) -> bool:
    if not conditions_hold(template.when, facts, FACT_PREDICATES):
        return False
    if template.when_any:
        return any(
            check_condition(condition, facts, FACT_PREDICATES) for condition in template.when_any
        )
    return True


def _assign_urgency(
    template: ActionTemplate,
    facts: ProfileFacts,
    connection: _DomainConnection,
    addressed: Tuple[RiskFlag, ...],
) -> ActionUrgency:
    urgency: ActionUrgency = template.urgency
    if template.domain in RETIREMENT_TIMED_DOMAINS:
        if facts.near_retirement:
            urgency = _raise_urgency(urgency, "NEAR_TERM")
        elif facts.approaching_retirement:
            urgency = _raise_urgency(urgency, "MEDIUM_TERM")
    if connection.has_short_goal:
        urgency = _raise_urgency(urgency, "NEAR_TERM")
    if addressed:
        if connection.ranking.priority == "CRITICAL":
            urgency = "IMMEDIATE"
        elif connection.ranking.priority == "HIGH":
            urgency = _raise_urgency(urgency, "NEAR_TERM")
    return urgency


def _build_candidates(
    facts: ProfileFacts, focus: PlanningFocusResult, *, gated: bool
) -> List[List[_Candidate]]:
    """Qualifying candidates grouped by domain, domains in focus-rank order."""
    grouped: List[List[_Candidate]] = []
    for ranking in sorted(focus.rankings, key=lambda item: item.rank):
        connection = _connection_for(facts, ranking)
        if not connection.connected:
            continue
        flagged = {flag.code: flag for flag in connection.risk_flags}
        candidates: List[_Candidate] = []
        for template in templates_for_domain(ranking.domain):
            if gated and template.max_focus_rank is not None:
                if ranking.rank > template.max_focus_rank:
                    continue
            if not _template_applies(template, facts):
                continue
            addressed = tuple(
                flagged[code] for code in template.addresses_risks if code in flagged
            )
            candidates.append(
                _Candidate(
                    template=template,
                    connection=connection,
                    urgency=_assign_urgency(template, facts, connection, addressed),
                    addressed=addressed,
                )
            )
        if not candidates:
            continue
        best = min(URGENCY_ORDER[candidate.urgency] for candidate in candidates)
        resolved = [
            _Candidate(
                template=candidate.template,
                connection=candidate.connection,
                urgency=candidate.urgency,
                addressed=candidate.addressed,
                effective_urgency=(
                    best if candidate.addressed else URGENCY_ORDER[candidate.urgency]
                ),
            )
            for candidate in candidates
        ]
        grouped.append(sorted(resolved, key=lambda candidate: candidate.sort_key()))
    return grouped


def _select_round_robin(grouped: List[List[_Candidate]], max_actions: int) -> List[_Candidate]:
    pool: Dict[str, _Candidate] = {
        candidate.id: candidate for group in grouped for candidate in group
    }
    declared = {
        action_id: [dep for dep in candidate.template.dependencies if dep in pool]
        for action_id, candidate in pool.items()
    }
    queues: List[Deque[_Candidate]] = [deque(group) for group in grouped]
    selected: List[str] = []
    selected_set = set()

    while len(selected) < max_actions and any(queues):
        for queue in queues:
            while queue and queue[0].id in selected_set:
                queue.popleft()
            if not queue:
                continue
            candidate = queue.popleft()
            needed = [
                dep for dep in dependency_closure(candidate.id, declared) if dep not in selected_set
            ]
            needed.append(candidate.id)
            if len(selected) + len(needed) > max_actions:
                continue
            selected.extend(needed)
            selected_set.update(needed)
            if len(selected) >= max_actions:
                break

    return [pool[action_id] for action_id in selected]


def _order_selected(selected: List[_Candidate]) -> Tuple[List[_Candidate], Dict[str, List[str]]]:
    by_key = sorted(selected, key=lambda candidate: candidate.sort_key())
    ids = [candidate.id for candidate in by_key]
    linked = link_action_dependencies(
        ids, {candidate.id: candidate.template.dependencies for candidate in by_key}
    )
    by_id = {candidate.id: candidate for candidate in by_key}
    return [by_id[action_id] for action_id in order_by_dependencies(ids, linked)], linked


def _lower_first(text: str) -> str:
    return text[:1].lower() + text[1:] if text else text


def _render(
    candidate: _Candidate, facts: ProfileFacts, *, priority: int, dependencies: List[str]
) -> ActionRecommendation:
    connection = candidate.connection
    ranking = connection.ranking
    if candidate.addressed:
        kind = "RISK"
        risk_label = candidate.addressed[0].label
    elif connection.best_goal is not None:
        kind, risk_label = "GOAL", ""
    elif connection.best_value is not None:
        kind, risk_label = "VALUE", ""
    else:
        kind = "RISK"
        risk_label = ranking.risk_factors[0]

    params = {
        "value": connection.best_value.title if connection.best_value else "what matters to you",
        "goal": connection.best_goal.label if connection.best_goal else "your goals",
        "risk": _lower_first(risk_label) if risk_label else "an open gap",
        "years": years_phrase(facts.years_to_retirement),
    }
    template = candidate.template
    why = template.why.format(**params)
    what = template.what.format(**params)

    addressed_labels = [flag.label for flag in candidate.addressed]
    related_risks = addressed_labels + [
        label for label in ranking.risk_factors if label not in addressed_labels
    ]
    return ActionRecommendation(
        id=template.id,
        title=template.title,
        description=template.description.format(**params),
        why_it_matters=action_why(
            kind, why=why, value=params["value"], goal=params["goal"], risk=risk_label
        ),
        what_it_achieves=action_what(kind, what=what, goal=params["goal"]),
        action_type=template.action_type,
        guidance=template.guidance,
        urgency=candidate.urgency,
        related_domain=template.domain,
        related_values=list(ranking.value_connections),
        related_goals=list(ranking.goal_connections),
        related_risks=related_risks,
        dependencies=dependencies,
        priority=priority,
    )


def recommend_for_facts(
    facts: ProfileFacts, focus: PlanningFocusResult, *, generated_at: str
) -> ActionRecommendations:
    options = facts.options
    selected = _select_round_robin(_build_candidates(facts, focus, gated=True), options.max_actions)
    if len(selected) < options.min_actions:
        relaxed = _select_round_robin(
            _build_candidates(facts, focus, gated=False), options.max_actions
        )
        if len(relaxed) > len(selected):
            logger.debug(
                "Rank gate relaxed to reach action floor. gated=%d relaxed=%d",
                len(selected),
                len(relaxed),
            )
            selected = relaxed

    ordered, linked = _order_selected(selected)
    recommendations = [
        _render(candidate, facts, priority=position, dependencies=linked[candidate.id])
        for position, candidate in enumerate(ordered, start=1)
    ]
    top_actions = [
        item.id for item in recommendations if item.urgency in TOP_ACTION_URGENCIES
    ][:TOP_ACTION_COUNT]
    logger.debug("Actions selected. ids=%s", [item.id for item in recommendations])
    return ActionRecommendations(
        recommendations=recommendations,
        top_actions=top_actions,
        generated_at=generated_at,
    )


def generate_action_recommendations(
    profile: Profile | Dict[str, Any],
    focus: PlanningFocusResult | Dict[str, Any],
    options: Optional[InsightsOptions | Dict[str, Any]] = None,
    *,
    as_of: Optional[datetime] = None,
) -> ActionRecommendations:
    resolved_profile = coerce_profile(profile)
    resolved_options = coerce_options(options)
    if not isinstance(focus, PlanningFocusResult):
        focus = PlanningFocusResult.model_validate(focus)
    moment = resolve_as_of(as_of)
    facts = build_profile_facts(resolved_profile, resolved_options, as_of=moment)
    return recommend_for_facts(facts, focus, generated_at=moment.isoformat())
