"""
FILE: src/core/insights_engine.py
Insights Orchestrator.

Builds the derived profile facts once, runs the strategy scorer and the
focus ranker independently, then feeds the focus ranking into the action
generator. Readiness helpers report how complete the profile is without
touching the engines.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.core.action_recommendations import recommend_for_facts
from src.core.common.canonical import hash_canonical_payload
from src.core.models import (
    DiscoveryInsights,
    InsightsInputSummary,
    InsightsOptions,
    InsightsReadiness,
    Profile,
)
from src.core.planning_focus import rank_facts
from src.core.profile_facts import (
    TOP_VALUE_COUNT,
    build_profile_facts,
    coerce_options,
    coerce_profile,
    resolve_as_of,
)
from src.core.strategy_profile import score_facts

logger = logging.getLogger(__name__)

READINESS_THRESHOLD = 25

STATUS_MESSAGES = (
    (25, "Complete more discovery sections to generate planning insights."),
    (50, "Basic insights available. Complete more sections for deeper analysis."),
    (75, "Good foundation for insights. Additional sections will refine recommendations."),
)
COMPLETE_STATUS_MESSAGE = "Comprehensive data available for detailed planning insights."


def _count_points(count: int, *, full: int, partial: int, full_at: int = 3) -> int:
    if count >= full_at:
        return full
    if count >= 1:
        return partial
    return 0


def _basic_context_points(profile: Profile) -> int:
    context = profile.basic_context
    if context is None:
        return 0
    points = 0
    if context.age is not None or context.birth_date is not None:
        points += 10
    if context.target_retirement_age is not None:
        points += 10
    if context.marital_status is not None:
        points += 5
    return points


def _values_points(profile: Profile) -> int:
    values = profile.values_discovery
    if values is None:
        return 0
    top_count = len(values.ranked_values[:TOP_VALUE_COUNT])
    points = _count_points(top_count, full=15, partial=5, full_at=TOP_VALUE_COUNT)
    if values.non_negotiables:
        points += 5
    if values.tradeoff_responses:
        points += 5
    return points


def _goals_points(profile: Profile) -> int:
    if profile.financial_goals is None or not profile.financial_goals.goals:
        return 0
    goals = profile.financial_goals.goals
    return (
        _count_points(sum(1 for goal in goals if goal.priority), full=15, partial=8)
        + _count_points(sum(1 for goal in goals if goal.time_horizon), full=5, partial=2)
        + _count_points(sum(1 for goal in goals if goal.flexibility), full=5, partial=2)
    )


def _purpose_points(profile: Profile) -> int:
    purpose = profile.financial_purpose
    if purpose is None:
        return 0
    points = 0
    if purpose.primary_driver is not None:
        points += 10
    if purpose.tradeoff_anchors:
        points += 5
    if purpose.final_statement and purpose.final_statement.strip():
        points += 10
    return points


def completion_percentage(profile: Profile | Dict[str, Any]) -> int:
    """Four discovery sections weighted 25 points each."""
    resolved = coerce_profile(profile)
    return min(
        100,
        _basic_context_points(resolved)
        + _values_points(resolved)
        + _goals_points(resolved)
        + _purpose_points(resolved),
    )


def summarize_inputs(profile: Profile | Dict[str, Any]) -> InsightsInputSummary:
    resolved = coerce_profile(profile)
    context = resolved.basic_context
    values = resolved.values_discovery
    goals = resolved.financial_goals
    purpose = resolved.financial_purpose
    return InsightsInputSummary(
        has_values=bool(values and values.ranked_values),
        has_goals=bool(goals and goals.goals),
        has_purpose=bool(purpose and purpose.final_statement and purpose.final_statement.strip()),
        has_basic_context=bool(
            context and (context.age is not None or context.birth_date is not None)
        ),
        completion_percentage=completion_percentage(resolved),
    )


def has_enough_data_for_insights(profile: Profile | Dict[str, Any]) -> bool:
    return completion_percentage(profile) >= READINESS_THRESHOLD


def insights_status_message(profile: Profile | Dict[str, Any]) -> str:
    completion = completion_percentage(profile)
    for upper_bound, message in STATUS_MESSAGES:
        if completion < upper_bound:
            return message
    return COMPLETE_STATUS_MESSAGE


def missing_data_suggestions(profile: Profile | Dict[str, Any]) -> List[str]:
    """Follow-up prompts that would most improve the insights, in questionnaire order."""
    resolved = coerce_profile(profile)
    suggestions: List[str] = []
    context = resolved.basic_context
    if context is None or (context.age is None and context.birth_date is None):
        suggestions.append("Add your age and retirement target")

    values = resolved.values_discovery
    ranked = values.ranked_values if values else []
    if not ranked:
        suggestions.append("Complete Values Discovery to identify your core values")
    elif len(ranked) < TOP_VALUE_COUNT:
        suggestions.append("Select all 5 top values in Values Discovery")
    if values is None or not values.non_negotiables:
        suggestions.append("Identify your non-negotiable values")

    goals = resolved.financial_goals.goals if resolved.financial_goals else []
    if not goals:
        suggestions.append("Add financial goals")
    else:
        if any(goal.priority is None for goal in goals):
            suggestions.append("Set priorities for all your goals")
        if any(goal.time_horizon is None for goal in goals):
            suggestions.append("Add time horizons to your goals")

    purpose = resolved.financial_purpose
    if purpose is None or not (purpose.final_statement and purpose.final_statement.strip()):
        suggestions.append("Complete your Statement of Financial Purpose")
    return suggestions


def assess_readiness(profile: Profile | Dict[str, Any]) -> InsightsReadiness:
    resolved = coerce_profile(profile)
    summary = summarize_inputs(resolved)
    return InsightsReadiness(
        input_summary=summary,
        ready=summary.completion_percentage >= READINESS_THRESHOLD,
        status_message=insights_status_message(resolved),
        missing_data_suggestions=missing_data_suggestions(resolved),
    )


def profile_hash(profile: Profile | Dict[str, Any]) -> str:
    resolved = coerce_profile(profile)
    return hash_canonical_payload(resolved.model_dump(mode="json"))


def build_insights(
    profile: Profile | Dict[str, Any],
    options: Optional[InsightsOptions | Dict[str, Any]] = None,
    *,
    as_of: Optional[datetime] = None,
) -> DiscoveryInsights:
    """
    Produce the full insights bundle for a possibly partial profile.

    Raises InvalidProfileError / InvalidOptionsError for malformed input only;
    missing sections lower confidence instead of failing.
    """
    resolved_profile = coerce_profile(profile)
    resolved_options = coerce_options(options)
    moment = resolve_as_of(as_of)
    generated_at = moment.isoformat()

    facts = build_profile_facts(resolved_profile, resolved_options, as_of=moment)
    strategy = score_facts(facts, generated_at=generated_at)
    focus = rank_facts(facts, generated_at=generated_at)
    actions = recommend_for_facts(facts, focus, generated_at=generated_at)

    insights = DiscoveryInsights(
        strategy_profile=strategy,
        focus_areas=focus,
        actions=actions,
        input_summary=summarize_inputs(resolved_profile),
        profile_hash=profile_hash(resolved_profile),
        generated_at=generated_at,
    )
    logger.info(
        "Insights built. domains=%d excluded=%d actions=%d completion=%d",
        len(focus.rankings),
        len(focus.excluded_domains),
        len(actions.recommendations),
        insights.input_summary.completion_percentage,
    )
    return insights
