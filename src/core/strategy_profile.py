"""
FILE: src/core/strategy_profile.py
Strategy Profile Scorer: five independent dimensions plus a combination-keyed
summary. Total over partial profiles; missing sections lower confidence and
fall back to neutral values instead of raising.
"""

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Sequence, Type

from src.core.domain_mappings import VALUE_CATEGORY_LABELS
from src.core.models import (
    ComplexityTolerance,
    DecisionSupportNeed,
    Dimension,
    IncomeStrategyOrientation,
    InsightsOptions,
    PlanningFlexibility,
    Profile,
    StrategyProfile,
    TimingSensitivity,
    ValueCategory,
)
from src.core.narratives import compose_summary, dimension_rationale, signal_phrase
from src.core.profile_facts import (
    ProfileFacts,
    build_profile_facts,
    coerce_options,
    coerce_profile,
    resolve_as_of,
)

logger = logging.getLogger(__name__)

IncomeDimension = Dimension[IncomeStrategyOrientation]
TimingDimension = Dimension[TimingSensitivity]
FlexibilityDimension = Dimension[PlanningFlexibility]
ComplexityDimension = Dimension[ComplexityTolerance]
SupportDimension = Dimension[DecisionSupportNeed]

CONFIDENCE_BASE = 40
CONFIDENCE_STEP = 12
PRELIMINARY_CONFIDENCE_THRESHOLD = 50

INCOME_GROWTH_THRESHOLD = 3
INCOME_STABILITY_THRESHOLD = -3
FLEXIBILITY_SECONDARY_THRESHOLD = 2
COMPLEXITY_ADVANCED_THRESHOLD = 3
COMPLEXITY_SIMPLE_THRESHOLD = -2
SUPPORT_HIGH_THRESHOLD = 2
SUPPORT_LOW_THRESHOLD = -2

MANY_NON_NEGOTIABLES = 3
FEW_NON_NEGOTIABLES = 1
FIXED_GOAL_SHARE = Decimal("0.5")
FIXED_GOAL_MIN_COUNT = 2
FLEXIBLE_GOAL_SHARE = Decimal("0.6")
HIGH_PRIORITY_GOAL_LOAD = 3

_VALUES = "values_discovery.ranked_values"
_NON_NEGOTIABLES = "values_discovery.non_negotiables"
_RETIREMENT = "basic_context.age"
_FEDERAL = "basic_context.federal_employee"
_GOALS = "financial_goals.goals"
_ANCHORS = "financial_purpose.tradeoff_anchors"
_STATEMENT = "financial_purpose.final_statement"
_STABILITY = "risk_comfort.income_stability_preference"
_GUARANTEED = "risk_comfort.guaranteed_income_importance"
_DOWNTURN = "risk_comfort.market_downturn_response"
_COMPLEXITY = "planning_preferences.complexity_tolerance"
_CONFIDENCE = "planning_preferences.financial_confidence"
_PRODUCTS = "planning_preferences.financial_product_comfort"
_INVOLVEMENT = "planning_preferences.advisor_involvement"
_STYLE = "planning_preferences.decision_style"

_STABILITY_PREFERENCE_POINTS = {
    "strong_stability": -2,
    "prefer_stability": -1,
    "balanced": 0,
    "prefer_growth": 1,
    "strong_growth": 2,
}
_GUARANTEED_INCOME_POINTS = {"critical": -2, "very_important": -1}
_PRODUCT_COMFORT_POINTS = {"very_low": -2, "low": -1, "moderate": 0, "high": 1, "very_high": 2}
_SUPPORT_INVOLVEMENT = {
    "delegated": (2, "INVOLVEMENT_DELEGATED"),
    "collaborative": (1, "INVOLVEMENT_COLLABORATIVE"),
    "guidance": (1, "INVOLVEMENT_GUIDANCE"),
    "diy": (-2, "INVOLVEMENT_DIY"),
}
_GROWTH_CATEGORIES = frozenset({ValueCategory.FREEDOM, ValueCategory.GROWTH})


class _DimensionTally:
    """Accumulates consulted inputs and weighted signals for one dimension."""

    def __init__(self) -> None:
        self.consulted: List[str] = []
        self.present: List[str] = []
        self.extra_inputs: List[str] = []
        self.signals: List[str] = []
        self.score = 0
        # sum of absolute signal points; only grows as inputs are added
        self.magnitude = 0

    def consult(self, input_name: str, present: bool) -> bool:
        self.consulted.append(input_name)
        if present:
            self.present.append(input_name)
        return present

    def add(self, input_name: str, points: int, code: str, **params: Any) -> None:
        if input_name not in self.extra_inputs:
            self.extra_inputs.append(input_name)
        self.score += points
        self.magnitude += abs(points)
        self.signals.append(signal_phrase(code, **params))

    @property
    def missing(self) -> List[str]:
        return [name for name in self.consulted if name not in self.present]

    def confidence(self, strength: int) -> int:
        if not self.present:
            return 0
        coverage = Decimal(len(self.present)) / Decimal(len(self.consulted))
        ceiling = Decimal(min(100, CONFIDENCE_BASE + CONFIDENCE_STEP * strength))
        return int((coverage * ceiling).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def dimension(
        self,
        model: Type[Dimension],
        value: str,
        *,
        neutral: str,
        strength: int,
        signals: Optional[Sequence[str]] = None,
    ) -> Dimension:
        if not self.present:
            value = neutral
            signals = []
        return model(
            value=value,
            confidence=self.confidence(strength),
            rationale=dimension_rationale(
                value,
                list(self.signals if signals is None else signals),
                present_inputs=self.present,
                missing_inputs=self.missing,
            ),
            inputs=list(dict.fromkeys(self.present + self.extra_inputs)),
        )


def _score_income_strategy(facts: ProfileFacts) -> Dimension:
    tally = _DimensionTally()

    if tally.consult(_VALUES, facts.has_values):
        dominant = facts.dominant_category
        secondary = facts.secondary_category
        if dominant == ValueCategory.SECURITY:
            tally.add(_VALUES, -2, "DOMINANT_VALUE", category="security")
        elif dominant in _GROWTH_CATEGORIES:
            tally.add(_VALUES, 2, "DOMINANT_VALUE", category=VALUE_CATEGORY_LABELS[dominant])
        if secondary == ValueCategory.SECURITY:
            tally.add(_VALUES, -1, "SECONDARY_VALUE", category="security")
        elif secondary in _GROWTH_CATEGORIES:
            tally.add(_VALUES, 1, "SECONDARY_VALUE", category=VALUE_CATEGORY_LABELS[secondary])

    if tally.consult(_RETIREMENT, facts.years_to_retirement is not None):
        years = facts.years_to_retirement
        if facts.near_retirement:
            tally.add(_RETIREMENT, -3, "RETIREMENT_NEAR", years=years)
        elif facts.approaching_retirement:
            tally.add(_RETIREMENT, -1, "RETIREMENT_APPROACHING", years=years)
        elif facts.long_horizon:
            tally.add(_RETIREMENT, 2, "RETIREMENT_DISTANT", years=years)

    anchor = facts.anchor("SECURITY_VS_GROWTH")
    if tally.consult(_ANCHORS, anchor is not None):
        if anchor < 0:
            tally.add(_ANCHORS, anchor, "ANCHOR_SECURITY")
        elif anchor > 0:
            tally.add(_ANCHORS, anchor, "ANCHOR_GROWTH")

    preference = facts.income_stability_preference
    if tally.consult(_STABILITY, preference is not None):
        points = _STABILITY_PREFERENCE_POINTS[preference]
        if points < 0:
            tally.add(_STABILITY, points, "STABILITY_PREFERENCE")
        elif points > 0:
            tally.add(_STABILITY, points, "GROWTH_PREFERENCE")

    importance = facts.guaranteed_income_importance
    if tally.consult(_GUARANTEED, importance is not None):
        if importance in _GUARANTEED_INCOME_POINTS:
            tally.add(
                _GUARANTEED,
                _GUARANTEED_INCOME_POINTS[importance],
                "GUARANTEED_INCOME",
                importance=importance.replace("_", " "),
            )

    if tally.score >= INCOME_GROWTH_THRESHOLD:
        value = "GROWTH_FOCUSED"
    elif tally.score <= INCOME_STABILITY_THRESHOLD:
        value = "STABILITY_FOCUSED"
    else:
        value = "BALANCED"
    return tally.dimension(IncomeDimension, value, neutral="BALANCED", strength=tally.magnitude)


def _score_timing_sensitivity(facts: ProfileFacts) -> Dimension:
    tally = _DimensionTally()
    has_goals = tally.consult(_GOALS, facts.has_goals)
    has_retirement = tally.consult(_RETIREMENT, facts.years_to_retirement is not None)

    high: List[str] = []
    medium: List[str] = []
    for goal in facts.goals:
        if goal.time_horizon == "SHORT" and goal.priority == "HIGH":
            high.append(signal_phrase("URGENT_GOAL", goal=goal.label))
        elif goal.time_horizon == "SHORT":
            medium.append(signal_phrase("SHORT_GOAL", goal=goal.label))
        elif goal.time_horizon == "MID":
            medium.append(signal_phrase("MID_GOAL", goal=goal.label))
        if goal.flexibility == "FIXED":
            high.append(signal_phrase("FIXED_GOAL", goal=goal.label))
    if facts.near_retirement:
        high.append(signal_phrase("RETIREMENT_NEAR", years=facts.years_to_retirement))
    elif facts.approaching_retirement:
        medium.append(signal_phrase("RETIREMENT_APPROACHING", years=facts.years_to_retirement))

    if high:
        value, signals = "HIGH", high
    elif medium:
        value, signals = "MEDIUM", medium
    elif has_goals or has_retirement:
        signals = []
        if has_goals:
            signals.append(signal_phrase("LONG_GOALS"))
        if has_retirement:
            signals.append(signal_phrase("RETIREMENT_MID", years=facts.years_to_retirement))
        value = "LOW"
    else:
        value, signals = "MEDIUM", []
    return tally.dimension(
        TimingDimension, value, neutral="MEDIUM", strength=2 * len(signals), signals=signals
    )


def _score_planning_flexibility(facts: ProfileFacts) -> Dimension:
    tally = _DimensionTally()
    rated_goals = [goal for goal in facts.goals if goal.flexibility is not None]
    has_rated_goals = tally.consult(_GOALS, bool(rated_goals))
    has_values = tally.consult(_NON_NEGOTIABLES, facts.has_values)
    anchor = facts.anchor("CONTROL_STRUCTURE_VS_FLEXIBILITY")
    tally.consult(_ANCHORS, anchor is not None)

    non_negotiables = facts.non_negotiable_count()
    if has_values and non_negotiables >= MANY_NON_NEGOTIABLES:
        return tally.dimension(
            FlexibilityDimension,
            "LOW",
            neutral="MODERATE",
            strength=non_negotiables,
            signals=[signal_phrase("MANY_NON_NEGOTIABLES", count=non_negotiables)],
        )

    if has_rated_goals:
        total = Decimal(len(rated_goals))
        fixed = sum(1 for goal in rated_goals if goal.flexibility == "FIXED")
        flexible = len(rated_goals) - fixed
        if fixed >= FIXED_GOAL_MIN_COUNT and Decimal(fixed) / total >= FIXED_GOAL_SHARE:
            return tally.dimension(
                FlexibilityDimension,
                "LOW",
                neutral="MODERATE",
                strength=fixed + 1,
                signals=[signal_phrase("FIXED_GOALS_DOMINATE", count=fixed)],
            )
        broadly_flexible = Decimal(flexible) / total >= FLEXIBLE_GOAL_SHARE
        if broadly_flexible and non_negotiables <= FEW_NON_NEGOTIABLES:
            signals = [signal_phrase("FLEXIBLE_GOALS_DOMINATE")]
            if has_values:
                signals.append(signal_phrase("FEW_NON_NEGOTIABLES"))
            return tally.dimension(
                FlexibilityDimension,
                "HIGH",
                neutral="MODERATE",
                strength=flexible + 1,
                signals=signals,
            )

    categories = facts.top_value_categories()
    if ValueCategory.FREEDOM in categories:
        tally.add(_VALUES, 1, "FREEDOM_VALUE")
    if ValueCategory.CONTROL in categories:
        tally.add(_VALUES, -1, "CONTROL_VALUE")
    if anchor is not None and anchor < 0:
        tally.add(_ANCHORS, anchor, "ANCHOR_STRUCTURE")
    elif anchor is not None and anchor > 0:
        tally.add(_ANCHORS, anchor, "ANCHOR_FLEXIBILITY")

    if tally.score >= FLEXIBILITY_SECONDARY_THRESHOLD:
        value = "HIGH"
    elif tally.score <= -FLEXIBILITY_SECONDARY_THRESHOLD:
        value = "LOW"
    else:
        value = "MODERATE"
    return tally.dimension(
        FlexibilityDimension, value, neutral="MODERATE", strength=tally.magnitude
    )


def _score_complexity_tolerance(facts: ProfileFacts) -> Dimension:
    tally = _DimensionTally()

    preference = facts.complexity_preference
    if tally.consult(_COMPLEXITY, preference is not None) and preference != 3:
        tally.add(_COMPLEXITY, preference - 3, "COMPLEXITY_PREFERENCE", score=preference)

    confidence = facts.financial_confidence
    if tally.consult(_CONFIDENCE, confidence is not None):
        if confidence >= 4:
            tally.add(_CONFIDENCE, 1, "FINANCIAL_CONFIDENCE", score=confidence)
        elif confidence <= 2:
            tally.add(_CONFIDENCE, -1, "FINANCIAL_CONFIDENCE", score=confidence)

    comfort = facts.product_comfort
    if tally.consult(_PRODUCTS, comfort is not None) and _PRODUCT_COMFORT_POINTS[comfort]:
        tally.add(
            _PRODUCTS,
            _PRODUCT_COMFORT_POINTS[comfort],
            "PRODUCT_COMFORT",
            level=comfort.replace("_", " "),
        )

    involvement = facts.advisor_involvement
    if tally.consult(_INVOLVEMENT, involvement is not None):
        if involvement == "diy":
            tally.add(_INVOLVEMENT, 1, "INVOLVEMENT_DIY")
        elif involvement == "delegated":
            tally.add(_INVOLVEMENT, -1, "INVOLVEMENT_DELEGATED")

    if tally.consult(_VALUES, facts.has_values):
        if ValueCategory.CONTROL in facts.top_value_categories():
            tally.add(_VALUES, 1, "CONTROL_VALUE")
        if facts.dominant_category == ValueCategory.SECURITY:
            tally.add(_VALUES, -1, "SECURITY_VALUE")

    if facts.federal_employee:
        tally.add(
            _FEDERAL,
            1,
            "FEDERAL_BENEFITS",
            system=facts.federal_retirement_system or "your",
        )

    if tally.score >= COMPLEXITY_ADVANCED_THRESHOLD:
        value = "ADVANCED"
    elif tally.score <= COMPLEXITY_SIMPLE_THRESHOLD:
        value = "SIMPLE"
    else:
        value = "MODERATE"
    return tally.dimension(
        ComplexityDimension, value, neutral="MODERATE", strength=tally.magnitude
    )


def _score_decision_support(facts: ProfileFacts) -> Dimension:
    tally = _DimensionTally()

    response = facts.downturn_response
    if tally.consult(_DOWNTURN, response is not None):
        if response == "unsure":
            tally.add(_DOWNTURN, 2, "DOWNTURN_UNSURE")
        elif response == "stay_the_course":
            tally.add(_DOWNTURN, -1, "DOWNTURN_STEADY")

    involvement = facts.advisor_involvement
    if tally.consult(_INVOLVEMENT, involvement is not None):
        points, code = _SUPPORT_INVOLVEMENT[involvement]
        tally.add(_INVOLVEMENT, points, code)

    style = facts.decision_style
    if tally.consult(_STYLE, style is not None):
        if style == "consultative":
            tally.add(_STYLE, 1, "CONSULTATIVE_STYLE")
        elif style == "analytical":
            tally.add(_STYLE, -1, "ANALYTICAL_STYLE")

    if tally.consult(_GOALS, facts.has_goals):
        unclear = sum(
            1 for goal in facts.goals if goal.priority is None or goal.time_horizon is None
        )
        high_goals = sum(1 for goal in facts.goals if goal.priority == "HIGH")
        if unclear and unclear * 2 >= len(facts.goals):
            tally.add(_GOALS, 1, "UNCLEAR_GOALS", count=unclear)
        elif not unclear:
            tally.add(_GOALS, -1, "CLEAR_GOALS")
        if high_goals >= HIGH_PRIORITY_GOAL_LOAD:
            tally.add(_GOALS, 1, "HIGH_PRIORITY_LOAD", count=high_goals)

    purpose_started = (
        bool(facts.anchor_scores) or facts.primary_driver is not None or facts.has_final_statement
    )
    if tally.consult(_STATEMENT, purpose_started):
        if facts.has_final_statement:
            tally.add(_STATEMENT, -1, "PURPOSE_STATEMENT")
        else:
            tally.add(_STATEMENT, 1, "NO_PURPOSE_STATEMENT")
        if facts.neutral_anchor_count >= 2:
            tally.add(_ANCHORS, 1, "ANCHORS_NEUTRAL", count=facts.neutral_anchor_count)

    if tally.consult(_VALUES, facts.has_values):
        if ValueCategory.CONTROL in facts.top_value_categories():
            tally.add(_VALUES, -1, "CONTROL_VALUE")
        if facts.dominant_category == ValueCategory.SECURITY:
            tally.add(_VALUES, 1, "SECURITY_VALUE")
        if facts.non_negotiable_count() >= MANY_NON_NEGOTIABLES:
            tally.add(
                _NON_NEGOTIABLES,
                1,
                "MANY_NON_NEGOTIABLES",
                count=facts.non_negotiable_count(),
            )

    if tally.score >= SUPPORT_HIGH_THRESHOLD:
        value = "HIGH"
    elif tally.score <= SUPPORT_LOW_THRESHOLD:
        value = "LOW"
    else:
        value = "MODERATE"
    return tally.dimension(SupportDimension, value, neutral="MODERATE", strength=tally.magnitude)


def score_facts(facts: ProfileFacts, *, generated_at: str) -> StrategyProfile:
    income = _score_income_strategy(facts)
    timing = _score_timing_sensitivity(facts)
    flexibility = _score_planning_flexibility(facts)
    complexity = _score_complexity_tolerance(facts)
    support = _score_decision_support(facts)

    confidences: Dict[str, int] = {
        "income_strategy": income.confidence,
        "timing_sensitivity": timing.confidence,
        "planning_flexibility": flexibility.confidence,
        "complexity_tolerance": complexity.confidence,
        "decision_support": support.confidence,
    }
    mean_confidence = Decimal(sum(confidences.values())) / Decimal(len(confidences))
    logger.debug("Strategy profile scored. confidences=%s", confidences)

    return StrategyProfile(
        income_strategy=income,
        timing_sensitivity=timing,
        planning_flexibility=flexibility,
        complexity_tolerance=complexity,
        decision_support=support,
        summary=compose_summary(
            income=income.value,
            timing=timing.value,
            flexibility=flexibility.value,
            complexity=complexity.value,
            support=support.value,
            preliminary=mean_confidence < PRELIMINARY_CONFIDENCE_THRESHOLD,
        ),
        generated_at=generated_at,
    )


def score_strategy_profile(
    profile: Profile | Dict[str, Any],
    options: Optional[InsightsOptions | Dict[str, Any]] = None,
    *,
    as_of: Optional[datetime] = None,
) -> StrategyProfile:
    """
    Score the five strategy dimensions for a (possibly partial) profile.

    Never raises for missing data. A structurally invalid mapping raises
    InvalidProfileError; invalid options raise InvalidOptionsError.
    """
    resolved_profile = coerce_profile(profile)
    resolved_options = coerce_options(options)
    moment = resolve_as_of(as_of)
    facts = build_profile_facts(resolved_profile, resolved_options, as_of=moment)
    return score_facts(facts, generated_at=moment.isoformat())
