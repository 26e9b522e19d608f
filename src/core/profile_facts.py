"""
FILE: src/core/profile_facts.py
Input normalization and the derived, read-only view of a profile that every
scorer consults. Scorers never read the raw profile directly.
"""

from collections.abc import Mapping as MappingABC
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from src.core.common.rules import Condition, Predicate, Rule, fired_effects
from src.core.models import (
    FinancialGoal,
    GoalCategory,
    InsightsOptions,
    PlanningDomain,
    Profile,
    RankedValue,
    TradeoffAnchor,
    ValueCategory,
)

TOP_VALUE_COUNT = 5
_WORKING_STATUSES = frozenset({"employed_full_time", "employed_part_time", "self_employed"})
_PARTNERED_STATUSES = frozenset({"married", "domestic_partnership"})


class InsightsError(Exception):
    pass


class InvalidProfileError(InsightsError):
    pass


class InvalidOptionsError(InsightsError):
    pass


def _first_error_message(exc: ValidationError) -> str:
    first_error = exc.errors()[0]
    location = ".".join(str(part) for part in first_error.get("loc", ()))
    message = first_error.get("msg", "validation failed")
    return f"{location}: {message}" if location else message


def coerce_profile(profile: Any) -> Profile:
    if isinstance(profile, Profile):
        return profile
    if not isinstance(profile, MappingABC):
        raise InvalidProfileError(
            f"INVALID_PROFILE: expected a mapping, got {type(profile).__name__}"
        )
    try:
        return Profile.model_validate(dict(profile))
    except ValidationError as exc:
        raise InvalidProfileError(f"INVALID_PROFILE: {_first_error_message(exc)}") from exc


def coerce_options(options: Any) -> InsightsOptions:
    if options is None:
        return InsightsOptions()
    if isinstance(options, InsightsOptions):
        return options
    if not isinstance(options, MappingABC):
        raise InvalidOptionsError(
            f"INVALID_OPTIONS: expected a mapping, got {type(options).__name__}"
        )
    try:
        return InsightsOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise InvalidOptionsError(f"INVALID_OPTIONS: {_first_error_message(exc)}") from exc


def resolve_as_of(as_of: Optional[datetime]) -> datetime:
    if as_of is None:
        return datetime.now(timezone.utc)
    if as_of.tzinfo is None:
        return as_of.replace(tzinfo=timezone.utc)
    return as_of


def _age_on(birth_date: date, on: date) -> int:
    years = on.year - birth_date.year
    if (on.month, on.day) < (birth_date.month, birth_date.day):
        years -= 1
    return max(0, years)


def anchor_lean_score(anchor: TradeoffAnchor) -> int:
    """Map an anchor onto -2..2: negative leans A, positive leans B."""
    if anchor.lean == "A":
        return -2 if anchor.strength == 1 else -1
    if anchor.lean == "B":
        return 2 if anchor.strength == 5 else 1
    return 0


@dataclass(frozen=True)
class RiskFlag:
    code: str
    label: str
    domain: PlanningDomain
    bonus: Decimal


@dataclass(frozen=True)
class ProfileFacts:
    options: InsightsOptions
    age: Optional[int] = None
    target_retirement_age: Optional[int] = None
    years_to_retirement: Optional[int] = None
    marital_status: Optional[str] = None
    employment_status: Optional[str] = None
    partnered: bool = False
    dependent_count: int = 0
    federal_employee: bool = False
    federal_retirement_system: Optional[str] = None
    has_employer_benefits: bool = False
    ranked_values: Tuple[RankedValue, ...] = ()
    non_negotiable_ids: FrozenSet[str] = frozenset()
    dominant_category: Optional[ValueCategory] = None
    secondary_category: Optional[ValueCategory] = None
    tradeoff_response_count: int = 0
    goals: Tuple[FinancialGoal, ...] = ()
    anchor_scores: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    neutral_anchor_count: int = 0
    primary_driver: Optional[str] = None
    secondary_driver: Optional[str] = None
    has_final_statement: bool = False
    complexity_preference: Optional[int] = None
    financial_confidence: Optional[int] = None
    product_comfort: Optional[str] = None
    advisor_involvement: Optional[str] = None
    decision_style: Optional[str] = None
    investment_risk_tolerance: Optional[int] = None
    income_stability_preference: Optional[str] = None
    downturn_response: Optional[str] = None
    guaranteed_income_importance: Optional[str] = None
    emergency_fund_months: Optional[Decimal] = None
    has_life_insurance: Optional[bool] = None
    has_disability_insurance: Optional[bool] = None
    has_long_term_care: Optional[bool] = None
    has_estate_documents: Optional[bool] = None
    self_reported_underinsured: Optional[bool] = None
    has_high_interest_debt: Optional[bool] = None
    risk_flags: Tuple[RiskFlag, ...] = ()

    @property
    def top_values(self) -> Tuple[RankedValue, ...]:
        return self.ranked_values[:TOP_VALUE_COUNT]

    @property
    def has_values(self) -> bool:
        return bool(self.ranked_values)

    @property
    def has_goals(self) -> bool:
        return bool(self.goals)

    @property
    def near_retirement(self) -> bool:
        return (
            self.years_to_retirement is not None
            and self.years_to_retirement <= self.options.near_retirement_years
        )

    @property
    def approaching_retirement(self) -> bool:
        return (
            self.years_to_retirement is not None
            and self.years_to_retirement <= self.options.approaching_retirement_years
        )

    @property
    def long_horizon(self) -> bool:
        return (
            self.years_to_retirement is not None
            and self.years_to_retirement > self.options.long_horizon_years
        )

    def is_non_negotiable(self, value: RankedValue) -> bool:
        return value.id in self.non_negotiable_ids

    def top_value_categories(self) -> FrozenSet[ValueCategory]:
        return frozenset(value.category for value in self.top_values)

    def non_negotiable_count(self) -> int:
        return len(self.non_negotiable_ids)

    def first_value_in(self, category: ValueCategory) -> Optional[RankedValue]:
        return next((value for value in self.top_values if value.category == category), None)

    def goals_in(self, category: GoalCategory) -> List[FinancialGoal]:
        return [goal for goal in self.goals if goal.category == category]

    def has_goal_category(self, category: GoalCategory) -> bool:
        return any(goal.category == category for goal in self.goals)

    def has_urgent_goal(self) -> bool:
        return any(
            goal.time_horizon == "SHORT" and goal.priority in {"HIGH", "MEDIUM"}
            for goal in self.goals
        )

    def anchor(self, axis: str) -> Optional[int]:
        return self.anchor_scores.get(axis)

    def risk_codes(self) -> FrozenSet[str]:
        return frozenset(flag.code for flag in self.risk_flags)

    def risk_flags_for(self, domain: PlanningDomain) -> Tuple[RiskFlag, ...]:
        return tuple(flag for flag in self.risk_flags if flag.domain == domain)

    def is_working(self) -> bool:
        return self.employment_status in _WORKING_STATUSES


def _category_order(
    ranked_values: Tuple[RankedValue, ...], non_negotiable_ids: FrozenSet[str]
) -> List[ValueCategory]:
    """Order categories present in the top values: count, then non-negotiables, then rank."""
    counts: Dict[ValueCategory, int] = {}
    non_negotiables: Dict[ValueCategory, int] = {}
    first_position: Dict[ValueCategory, int] = {}
    for position, value in enumerate(ranked_values[:TOP_VALUE_COUNT]):
        counts[value.category] = counts.get(value.category, 0) + 1
        first_position.setdefault(value.category, position)
        if value.id in non_negotiable_ids:
            non_negotiables[value.category] = non_negotiables.get(value.category, 0) + 1
    return sorted(
        counts,
        key=lambda category: (
            -counts[category],
            -non_negotiables.get(category, 0),
            first_position[category],
            category.value,
        ),
    )


def _snapshot_is(facts: ProfileFacts, param: Tuple[str, Any]) -> bool:
    attribute, expected = param
    return getattr(facts, attribute) is expected


def _emergency_fund_below_target(facts: ProfileFacts, _param: Any) -> bool:
    return (
        facts.emergency_fund_months is not None
        and facts.emergency_fund_months < facts.options.low_emergency_fund_months
    )


def _has_risk(facts: ProfileFacts, code: str) -> bool:
    return code in facts.risk_codes()


FACT_PREDICATES: Mapping[str, Predicate] = MappingProxyType(
    {
        "federal_employee": lambda facts, _param: facts.federal_employee,
        "has_employer_benefits": lambda facts, _param: facts.has_employer_benefits,
        "has_goal_category": lambda facts, category: facts.has_goal_category(category),
        "has_value_category": lambda facts, category: category in facts.top_value_categories(),
        "dominant_value": lambda facts, category: facts.dominant_category == category,
        "retirement_known": lambda facts, _param: facts.years_to_retirement is not None,
        "near_retirement": lambda facts, _param: facts.near_retirement,
        "approaching_retirement": lambda facts, _param: facts.approaching_retirement,
        "long_horizon": lambda facts, _param: facts.long_horizon,
        "age_at_least": lambda facts, years: facts.age is not None and facts.age >= years,
        "partnered": lambda facts, _param: facts.partnered,
        "has_dependents": lambda facts, _param: facts.dependent_count > 0,
        "is_working": lambda facts, _param: facts.is_working(),
        "employment_status_is": lambda facts, status: facts.employment_status == status,
        "has_urgent_goal": lambda facts, _param: facts.has_urgent_goal(),
        "has_non_negotiables": lambda facts, _param: bool(facts.non_negotiable_ids),
        "snapshot_is": _snapshot_is,
        "emergency_fund_below_target": _emergency_fund_below_target,
        "has_risk": _has_risk,
    }
)

RISK_FLAG_RULES: Tuple[Rule[RiskFlag], ...] = (
    Rule(
        rule_id="NO_ESTATE_DOCUMENTS",
        when=(Condition("snapshot_is", ("has_estate_documents", False)),),
        effect=RiskFlag(
            code="NO_ESTATE_DOCUMENTS",
            label="No will, powers of attorney or healthcare directive in place",
            domain=PlanningDomain.ESTATE_LEGACY,
            bonus=Decimal("3"),
        ),
    ),
    Rule(
        rule_id="LOW_EMERGENCY_FUND",
        when=(Condition("emergency_fund_below_target"),),
        effect=RiskFlag(
            code="LOW_EMERGENCY_FUND",
            label="Emergency reserves below target",
            domain=PlanningDomain.CASH_FLOW_DEBT,
            bonus=Decimal("3"),
        ),
    ),
    Rule(
        rule_id="HIGH_INTEREST_DEBT",
        when=(Condition("snapshot_is", ("has_high_interest_debt", True)),),
        effect=RiskFlag(
            code="HIGH_INTEREST_DEBT",
            label="Carrying high-interest debt",
            domain=PlanningDomain.CASH_FLOW_DEBT,
            bonus=Decimal("2"),
        ),
    ),
    Rule(
        rule_id="NO_LIFE_INSURANCE",
        when=(Condition("snapshot_is", ("has_life_insurance", False)),),
        effect=RiskFlag(
            code="NO_LIFE_INSURANCE",
            label="No life insurance coverage",
            domain=PlanningDomain.INSURANCE_RISK,
            bonus=Decimal("3"),
        ),
    ),
    Rule(
        rule_id="SELF_REPORTED_UNDERINSURED",
        when=(Condition("snapshot_is", ("self_reported_underinsured", True)),),
        effect=RiskFlag(
            code="SELF_REPORTED_UNDERINSURED",
            label="Current coverage may not be enough",
            domain=PlanningDomain.INSURANCE_RISK,
            bonus=Decimal("3"),
        ),
    ),
    Rule(
        rule_id="DEPENDENTS_WITHOUT_LIFE_INSURANCE",
        when=(
            Condition("has_dependents"),
            Condition("snapshot_is", ("has_life_insurance", True), negate=True),
        ),
        effect=RiskFlag(
            code="DEPENDENTS_WITHOUT_LIFE_INSURANCE",
            label="Dependents rely on income without confirmed life insurance",
            domain=PlanningDomain.INSURANCE_RISK,
            bonus=Decimal("2"),
        ),
    ),
    Rule(
        rule_id="NO_DISABILITY_INSURANCE",
        when=(
            Condition("is_working"),
            Condition("snapshot_is", ("has_disability_insurance", False)),
        ),
        effect=RiskFlag(
            code="NO_DISABILITY_INSURANCE",
            label="Earned income is not protected by disability coverage",
            domain=PlanningDomain.INSURANCE_RISK,
            bonus=Decimal("1"),
        ),
    ),
    Rule(
        rule_id="NO_LTC_NEAR_RETIREMENT",
        when=(
            Condition("approaching_retirement"),
            Condition("snapshot_is", ("has_long_term_care", False)),
        ),
        effect=RiskFlag(
            code="NO_LTC_NEAR_RETIREMENT",
            label="No long-term care coverage as retirement approaches",
            domain=PlanningDomain.HEALTHCARE_LTC,
            bonus=Decimal("2"),
        ),
    ),
    Rule(
        rule_id="FEDERAL_BENEFIT_ELECTIONS",
        when=(Condition("federal_employee"),),
        effect=RiskFlag(
            code="FEDERAL_BENEFIT_ELECTIONS",
            label="Federal benefit elections (pension, TSP, FEHB) need a decision plan",
            domain=PlanningDomain.BENEFITS_OPTIMIZATION,
            bonus=Decimal("4"),
        ),
    ),
)


def build_profile_facts(
    profile: Profile, options: InsightsOptions, *, as_of: datetime
) -> ProfileFacts:
    basic = profile.basic_context
    values = profile.values_discovery
    goals = profile.financial_goals
    purpose = profile.financial_purpose
    preferences = profile.planning_preferences
    risk = profile.risk_comfort
    snapshot = profile.financial_snapshot

    age: Optional[int] = None
    target_age: Optional[int] = None
    years_to_retirement: Optional[int] = None
    if basic is not None:
        age = basic.age
        if age is None and basic.birth_date is not None:
            age = _age_on(basic.birth_date, as_of.date())
        target_age = basic.target_retirement_age
        if age is not None:
            retirement_age = (
                target_age if target_age is not None else options.default_retirement_age
            )
            years_to_retirement = max(0, retirement_age - age)

    ranked_values = tuple(values.ranked_values) if values is not None else ()
    non_negotiable_ids = frozenset(values.non_negotiables) if values is not None else frozenset()
    category_order = _category_order(ranked_values, non_negotiable_ids)

    anchors = tuple(purpose.tradeoff_anchors) if purpose is not None else ()
    anchor_scores = MappingProxyType(
        {anchor.axis: anchor_lean_score(anchor) for anchor in anchors}
    )

    facts = ProfileFacts(
        options=options,
        age=age,
        target_retirement_age=target_age,
        years_to_retirement=years_to_retirement,
        marital_status=basic.marital_status if basic else None,
        employment_status=basic.employment_status if basic else None,
        partnered=bool(
            basic and (basic.marital_status in _PARTNERED_STATUSES or basic.has_spouse is True)
        ),
        dependent_count=(
            sum(1 for dependent in basic.dependents if dependent.financially_dependent)
            if basic
            else 0
        ),
        federal_employee=bool(basic and basic.federal_employee is not None),
        federal_retirement_system=(
            basic.federal_employee.retirement_system
            if basic and basic.federal_employee is not None
            else None
        ),
        has_employer_benefits=bool(basic and basic.has_employer_benefits is True),
        ranked_values=ranked_values,
        non_negotiable_ids=non_negotiable_ids,
        dominant_category=category_order[0] if category_order else None,
        secondary_category=category_order[1] if len(category_order) > 1 else None,
        tradeoff_response_count=len(values.tradeoff_responses) if values is not None else 0,
        goals=tuple(goals.goals) if goals is not None else (),
        anchor_scores=anchor_scores,
        neutral_anchor_count=sum(1 for anchor in anchors if anchor.lean == "NEUTRAL"),
        primary_driver=purpose.primary_driver if purpose else None,
        secondary_driver=purpose.secondary_driver if purpose else None,
        has_final_statement=bool(purpose and (purpose.final_statement or "").strip()),
        complexity_preference=preferences.complexity_tolerance if preferences else None,
        financial_confidence=preferences.financial_confidence if preferences else None,
        product_comfort=preferences.financial_product_comfort if preferences else None,
        advisor_involvement=preferences.advisor_involvement if preferences else None,
        decision_style=preferences.decision_style if preferences else None,
        investment_risk_tolerance=risk.investment_risk_tolerance if risk else None,
        income_stability_preference=risk.income_stability_preference if risk else None,
        downturn_response=risk.market_downturn_response if risk else None,
        guaranteed_income_importance=risk.guaranteed_income_importance if risk else None,
        emergency_fund_months=snapshot.emergency_fund_months if snapshot else None,
        has_life_insurance=snapshot.has_life_insurance if snapshot else None,
        has_disability_insurance=snapshot.has_disability_insurance if snapshot else None,
        has_long_term_care=snapshot.has_long_term_care if snapshot else None,
        has_estate_documents=snapshot.has_estate_documents if snapshot else None,
        self_reported_underinsured=snapshot.self_reported_underinsured if snapshot else None,
        has_high_interest_debt=snapshot.has_high_interest_debt if snapshot else None,
    )
    flags = fired_effects(RISK_FLAG_RULES, facts, FACT_PREDICATES)
    return replace(facts, risk_flags=tuple(flags))
