from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from src.core.models import (
    BasicContext,
    FederalEmployeeInfo,
    FinancialGoal,
    FinancialGoals,
    FinancialPurpose,
    FinancialSnapshot,
    PlanningPreferences,
    Profile,
    RankedValue,
    RiskComfort,
    TradeoffAnchor,
    ValuesDiscovery,
    ValueTradeoffResponse,
)

AS_OF = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def value(value_id: str, title: str, category: str) -> RankedValue:
    return RankedValue(id=value_id, title=title, category=category)


def goal(
    goal_id: str,
    label: str,
    category: str,
    *,
    priority: str | None = None,
    time_horizon: str | None = None,
    flexibility: str | None = None,
) -> FinancialGoal:
    return FinancialGoal(
        id=goal_id,
        label=label,
        category=category,
        priority=priority,
        time_horizon=time_horizon,
        flexibility=flexibility,
    )


def anchor(axis: str, lean: str, strength: int = 3) -> TradeoffAnchor:
    return TradeoffAnchor(axis=axis, lean=lean, strength=strength)


def federal(retirement_system: str = "FERS", years_of_service: int = 20) -> FederalEmployeeInfo:
    return FederalEmployeeInfo(
        agency="VA", years_of_service=years_of_service, retirement_system=retirement_system
    )


def profile(
    *,
    age: int | None = None,
    target_retirement_age: int | None = None,
    marital_status: str | None = None,
    employment_status: str | None = None,
    federal_employee: FederalEmployeeInfo | None = None,
    has_employer_benefits: bool | None = None,
    values: Iterable[RankedValue] | None = None,
    non_negotiables: Iterable[str] | None = None,
    tradeoff_responses: Iterable[ValueTradeoffResponse] | None = None,
    goals: Iterable[FinancialGoal] | None = None,
    primary_driver: str | None = None,
    anchors: Iterable[TradeoffAnchor] | None = None,
    final_statement: str | None = None,
    preferences: PlanningPreferences | None = None,
    risk_comfort: RiskComfort | None = None,
    snapshot: FinancialSnapshot | None = None,
) -> Profile:
    basic_fields = {
        "age": age,
        "target_retirement_age": target_retirement_age,
        "marital_status": marital_status,
        "employment_status": employment_status,
        "federal_employee": federal_employee,
        "has_employer_benefits": has_employer_benefits,
    }
    basic = (
        BasicContext(**basic_fields)
        if any(item is not None for item in basic_fields.values())
        else None
    )
    discovery = (
        ValuesDiscovery(
            ranked_values=list(values or []),
            non_negotiables=list(non_negotiables or []),
            tradeoff_responses=list(tradeoff_responses or []),
        )
        if values is not None or non_negotiables is not None or tradeoff_responses is not None
        else None
    )
    purpose = (
        FinancialPurpose(
            primary_driver=primary_driver,
            tradeoff_anchors=list(anchors or []),
            final_statement=final_statement,
        )
        if primary_driver is not None or anchors is not None or final_statement is not None
        else None
    )
    return Profile(
        basic_context=basic,
        values_discovery=discovery,
        financial_goals=FinancialGoals(goals=list(goals)) if goals is not None else None,
        financial_purpose=purpose,
        planning_preferences=preferences,
        risk_comfort=risk_comfort,
        financial_snapshot=snapshot,
    )


def near_retirement_profile() -> Profile:
    """Security first, retiring early, two years out."""
    return profile(
        age=60,
        target_retirement_age=62,
        values=[value("security_financial_security", "Financial security", "SECURITY")],
        goals=[
            goal(
                "goal_retire_early",
                "Retire early",
                "RETIREMENT",
                priority="HIGH",
                time_horizon="SHORT",
            )
        ],
    )


def protection_gap_profile() -> Profile:
    return profile(
        snapshot=FinancialSnapshot(has_life_insurance=False, has_estate_documents=False)
    )


def complete_profile() -> Profile:
    return profile(
        age=45,
        target_retirement_age=62,
        marital_status="married",
        employment_status="employed_full_time",
        has_employer_benefits=True,
        values=[
            value("security_financial_security", "Financial security", "SECURITY"),
            value("family_provide", "Providing for family", "FAMILY"),
            value("freedom_time", "Freedom with my time", "FREEDOM"),
            value("health_wellbeing", "Health and wellbeing", "HEALTH"),
            value("growth_learning", "Learning and growth", "GROWTH"),
        ],
        non_negotiables=["security_financial_security"],
        tradeoff_responses=[
            ValueTradeoffResponse(
                category_a="SECURITY", category_b="GROWTH", choice="A", strength=2
            )
        ],
        goals=[
            goal(
                "goal_retire",
                "Retire at 62",
                "RETIREMENT",
                priority="HIGH",
                time_horizon="LONG",
                flexibility="FIXED",
            ),
            goal(
                "goal_college",
                "Fund college",
                "FAMILY_LEGACY",
                priority="MEDIUM",
                time_horizon="MID",
                flexibility="FLEXIBLE",
            ),
            goal(
                "goal_home",
                "Kitchen remodel",
                "MAJOR_PURCHASES",
                priority="LOW",
                time_horizon="SHORT",
                flexibility="DEFERABLE",
            ),
        ],
        primary_driver="PROTECT_FAMILY",
        anchors=[anchor("SECURITY_VS_GROWTH", "A", 2)],
        final_statement="I want my family to feel secure no matter what happens.",
        preferences=PlanningPreferences(
            complexity_tolerance=3,
            financial_confidence=3,
            financial_product_comfort="moderate",
            advisor_involvement="collaborative",
            decision_style="deliberate",
        ),
        risk_comfort=RiskComfort(
            investment_risk_tolerance=3,
            income_stability_preference="prefer_stability",
            market_downturn_response="stay_the_course",
            guaranteed_income_importance="very_important",
        ),
        snapshot=FinancialSnapshot(
            emergency_fund_months=Decimal("4"),
            has_life_insurance=True,
            has_disability_insurance=True,
            has_estate_documents=True,
        ),
    )
