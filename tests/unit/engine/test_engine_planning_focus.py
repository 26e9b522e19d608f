from decimal import Decimal

from src.core.models import FinancialSnapshot, InsightsOptions, PlanningDomain, Profile
from src.core.planning_focus import priority_tier, rank_planning_focus
from tests.assertions import assert_dense_ranks, find_ranking, ranked_domains
from tests.factories import (
    AS_OF,
    federal,
    goal,
    near_retirement_profile,
    profile,
    protection_gap_profile,
    value,
)

D = PlanningDomain


def test_empty_profile_ranks_every_applicable_domain_at_zero():
    result = rank_planning_focus(Profile(), as_of=AS_OF)

    assert ranked_domains(result) == [
        D.RETIREMENT_INCOME,
        D.INVESTMENT_STRATEGY,
        D.TAX_OPTIMIZATION,
        D.INSURANCE_RISK,
        D.ESTATE_LEGACY,
        D.CASH_FLOW_DEBT,
        D.HEALTHCARE_LTC,
    ]
    assert result.excluded_domains == [D.BENEFITS_OPTIMIZATION, D.BUSINESS_CAREER]
    assert result.top_priorities == []
    for ranking in result.rankings:
        assert ranking.score == Decimal("0.00")
        assert ranking.priority == "LOW"
        assert ranking.explanation.endswith(
            "because a baseline review keeps the overall plan complete."
        )
    assert_dense_ranks(result)


def test_near_retirement_security_profile_puts_retirement_income_first():
    result = rank_planning_focus(near_retirement_profile(), as_of=AS_OF)

    top = result.rankings[0]
    assert top.domain == D.RETIREMENT_INCOME
    assert top.rank == 1
    assert top.score == Decimal("12.00")
    assert top.priority == "CRITICAL"
    assert top.explanation == (
        "Retirement Income Planning — because your high-priority goal \"Retire early\" "
        "depends on it and you ranked Financial security (security) among your top values."
    )
    assert top.value_connections == ["Financial security"]
    assert top.goal_connections == ["Retire early"]
    assert result.top_priorities == [
        D.RETIREMENT_INCOME,
        D.TAX_OPTIMIZATION,
        D.INVESTMENT_STRATEGY,
    ]
    assert find_ranking(result, D.TAX_OPTIMIZATION).score == Decimal("4.50")
    assert find_ranking(result, D.INVESTMENT_STRATEGY).score == Decimal("3.75")
    assert find_ranking(result, D.HEALTHCARE_LTC).score == Decimal("3.00")
    assert find_ranking(result, D.TAX_OPTIMIZATION).priority == "MODERATE"
    assert find_ranking(result, D.ESTATE_LEGACY).priority == "LOW"
    assert_dense_ranks(result)


def test_protection_gaps_raise_insurance_and_estate():
    result = rank_planning_focus(protection_gap_profile(), as_of=AS_OF)

    assert ranked_domains(result)[:2] == [D.INSURANCE_RISK, D.ESTATE_LEGACY]
    insurance = find_ranking(result, D.INSURANCE_RISK)
    estate = find_ranking(result, D.ESTATE_LEGACY)
    assert insurance.score == estate.score == Decimal("3.00")
    assert insurance.priority == estate.priority == "HIGH"
    assert insurance.risk_factors == ["No life insurance coverage"]
    assert estate.risk_factors == [
        "No will, powers of attorney or healthcare directive in place"
    ]
    assert insurance.explanation == (
        "Insurance & Risk Management — because no life insurance coverage."
    )
    for ranking in result.rankings[2:]:
        assert ranking.score == Decimal("0.00")
        assert ranking.priority == "LOW"
    assert ranked_domains(result)[2:] == [
        D.RETIREMENT_INCOME,
        D.INVESTMENT_STRATEGY,
        D.TAX_OPTIMIZATION,
        D.CASH_FLOW_DEBT,
        D.HEALTHCARE_LTC,
    ]
    assert result.top_priorities == [D.INSURANCE_RISK, D.ESTATE_LEGACY]
    assert result.excluded_domains == [D.BENEFITS_OPTIMIZATION, D.BUSINESS_CAREER]


def test_tied_scores_resolve_by_canonical_domain_order_every_time():
    first = rank_planning_focus(protection_gap_profile(), as_of=AS_OF)
    second = rank_planning_focus(protection_gap_profile().model_dump(), as_of=AS_OF)

    assert ranked_domains(first) == ranked_domains(second)
    assert first.model_dump() == second.model_dump()


def test_benefits_domain_applies_to_federal_employees():
    result = rank_planning_focus(profile(federal_employee=federal()), as_of=AS_OF)

    benefits = find_ranking(result, D.BENEFITS_OPTIMIZATION)
    assert D.BENEFITS_OPTIMIZATION not in result.excluded_domains
    assert result.excluded_domains == [D.BUSINESS_CAREER]
    assert benefits.rank == 1
    assert benefits.score == Decimal("4.00")
    assert benefits.risk_factors == [
        "Federal benefit elections (pension, TSP, FEHB) need a decision plan"
    ]


def test_benefits_domain_applies_with_employer_benefits():
    result = rank_planning_focus(profile(has_employer_benefits=True), as_of=AS_OF)

    assert result.excluded_domains == [D.BUSINESS_CAREER]
    assert len(result.rankings) == 8


def test_career_goal_makes_business_domain_applicable():
    result = rank_planning_focus(
        profile(goals=[goal("g1", "Change careers", "CAREER_GROWTH", priority="MEDIUM")]),
        as_of=AS_OF,
    )

    business = find_ranking(result, D.BUSINESS_CAREER)
    assert business.rank == 1
    assert business.score == Decimal("1.50")
    assert business.goal_connections == ["Change careers"]
    # benefits stays excluded even though career goals map to it
    assert result.excluded_domains == [D.BENEFITS_OPTIMIZATION]


def test_values_past_the_top_five_do_not_contribute():
    values = [
        value("v1", "Financial security", "SECURITY"),
        value("v2", "Freedom", "FREEDOM"),
        value("v3", "Family", "FAMILY"),
        value("v4", "Growth", "GROWTH"),
        value("v5", "Health", "HEALTH"),
        value("v6", "Giving back", "CONTRIBUTION"),
    ]
    result = rank_planning_focus(profile(values=values), as_of=AS_OF)

    for ranking in result.rankings:
        assert "Giving back" not in ranking.value_connections


def test_non_negotiable_value_outweighs_same_rank_value():
    plain = rank_planning_focus(
        profile(values=[value("family", "Family first", "FAMILY")]), as_of=AS_OF
    )
    committed = rank_planning_focus(
        profile(values=[value("family", "Family first", "FAMILY")], non_negotiables=["family"]),
        as_of=AS_OF,
    )

    assert find_ranking(plain, D.ESTATE_LEGACY).score == Decimal("2.00")
    assert find_ranking(committed, D.ESTATE_LEGACY).score == Decimal("3.00")
    assert "you marked Family first (family) as non-negotiable" in (
        find_ranking(committed, D.ESTATE_LEGACY).explanation
    )


def test_partnered_users_get_estate_context_bonus():
    result = rank_planning_focus(profile(marital_status="married"), as_of=AS_OF)

    estate = find_ranking(result, D.ESTATE_LEGACY)
    assert estate.rank == 1
    assert estate.score == Decimal("1.00")
    assert "shared planning with a spouse or partner" in estate.explanation


def test_low_emergency_fund_flags_cash_flow():
    result = rank_planning_focus(
        profile(snapshot=FinancialSnapshot(emergency_fund_months=Decimal("1.5"))), as_of=AS_OF
    )

    cash = find_ranking(result, D.CASH_FLOW_DEBT)
    assert cash.rank == 1
    assert cash.risk_factors == ["Emergency reserves below target"]


def test_custom_tier_thresholds_change_priorities_not_order():
    options = InsightsOptions(
        tier_thresholds={
            "critical_margin": "0",
            "critical_floor": "20",
            "high_margin": "1",
            "high_floor": "10",
            "moderate_floor": "5",
        }
    )
    result = rank_planning_focus(near_retirement_profile(), options, as_of=AS_OF)

    assert ranked_domains(result)[0] == D.RETIREMENT_INCOME
    assert result.rankings[0].priority == "HIGH"
    assert find_ranking(result, D.TAX_OPTIMIZATION).priority == "LOW"


def test_priority_tier_bands():
    thresholds = InsightsOptions().tier_thresholds

    assert priority_tier(Decimal("12"), Decimal("12"), thresholds) == "CRITICAL"
    assert priority_tier(Decimal("10"), Decimal("12"), thresholds) == "CRITICAL"
    assert priority_tier(Decimal("9"), Decimal("12"), thresholds) == "HIGH"
    assert priority_tier(Decimal("4"), Decimal("12"), thresholds) == "MODERATE"
    assert priority_tier(Decimal("0.5"), Decimal("12"), thresholds) == "LOW"


def test_explanation_names_heavier_risk_over_low_priority_goal():
    result = rank_planning_focus(
        profile(
            values=[value("family", "Family first", "FAMILY")],
            goals=[goal("g1", "Protect household", "SECURITY_PROTECTION", priority="LOW")],
            snapshot=FinancialSnapshot(has_life_insurance=False, self_reported_underinsured=True),
        ),
        as_of=AS_OF,
    )

    insurance = result.rankings[0]
    assert insurance.domain == D.INSURANCE_RISK
    # value 1.5, goal 0.5, two risks at 3 each
    assert insurance.score == Decimal("8.00")
    assert insurance.priority == "CRITICAL"
    assert insurance.explanation == (
        "Insurance & Risk Management — because no life insurance coverage and "
        "you ranked Family first (family) among your top values."
    )
    assert insurance.risk_factors == [
        "No life insurance coverage",
        "Current coverage may not be enough",
    ]


def test_connections_are_capped_at_three_entries():
    goals = [
        goal(f"g{index}", f"Retirement goal {index}", "RETIREMENT", priority="HIGH")
        for index in range(1, 5)
    ]
    result = rank_planning_focus(profile(goals=goals), as_of=AS_OF)

    retirement = find_ranking(result, D.RETIREMENT_INCOME)
    assert retirement.goal_connections == [
        "Retirement goal 1",
        "Retirement goal 2",
        "Retirement goal 3",
    ]
    assert retirement.score == Decimal("12.00")
