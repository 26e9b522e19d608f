"""
FILE: src/core/domain_mappings.py
Static value/goal -> planning domain tables shared by the focus ranker and
the action generator. Read-only: every table is a MappingProxyType over tuples.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Tuple

from src.core.models import GoalCategory, PlanningDomain, ValueCategory

D = PlanningDomain

CANONICAL_DOMAIN_ORDER: Tuple[PlanningDomain, ...] = (
    D.RETIREMENT_INCOME,
    D.INVESTMENT_STRATEGY,
    D.TAX_OPTIMIZATION,
    D.INSURANCE_RISK,
    D.ESTATE_LEGACY,
    D.CASH_FLOW_DEBT,
    D.BENEFITS_OPTIMIZATION,
    D.BUSINESS_CAREER,
    D.HEALTHCARE_LTC,
)

DOMAIN_ORDER_INDEX: Mapping[PlanningDomain, int] = MappingProxyType(
    {domain: index for index, domain in enumerate(CANONICAL_DOMAIN_ORDER)}
)

DOMAIN_LABELS: Mapping[PlanningDomain, str] = MappingProxyType(
    {
        D.RETIREMENT_INCOME: "Retirement Income Planning",
        D.INVESTMENT_STRATEGY: "Investment Strategy",
        D.TAX_OPTIMIZATION: "Tax Optimization",
        D.INSURANCE_RISK: "Insurance & Risk Management",
        D.ESTATE_LEGACY: "Estate & Legacy Planning",
        D.CASH_FLOW_DEBT: "Cash Flow & Debt Management",
        D.BENEFITS_OPTIMIZATION: "Benefits Optimization",
        D.BUSINESS_CAREER: "Business & Career Planning",
        D.HEALTHCARE_LTC: "Healthcare & Long-Term Care",
    }
)

VALUE_CATEGORY_LABELS: Mapping[ValueCategory, str] = MappingProxyType(
    {
        ValueCategory.SECURITY: "security",
        ValueCategory.FREEDOM: "freedom",
        ValueCategory.FAMILY: "family",
        ValueCategory.GROWTH: "growth",
        ValueCategory.CONTRIBUTION: "contribution",
        ValueCategory.PURPOSE: "purpose",
        ValueCategory.CONTROL: "control",
        ValueCategory.HEALTH: "health",
        ValueCategory.QUALITY_OF_LIFE: "quality of life",
    }
)

# Position inside a mapping list sets the weight: primary, secondary, tertiary.
MAPPING_POSITION_WEIGHTS: Tuple[Decimal, ...] = (Decimal("1.0"), Decimal("0.75"), Decimal("0.5"))

VALUE_DOMAIN_MAP: Mapping[ValueCategory, Tuple[PlanningDomain, ...]] = MappingProxyType(
    {
        ValueCategory.SECURITY: (D.RETIREMENT_INCOME, D.INSURANCE_RISK, D.CASH_FLOW_DEBT),
        ValueCategory.FREEDOM: (D.INVESTMENT_STRATEGY, D.CASH_FLOW_DEBT, D.RETIREMENT_INCOME),
        ValueCategory.FAMILY: (D.ESTATE_LEGACY, D.INSURANCE_RISK, D.HEALTHCARE_LTC),
        ValueCategory.GROWTH: (D.INVESTMENT_STRATEGY, D.TAX_OPTIMIZATION, D.BUSINESS_CAREER),
        ValueCategory.CONTROL: (D.CASH_FLOW_DEBT, D.TAX_OPTIMIZATION, D.INVESTMENT_STRATEGY),
        ValueCategory.HEALTH: (D.HEALTHCARE_LTC, D.INSURANCE_RISK),
        ValueCategory.CONTRIBUTION: (D.ESTATE_LEGACY, D.TAX_OPTIMIZATION),
        ValueCategory.PURPOSE: (D.BUSINESS_CAREER, D.ESTATE_LEGACY),
        ValueCategory.QUALITY_OF_LIFE: (
            D.RETIREMENT_INCOME,
            D.CASH_FLOW_DEBT,
            D.HEALTHCARE_LTC,
        ),
    }
)

GOAL_DOMAIN_MAP: Mapping[GoalCategory, Tuple[PlanningDomain, ...]] = MappingProxyType(
    {
        GoalCategory.RETIREMENT: (D.RETIREMENT_INCOME, D.INVESTMENT_STRATEGY, D.TAX_OPTIMIZATION),
        GoalCategory.FAMILY_LEGACY: (D.ESTATE_LEGACY, D.INSURANCE_RISK, D.CASH_FLOW_DEBT),
        GoalCategory.LIFESTYLE: (D.CASH_FLOW_DEBT, D.INVESTMENT_STRATEGY),
        GoalCategory.SECURITY_PROTECTION: (
            D.INSURANCE_RISK,
            D.CASH_FLOW_DEBT,
            D.RETIREMENT_INCOME,
        ),
        GoalCategory.GIVING: (D.ESTATE_LEGACY, D.TAX_OPTIMIZATION),
        GoalCategory.CAREER_GROWTH: (D.BUSINESS_CAREER, D.BENEFITS_OPTIMIZATION),
        GoalCategory.HEALTH: (D.HEALTHCARE_LTC, D.INSURANCE_RISK),
        GoalCategory.MAJOR_PURCHASES: (D.CASH_FLOW_DEBT, D.INVESTMENT_STRATEGY),
    }
)

# Rank multipliers for the user's top five values; anything past five does not count.
VALUE_RANK_MULTIPLIERS: Tuple[Decimal, ...] = (
    Decimal("1.0"),
    Decimal("0.8"),
    Decimal("0.6"),
    Decimal("0.5"),
    Decimal("0.4"),
)

GOAL_PRIORITY_POINTS: Mapping[str, Decimal] = MappingProxyType(
    {"HIGH": Decimal("3"), "MEDIUM": Decimal("1.5"), "LOW": Decimal("0.5"), "NA": Decimal("0")}
)


def mapping_weight(position: int) -> Decimal:
    if position < len(MAPPING_POSITION_WEIGHTS):
        return MAPPING_POSITION_WEIGHTS[position]
    return MAPPING_POSITION_WEIGHTS[-1]


def domains_for_value(category: ValueCategory) -> Tuple[PlanningDomain, ...]:
    return VALUE_DOMAIN_MAP.get(category, ())


def domains_for_goal(category: GoalCategory) -> Tuple[PlanningDomain, ...]:
    return GOAL_DOMAIN_MAP.get(category, ())
