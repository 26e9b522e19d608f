"""
FILE: src/core/models.py
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator, model_validator


class ValueCategory(str, Enum):
    SECURITY = "SECURITY"
    FREEDOM = "FREEDOM"
    FAMILY = "FAMILY"
    GROWTH = "GROWTH"
    CONTRIBUTION = "CONTRIBUTION"
    PURPOSE = "PURPOSE"
    CONTROL = "CONTROL"
    HEALTH = "HEALTH"
    QUALITY_OF_LIFE = "QUALITY_OF_LIFE"


class GoalCategory(str, Enum):
    RETIREMENT = "RETIREMENT"
    FAMILY_LEGACY = "FAMILY_LEGACY"
    LIFESTYLE = "LIFESTYLE"
    SECURITY_PROTECTION = "SECURITY_PROTECTION"
    GIVING = "GIVING"
    CAREER_GROWTH = "CAREER_GROWTH"
    HEALTH = "HEALTH"
    MAJOR_PURCHASES = "MAJOR_PURCHASES"


class PlanningDomain(str, Enum):
    RETIREMENT_INCOME = "RETIREMENT_INCOME"
    INVESTMENT_STRATEGY = "INVESTMENT_STRATEGY"
    TAX_OPTIMIZATION = "TAX_OPTIMIZATION"
    INSURANCE_RISK = "INSURANCE_RISK"
    ESTATE_LEGACY = "ESTATE_LEGACY"
    CASH_FLOW_DEBT = "CASH_FLOW_DEBT"
    BENEFITS_OPTIMIZATION = "BENEFITS_OPTIMIZATION"
    BUSINESS_CAREER = "BUSINESS_CAREER"
    HEALTHCARE_LTC = "HEALTHCARE_LTC"


MaritalStatus = Literal["single", "married", "divorced", "widowed", "domestic_partnership"]
EmploymentStatus = Literal[
    "employed_full_time",
    "employed_part_time",
    "self_employed",
    "unemployed",
    "retired",
    "homemaker",
    "disabled",
]
RetirementSystem = Literal["FERS", "CSRS", "FERS_RAE", "FERS_FRAE"]
GoalPriority = Literal["HIGH", "MEDIUM", "LOW", "NA"]
GoalTimeHorizon = Literal["SHORT", "MID", "LONG", "ONGOING"]
GoalFlexibility = Literal["FIXED", "FLEXIBLE", "DEFERABLE"]
TradeoffLean = Literal["A", "B", "NEUTRAL"]
TradeoffAxis = Literal[
    "SECURITY_VS_GROWTH",
    "FREEDOM_SOONER_VS_CERTAINTY_LATER",
    "LIFESTYLE_NOW_VS_BUFFER_FIRST",
    "CONTROL_STRUCTURE_VS_FLEXIBILITY",
]
PurposeDriver = Literal[
    "PROTECT_FAMILY",
    "FREEDOM_OPTIONS",
    "STABILITY_PEACE",
    "HEALTH_QUALITY",
    "IMPACT_GIVING",
    "MEANING_PURPOSE",
    "CONTROL_CONFIDENCE",
    "GROWTH_OPPORTUNITY",
]
ComfortLevel = Literal["very_low", "low", "moderate", "high", "very_high"]
InvolvementLevel = Literal["diy", "guidance", "collaborative", "delegated"]
DecisionStyle = Literal["analytical", "intuitive", "consultative", "deliberate"]
StabilityPreference = Literal[
    "strong_stability", "prefer_stability", "balanced", "prefer_growth", "strong_growth"
]
DownturnResponse = Literal[
    "reduce_spending", "delay_retirement", "work_part_time", "stay_the_course", "unsure"
]
ImportanceLevel = Literal["critical", "very_important", "somewhat_important", "not_important"]

IncomeStrategyOrientation = Literal["STABILITY_FOCUSED", "BALANCED", "GROWTH_FOCUSED"]
TimingSensitivity = Literal["HIGH", "MEDIUM", "LOW"]
PlanningFlexibility = Literal["HIGH", "MODERATE", "LOW"]
ComplexityTolerance = Literal["SIMPLE", "MODERATE", "ADVANCED"]
DecisionSupportNeed = Literal["HIGH", "MODERATE", "LOW"]
FocusPriority = Literal["CRITICAL", "HIGH", "MODERATE", "LOW"]
ActionType = Literal[
    "EDUCATION_AWARENESS",
    "DECISION_PREPARATION",
    "STRUCTURAL_SETUP",
    "PROFESSIONAL_REVIEW",
    "OPTIMIZATION",
]
ActionGuidance = Literal["SELF_GUIDED", "ADVISOR_GUIDED", "SPECIALIST_GUIDED"]
ActionUrgency = Literal["IMMEDIATE", "NEAR_TERM", "MEDIUM_TERM", "ONGOING"]


# ---------------------------------------------------------------------------
# Profile (input)
# ---------------------------------------------------------------------------


class Dependent(BaseModel):
    relationship: str = Field(description="Relationship to the user.", examples=["child"])
    birth_date: Optional[date] = Field(default=None, description="Dependent birth date.")
    financially_dependent: bool = Field(
        default=True,
        description="Whether the dependent relies on the user's income.",
        examples=[True],
    )


class FederalEmployeeInfo(BaseModel):
    agency: Optional[str] = Field(default=None, description="Employing agency.", examples=["VA"])
    years_of_service: Optional[int] = Field(
        default=None, ge=0, description="Creditable years of service.", examples=[22]
    )
    retirement_system: Optional[RetirementSystem] = Field(
        default=None, description="Federal retirement system.", examples=["FERS"]
    )


class BasicContext(BaseModel):
    age: Optional[int] = Field(default=None, ge=0, le=120, description="Age in years.")
    target_retirement_age: Optional[int] = Field(
        default=None, ge=0, le=120, description="Age at which the user plans to retire."
    )
    birth_date: Optional[date] = Field(
        default=None,
        description="Birth date, used to derive age when `age` is not supplied.",
    )
    marital_status: Optional[MaritalStatus] = Field(default=None, description="Marital status.")
    employment_status: Optional[EmploymentStatus] = Field(
        default=None, description="Current employment status."
    )
    occupation: Optional[str] = Field(default=None, description="Free-text occupation.")
    dependents: List[Dependent] = Field(
        default_factory=list, description="People who depend on the user."
    )
    federal_employee: Optional[FederalEmployeeInfo] = Field(
        default=None, description="Federal employment record, when the user is a federal employee."
    )
    has_employer_benefits: Optional[bool] = Field(
        default=None,
        description="Whether the user has access to an employer-sponsored benefits package.",
    )
    has_spouse: Optional[bool] = Field(
        default=None, description="Whether a spouse or partner is part of the plan."
    )


class RankedValue(BaseModel):
    id: str = Field(description="Value card identifier.", examples=["security_stable_income"])
    title: str = Field(description="Display title of the value.", examples=["Stable income"])
    category: ValueCategory = Field(description="Internal value category.", examples=["SECURITY"])


class ValueTradeoffResponse(BaseModel):
    category_a: ValueCategory = Field(description="First category of the forced choice.")
    category_b: ValueCategory = Field(description="Second category of the forced choice.")
    choice: TradeoffLean = Field(description="Which side the user chose.")
    strength: int = Field(default=3, ge=1, le=5, description="1 = strong A, 5 = strong B.")


class ValuesDiscovery(BaseModel):
    ranked_values: List[RankedValue] = Field(
        default_factory=list,
        description="Values ordered from most to least important.",
    )
    non_negotiables: List[str] = Field(
        default_factory=list,
        description="Identifiers of values the user will not trade away.",
    )
    tradeoff_responses: List[ValueTradeoffResponse] = Field(
        default_factory=list, description="Responses to value tradeoff questions."
    )


class FinancialGoal(BaseModel):
    id: str = Field(description="Goal identifier.", examples=["goal_retire_early"])
    label: str = Field(description="Goal label as the user phrased it.", examples=["Retire early"])
    category: GoalCategory = Field(description="Internal goal category.", examples=["RETIREMENT"])
    priority: Optional[GoalPriority] = Field(default=None, description="Priority bucket.")
    time_horizon: Optional[GoalTimeHorizon] = Field(default=None, description="Time horizon.")
    flexibility: Optional[GoalFlexibility] = Field(
        default=None, description="How much the goal can bend."
    )


class FinancialGoals(BaseModel):
    goals: List[FinancialGoal] = Field(default_factory=list, description="All captured goals.")


class TradeoffAnchor(BaseModel):
    axis: TradeoffAxis = Field(description="Tradeoff axis.", examples=["SECURITY_VS_GROWTH"])
    lean: TradeoffLean = Field(description="A, B or NEUTRAL.", examples=["A"])
    strength: int = Field(default=3, ge=1, le=5, description="1 = strong A, 5 = strong B.")


class FinancialPurpose(BaseModel):
    primary_driver: Optional[PurposeDriver] = Field(default=None, description="Primary driver.")
    secondary_driver: Optional[PurposeDriver] = Field(
        default=None, description="Secondary driver."
    )
    tradeoff_anchors: List[TradeoffAnchor] = Field(
        default_factory=list, description="Recorded tradeoff leanings."
    )
    final_statement: Optional[str] = Field(
        default=None, description="Final statement of financial purpose."
    )


class PlanningPreferences(BaseModel):
    complexity_tolerance: Optional[int] = Field(
        default=None, ge=1, le=5, description="Self-rated tolerance for complexity (1-5)."
    )
    financial_confidence: Optional[int] = Field(
        default=None, ge=1, le=5, description="Self-rated financial confidence (1-5)."
    )
    financial_product_comfort: Optional[ComfortLevel] = Field(
        default=None, description="Comfort with financial products."
    )
    advisor_involvement: Optional[InvolvementLevel] = Field(
        default=None, description="Desired level of advisor involvement."
    )
    decision_style: Optional[DecisionStyle] = Field(default=None, description="Decision style.")


class RiskComfort(BaseModel):
    investment_risk_tolerance: Optional[int] = Field(
        default=None, ge=1, le=5, description="Investment risk tolerance (1-5)."
    )
    income_stability_preference: Optional[StabilityPreference] = Field(
        default=None, description="Preference between stable and growth-oriented income."
    )
    market_downturn_response: Optional[DownturnResponse] = Field(
        default=None, description="Expected response to a market downturn."
    )
    guaranteed_income_importance: Optional[ImportanceLevel] = Field(
        default=None, description="Importance of guaranteed income."
    )


class FinancialSnapshot(BaseModel):
    emergency_fund_months: Optional[Decimal] = Field(
        default=None, ge=0, description="Months of expenses held in reserves.", examples=["2"]
    )
    has_life_insurance: Optional[bool] = Field(default=None, description="Life insurance held.")
    has_disability_insurance: Optional[bool] = Field(
        default=None, description="Disability insurance held."
    )
    has_long_term_care: Optional[bool] = Field(
        default=None, description="Long-term care coverage held."
    )
    has_estate_documents: Optional[bool] = Field(
        default=None, description="Will, powers of attorney and directives are in place."
    )
    self_reported_underinsured: Optional[bool] = Field(
        default=None, description="User believes current coverage is not enough."
    )
    has_high_interest_debt: Optional[bool] = Field(
        default=None, description="User carries high-interest consumer debt."
    )


class Profile(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "basic_context": {"age": 60, "target_retirement_age": 62},
                "values_discovery": {
                    "ranked_values": [
                        {
                            "id": "security_financial_security",
                            "title": "Financial security",
                            "category": "SECURITY",
                        }
                    ]
                },
                "financial_goals": {
                    "goals": [
                        {
                            "id": "g1",
                            "label": "Retire early",
                            "category": "RETIREMENT",
                            "priority": "HIGH",
                            "time_horizon": "SHORT",
                        }
                    ]
                },
            }
        }
    }

    basic_context: Optional[BasicContext] = Field(default=None, description="Basic context.")
    values_discovery: Optional[ValuesDiscovery] = Field(
        default=None, description="Values discovery results."
    )
    financial_goals: Optional[FinancialGoals] = Field(default=None, description="Goals.")
    financial_purpose: Optional[FinancialPurpose] = Field(
        default=None, description="Statement of financial purpose inputs."
    )
    planning_preferences: Optional[PlanningPreferences] = Field(
        default=None, description="Planning and decision preferences."
    )
    risk_comfort: Optional[RiskComfort] = Field(default=None, description="Risk comfort.")
    financial_snapshot: Optional[FinancialSnapshot] = Field(
        default=None, description="Light-touch financial snapshot."
    )


# ---------------------------------------------------------------------------
# Engine options
# ---------------------------------------------------------------------------


class TierThresholds(BaseModel):
    critical_margin: Decimal = Field(
        default=Decimal("2"),
        ge=0,
        description="Max distance below the top score that still counts as CRITICAL.",
    )
    critical_floor: Decimal = Field(
        default=Decimal("5"), ge=0, description="Minimum score for CRITICAL."
    )
    high_margin: Decimal = Field(
        default=Decimal("6"),
        ge=0,
        description="Max distance below the top score that still counts as HIGH.",
    )
    high_floor: Decimal = Field(default=Decimal("3"), ge=0, description="Minimum score for HIGH.")
    moderate_floor: Decimal = Field(
        default=Decimal("1"), ge=0, description="Minimum score for MODERATE."
    )

    @model_validator(mode="after")
    def validate_band_order(self) -> "TierThresholds":
        if self.critical_margin > self.high_margin:
            raise ValueError("critical_margin must not exceed high_margin")
        if not (self.moderate_floor <= self.high_floor <= self.critical_floor):
            raise ValueError("floors must satisfy moderate_floor <= high_floor <= critical_floor")
        return self


class InsightsOptions(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {"min_actions": 3, "max_actions": 7, "near_retirement_years": 3}
        }
    }

    min_actions: int = Field(
        default=3,
        ge=0,
        description="Action floor applied whenever enough justified actions qualify.",
        examples=[3],
    )
    max_actions: int = Field(
        default=7, ge=1, description="Maximum number of emitted actions.", examples=[7]
    )
    near_retirement_years: int = Field(
        default=3, ge=0, description="Years to retirement treated as imminent.", examples=[3]
    )
    approaching_retirement_years: int = Field(
        default=10, ge=0, description="Years to retirement treated as approaching.", examples=[10]
    )
    long_horizon_years: int = Field(
        default=20, ge=0, description="Years to retirement treated as a long runway.", examples=[20]
    )
    low_emergency_fund_months: Decimal = Field(
        default=Decimal("3"),
        ge=0,
        description="Reserves below this many months of expenses are a red flag.",
        examples=["3"],
    )
    default_retirement_age: int = Field(
        default=65,
        ge=0,
        le=120,
        description="Retirement age assumed when only a birth date or age is known.",
        examples=[65],
    )
    tier_thresholds: TierThresholds = Field(
        default_factory=TierThresholds, description="Score bands for focus priorities."
    )

    @model_validator(mode="after")
    def validate_ranges(self) -> "InsightsOptions":
        if self.min_actions > self.max_actions:
            raise ValueError("min_actions must not exceed max_actions")
        if self.near_retirement_years > self.approaching_retirement_years:
            raise ValueError("near_retirement_years must not exceed approaching_retirement_years")
        if self.approaching_retirement_years > self.long_horizon_years:
            raise ValueError("approaching_retirement_years must not exceed long_horizon_years")
        return self


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

T = TypeVar("T")


class Dimension(BaseModel, Generic[T]):
    model_config = {"frozen": True}

    value: T = Field(description="Scored value of the dimension.")
    confidence: int = Field(ge=0, le=100, description="Confidence in the value (0-100).")
    rationale: str = Field(description="Why this value was chosen.")
    inputs: List[str] = Field(
        default_factory=list, description="Profile inputs that contributed to the value."
    )

    @model_validator(mode="after")
    def validate_traceable_rationale(self) -> "Dimension[T]":
        if self.confidence > 0 and not self.inputs:
            raise ValueError("a dimension with confidence > 0 must cite at least one input")
        return self


class StrategyProfile(BaseModel):
    model_config = {"frozen": True}

    income_strategy: Dimension[IncomeStrategyOrientation]
    timing_sensitivity: Dimension[TimingSensitivity]
    planning_flexibility: Dimension[PlanningFlexibility]
    complexity_tolerance: Dimension[ComplexityTolerance]
    decision_support: Dimension[DecisionSupportNeed]
    summary: str = Field(description="Deterministic natural-language summary.")
    generated_at: str = Field(description="ISO-8601 generation timestamp.")


class FocusAreaRanking(BaseModel):
    model_config = {"frozen": True}

    domain: PlanningDomain
    priority: FocusPriority
    rank: int = Field(ge=1, description="Dense rank, 1 = highest.")
    explanation: str
    value_connections: List[str] = Field(default_factory=list)
    goal_connections: List[str] = Field(default_factory=list)
    risk_factors: List[str] = Field(default_factory=list)
    score: Decimal

    @field_validator("score")
    @classmethod
    def quantize_score(cls, value: Decimal) -> Decimal:
        return value.quantize(Decimal("0.01"))


class PlanningFocusResult(BaseModel):
    model_config = {"frozen": True}

    rankings: List[FocusAreaRanking]
    top_priorities: List[PlanningDomain] = Field(
        description="Up to three highest-ranked domains with a positive score."
    )
    excluded_domains: List[PlanningDomain] = Field(
        default_factory=list, description="Conditional domains that did not apply."
    )
    generated_at: str

    @model_validator(mode="after")
    def validate_dense_ranks(self) -> "PlanningFocusResult":
        ranks = [item.rank for item in self.rankings]
        if sorted(ranks) != list(range(1, len(ranks) + 1)):
            raise ValueError("rankings must carry a dense permutation of 1..N")
        return self


class ActionRecommendation(BaseModel):
    model_config = {"frozen": True}

    id: str
    title: str
    description: str
    why_it_matters: str
    what_it_achieves: str
    action_type: ActionType
    guidance: ActionGuidance
    urgency: ActionUrgency
    related_domain: PlanningDomain
    related_values: List[str] = Field(default_factory=list)
    related_goals: List[str] = Field(default_factory=list)
    related_risks: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    priority: int = Field(ge=1, description="1-based position in the ordered list.")

    @model_validator(mode="after")
    def validate_not_orphaned(self) -> "ActionRecommendation":
        if not (self.related_values or self.related_goals or self.related_risks):
            raise ValueError(f"action {self.id} has no value, goal or risk connection")
        return self


class ActionRecommendations(BaseModel):
    model_config = {"frozen": True}

    recommendations: List[ActionRecommendation]
    top_actions: List[str] = Field(
        default_factory=list, description="Ids of up to five immediate or near-term actions."
    )
    generated_at: str


class InsightsInputSummary(BaseModel):
    model_config = {"frozen": True}

    has_values: bool
    has_goals: bool
    has_purpose: bool
    has_basic_context: bool
    completion_percentage: int = Field(ge=0, le=100)


class DiscoveryInsights(BaseModel):
    model_config = {"frozen": True}

    strategy_profile: StrategyProfile
    focus_areas: PlanningFocusResult
    actions: ActionRecommendations
    input_summary: InsightsInputSummary
    profile_hash: str = Field(description="Canonical hash of the profile the insights describe.")
    generated_at: str


class InsightsReadiness(BaseModel):
    input_summary: InsightsInputSummary
    ready: bool = Field(description="Whether enough data exists for meaningful insights.")
    status_message: str
    missing_data_suggestions: List[str] = Field(default_factory=list)
