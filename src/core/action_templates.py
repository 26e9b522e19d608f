"""
FILE: src/core/action_templates.py
Action template library. Pure data: adding a template never needs a code change.

`why` completes a sentence and may use {value}, {goal}, {risk} and {years};
`what` is a noun phrase describing the outcome.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from src.core.common.rules import Condition
from src.core.models import (
    ActionGuidance,
    ActionType,
    ActionUrgency,
    GoalCategory,
    PlanningDomain,
    ValueCategory,
)

D = PlanningDomain


@dataclass(frozen=True)
class ActionTemplate:
    id: str
    domain: PlanningDomain
    title: str
    description: str
    why: str
    what: str
    action_type: ActionType
    guidance: ActionGuidance
    urgency: ActionUrgency
    when: Tuple[Condition, ...] = ()
    when_any: Tuple[Condition, ...] = ()
    max_focus_rank: Optional[int] = None
    addresses_risks: Tuple[str, ...] = ()
    dependencies: Tuple[str, ...] = ()


ACTION_TEMPLATES: Tuple[ActionTemplate, ...] = (
    # Retirement income
    ActionTemplate(
        id="retirement-income-sources",
        domain=D.RETIREMENT_INCOME,
        title="Map your retirement income sources",
        description=(
            "List every expected source of retirement income, including pensions, "
            "Social Security, savings and part-time work, with the age each one starts."
        ),
        why="knowing what will fund each year of retirement shows whether the plan holds up.",
        what="a complete inventory of when and from where retirement income arrives",
        action_type="EDUCATION_AWARENESS",
        guidance="SELF_GUIDED",
        urgency="NEAR_TERM",
    ),
    ActionTemplate(
        id="retirement-income-strategy",
        domain=D.RETIREMENT_INCOME,
        title="Design a retirement income strategy",
        description=(
            "Decide how savings will be turned into a paycheck, which accounts are drawn first "
            "and how much income should be guaranteed."
        ),
        why="a deliberate withdrawal order keeps income steady once the paychecks stop.",
        what="a sustainable income plan matched to your spending needs",
        action_type="DECISION_PREPARATION",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
        dependencies=("retirement-income-sources",),
    ),
    ActionTemplate(
        id="federal-retirement-analysis",
        domain=D.RETIREMENT_INCOME,
        title="Analyze your federal retirement benefits",
        description=(
            "Review your pension estimate, service credit, TSP balance and the earliest date "
            "you can retire with an unreduced annuity."
        ),
        why="federal pension rules reward precise timing, and small choices add up for life.",
        what="a clear view of your annuity, supplement and TSP options",
        action_type="PROFESSIONAL_REVIEW",
        guidance="SPECIALIST_GUIDED",
        urgency="NEAR_TERM",
        when=(Condition("federal_employee"),),
    ),
    ActionTemplate(
        id="retirement-lifestyle-vision",
        domain=D.RETIREMENT_INCOME,
        title="Describe the retirement you want",
        description="Write down where you will live, how you will spend time and what it costs.",
        why="a concrete picture of retirement turns a vague target into a number.",
        what="a retirement lifestyle with a realistic annual budget",
        action_type="EDUCATION_AWARENESS",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="social-security-timing",
        domain=D.RETIREMENT_INCOME,
        title="Compare Social Security claiming ages",
        description="Compare benefit estimates at 62, full retirement age and 70.",
        why="with about {years} years to retirement, the claiming decision is approaching.",
        what="a claiming age chosen on purpose rather than by default",
        action_type="DECISION_PREPARATION",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
        when=(Condition("approaching_retirement"),),
        max_focus_rank=5,
    ),
    # Investment strategy
    ActionTemplate(
        id="investment-risk-review",
        domain=D.INVESTMENT_STRATEGY,
        title="Review your investment risk alignment",
        description=(
            "Compare how your portfolio is invested today with the risk you are willing "
            "and able to take."
        ),
        why="a portfolio that fits your comfort with risk is one you can stick with.",
        what="an allocation that reflects your time horizon and comfort with volatility",
        action_type="PROFESSIONAL_REVIEW",
        guidance="ADVISOR_GUIDED",
        urgency="NEAR_TERM",
    ),
    ActionTemplate(
        id="investment-account-organization",
        domain=D.INVESTMENT_STRATEGY,
        title="Organize your investment accounts",
        description="Gather every brokerage, retirement and savings account into one view.",
        why="you cannot steer what you cannot see in one place.",
        what="a single, current view of every account and what it holds",
        action_type="STRUCTURAL_SETUP",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="investment-growth-focus",
        domain=D.INVESTMENT_STRATEGY,
        title="Build a long-term growth plan",
        description="Set a growth-oriented allocation for money you will not need for years.",
        why="long-horizon money can afford to work harder for you.",
        what="a growth allocation for long-term dollars with clear guardrails",
        action_type="OPTIMIZATION",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
        when_any=(
            Condition("has_value_category", ValueCategory.GROWTH),
            Condition("has_value_category", ValueCategory.FREEDOM),
            Condition("long_horizon"),
        ),
        dependencies=("investment-risk-review",),
    ),
    ActionTemplate(
        id="investment-rebalancing-policy",
        domain=D.INVESTMENT_STRATEGY,
        title="Set a rebalancing policy",
        description="Agree on when and how the portfolio is brought back to its targets.",
        why="a written policy keeps emotions out of market swings.",
        what="a rebalancing routine you can follow in any market",
        action_type="STRUCTURAL_SETUP",
        guidance="ADVISOR_GUIDED",
        urgency="ONGOING",
        max_focus_rank=4,
        dependencies=("investment-risk-review",),
    ),
    # Tax optimization
    ActionTemplate(
        id="tax-strategy-review",
        domain=D.TAX_OPTIMIZATION,
        title="Review your tax situation",
        description=(
            "Look at recent returns for missed deductions, bracket management and the mix of "
            "taxable, tax-deferred and tax-free accounts."
        ),
        why="taxes are one of the largest costs you can plan around.",
        what="a multi-year view of your tax brackets and account mix",
        action_type="PROFESSIONAL_REVIEW",
        guidance="SPECIALIST_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="roth-conversion-analysis",
        domain=D.TAX_OPTIMIZATION,
        title="Evaluate Roth conversion opportunities",
        description="Model whether converting pre-tax savings in lower-income years pays off.",
        why="converting in lower-bracket years can reduce lifetime taxes.",
        what="a yes-or-no decision on conversions, with amounts and years",
        action_type="DECISION_PREPARATION",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
        max_focus_rank=5,
        dependencies=("emergency-fund-target", "tax-strategy-review"),
    ),
    ActionTemplate(
        id="tax-advantaged-accounts",
        domain=D.TAX_OPTIMIZATION,
        title="Check your use of tax-advantaged accounts",
        description="Confirm which IRA, workplace plan and HSA limits you are using each year.",
        why="unused contribution room is a tax break that expires every year.",
        what="annual contributions that use the tax breaks available to you",
        action_type="EDUCATION_AWARENESS",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="tax-efficient-withdrawals",
        domain=D.TAX_OPTIMIZATION,
        title="Plan tax-efficient retirement withdrawals",
        description="Sequence withdrawals across account types to manage brackets in retirement.",
        why="the order you draw from accounts changes how long savings last.",
        what="a withdrawal sequence that keeps more of each dollar",
        action_type="OPTIMIZATION",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
        when=(Condition("approaching_retirement"),),
        dependencies=("retirement-income-strategy",),
    ),
    ActionTemplate(
        id="charitable-giving-strategy",
        domain=D.TAX_OPTIMIZATION,
        title="Structure your charitable giving",
        description="Compare donor-advised funds, appreciated stock and qualified distributions.",
        why="thoughtful structure lets the same gift do more good.",
        what="a giving plan that is both generous and tax-aware",
        action_type="OPTIMIZATION",
        guidance="SPECIALIST_GUIDED",
        urgency="ONGOING",
        when_any=(
            Condition("has_goal_category", GoalCategory.GIVING),
            Condition("has_value_category", ValueCategory.CONTRIBUTION),
        ),
    ),
    # Insurance and risk
    ActionTemplate(
        id="insurance-coverage-review",
        domain=D.INSURANCE_RISK,
        title="Review your insurance coverage",
        description="Check life and disability coverage against what your household needs.",
        why="coverage that matches your life keeps one bad event from undoing years of progress.",
        what="confirmed coverage with gaps and overlaps identified",
        action_type="PROFESSIONAL_REVIEW",
        guidance="ADVISOR_GUIDED",
        urgency="NEAR_TERM",
        addresses_risks=("SELF_REPORTED_UNDERINSURED", "NO_DISABILITY_INSURANCE"),
    ),
    ActionTemplate(
        id="life-insurance-needs",
        domain=D.INSURANCE_RISK,
        title="Calculate your life insurance needs",
        description="Estimate how much coverage would replace your income and cover obligations.",
        why="the people who rely on you need a plan if your income stops.",
        what="a coverage amount and term based on real obligations",
        action_type="DECISION_PREPARATION",
        guidance="ADVISOR_GUIDED",
        urgency="NEAR_TERM",
        when_any=(
            Condition("has_dependents"),
            Condition("partnered"),
            Condition("has_risk", "NO_LIFE_INSURANCE"),
        ),
        addresses_risks=("NO_LIFE_INSURANCE", "DEPENDENTS_WITHOUT_LIFE_INSURANCE"),
    ),
    ActionTemplate(
        id="coverage-inventory",
        domain=D.INSURANCE_RISK,
        title="Create an inventory of current policies",
        description="Record each policy, its coverage amount, premium and beneficiaries.",
        why="a clear record makes every later coverage decision faster.",
        what="one list of every policy you hold",
        action_type="STRUCTURAL_SETUP",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="liability-protection-review",
        domain=D.INSURANCE_RISK,
        title="Review property and liability protection",
        description="Check home, auto and umbrella liability limits against what you own.",
        why="a single lawsuit or uninsured loss can reach savings you have worked to build.",
        what="liability limits sized to protect your assets",
        action_type="PROFESSIONAL_REVIEW",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="disability-coverage-check",
        domain=D.INSURANCE_RISK,
        title="Check your disability income protection",
        description="Confirm what employer and individual disability coverage would pay.",
        why="your ability to earn is the asset that funds every other goal.",
        what="a clear answer on how long income continues if you cannot work",
        action_type="EDUCATION_AWARENESS",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
        when=(Condition("is_working"),),
        addresses_risks=("NO_DISABILITY_INSURANCE",),
    ),
    # Estate and legacy
    ActionTemplate(
        id="estate-documents-review",
        domain=D.ESTATE_LEGACY,
        title="Put core estate documents in place",
        description=(
            "Create or update your will, financial power of attorney and healthcare directive."
        ),
        why="these documents decide who acts for you and who inherits when you cannot.",
        what="legally valid documents that reflect your current wishes",
        action_type="PROFESSIONAL_REVIEW",
        guidance="SPECIALIST_GUIDED",
        urgency="NEAR_TERM",
        addresses_risks=("NO_ESTATE_DOCUMENTS",),
    ),
    ActionTemplate(
        id="beneficiary-audit",
        domain=D.ESTATE_LEGACY,
        title="Audit your beneficiary designations",
        description="Check every account and policy for current primary and backup beneficiaries.",
        why="beneficiary forms override a will, and outdated ones are a common mistake.",
        what="beneficiary designations that match your intentions",
        action_type="STRUCTURAL_SETUP",
        guidance="SELF_GUIDED",
        urgency="NEAR_TERM",
    ),
    ActionTemplate(
        id="legacy-planning",
        domain=D.ESTATE_LEGACY,
        title="Define the legacy you want to leave",
        description="Decide what you want to pass on, to whom, and how it should be structured.",
        why="a clear legacy plan turns good intentions into specific instructions.",
        what="a written legacy vision your heirs and advisors can follow",
        action_type="DECISION_PREPARATION",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
        when_any=(
            Condition("has_goal_category", GoalCategory.FAMILY_LEGACY),
            Condition("has_goal_category", GoalCategory.GIVING),
            Condition("has_value_category", ValueCategory.FAMILY),
            Condition("has_value_category", ValueCategory.CONTRIBUTION),
        ),
        dependencies=("estate-documents-review",),
    ),
    ActionTemplate(
        id="family-financial-conversation",
        domain=D.ESTATE_LEGACY,
        title="Hold a family money conversation",
        description="Share where documents live and what your wishes are with the people involved.",
        why="plans only work when the people they depend on know about them.",
        what="family members who know your wishes and where to find things",
        action_type="EDUCATION_AWARENESS",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    # Cash flow and debt
    ActionTemplate(
        id="emergency-fund-target",
        domain=D.CASH_FLOW_DEBT,
        title="Set an emergency fund target",
        description="Pick a reserve target in months of expenses and automate contributions.",
        why="a cash cushion keeps surprises from becoming debt.",
        what="a funded reserve sized to your household",
        action_type="STRUCTURAL_SETUP",
        guidance="SELF_GUIDED",
        urgency="NEAR_TERM",
        addresses_risks=("LOW_EMERGENCY_FUND",),
    ),
    ActionTemplate(
        id="debt-payoff-strategy",
        domain=D.CASH_FLOW_DEBT,
        title="Create a debt payoff plan",
        description="Order debts by interest rate and set a payoff date for each.",
        why="high-interest balances compound against you every month.",
        what="a payoff schedule that frees cash flow for your priorities",
        action_type="DECISION_PREPARATION",
        guidance="SELF_GUIDED",
        urgency="NEAR_TERM",
        when=(Condition("has_risk", "HIGH_INTEREST_DEBT"),),
        addresses_risks=("HIGH_INTEREST_DEBT",),
    ),
    ActionTemplate(
        id="values-based-spending-plan",
        domain=D.CASH_FLOW_DEBT,
        title="Build a values-based spending plan",
        description="Sort spending into what supports your priorities and what does not.",
        why="spending aligned with your priorities makes saving feel less like sacrifice.",
        what="a monthly plan that funds what matters and trims what does not",
        action_type="STRUCTURAL_SETUP",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="automate-savings",
        domain=D.CASH_FLOW_DEBT,
        title="Automate your savings",
        description="Schedule transfers to savings and investment accounts on payday.",
        why="automatic saving happens before spending has a chance to compete.",
        what="steady progress that does not depend on willpower",
        action_type="STRUCTURAL_SETUP",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
        dependencies=("values-based-spending-plan",),
    ),
    ActionTemplate(
        id="major-purchase-funding",
        domain=D.CASH_FLOW_DEBT,
        title="Plan funding for major purchases",
        description="Set a savings schedule for large planned purchases.",
        why="saving ahead avoids borrowing at the last minute.",
        what="a dedicated savings track for each planned purchase",
        action_type="DECISION_PREPARATION",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
        when=(Condition("has_goal_category", GoalCategory.MAJOR_PURCHASES),),
        dependencies=("emergency-fund-target",),
    ),
    # Benefits optimization
    ActionTemplate(
        id="federal-benefits-analysis",
        domain=D.BENEFITS_OPTIMIZATION,
        title="Review your federal benefit elections",
        description="Review FEHB, FEGLI, TSP and survivor elections before their deadlines.",
        why="several federal elections are hard or impossible to change later.",
        what="benefit elections chosen deliberately before they lock in",
        action_type="PROFESSIONAL_REVIEW",
        guidance="SPECIALIST_GUIDED",
        urgency="NEAR_TERM",
        when=(Condition("federal_employee"),),
        addresses_risks=("FEDERAL_BENEFIT_ELECTIONS",),
    ),
    ActionTemplate(
        id="employer-benefits-review",
        domain=D.BENEFITS_OPTIMIZATION,
        title="Review your employer benefits package",
        description="Read the benefits guide for matches, HSAs, insurance and other perks.",
        why="unused benefits are compensation left on the table.",
        what="full use of the benefits you already earn",
        action_type="EDUCATION_AWARENESS",
        guidance="SELF_GUIDED",
        urgency="NEAR_TERM",
    ),
    ActionTemplate(
        id="retirement-plan-contributions",
        domain=D.BENEFITS_OPTIMIZATION,
        title="Optimize workplace retirement contributions",
        description="Set contribution rates to capture the full match and fit your tax strategy.",
        why="workplace plans are the simplest way to save with every paycheck.",
        what="contribution rates that capture every matching dollar",
        action_type="OPTIMIZATION",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
        dependencies=("employer-benefits-review",),
    ),
    ActionTemplate(
        id="survivor-benefit-elections",
        domain=D.BENEFITS_OPTIMIZATION,
        title="Decide on survivor benefit elections",
        description="Compare survivor annuity or pension options and what they cost.",
        why="the right election protects your partner's income for life.",
        what="a survivor benefit choice made with full information",
        action_type="DECISION_PREPARATION",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
        when=(Condition("partnered"),),
    ),
    ActionTemplate(
        id="benefits-enrollment-calendar",
        domain=D.BENEFITS_OPTIMIZATION,
        title="Set up a benefits enrollment calendar",
        description="Record open enrollment windows and election deadlines in one calendar.",
        why="most benefit choices can only be changed during short windows.",
        what="no missed enrollment or election deadlines",
        action_type="STRUCTURAL_SETUP",
        guidance="SELF_GUIDED",
        urgency="ONGOING",
    ),
    # Business and career
    ActionTemplate(
        id="career-transition-planning",
        domain=D.BUSINESS_CAREER,
        title="Plan your next career move",
        description="Map the financial side of a promotion, job change or new venture.",
        why="career moves change income, benefits and risk all at once.",
        what="a career plan with its financial trade-offs spelled out",
        action_type="DECISION_PREPARATION",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="income-growth-roadmap",
        domain=D.BUSINESS_CAREER,
        title="Map your income growth path",
        description="Identify the skills, credentials or clients that would raise your earnings.",
        why="growing income is often the fastest lever you control.",
        what="a concrete path to higher earnings",
        action_type="EDUCATION_AWARENESS",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="total-compensation-review",
        domain=D.BUSINESS_CAREER,
        title="Compare total compensation, not just salary",
        description="Add up salary, bonus, equity, retirement match and benefits for each option.",
        why="the best-paying offer on paper is not always the best for your plan.",
        what="career choices compared on everything they pay",
        action_type="EDUCATION_AWARENESS",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="business-structure-review",
        domain=D.BUSINESS_CAREER,
        title="Review your business structure",
        description="Check entity type, owner compensation and retirement plan options.",
        why="the way your business is set up shapes taxes, liability and savings.",
        what="a business structure that supports your personal plan",
        action_type="PROFESSIONAL_REVIEW",
        guidance="SPECIALIST_GUIDED",
        urgency="MEDIUM_TERM",
        when=(Condition("employment_status_is", "self_employed"),),
    ),
    # Healthcare and long-term care
    ActionTemplate(
        id="healthcare-transition-plan",
        domain=D.HEALTHCARE_LTC,
        title="Plan healthcare coverage through retirement",
        description="Decide how you will be covered from your last workday through Medicare.",
        why="with {years} years to retirement, coverage gaps need a plan now.",
        what="continuous health coverage with costs built into the budget",
        action_type="DECISION_PREPARATION",
        guidance="ADVISOR_GUIDED",
        urgency="MEDIUM_TERM",
        when=(Condition("approaching_retirement"),),
    ),
    ActionTemplate(
        id="ltc-insurance-evaluation",
        domain=D.HEALTHCARE_LTC,
        title="Evaluate long-term care options",
        description="Compare traditional, hybrid and self-funded approaches to long-term care.",
        why="extended care is one of the largest uninsured costs in later life.",
        what="a decision on how long-term care would be paid for",
        action_type="PROFESSIONAL_REVIEW",
        guidance="SPECIALIST_GUIDED",
        urgency="MEDIUM_TERM",
        when_any=(
            Condition("approaching_retirement"),
            Condition("has_value_category", ValueCategory.HEALTH),
            Condition("has_goal_category", GoalCategory.HEALTH),
        ),
        addresses_risks=("NO_LTC_NEAR_RETIREMENT",),
    ),
    ActionTemplate(
        id="healthcare-cost-estimate",
        domain=D.HEALTHCARE_LTC,
        title="Estimate future healthcare costs",
        description="Estimate premiums and out-of-pocket costs for the years ahead.",
        why="healthcare costs rise faster than most budgets assume.",
        what="a realistic healthcare line in your long-term budget",
        action_type="EDUCATION_AWARENESS",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="health-savings-review",
        domain=D.HEALTHCARE_LTC,
        title="Review your health savings options",
        description="Check whether an HSA or FSA fits your coverage and how to fund it.",
        why="setting money aside for medical costs softens the budget shock when they arrive.",
        what="a dedicated, tax-aware fund for medical expenses",
        action_type="EDUCATION_AWARENESS",
        guidance="SELF_GUIDED",
        urgency="MEDIUM_TERM",
    ),
    ActionTemplate(
        id="healthcare-directive",
        domain=D.HEALTHCARE_LTC,
        title="Document your healthcare wishes",
        description="Record treatment preferences and name someone to speak for you.",
        why="clear wishes spare your family hard guesses in a crisis.",
        what="a documented plan for medical decisions",
        action_type="STRUCTURAL_SETUP",
        guidance="SELF_GUIDED",
        urgency="ONGOING",
    ),
)

TEMPLATES_BY_ID: Mapping[str, ActionTemplate] = MappingProxyType(
    {template.id: template for template in ACTION_TEMPLATES}
)
_TEMPLATE_INDEX: Mapping[str, int] = MappingProxyType(
    {template.id: index for index, template in enumerate(ACTION_TEMPLATES)}
)


def templates_for_domain(domain: PlanningDomain) -> Tuple[ActionTemplate, ...]:
    return tuple(template for template in ACTION_TEMPLATES if template.domain == domain)


def template_order(template_id: str) -> int:
    return _TEMPLATE_INDEX[template_id]
