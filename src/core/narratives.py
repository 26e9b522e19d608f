"""
FILE: src/core/narratives.py
Declarative wording tables. Scorers choose keys; this module owns every
sentence the engine emits so copy changes never touch scoring logic.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence, Tuple

# ---------------------------------------------------------------------------
# Strategy profile: signal phrases and dimension rationales
# ---------------------------------------------------------------------------

SIGNAL_PHRASES: Mapping[str, str] = MappingProxyType(
    {
        "DOMINANT_VALUE": "your dominant value is {category}",
        "SECONDARY_VALUE": "{category} is your secondary value theme",
        "RETIREMENT_NEAR": "retirement is {years} years away",
        "RETIREMENT_APPROACHING": "retirement is {years} years away",
        "RETIREMENT_DISTANT": "you have a {years}-year runway to retirement",
        "RETIREMENT_MID": "retirement is {years} years away",
        "ANCHOR_SECURITY": "you lean toward security over growth",
        "ANCHOR_GROWTH": "you lean toward growth over security",
        "ANCHOR_STRUCTURE": "you prefer control and structure",
        "ANCHOR_FLEXIBILITY": "you prefer to keep plans flexible",
        "ANCHORS_NEUTRAL": "you stayed neutral on {count} tradeoff questions",
        "STABILITY_PREFERENCE": "you prefer stable income",
        "GROWTH_PREFERENCE": "you are comfortable trading stability for growth",
        "GUARANTEED_INCOME": "guaranteed income is {importance} to you",
        "URGENT_GOAL": "\"{goal}\" is a high-priority near-term goal",
        "FIXED_GOAL": "\"{goal}\" has a fixed date",
        "MID_GOAL": "\"{goal}\" sits on a mid-range horizon",
        "SHORT_GOAL": "\"{goal}\" is a near-term goal",
        "LONG_GOALS": "your goals are long-horizon or ongoing",
        "MANY_NON_NEGOTIABLES": "you marked {count} values as non-negotiable",
        "FEW_NON_NEGOTIABLES": "you marked few values as non-negotiable",
        "FIXED_GOALS_DOMINATE": "{count} of your goals are fixed",
        "FLEXIBLE_GOALS_DOMINATE": "most of your goals can flex or be deferred",
        "FREEDOM_VALUE": "freedom ranks among your top values",
        "CONTROL_VALUE": "control ranks among your top values",
        "SECURITY_VALUE": "security ranks among your top values",
        "COMPLEXITY_PREFERENCE": "you rated your comfort with complexity {score} of 5",
        "FINANCIAL_CONFIDENCE": "you rated your financial confidence {score} of 5",
        "PRODUCT_COMFORT": "your comfort with financial products is {level}",
        "INVOLVEMENT_DIY": "you want to run your plan yourself",
        "INVOLVEMENT_DELEGATED": "you prefer to delegate planning work",
        "INVOLVEMENT_GUIDANCE": "you want guidance at key decisions",
        "INVOLVEMENT_COLLABORATIVE": "you want to plan collaboratively with an advisor",
        "FEDERAL_BENEFITS": "you already navigate {system} federal benefits",
        "DOWNTURN_UNSURE": "you are unsure how you would react to a downturn",
        "DOWNTURN_STEADY": "you would stay the course in a downturn",
        "CONSULTATIVE_STYLE": "you make decisions consultatively",
        "ANALYTICAL_STYLE": "you make decisions analytically",
        "UNCLEAR_GOALS": "{count} goals are missing a priority or horizon",
        "CLEAR_GOALS": "your goals have clear priorities and horizons",
        "NO_PURPOSE_STATEMENT": "you have not written a purpose statement yet",
        "PURPOSE_STATEMENT": "you have a written purpose statement",
        "HIGH_PRIORITY_LOAD": "you have {count} high-priority goals competing for attention",
    }
)

INPUT_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "values_discovery.ranked_values": "ranked values",
        "values_discovery.non_negotiables": "non-negotiable values",
        "basic_context.age": "age",
        "basic_context.target_retirement_age": "target retirement age",
        "basic_context.federal_employee": "federal employment details",
        "financial_goals.goals": "financial goals",
        "financial_purpose.tradeoff_anchors": "tradeoff anchors",
        "financial_purpose.final_statement": "purpose statement",
        "risk_comfort.income_stability_preference": "income stability preference",
        "risk_comfort.guaranteed_income_importance": "guaranteed income importance",
        "risk_comfort.market_downturn_response": "market downturn response",
        "planning_preferences.complexity_tolerance": "complexity comfort",
        "planning_preferences.financial_confidence": "financial confidence",
        "planning_preferences.financial_product_comfort": "financial product comfort",
        "planning_preferences.advisor_involvement": "advisor involvement",
        "planning_preferences.decision_style": "decision style",
    }
)

DIMENSION_VALUE_PHRASES: Mapping[str, str] = MappingProxyType(
    {
        "STABILITY_FOCUSED": "stability-focused",
        "BALANCED": "balanced",
        "GROWTH_FOCUSED": "growth-focused",
        "HIGH": "high",
        "MEDIUM": "medium",
        "MODERATE": "moderate",
        "LOW": "low",
        "SIMPLE": "simple",
        "ADVANCED": "advanced",
    }
)

RATIONALE_WITH_SIGNALS = "Rated {value} because {signals}."
RATIONALE_NO_SIGNALS = "Rated {value}: the answers provided carry no strong signal either way."
RATIONALE_MISSING_INPUTS = "Defaulted to {value} because data is missing: no {missing} provided."
RATIONALE_PARTIAL_SUFFIX = " Confidence is reduced because {missing} {verb} missing."


def signal_phrase(code: str, **params: object) -> str:
    return SIGNAL_PHRASES[code].format(**params)


def join_phrases(phrases: Sequence[str]) -> str:
    if not phrases:
        return ""
    if len(phrases) == 1:
        return phrases[0]
    return ", ".join(phrases[:-1]) + " and " + phrases[-1]


def describe_inputs(inputs: Iterable[str]) -> str:
    return join_phrases([INPUT_LABELS.get(name, name) for name in inputs])


def dimension_rationale(
    value: str,
    signals: Sequence[str],
    *,
    present_inputs: Sequence[str],
    missing_inputs: Sequence[str],
) -> str:
    value_phrase = DIMENSION_VALUE_PHRASES.get(value, value.lower())
    if not present_inputs:
        return RATIONALE_MISSING_INPUTS.format(
            value=value_phrase, missing=describe_inputs(missing_inputs)
        )
    if signals:
        rationale = RATIONALE_WITH_SIGNALS.format(
            value=value_phrase, signals=join_phrases(list(signals))
        )
    else:
        rationale = RATIONALE_NO_SIGNALS.format(value=value_phrase)
    if missing_inputs:
        rationale += RATIONALE_PARTIAL_SUFFIX.format(
            missing=describe_inputs(missing_inputs),
            verb="is" if len(missing_inputs) == 1 else "are",
        )
    return rationale


# ---------------------------------------------------------------------------
# Strategy profile summary, keyed by combinations of dimension values
# ---------------------------------------------------------------------------

INCOME_FLEXIBILITY_SUMMARY: Mapping[Tuple[str, str], str] = MappingProxyType(
    {
        ("STABILITY_FOCUSED", "HIGH"): (
            "You want dependable income, and you are willing to adjust the details of your "
            "plan to protect it."
        ),
        ("STABILITY_FOCUSED", "MODERATE"): (
            "You prioritize dependable income and can make measured adjustments when needed."
        ),
        ("STABILITY_FOCUSED", "LOW"): (
            "You want dependable income and firm commitments, so your plan should lock in "
            "reliable sources early."
        ),
        ("BALANCED", "HIGH"): (
            "You balance stability with growth and have room to adapt as circumstances change."
        ),
        ("BALANCED", "MODERATE"): (
            "You balance stability with growth and prefer steady, considered adjustments."
        ),
        ("BALANCED", "LOW"): (
            "You balance stability with growth, but your commitments leave little room "
            "to maneuver."
        ),
        ("GROWTH_FOCUSED", "HIGH"): (
            "You lean toward growth and stay open to changing course as opportunities appear."
        ),
        ("GROWTH_FOCUSED", "MODERATE"): (
            "You lean toward growth while keeping some guardrails in place."
        ),
        ("GROWTH_FOCUSED", "LOW"): (
            "You lean toward growth, yet several fixed commitments need to be funded regardless "
            "of market results."
        ),
    }
)

TIMING_FLEXIBILITY_SUMMARY: Mapping[Tuple[str, str], str] = MappingProxyType(
    {
        ("HIGH", "HIGH"): (
            "Several decisions are time-sensitive, but your flexibility gives you options on "
            "how to meet them."
        ),
        ("HIGH", "MODERATE"): (
            "Several decisions are time-sensitive, so sequencing them carefully matters."
        ),
        ("HIGH", "LOW"): (
            "Time-sensitive decisions and firm commitments mean near-term choices carry "
            "real weight."
        ),
        ("MEDIUM", "HIGH"): (
            "Your timeline has some pressure points, and you have room to adjust around them."
        ),
        ("MEDIUM", "MODERATE"): (
            "Your timeline has some pressure points worth planning around."
        ),
        ("MEDIUM", "LOW"): (
            "Your timeline has some pressure points, and fixed commitments leave limited slack."
        ),
        ("LOW", "HIGH"): (
            "Your timeline is relaxed, giving you space to explore options."
        ),
        ("LOW", "MODERATE"): (
            "Your timeline is relaxed, so you can sequence decisions deliberately."
        ),
        ("LOW", "LOW"): (
            "Your timeline is relaxed, though your commitments are firm once made."
        ),
    }
)

COMPLEXITY_SUPPORT_SUMMARY: Mapping[Tuple[str, str], str] = MappingProxyType(
    {
        ("ADVANCED", "HIGH"): (
            "You are comfortable with sophisticated strategies and still value a thinking "
            "partner for major decisions."
        ),
        ("ADVANCED", "MODERATE"): (
            "You are comfortable with sophisticated strategies and want input at key moments."
        ),
        ("ADVANCED", "LOW"): (
            "You are comfortable with sophisticated strategies and prefer to drive "
            "decisions yourself."
        ),
        ("MODERATE", "HIGH"): (
            "You can work with moderate complexity and would benefit from regular guidance."
        ),
        ("MODERATE", "MODERATE"): (
            "You can work with moderate complexity and occasional guidance."
        ),
        ("MODERATE", "LOW"): (
            "You can work with moderate complexity and prefer to act independently."
        ),
        ("SIMPLE", "HIGH"): (
            "A clear, simple plan with hands-on support will serve you best."
        ),
        ("SIMPLE", "MODERATE"): (
            "A clear, simple plan with periodic check-ins will serve you best."
        ),
        ("SIMPLE", "LOW"): (
            "A clear, simple plan you can follow on your own will serve you best."
        ),
    }
)

PRELIMINARY_SUMMARY_SENTENCE = (
    "These insights are preliminary; completing more discovery sections will sharpen them."
)


def compose_summary(
    *,
    income: str,
    timing: str,
    flexibility: str,
    complexity: str,
    support: str,
    preliminary: bool,
) -> str:
    sentences = [
        INCOME_FLEXIBILITY_SUMMARY[(income, flexibility)],
        TIMING_FLEXIBILITY_SUMMARY[(timing, flexibility)],
        COMPLEXITY_SUPPORT_SUMMARY[(complexity, support)],
    ]
    if preliminary:
        sentences.append(PRELIMINARY_SUMMARY_SENTENCE)
    return " ".join(sentences)


# ---------------------------------------------------------------------------
# Planning focus explanations
# ---------------------------------------------------------------------------

FOCUS_EXPLANATION = "{label} — because {reasons}."
FOCUS_REASON_SEPARATOR = " and "

FOCUS_REASONS: Mapping[str, str] = MappingProxyType(
    {
        "VALUE": "you ranked {value} ({category}) among your top values",
        "VALUE_NON_NEGOTIABLE": "you marked {value} ({category}) as non-negotiable",
        "GOAL": "your {priority}-priority goal \"{goal}\" depends on it",
        "TIMING_GOAL": "\"{goal}\" is due soon",
        "TIMING_RETIREMENT": "retirement is {years} years away",
        "RISK": "{risk}",
        "CONTEXT": "{context}",
        "BASELINE": "a baseline review keeps the overall plan complete",
    }
)

FOCUS_CONTEXT_PHRASES: Mapping[str, str] = MappingProxyType(
    {
        "PARTNERED": "shared planning with a spouse or partner benefits from clear estate plans",
    }
)

PRIORITY_WORDS: Mapping[str, str] = MappingProxyType(
    {"HIGH": "high", "MEDIUM": "medium", "LOW": "low", "NA": "unrated"}
)


def focus_reason(kind: str, **params: object) -> str:
    return FOCUS_REASONS[kind].format(**params)


def focus_explanation(label: str, reasons: Sequence[str]) -> str:
    if not reasons:
        reasons = [FOCUS_REASONS["BASELINE"]]
    return FOCUS_EXPLANATION.format(label=label, reasons=FOCUS_REASON_SEPARATOR.join(reasons))


# ---------------------------------------------------------------------------
# Action text: connection-keyed framing around each template's own clauses
# ---------------------------------------------------------------------------

ACTION_WHY_FRAMES: Mapping[str, str] = MappingProxyType(
    {
        "RISK": "{risk_sentence} {why_sentence}",
        "GOAL": "Your goal \"{goal}\" depends on this: {why}",
        "VALUE": "Because {value} matters to you, {why}",
    }
)

ACTION_WHAT_FRAMES: Mapping[str, str] = MappingProxyType(
    {
        "RISK": "{what}, closing the gap you flagged.",
        "GOAL": "{what}, keeping \"{goal}\" on track.",
        "VALUE": "{what}, in line with what you value most.",
    }
)


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:] if text else text


def action_why(kind: str, *, why: str, value: str, goal: str, risk: str) -> str:
    return ACTION_WHY_FRAMES[kind].format(
        why=why,
        why_sentence=_capitalize(why),
        value=value,
        goal=goal,
        risk_sentence=f"{_capitalize(risk)}.",
    )


def action_what(kind: str, *, what: str, goal: str) -> str:
    return ACTION_WHAT_FRAMES[kind].format(what=_capitalize(what), goal=goal)


def years_phrase(years: Optional[int]) -> str:
    if years is None:
        return "several"
    return str(years)
