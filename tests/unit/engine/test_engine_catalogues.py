import pytest

from src.core.action_templates import ACTION_TEMPLATES, TEMPLATES_BY_ID, templates_for_domain
from src.core.domain_mappings import (
    CANONICAL_DOMAIN_ORDER,
    DOMAIN_LABELS,
    GOAL_DOMAIN_MAP,
    VALUE_DOMAIN_MAP,
    mapping_weight,
)
from src.core.models import GoalCategory, PlanningDomain, ValueCategory
from src.core.narratives import (
    COMPLEXITY_SUPPORT_SUMMARY,
    INCOME_FLEXIBILITY_SUMMARY,
    PRELIMINARY_SUMMARY_SENTENCE,
    TIMING_FLEXIBILITY_SUMMARY,
    compose_summary,
    dimension_rationale,
    focus_explanation,
    join_phrases,
)
from src.core.profile_facts import FACT_PREDICATES


def test_every_domain_has_label_and_canonical_position():
    assert set(CANONICAL_DOMAIN_ORDER) == set(PlanningDomain)
    assert set(DOMAIN_LABELS) == set(PlanningDomain)


def test_every_category_maps_to_at_least_one_domain():
    assert set(VALUE_DOMAIN_MAP) == set(ValueCategory)
    assert set(GOAL_DOMAIN_MAP) == set(GoalCategory)
    for domains in list(VALUE_DOMAIN_MAP.values()) + list(GOAL_DOMAIN_MAP.values()):
        assert 1 <= len(domains) <= 3
        assert len(set(domains)) == len(domains)


def test_mapping_weight_clamps_to_last_position():
    assert str(mapping_weight(0)) == "1.0"
    assert str(mapping_weight(2)) == "0.5"
    assert mapping_weight(7) == mapping_weight(2)


def test_template_ids_are_unique():
    assert len(TEMPLATES_BY_ID) == len(ACTION_TEMPLATES)


@pytest.mark.parametrize("domain", list(PlanningDomain))
def test_each_domain_has_at_least_three_unconditional_templates(domain):
    unconditional = [
        template
        for template in templates_for_domain(domain)
        if not template.when and not template.when_any
    ]

    assert len(unconditional) >= 3


def test_template_references_resolve():
    for template in ACTION_TEMPLATES:
        for dependency_id in template.dependencies:
            assert dependency_id in TEMPLATES_BY_ID, (template.id, dependency_id)
            assert dependency_id != template.id
        for condition in template.when + template.when_any:
            assert condition.name in FACT_PREDICATES, (template.id, condition.name)


def test_template_text_placeholders_are_known():
    params = {"value": "v", "goal": "g", "risk": "r", "years": "3"}
    for template in ACTION_TEMPLATES:
        template.description.format(**params)
        template.why.format(**params)
        template.what.format(**params)


def test_summary_tables_cover_every_combination():
    assert len(INCOME_FLEXIBILITY_SUMMARY) == 9
    assert len(TIMING_FLEXIBILITY_SUMMARY) == 9
    assert len(COMPLEXITY_SUPPORT_SUMMARY) == 9


def test_compose_summary_appends_preliminary_sentence():
    summary = compose_summary(
        income="BALANCED",
        timing="MEDIUM",
        flexibility="MODERATE",
        complexity="MODERATE",
        support="MODERATE",
        preliminary=True,
    )

    assert summary.startswith(INCOME_FLEXIBILITY_SUMMARY[("BALANCED", "MODERATE")])
    assert summary.endswith(PRELIMINARY_SUMMARY_SENTENCE)


def test_dimension_rationale_variants():
    assert dimension_rationale(
        "BALANCED", [], present_inputs=[], missing_inputs=["basic_context.age"]
    ) == "Defaulted to balanced because data is missing: no age provided."
    assert dimension_rationale(
        "HIGH", ["a", "b", "c"], present_inputs=["x"], missing_inputs=[]
    ) == "Rated high because a, b and c."
    assert dimension_rationale(
        "LOW",
        [],
        present_inputs=["x"],
        missing_inputs=["financial_goals.goals", "planning_preferences.decision_style"],
    ) == (
        "Rated low: the answers provided carry no strong signal either way. "
        "Confidence is reduced because financial goals and decision style are missing."
    )


def test_join_phrases_and_focus_explanation():
    assert join_phrases([]) == ""
    assert join_phrases(["one"]) == "one"
    assert focus_explanation("Tax Optimization", ["x", "y"]) == (
        "Tax Optimization — because x and y."
    )
