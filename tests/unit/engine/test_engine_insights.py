import logging

import pytest

from src.core.insights_engine import (
    assess_readiness,
    build_insights,
    completion_percentage,
    has_enough_data_for_insights,
    insights_status_message,
    missing_data_suggestions,
    profile_hash,
    summarize_inputs,
)
from src.core.models import Profile
from src.core.profile_facts import InvalidOptionsError, InvalidProfileError
from tests.factories import (
    AS_OF,
    complete_profile,
    goal,
    near_retirement_profile,
    profile,
    protection_gap_profile,
    value,
)


def test_empty_profile_builds_preliminary_insights():
    insights = build_insights(Profile(), as_of=AS_OF)

    assert insights.generated_at == AS_OF.isoformat()
    assert insights.strategy_profile.generated_at == insights.generated_at
    assert insights.focus_areas.generated_at == insights.generated_at
    assert insights.actions.generated_at == insights.generated_at
    assert len(insights.focus_areas.rankings) == 7
    assert insights.actions.recommendations == []
    assert insights.input_summary.completion_percentage == 0
    assert insights.profile_hash.startswith("sha256:")


def test_build_insights_is_deterministic_for_same_profile_and_time():
    first = build_insights(complete_profile(), as_of=AS_OF)
    second = build_insights(complete_profile().model_dump(mode="json"), as_of=AS_OF)

    assert first.model_dump() == second.model_dump()


def test_build_insights_logs_summary(caplog):
    caplog.set_level(logging.INFO, logger="src.core.insights_engine")

    build_insights(protection_gap_profile(), as_of=AS_OF)

    assert "Insights built. domains=7 excluded=2 actions=7" in caplog.text


def test_options_flow_through_to_actions():
    insights = build_insights(
        complete_profile(), {"min_actions": 1, "max_actions": 2}, as_of=AS_OF
    )

    assert len(insights.actions.recommendations) <= 2


def test_naive_as_of_is_treated_as_utc():
    insights = build_insights(Profile(), as_of=AS_OF.replace(tzinfo=None))

    assert insights.generated_at == AS_OF.isoformat()


def test_invalid_profile_raises():
    with pytest.raises(InvalidProfileError, match="INVALID_PROFILE: expected a mapping, got list"):
        build_insights([], as_of=AS_OF)


def test_invalid_nested_profile_value_raises():
    with pytest.raises(InvalidProfileError, match="INVALID_PROFILE: basic_context.age"):
        build_insights({"basic_context": {"age": 400}}, as_of=AS_OF)


def test_invalid_options_raise():
    with pytest.raises(InvalidOptionsError, match="INVALID_OPTIONS: max_actions"):
        build_insights(Profile(), {"max_actions": 0}, as_of=AS_OF)


def test_profile_hash_ignores_key_order_and_input_form():
    payload = {"basic_context": {"target_retirement_age": 62, "age": 60}}
    reordered = {"basic_context": {"age": 60, "target_retirement_age": 62}}

    assert profile_hash(payload) == profile_hash(reordered)
    assert profile_hash(payload) == profile_hash(Profile.model_validate(payload))
    assert profile_hash(payload) != profile_hash({"basic_context": {"age": 61}})


def test_completion_of_empty_and_complete_profiles():
    assert completion_percentage(Profile()) == 0
    assert completion_percentage(complete_profile()) == 100


def test_completion_counts_partial_sections():
    partial = profile(
        age=60,
        target_retirement_age=62,
        values=[value("security", "Security", "SECURITY")],
        goals=[goal("g1", "Retire", "RETIREMENT", priority="HIGH", time_horizon="SHORT")],
    )

    # basic 20, values 5, goals 8 + 2
    assert completion_percentage(partial) == 35
    assert has_enough_data_for_insights(partial) is True
    assert insights_status_message(partial) == (
        "Basic insights available. Complete more sections for deeper analysis."
    )


def test_status_messages_by_completion_band():
    assert insights_status_message(Profile()) == (
        "Complete more discovery sections to generate planning insights."
    )
    assert insights_status_message(complete_profile()) == (
        "Comprehensive data available for detailed planning insights."
    )
    assert has_enough_data_for_insights(Profile()) is False


def test_summarize_inputs_flags_sections():
    summary = summarize_inputs(near_retirement_profile())

    assert summary.has_basic_context is True
    assert summary.has_values is True
    assert summary.has_goals is True
    assert summary.has_purpose is False


def test_missing_data_suggestions_for_empty_profile():
    assert missing_data_suggestions(Profile()) == [
        "Add your age and retirement target",
        "Complete Values Discovery to identify your core values",
        "Identify your non-negotiable values",
        "Add financial goals",
        "Complete your Statement of Financial Purpose",
    ]


def test_missing_data_suggestions_for_partial_profile():
    partial = profile(
        age=40,
        values=[value("security", "Security", "SECURITY")],
        goals=[goal("g1", "Retire", "RETIREMENT")],
        final_statement="   ",
    )

    assert missing_data_suggestions(partial) == [
        "Select all 5 top values in Values Discovery",
        "Identify your non-negotiable values",
        "Set priorities for all your goals",
        "Add time horizons to your goals",
        "Complete your Statement of Financial Purpose",
    ]


def test_complete_profile_needs_no_suggestions():
    readiness = assess_readiness(complete_profile())

    assert readiness.ready is True
    assert readiness.missing_data_suggestions == []
    assert readiness.input_summary.completion_percentage == 100


@pytest.mark.parametrize(
    "options, field",
    [
        ({"min_actions": 8}, "min_actions must not exceed max_actions"),
        ({"near_retirement_years": 12}, "near_retirement_years must not exceed"),
        ({"approaching_retirement_years": 25}, "approaching_retirement_years must not exceed"),
        ({"tier_thresholds": {"high_floor": "9"}}, "floors must satisfy"),
    ],
)
def test_inconsistent_options_are_rejected(options, field):
    with pytest.raises(InvalidOptionsError, match=field):
        build_insights(Profile(), options, as_of=AS_OF)
