import pytest

from src.core.common.action_dependencies import (
    dependency_closure,
    link_action_dependencies,
    order_by_dependencies,
)
from src.core.common.canonical import canonical_json, hash_canonical_payload
from src.core.common.rules import Condition, Rule, evaluate_rules, fired_effects

PREDICATES = {
    "above": lambda subject, threshold: subject > threshold,
    "even": lambda subject, _param: subject % 2 == 0,
}


def test_rule_fires_only_when_every_condition_holds():
    rules = (
        Rule("BIG_EVEN", (Condition("above", 10), Condition("even")), "big-even"),
        Rule("BIG", (Condition("above", 10),), "big"),
        Rule("SMALL", (Condition("above", 10, negate=True),), "small"),
    )

    assert fired_effects(rules, 12, PREDICATES) == ["big-even", "big"]
    assert fired_effects(rules, 11, PREDICATES) == ["big"]
    assert [rule.rule_id for rule in evaluate_rules(rules, 4, PREDICATES)] == ["SMALL"]


def test_rule_without_conditions_always_fires():
    assert fired_effects((Rule("ALWAYS", (), "x"),), 0, PREDICATES) == ["x"]


def test_unknown_condition_raises_value_error():
    rules = (Rule("BROKEN", (Condition("missing_predicate"),), "x"),)

    with pytest.raises(ValueError, match="Unknown rule condition: missing_predicate"):
        fired_effects(rules, 1, PREDICATES)


def test_link_action_dependencies_keeps_only_present_actions():
    linked = link_action_dependencies(
        ["a", "b"],
        {"a": ["b", "missing", "a"], "b": []},
    )

    assert linked == {"a": ["b"], "b": []}


def test_order_by_dependencies_moves_dependency_first_and_keeps_rest_stable():
    ordered = order_by_dependencies(["c", "a", "b", "d"], {"a": ["d"], "c": []})

    assert ordered == ["c", "b", "d", "a"]


def test_order_by_dependencies_falls_back_on_cycles():
    ordered = order_by_dependencies(["a", "b"], {"a": ["b"], "b": ["a"]})

    assert ordered == ["a", "b"]


def test_dependency_closure_is_deepest_first():
    dependencies = {"c": ["b"], "b": ["a"], "a": []}

    assert dependency_closure("c", dependencies) == ["a", "b"]
    assert dependency_closure("a", dependencies) == []


def test_dependency_closure_tolerates_cycles():
    assert dependency_closure("a", {"a": ["b"], "b": ["a"]}) == ["b"]


def test_canonical_json_is_key_order_independent():
    assert canonical_json({"b": 1, "a": "é"}) == '{"a":"é","b":1}'
    assert hash_canonical_payload({"b": 1, "a": 2}) == hash_canonical_payload({"a": 2, "b": 1})
    assert hash_canonical_payload({"a": 1}).startswith("sha256:")
