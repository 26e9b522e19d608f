from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Mapping, Tuple, TypeVar

S = TypeVar("S")
E = TypeVar("E")

Predicate = Callable[[S, Any], bool]


@dataclass(frozen=True)
class Condition:
    name: str
    param: Any = None
    negate: bool = False


@dataclass(frozen=True)
class Rule(Generic[E]):
    """A `{condition, effect}` pair. Fires when every condition in `when` holds."""

    rule_id: str
    when: Tuple[Condition, ...]
    effect: E


def check_condition(
    condition: Condition, subject: S, predicates: Mapping[str, Predicate]
) -> bool:
    predicate = predicates.get(condition.name)
    if predicate is None:
        raise ValueError(f"Unknown rule condition: {condition.name}")
    outcome = bool(predicate(subject, condition.param))
    return not outcome if condition.negate else outcome


def conditions_hold(
    conditions: Iterable[Condition], subject: S, predicates: Mapping[str, Predicate]
) -> bool:
    return all(check_condition(condition, subject, predicates) for condition in conditions)


def evaluate_rules(
    rules: Iterable[Rule[E]], subject: S, predicates: Mapping[str, Predicate]
) -> List[Rule[E]]:
    """Return the rules that fire for `subject`, preserving table order."""
    return [rule for rule in rules if conditions_hold(rule.when, subject, predicates)]


def fired_effects(
    rules: Iterable[Rule[E]], subject: S, predicates: Mapping[str, Predicate]
) -> List[E]:
    return [rule.effect for rule in evaluate_rules(rules, subject, predicates)]
