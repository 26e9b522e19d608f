from collections.abc import Mapping, Sequence


def link_action_dependencies(
    action_ids: Sequence[str],
    declared_dependencies: Mapping[str, Sequence[str]],
) -> dict[str, list[str]]:
    """Keep only dependencies that point at actions present in `action_ids`."""
    present = set(action_ids)
    linked: dict[str, list[str]] = {}
    for action_id in action_ids:
        linked[action_id] = [
            dependency_id
            for dependency_id in declared_dependencies.get(action_id, ())
            if dependency_id in present and dependency_id != action_id
        ]
    return linked


def order_by_dependencies(
    action_ids: Sequence[str],
    dependencies: Mapping[str, Sequence[str]],
) -> list[str]:
    """
    Stable dependency ordering: keeps the incoming order except that an action
    never precedes one of its dependencies. Cycles fall back to incoming order.
    """
    remaining = list(action_ids)
    emitted: list[str] = []
    emitted_set: set[str] = set()
    while remaining:
        for index, action_id in enumerate(remaining):
            pending = [dep for dep in dependencies.get(action_id, ()) if dep not in emitted_set]
            if not pending:
                break
        else:
            index = 0
        action_id = remaining.pop(index)
        emitted.append(action_id)
        emitted_set.add(action_id)
    return emitted


def dependency_closure(
    action_id: str,
    dependencies: Mapping[str, Sequence[str]],
) -> list[str]:
    """Dependencies of `action_id` (transitively), deepest first, without the action itself."""
    ordered: list[str] = []
    visiting: set[str] = {action_id}

    def _visit(current: str) -> None:
        for dependency_id in dependencies.get(current, ()):
            if dependency_id in visiting or dependency_id in ordered:
                continue
            visiting.add(dependency_id)
            _visit(dependency_id)
            ordered.append(dependency_id)

    _visit(action_id)
    return ordered
