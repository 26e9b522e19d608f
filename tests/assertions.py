from src.core.models import (
    ActionRecommendations,
    FocusAreaRanking,
    PlanningDomain,
    PlanningFocusResult,
)


def find_ranking(result: PlanningFocusResult, domain: PlanningDomain) -> FocusAreaRanking:
    return next(item for item in result.rankings if item.domain == domain)


def ranked_domains(result: PlanningFocusResult) -> list[PlanningDomain]:
    return [item.domain for item in sorted(result.rankings, key=lambda item: item.rank)]


def action_ids(result: ActionRecommendations) -> list[str]:
    return [item.id for item in result.recommendations]


def assert_dense_ranks(result: PlanningFocusResult) -> None:
    ranks = sorted(item.rank for item in result.rankings)
    assert ranks == list(range(1, len(result.rankings) + 1))


def assert_no_orphaned_actions(result: ActionRecommendations) -> None:
    for item in result.recommendations:
        assert item.related_values or item.related_goals or item.related_risks, item.id


def assert_dependencies_precede(result: ActionRecommendations) -> None:
    positions = {item.id: index for index, item in enumerate(result.recommendations)}
    for item in result.recommendations:
        for dependency_id in item.dependencies:
            assert positions[dependency_id] < positions[item.id], (dependency_id, item.id)
