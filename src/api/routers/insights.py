from typing import Annotated, Optional

from fastapi import APIRouter, Body, Header, status

from src.api.insights_examples import (
    DISABLED_EXAMPLE,
    EMPTY_PROFILE_EXAMPLE,
    FEDERAL_EMPLOYEE_PROFILE_EXAMPLE,
    INSIGHTS_RESPONSE_EXAMPLE,
    INVALID_PROFILE_EXAMPLE,
    NEAR_RETIREMENT_PROFILE_EXAMPLE,
    READINESS_RESPONSE_EXAMPLE,
)
from src.api.services import insights_service as service
from src.core.models import DiscoveryInsights, InsightsOptions, InsightsReadiness, Profile

router = APIRouter()

PROFILE_BODY_EXAMPLES = {
    "near_retirement": NEAR_RETIREMENT_PROFILE_EXAMPLE,
    "federal_employee": FEDERAL_EMPLOYEE_PROFILE_EXAMPLE,
    "empty": EMPTY_PROFILE_EXAMPLE,
}


@router.post(
    "/insights",
    response_model=DiscoveryInsights,
    status_code=status.HTTP_200_OK,
    tags=["Discovery Insights"],
    summary="Generate Discovery Insights",
    description=(
        "Turns a possibly partial discovery profile into a strategy profile, a ranked "
        "planning focus and an ordered list of next-step actions.\\n\\n"
        "Missing sections lower confidence instead of failing the request. "
        "Results are memoized by canonical profile hash.\\n\\n"
        "Optional header: `X-Correlation-Id` (auto-generated when omitted)."
    ),
    responses={
        200: {
            "description": "Insights generated.",
            "content": {"application/json": {"examples": {"ready": INSIGHTS_RESPONSE_EXAMPLE}}},
        },
        404: {
            "description": "Insights engine disabled by configuration.",
            "content": {"application/json": {"examples": {"disabled": DISABLED_EXAMPLE}}},
        },
        422: {
            "description": "Structurally invalid profile.",
            "content": {
                "application/problem+json": {"examples": {"invalid": INVALID_PROFILE_EXAMPLE}}
            },
        },
    },
)
def generate_insights(
    profile: Annotated[Profile, Body(openapi_examples=PROFILE_BODY_EXAMPLES)],
    correlation_id: Annotated[
        Optional[str],
        Header(
            alias="X-Correlation-Id",
            description="Optional trace/correlation identifier propagated to logs and response.",
            examples=["corr-insights-1234"],
        ),
    ] = None,
) -> DiscoveryInsights:
    return service.build_insights_response(profile=profile, correlation_id=correlation_id)


@router.post(
    "/insights/readiness",
    response_model=InsightsReadiness,
    status_code=status.HTTP_200_OK,
    tags=["Discovery Insights"],
    summary="Check Insights Readiness",
    description=(
        "Reports profile completion, whether insights are meaningful yet, a status message "
        "and the follow-up questions that would most improve the result."
    ),
    responses={
        200: {
            "description": "Readiness assessed.",
            "content": {
                "application/json": {"examples": {"partial": READINESS_RESPONSE_EXAMPLE}}
            },
        },
        404: {"description": "Insights engine disabled by configuration."},
        422: {"description": "Structurally invalid profile."},
    },
)
def check_insights_readiness(
    profile: Annotated[Profile, Body(openapi_examples=PROFILE_BODY_EXAMPLES)],
) -> InsightsReadiness:
    return service.readiness_response(profile=profile)


@router.get(
    "/insights/options",
    response_model=InsightsOptions,
    status_code=status.HTTP_200_OK,
    tags=["Discovery Insights"],
    summary="Get Effective Insights Options",
    description="Returns engine options after environment overrides are applied.",
)
def get_insights_options() -> InsightsOptions:
    return service.options_response()
