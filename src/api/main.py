"""
FILE: src/api/main.py
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.api.observability import setup_observability
from src.api.routers.insights import router as insights_router

app = FastAPI(
    title="Discovery Insights API",
    version="0.1.0",
    description=(
        "Deterministic discovery insights service.\n\n"
        "Turns questionnaire answers into a strategy profile, a ranked planning focus "
        "and a bounded list of next-step actions. Partial profiles are accepted; "
        "missing data lowers confidence instead of failing the request."
    ),
    openapi_tags=[
        {
            "name": "Discovery Insights",
            "description": "Insights generation, readiness and effective options.",
        },
        {
            "name": "Health",
            "description": "Liveness and readiness probes.",
        },
    ],
)

logger = logging.getLogger(__name__)

setup_observability(app)
app.include_router(insights_router)


def _problem_details(
    request: Request, *, status_code: int, title: str, detail: str
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        media_type="application/problem+json",
        content={
            "type": "about:blank",
            "title": title,
            "status": status_code,
            "detail": detail,
            "instance": str(request.url.path),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_to_problem_details(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception while serving request", exc_info=exc)
    return _problem_details(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        title="Internal Server Error",
        detail="An unexpected error occurred.",
    )


@app.get("/health", tags=["Health"], summary="Service health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/health/live", tags=["Health"], summary="Liveness probe")
def health_live() -> dict[str, str]:
    return {"status": "live"}


@app.get("/health/ready", tags=["Health"], summary="Readiness probe")
def health_ready() -> dict[str, str]:
    return {"status": "ready"}
