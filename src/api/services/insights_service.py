import logging
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Optional, cast

from src.api.routers.runtime_utils import assert_feature_enabled, env_int
from src.core.common.canonical import hash_canonical_payload
from src.core.insights_engine import assess_readiness, build_insights, profile_hash
from src.core.models import DiscoveryInsights, InsightsOptions, InsightsReadiness, Profile
from src.core.profile_facts import coerce_options

logger = logging.getLogger(__name__)

INSIGHTS_CACHE: "OrderedDict[str, Dict[str, object]]" = OrderedDict()
INSIGHTS_CACHE_LOCK = Lock()
DEFAULT_INSIGHTS_CACHE_MAX_SIZE = 512


def insights_cache_max_size() -> int:
    return env_int("INSIGHTS_CACHE_MAX_SIZE", DEFAULT_INSIGHTS_CACHE_MAX_SIZE)


def assert_insights_enabled() -> None:
    assert_feature_enabled(
        name="INSIGHTS_ENGINE_ENABLED",
        default=True,
        detail="INSIGHTS_ENGINE_DISABLED: set INSIGHTS_ENGINE_ENABLED=true to enable",
    )


def resolve_insights_options() -> InsightsOptions:
    """Engine options with environment overrides; invalid combinations raise InvalidOptionsError."""
    defaults = InsightsOptions()
    overrides: Dict[str, Any] = {
        "max_actions": env_int("INSIGHTS_MAX_ACTIONS", defaults.max_actions),
        "min_actions": env_int("INSIGHTS_MIN_ACTIONS", defaults.min_actions, minimum=0),
        "near_retirement_years": env_int(
            "INSIGHTS_NEAR_RETIREMENT_YEARS", defaults.near_retirement_years, minimum=0
        ),
    }
    return coerce_options(overrides)


def _cache_key(profile: Profile, options: InsightsOptions, as_of: datetime) -> str:
    # Age-derived facts change with the calendar day, so the day is part of the key.
    return ":".join(
        (
            profile_hash(profile),
            hash_canonical_payload(options.model_dump(mode="json")),
            as_of.date().isoformat(),
        )
    )


def build_insights_response(
    *,
    profile: Profile,
    correlation_id: Optional[str],
    as_of: Optional[datetime] = None,
) -> DiscoveryInsights:
    assert_insights_enabled()
    options = resolve_insights_options()
    moment = as_of or datetime.now(timezone.utc)
    resolved_correlation_id = correlation_id or f"corr_{uuid.uuid4().hex[:12]}"
    cache_key = _cache_key(profile, options, moment)

    with INSIGHTS_CACHE_LOCK:
        cached = INSIGHTS_CACHE.get(cache_key)
        if cached:
            INSIGHTS_CACHE.move_to_end(cache_key)
    if cached:
        logger.info("Insights served from cache. correlation_id=%s", resolved_correlation_id)
        return cast(DiscoveryInsights, DiscoveryInsights.model_validate(cached["response"]))

    result = build_insights(profile, options, as_of=moment)
    max_cache_size = insights_cache_max_size()
    with INSIGHTS_CACHE_LOCK:
        INSIGHTS_CACHE[cache_key] = {
            "profile_hash": result.profile_hash,
            "response": result.model_dump(mode="json"),
        }
        INSIGHTS_CACHE.move_to_end(cache_key)
        while len(INSIGHTS_CACHE) > max_cache_size:
            INSIGHTS_CACHE.popitem(last=False)
    logger.info(
        "Insights generated. correlation_id=%s actions=%d",
        resolved_correlation_id,
        len(result.actions.recommendations),
    )
    return result


def readiness_response(*, profile: Profile) -> InsightsReadiness:
    assert_insights_enabled()
    return assess_readiness(profile)


def options_response() -> InsightsOptions:
    assert_insights_enabled()
    return resolve_insights_options()
