"""Lead scoring — weighted 0-100 score from tier, scope, value, location and contact info.

  tier        40%   tier base score (80/60/40/20)
  scope       25%   small 20 / medium 50 / large 75 / enterprise 100, default 50
  value       20%   position of estimated value in the tier's expected range
  location    10%   100 for premium NoVA counties, 70 otherwise
  engagement   5%   50 for an email, 50 for a phone

Tag bonuses and up to +5 for AI confidence are added on top, then the
total is rounded and clamped to [0, 100].
"""

import math
from datetime import datetime, timedelta

from pydantic import BaseModel

from majestic_leads.config import settings
from majestic_leads.core.categorization import coerce_tier
from majestic_leads.core.tagging import tag_bonus
from majestic_leads.models import PipelineStage, ProjectScope, ServiceTier, naive_utc, utcnow
from majestic_leads.reference import DEFAULT_REFERENCE, ReferenceData

WEIGHTS = {
    "tier": 0.40,
    "scope": 0.25,
    "value": 0.20,
    "location": 0.10,
    "engagement": 0.05,
}

_NEUTRAL_SCORE = 50
_VALUE_FLOOR = 30
_PREMIUM_LOCATION = 100
_DEFAULT_LOCATION = 70
_MAX_CONFIDENCE_BONUS = 5


class ScoreInput(BaseModel):
    service_tier: int = ServiceTier.SERVICE
    project_scope: ProjectScope | None = None
    estimated_value: float | None = None
    county: str | None = None
    has_email: bool = False
    has_phone: bool = False
    tags: list[str] = []
    confidence_score: float | None = None


def value_score(estimated_value: float | None, tier: ServiceTier | int, ref: ReferenceData = DEFAULT_REFERENCE) -> float:
    """Linear 30-100 within the tier's expected range; 50 when unknown."""
    if not estimated_value or estimated_value <= 0:
        return _NEUTRAL_SCORE
    profile = ref.tier_profiles[coerce_tier(tier)]
    if estimated_value >= profile.max_value:
        return 100
    if estimated_value <= profile.min_value:
        return _VALUE_FLOOR
    span = profile.max_value - profile.min_value
    return _VALUE_FLOOR + (100 - _VALUE_FLOOR) * (estimated_value - profile.min_value) / span


def location_score(county: str | None, ref: ReferenceData = DEFAULT_REFERENCE) -> int:
    # Unknown county scores the same as a known non-premium one
    if county and any(c.lower() == county.lower() for c in ref.premium_counties):
        return _PREMIUM_LOCATION
    return _DEFAULT_LOCATION


def score_breakdown(inp: ScoreInput, ref: ReferenceData = DEFAULT_REFERENCE) -> dict[str, float]:
    """Component scores plus the final clamped total."""
    tier = coerce_tier(inp.service_tier)
    scope = inp.project_scope.value if inp.project_scope else None

    breakdown: dict[str, float] = {
        "tier": ref.tier_profiles[tier].base_score,
        "scope": ref.scope_scores.get(scope, _NEUTRAL_SCORE) if scope else _NEUTRAL_SCORE,
        "value": round(value_score(inp.estimated_value, tier, ref), 2),
        "location": location_score(inp.county, ref),
        "engagement": (50 if inp.has_email else 0) + (50 if inp.has_phone else 0),
    }

    weighted = (
        breakdown["tier"] * WEIGHTS["tier"]
        + breakdown["scope"] * WEIGHTS["scope"]
        + value_score(inp.estimated_value, tier, ref) * WEIGHTS["value"]
        + breakdown["location"] * WEIGHTS["location"]
        + breakdown["engagement"] * WEIGHTS["engagement"]
    )

    breakdown["tag_bonus"] = tag_bonus(inp.tags, ref) if inp.tags else 0
    weighted += breakdown["tag_bonus"]

    confidence_bonus = 0.0
    if inp.confidence_score and inp.confidence_score > 0:
        confidence_bonus = min(_MAX_CONFIDENCE_BONUS, inp.confidence_score / 100 * _MAX_CONFIDENCE_BONUS)
    breakdown["confidence_bonus"] = round(confidence_bonus, 2)
    weighted += confidence_bonus

    # Half-up rounding, matching how scores have always been displayed
    breakdown["total"] = min(100, max(0, math.floor(weighted + 0.5)))
    return breakdown


def compute_score(inp: ScoreInput, ref: ReferenceData = DEFAULT_REFERENCE) -> int:
    return int(score_breakdown(inp, ref)["total"])


def score_label(score: float) -> str:
    if score >= 80:
        return "Hot Lead"
    if score >= 60:
        return "Warm Lead"
    if score >= 40:
        return "Cool Lead"
    return "Cold Lead"


def priority_rank(score: float, tier: ServiceTier | int, is_stale: bool) -> float:
    """Sort key only, never stored. Staleness outweighs tier, tier outweighs score."""
    rank = score + (5 - int(coerce_tier(tier))) * 10
    if is_stale:
        rank += 50
    return rank


def estimate_scope_from_value(value: float) -> ProjectScope:
    if value >= 150_000:
        return ProjectScope.enterprise
    if value >= 50_000:
        return ProjectScope.large
    if value >= 10_000:
        return ProjectScope.medium
    return ProjectScope.small


def is_stale(
    last_contacted_at: datetime | None,
    discovered_at: datetime | None,
    created_at: datetime | None,
    pipeline_stage: PipelineStage | str,
    now: datetime | None = None,
    threshold: timedelta | None = None,
) -> bool:
    """Has this lead gone too long without contact?

    Contacted leads go stale once the last contact is older than the
    threshold. Never-contacted leads only count while still in the ``new``
    stage, measured from discovery (or creation).
    Aware datetimes are compared in UTC.
    """
    now = naive_utc(now) or utcnow()
    last_contacted_at = naive_utc(last_contacted_at)
    threshold = threshold or timedelta(hours=settings.stale_after_hours)

    if last_contacted_at:
        return now - last_contacted_at > threshold

    stage = pipeline_stage.value if isinstance(pipeline_stage, PipelineStage) else pipeline_stage
    since = naive_utc(discovered_at or created_at)
    if stage != PipelineStage.new.value or since is None:
        return False
    return now - since > threshold
