"""Lead engine core: classification, geofencing, tagging, scoring, duplicate detection."""

from majestic_leads.core.categorization import classify_service, tier_for_service
from majestic_leads.core.duplicates import (
    DuplicateCandidate,
    DuplicateCheckResult,
    batch_find_duplicates,
    find_duplicate,
)
from majestic_leads.core.geofence import (
    GeoValidationResult,
    is_in_service_area,
    should_archive,
    validate_location,
)
from majestic_leads.core.scoring import (
    ScoreInput,
    compute_score,
    is_stale,
    priority_rank,
    score_label,
)
from majestic_leads.core.tagging import assign_tags, tag_bonus

__all__ = [
    "classify_service",
    "tier_for_service",
    "validate_location",
    "is_in_service_area",
    "should_archive",
    "GeoValidationResult",
    "assign_tags",
    "tag_bonus",
    "ScoreInput",
    "compute_score",
    "score_label",
    "priority_rank",
    "is_stale",
    "DuplicateCandidate",
    "DuplicateCheckResult",
    "find_duplicate",
    "batch_find_duplicates",
]
