"""Turn untrusted lead data (form posts, AI extraction output) into a scored Lead.

Nothing in a payload is trusted: the service is re-classified and its tier
recomputed, the location is re-validated, and tags and score are derived
here rather than taken from the caller.
"""

import logging
import re
from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from majestic_leads.config import settings
from majestic_leads.core.categorization import classify_service, normalize_lead_type, tier_for_service
from majestic_leads.core.geofence import GeoValidationResult, is_service_state, validate_location
from majestic_leads.core.scoring import ScoreInput, compute_score
from majestic_leads.core.tagging import assign_tags
from majestic_leads.errors import LeadValidationError
from majestic_leads.models import Lead, LeadStatus, PipelineStage, ProjectScope, naive_utc, utcnow
from majestic_leads.reference import DEFAULT_REFERENCE, ReferenceData

logger = logging.getLogger(__name__)

_AMOUNT = r"(\d[\d,]*(?:\.\d+)?)\s*([kKmM])?"
# "45k", or a range like "40-50k" / "$40k to $50k"
_MONEY = re.compile(_AMOUNT + r"(?:\s*(?:-|–|to)\s*\$?\s*" + _AMOUNT + ")?")
_SCOPES = {s.value for s in ProjectScope}
UNKNOWN_STATE = "Unknown"


def _alias(*names: str):
    return Field(default=None, validation_alias=AliasChoices(*names))


class LeadPayload(BaseModel):
    """Loosely-typed lead data; every field optional, snake or camel case."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = _alias("location", "city")
    zip_code: Optional[str] = _alias("zip_code", "zipCode", "zip")
    state: Optional[str] = None
    county: Optional[str] = None
    address: Optional[str] = None
    service_type: Optional[str] = _alias("service_type", "serviceType", "service")
    project_scope: Optional[str] = _alias("project_scope", "projectScope")
    project_description: Optional[str] = _alias("project_description", "projectDescription")
    estimated_value: Optional[float] = _alias("estimated_value", "estimatedValue")
    lead_type: Optional[str] = _alias("lead_type", "leadType")
    company: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    confidence_score: Optional[int] = _alias("confidence_score", "confidenceScore")
    service_need: Optional[str] = _alias("service_need", "serviceNeed")
    notes: Optional[str] = None
    discovered_at: Optional[datetime] = _alias("discovered_at", "discoveredAt")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("zip_code", "phone", mode="before")
    @classmethod
    def _numbers_as_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return v

    @field_validator("estimated_value", mode="before")
    @classmethod
    def _parse_money(cls, v: Any) -> Any:
        return parse_money(v)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _clamp_confidence(cls, v: Any) -> Any:
        if v is None:
            return None
        try:
            return min(100, max(0, int(float(v))))
        except (TypeError, ValueError):
            return None

    @field_validator("discovered_at")
    @classmethod
    def _naive_utc(cls, v: datetime | None) -> datetime | None:
        return naive_utc(v)

    @property
    def scope(self) -> ProjectScope | None:
        """The project scope if it's one of the four buckets.

        Extraction often puts a free-text description here instead.
        """
        if self.project_scope and self.project_scope.lower() in _SCOPES:
            return ProjectScope(self.project_scope.lower())
        return None

    @property
    def description(self) -> str | None:
        if self.project_description:
            return self.project_description
        if self.project_scope and self.scope is None:
            return self.project_scope
        return None


def parse_money(v: Any) -> float | None:
    """'$45,000' -> 45000.0, '45k' -> 45000.0; anything unparseable -> None.

    A range takes its upper bound, with the trailing suffix: '40-50k' -> 50000.0.
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v) if v > 0 else None
    m = _MONEY.search(str(v))
    if not m:
        return None
    low, low_suffix, high, high_suffix = m.groups()
    if high:
        value = _amount(high, high_suffix or low_suffix)
    else:
        value = _amount(low, low_suffix)
    return value if value > 0 else None


def _amount(digits: str, suffix: str | None) -> float:
    value = float(digits.replace(",", ""))
    suffix = (suffix or "").lower()
    if suffix == "k":
        value *= 1_000
    elif suffix == "m":
        value *= 1_000_000
    return value


def resolve_service(raw: str | None, ref: ReferenceData = DEFAULT_REFERENCE) -> str:
    """Classify service text, falling back to the configured default service."""
    return classify_service(raw, ref) or settings.default_service


def build_lead(
    payload: LeadPayload | dict,
    ref: ReferenceData = DEFAULT_REFERENCE,
    now: datetime | None = None,
) -> tuple[Lead, GeoValidationResult]:
    """Classify, validate, tag and score a payload into an unsaved Lead.

    Raises LeadValidationError if name, location or ZIP code is missing.
    Leads outside the service area are returned archived, not rejected.
    """
    if isinstance(payload, dict):
        payload = LeadPayload.model_validate(payload)

    missing = [f for f in ("name", "location", "zip_code") if not getattr(payload, f)]
    if missing:
        raise LeadValidationError(f"Missing required fields: {', '.join(missing)}")

    now = naive_utc(now) or utcnow()
    service_type = resolve_service(payload.service_type, ref)
    lead = Lead(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        location=payload.location,
        zip_code=payload.zip_code,
        county=payload.county,
        state=payload.state or ref.state_code,
        address=payload.address,
        service_type=service_type,
        service_tier=int(tier_for_service(service_type, ref)),
        project_scope=payload.scope,
        estimated_value=payload.estimated_value,
        pipeline_stage=PipelineStage.new,
        status=LeadStatus.active,
        lead_type=normalize_lead_type(payload.lead_type) if payload.lead_type else None,
        company=payload.company,
        website=payload.website,
        instagram=payload.instagram,
        facebook=payload.facebook,
        confidence_score=payload.confidence_score,
        service_need=payload.service_need,
        notes=_join_notes(payload.notes, payload.description),
        discovered_at=payload.discovered_at or now,
        created_at=now,
        updated_at=now,
    )

    validation = apply_location(lead, ref)
    if not validation.is_serviceable:
        lead.notes = _join_notes(lead.notes, f"Auto-archived: {validation.message}")
    rescore(lead, ref)

    logger.debug(
        "Built lead %s: %s (tier %d) score %d tags %s — %s",
        lead.name, lead.service_type, lead.service_tier, lead.lead_score, lead.tags, validation.message,
    )
    return lead, validation


def location_validation(lead: Lead, ref: ReferenceData = DEFAULT_REFERENCE) -> GeoValidationResult:
    """Geofence result for the lead's current ZIP/state. An ``Unknown`` state counts as none."""
    state = lead.state if lead.state != UNKNOWN_STATE else None
    return validate_location(lead.zip_code, state, ref)


def apply_location(
    lead: Lead,
    ref: ReferenceData = DEFAULT_REFERENCE,
    reactivate: bool = True,
) -> GeoValidationResult:
    """Re-validate a lead's ZIP/state and set county, state and active/archived status.

    A provided county is kept only when the ZIP table has no entry for a
    serviceable ZIP. An out-of-area active lead is archived; an archived
    lead back in the area is reactivated only when ``reactivate`` is set,
    so manual archives survive location edits. Converted and lost leads
    keep their status.
    """
    state = lead.state if lead.state != UNKNOWN_STATE else None
    validation = location_validation(lead, ref)
    if validation.is_serviceable:
        lead.county = validation.county or lead.county
        lead.state = ref.state_code
        if lead.status is None or (lead.status == LeadStatus.archived and reactivate):
            lead.status = LeadStatus.active
    else:
        lead.county = None
        if not state or is_service_state(state, ref):
            lead.state = UNKNOWN_STATE
        if lead.status in (LeadStatus.active, None):
            lead.status = LeadStatus.archived
    return validation


def rescore(lead: Lead, ref: ReferenceData = DEFAULT_REFERENCE) -> int:
    """Recompute tier, tags and score from the lead's own fields."""
    lead.service_tier = int(tier_for_service(lead.service_type, ref))
    tags = assign_tags(
        lead.service_type,
        lead.location,
        lead.county,
        lead_type=lead.lead_type,
        estimated_value=lead.estimated_value,
        ref=ref,
    )
    lead.tags = ",".join(tags)
    lead.lead_score = compute_score(
        ScoreInput(
            service_tier=lead.service_tier,
            project_scope=lead.project_scope,
            estimated_value=lead.estimated_value,
            county=lead.county,
            has_email=bool(lead.email),
            has_phone=bool(lead.phone),
            tags=tags,
            confidence_score=lead.confidence_score,
        ),
        ref,
    )
    return lead.lead_score


def _join_notes(*parts: str | None) -> str | None:
    joined = "\n".join(p for p in parts if p)
    return joined or None
