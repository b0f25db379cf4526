"""Lead lifecycle: create, edit, move through the pipeline, archive.

All writes go through the intake rules, so a stored lead's tier always
matches its service and its score always reflects its current fields.
"""

import logging
from datetime import datetime
from typing import Any

from sqlmodel import select

from majestic_leads.core.categorization import normalize_lead_type, tier_color, tier_label
from majestic_leads.core.geofence import is_in_service_area
from majestic_leads.core.scoring import is_stale, priority_rank, score_label
from majestic_leads.core.tagging import primary_tag, sort_tags
from majestic_leads.database import get_session
from majestic_leads.errors import LeadNotFoundError, LeadValidationError
from majestic_leads.leads.intake import (
    LeadPayload,
    apply_location,
    build_lead,
    location_validation,
    parse_money,
    rescore,
    resolve_service,
)
from majestic_leads.leads.store import SqlLeadStore
from majestic_leads.models import (
    Lead,
    LeadStatus,
    PipelineStage,
    PipelineStageEntry,
    ProjectScope,
    naive_utc,
    utcnow,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "name", "email", "phone", "location", "zip_code", "county", "state", "address",
    "service_type", "project_scope", "estimated_value", "pipeline_stage", "status",
    "notes", "last_contacted_at", "lead_type", "company", "website", "instagram",
    "facebook", "confidence_score", "service_need",
}

# Always recomputed; silently ignored if a caller sends them
DERIVED_FIELDS = {"service_tier", "lead_score", "tags"}

_LOCATION_FIELDS = {"zip_code", "state", "county"}
_SCORING_FIELDS = {
    "service_type", "project_scope", "estimated_value", "county", "email", "phone",
    "zip_code", "state", "location", "lead_type", "confidence_score",
}


def create_lead(payload: LeadPayload | dict) -> Lead:
    """Validate, score and save a new lead, starting it in the ``new`` stage."""
    lead, validation = build_lead(payload)

    with get_session() as session:
        SqlLeadStore(session).add(lead)
        session.add(PipelineStageEntry(lead_id=lead.id, stage=PipelineStage.new))
        session.commit()
        session.refresh(lead)

    if lead.status == LeadStatus.archived:
        logger.info("Created lead %d: %s — archived (%s)", lead.id, lead.name, validation.message)
    else:
        logger.info(
            "Created lead %d: %s, %s (score %d, tags %s)",
            lead.id, lead.name, lead.service_type, lead.lead_score, lead.tags or "none",
        )
    return lead


def get_lead(lead_id: int) -> Lead:
    with get_session() as session:
        lead = session.get(Lead, lead_id)
    if not lead:
        raise LeadNotFoundError(lead_id)
    return lead


def update_lead(lead_id: int, changes: dict[str, Any]) -> Lead:
    """Apply field edits and re-derive whatever depends on them.

    Raises LeadNotFoundError for an unknown id and LeadValidationError for
    unknown fields or invalid stage/status/scope values.
    """
    ignored = DERIVED_FIELDS & changes.keys()
    if ignored:
        logger.debug("Ignoring derived fields on lead %d: %s", lead_id, sorted(ignored))
    changes = {k: v for k, v in changes.items() if k not in DERIVED_FIELDS}

    unknown = changes.keys() - EDITABLE_FIELDS
    if unknown:
        raise LeadValidationError(f"Unknown lead fields: {', '.join(sorted(unknown))}")

    values = {field: _coerce(field, value) for field, value in changes.items()}

    with get_session() as session:
        lead = session.get(Lead, lead_id)
        if not lead:
            raise LeadNotFoundError(lead_id)

        old_stage = lead.pipeline_stage
        # Only geofence archives are undone by a move back into the area
        reactivate = "status" not in values and not location_validation(lead).is_serviceable
        if "zip_code" in values and "county" not in values and values["zip_code"] != lead.zip_code:
            lead.county = None  # re-derive for the new ZIP
        for field, value in values.items():
            setattr(lead, field, value)

        if _LOCATION_FIELDS & values.keys():
            validation = apply_location(lead, reactivate=reactivate)
            logger.info("Lead %d location re-validated: %s", lead_id, validation.message)
        if _SCORING_FIELDS & values.keys():
            rescore(lead)

        if lead.pipeline_stage != old_stage:
            session.add(PipelineStageEntry(lead_id=lead_id, stage=lead.pipeline_stage))
            logger.info("Lead %d moved %s -> %s", lead_id, _value(old_stage), _value(lead.pipeline_stage))

        lead.updated_at = utcnow()
        session.add(lead)
        session.commit()
        session.refresh(lead)

    return lead


def move_stage(lead_id: int, stage: PipelineStage | str) -> Lead:
    return update_lead(lead_id, {"pipeline_stage": stage})


def mark_contacted(lead_id: int, when: datetime | None = None) -> Lead:
    return update_lead(lead_id, {"last_contacted_at": when or utcnow()})


def archive_lead(lead_id: int) -> Lead:
    """Soft delete. The core never removes lead rows."""
    return update_lead(lead_id, {"status": LeadStatus.archived})


def list_leads(**filters) -> list[Lead]:
    with get_session() as session:
        return SqlLeadStore(session).list_leads(**filters)


def stage_history(lead_id: int) -> list[PipelineStageEntry]:
    with get_session() as session:
        return list(session.exec(
            select(PipelineStageEntry)
            .where(PipelineStageEntry.lead_id == lead_id)
            .order_by(PipelineStageEntry.entered_at, PipelineStageEntry.id)
        ).all())


# --- Read-time derivations ---

def lead_is_stale(lead: Lead, now: datetime | None = None) -> bool:
    return is_stale(
        lead.last_contacted_at,
        lead.discovered_at,
        lead.created_at,
        lead.pipeline_stage,
        now=now,
    )


def lead_view(lead: Lead, now: datetime | None = None) -> dict:
    """Lead fields plus derived display values. Nothing here is stored."""
    stale = lead_is_stale(lead, now)
    tags = sort_tags(lead.tag_list)
    days_since_contact = None
    if lead.last_contacted_at:
        days_since_contact = ((naive_utc(now) or utcnow()) - lead.last_contacted_at).days
    return {
        **lead.model_dump(),
        "tags": tags,
        "is_stale": stale,
        "is_serviceable": is_in_service_area(lead.zip_code),
        "tier_label": tier_label(lead.service_tier),
        "tier_color": tier_color(lead.service_tier),
        "score_label": score_label(lead.lead_score),
        "primary_tag": primary_tag(tags),
        "days_since_contact": days_since_contact,
        "priority_rank": priority_rank(lead.lead_score, lead.service_tier, stale),
    }


def prioritized(leads: list[Lead], now: datetime | None = None) -> list[Lead]:
    """Stale leads first, then by tier, then by score."""
    return sorted(
        leads,
        key=lambda lead: priority_rank(lead.lead_score, lead.service_tier, lead_is_stale(lead, now)),
        reverse=True,
    )


def _coerce(field: str, value: Any) -> Any:
    try:
        if field == "pipeline_stage":
            return PipelineStage(_value(value))
        if field == "status":
            return LeadStatus(_value(value))
        if field == "project_scope":
            return ProjectScope(_value(value).lower()) if value else None
    except ValueError:
        raise LeadValidationError(f"Invalid {field}: {value!r}") from None

    if field == "service_type":
        return resolve_service(value)
    if field == "lead_type":
        return normalize_lead_type(value) if value else None
    if field == "estimated_value":
        return parse_money(value)
    if field == "last_contacted_at":
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value)
            except ValueError:
                raise LeadValidationError(f"Invalid last_contacted_at: {value!r}") from None
        return naive_utc(value)
    if field == "confidence_score":
        return LeadPayload(confidence_score=value).confidence_score
    if field in ("name", "location", "zip_code") and not value:
        raise LeadValidationError(f"{field} cannot be empty")
    return value


def _value(v: Any) -> Any:
    return getattr(v, "value", v)
