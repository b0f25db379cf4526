"""Lead finder processing — filter → classify → tag → score → dedup → save.

The search service returns loosely structured leads. This module keeps the
ones with an in-state ZIP and a real name, scores them for the requested
service category, and flags the ones already in the store.
"""

import logging
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from sqlalchemy.exc import SQLAlchemyError

from majestic_leads.config import settings
from majestic_leads.core.categorization import normalize_lead_type, tier_for_service
from majestic_leads.core.duplicates import DuplicateCandidate, LeadSource, batch_find_duplicates
from majestic_leads.core.geofence import county_from_zip, is_in_service_area
from majestic_leads.core.scoring import ScoreInput, compute_score
from majestic_leads.core.tagging import assign_tags
from majestic_leads.database import get_session
from majestic_leads.leads.intake import resolve_service
from majestic_leads.leads.service import create_lead
from majestic_leads.leads.store import SqlLeadStore
from majestic_leads.models import Lead, LeadType
from majestic_leads.reference import DEFAULT_REFERENCE, ReferenceData

logger = logging.getLogger(__name__)

_DEFAULT_CONFIDENCE = 50


class FoundLead(BaseModel):
    """One lead as returned by the search service, cleaned up."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, populate_by_name=True)

    name: str = "Unknown"
    lead_type: LeadType = Field(default=LeadType.homeowner, validation_alias=AliasChoices("lead_type", "leadType"))
    service_need: str = Field(default="", validation_alias=AliasChoices("service_need", "serviceNeed"))
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: str = ""
    zip_code: str = Field(default="", validation_alias=AliasChoices("zip_code", "zipCode"))
    website: Optional[str] = None
    company: Optional[str] = None
    confidence_score: int = Field(
        default=_DEFAULT_CONFIDENCE, validation_alias=AliasChoices("confidence_score", "confidenceScore"),
    )

    @field_validator("name", "service_need", "city", "zip_code", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return str(v)

    @field_validator("email", "phone", "address", "website", "company", mode="before")
    @classmethod
    def _empty_to_none(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return str(v)

    @field_validator("lead_type", mode="before")
    @classmethod
    def _lead_type(cls, v: Any) -> LeadType:
        return normalize_lead_type(v)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _confidence(cls, v: Any) -> int:
        try:
            number = float(v)
        except (TypeError, ValueError):
            return _DEFAULT_CONFIDENCE
        if not number:
            return _DEFAULT_CONFIDENCE
        return int(min(100, max(0, number)))


class DiscoveredLead(BaseModel):
    lead: FoundLead
    service_type: str
    service_tier: int
    county: Optional[str] = None
    state: str
    tags: list[str] = []
    lead_score: int
    is_duplicate: bool = False
    matched_lead_id: int | str | None = None

    def to_payload(self) -> dict:
        """Lead-service payload for saving this lead."""
        found = self.lead
        return {
            "name": found.name,
            "email": found.email,
            "phone": found.phone,
            "location": found.city,
            "zip_code": found.zip_code,
            "county": self.county,
            "address": found.address,
            "service_type": self.service_type,
            "lead_type": found.lead_type.value,
            "company": found.company,
            "website": found.website,
            "confidence_score": found.confidence_score,
            "service_need": found.service_need,
        }


def parse_found_leads(items: list[Any]) -> list[FoundLead]:
    """Coerce raw search results; malformed entries are logged and dropped."""
    found = []
    for i, item in enumerate(items or []):
        if not isinstance(item, dict):
            logger.warning("Skipping found lead %d: not an object", i)
            continue
        try:
            found.append(FoundLead.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping found lead %d: %s", i, e.errors()[0].get("msg", e))
    return found


def is_usable(lead: FoundLead, ref: ReferenceData = DEFAULT_REFERENCE) -> bool:
    """In-state ZIP and an actual name."""
    return bool(lead.zip_code) and is_in_service_area(lead.zip_code, ref) and lead.name not in ("", "Unknown")


def process_found_leads(
    found: list[FoundLead],
    category: str,
    source: LeadSource | None = None,
    ref: ReferenceData = DEFAULT_REFERENCE,
) -> list[DiscoveredLead]:
    """Score usable leads for ``category`` and flag ones already stored.

    If the store can't be reached the batch still goes through, with every
    lead treated as new.
    """
    usable = [lead for lead in found if is_usable(lead, ref)]
    logger.info("Lead finder: %d/%d leads usable for %s", len(usable), len(found), category)

    service_type = resolve_service(category, ref)
    service_tier = tier_for_service(service_type, ref)

    duplicates = {}
    if source is not None and usable:
        candidates = [
            DuplicateCandidate(name=l.name, email=l.email, phone=l.phone, location=l.city, address=l.address)
            for l in usable
        ]
        try:
            duplicates = batch_find_duplicates(candidates, source)
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Duplicate check unavailable, treating all leads as new: %s", e)

    results = []
    for i, lead in enumerate(usable):
        county = county_from_zip(lead.zip_code, ref)
        tags = assign_tags(service_type, lead.city, county, lead_type=lead.lead_type, ref=ref)
        score = compute_score(
            ScoreInput(
                service_tier=service_tier,
                county=county,
                has_email=bool(lead.email),
                has_phone=bool(lead.phone),
                tags=tags,
                confidence_score=lead.confidence_score,
            ),
            ref,
        )
        dup = duplicates.get(i)
        results.append(DiscoveredLead(
            lead=lead,
            service_type=service_type,
            service_tier=int(service_tier),
            county=county,
            state=ref.state_code,
            tags=tags,
            lead_score=score,
            is_duplicate=bool(dup and dup.is_duplicate),
            matched_lead_id=dup.matched_lead_id if dup else None,
        ))
    return results


def discover(
    items: list[Any],
    category: str,
    count: int | None = None,
    ref: ReferenceData = DEFAULT_REFERENCE,
) -> list[DiscoveredLead]:
    """Parse raw search results and process them against the lead store.

    ``count`` caps how many results are considered, bounded to the
    configured lead-finder batch size.
    """
    found = parse_found_leads(items)
    if count is not None:
        found = found[: settings.clamp_lead_count(count)]
    with get_session() as session:
        return process_found_leads(found, category, SqlLeadStore(session), ref)


def save_discovered(leads: list[DiscoveredLead], skip_duplicates: bool = True) -> list[Lead]:
    """Persist discovered leads through the lead service."""
    saved = []
    for discovered in leads:
        if skip_duplicates and discovered.is_duplicate:
            logger.debug("Not saving duplicate %s (matches lead %s)", discovered.lead.name, discovered.matched_lead_id)
            continue
        saved.append(create_lead(discovered.to_payload()))
    logger.info("Saved %d/%d discovered leads", len(saved), len(leads))
    return saved
