"""Strategic lead tags and the score bonus they carry.

  Whale       EPIC service, or estimated value >= whale threshold   +15
  Luxury      luxury area in location, or luxury county             +10
  Multi-Unit  Property Manager / Investor                           +8
  Commercial  Commercial / HOA Manager                              +5
  Quick-Turn  SERVICE-tier service                                  +3
"""

from majestic_leads.models import LeadTag, LeadType
from majestic_leads.reference import DEFAULT_REFERENCE, ReferenceData

_COMMERCIAL_TYPES = {LeadType.commercial.value, LeadType.hoa_manager.value}
_MULTI_UNIT_TYPES = {LeadType.property_manager.value, LeadType.investor.value}


def assign_tags(
    service_type: str,
    location: str | None,
    county: str | None,
    lead_type: LeadType | str | None = None,
    estimated_value: float | None = None,
    ref: ReferenceData = DEFAULT_REFERENCE,
) -> list[str]:
    tags: list[str] = []
    lead_type_value = lead_type.value if isinstance(lead_type, LeadType) else lead_type

    is_whale_service = service_type in ref.whale_services
    is_whale_value = bool(estimated_value) and estimated_value >= ref.whale_value_threshold
    if is_whale_service or is_whale_value:
        tags.append(LeadTag.whale.value)

    if service_type in ref.quick_turn_services:
        tags.append(LeadTag.quick_turn.value)

    location_lower = (location or "").lower()
    luxury_area = any(area.lower() in location_lower for area in ref.luxury_areas)
    luxury_county = bool(county) and any(c.lower() == county.lower() for c in ref.luxury_counties)
    if luxury_area or luxury_county:
        tags.append(LeadTag.luxury.value)

    if lead_type_value in _COMMERCIAL_TYPES:
        tags.append(LeadTag.commercial.value)

    if lead_type_value in _MULTI_UNIT_TYPES:
        tags.append(LeadTag.multi_unit.value)

    return tags


def tag_bonus(tags, ref: ReferenceData = DEFAULT_REFERENCE) -> int:
    """Sum of per-tag bonuses. Uncapped here; compute_score clamps the total."""
    return sum(ref.tag_bonuses.get(_tag_value(t), 0) for t in set(map(_tag_value, tags or [])))


def tag_priority(tag, ref: ReferenceData = DEFAULT_REFERENCE) -> int:
    return ref.tag_priority.get(_tag_value(tag), 99)


def sort_tags(tags, ref: ReferenceData = DEFAULT_REFERENCE) -> list[str]:
    """Display order: Whale, Luxury, Commercial, Multi-Unit, Quick-Turn."""
    return sorted((_tag_value(t) for t in tags or []), key=lambda t: tag_priority(t, ref))


def primary_tag(tags, ref: ReferenceData = DEFAULT_REFERENCE) -> str | None:
    ordered = sort_tags(tags, ref)
    return ordered[0] if ordered else None


def _tag_value(tag) -> str:
    return tag.value if isinstance(tag, LeadTag) else str(tag)
