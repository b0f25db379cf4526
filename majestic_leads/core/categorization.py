"""Map free-text service names onto the 17 canonical services and their tiers."""

from majestic_leads.models import LeadType, ServiceTier
from majestic_leads.reference import DEFAULT_REFERENCE, ReferenceData, TierProfile


def classify_service(raw: str | None, ref: ReferenceData = DEFAULT_REFERENCE) -> str | None:
    """Find the canonical service closest to ``raw``, or None.

    Tries, in order: exact case-insensitive name, substring in either
    direction (first service in table order wins), then the keyword map.
    """
    normalized = (raw or "").lower().strip()
    if not normalized:
        return None

    for service in ref.service_to_tier:
        if service.lower() == normalized:
            return service

    for service in ref.service_to_tier:
        name = service.lower()
        if normalized in name or name in normalized:
            return service

    for keyword, service in ref.service_keywords:
        if keyword in normalized:
            return service

    return None


def tier_for_service(service_type: str | None, ref: ReferenceData = DEFAULT_REFERENCE) -> ServiceTier:
    """Tier for a canonical service; unknown services fall to SERVICE."""
    return ref.service_to_tier.get(service_type or "", ServiceTier.SERVICE)


def is_valid_service(service: str | None, ref: ReferenceData = DEFAULT_REFERENCE) -> bool:
    return service in ref.service_to_tier


def services_for_tier(tier: ServiceTier | int, ref: ReferenceData = DEFAULT_REFERENCE) -> list[str]:
    return list(ref.services_in(coerce_tier(tier)))


def coerce_tier(tier: ServiceTier | int | None) -> ServiceTier:
    try:
        return ServiceTier(tier)
    except (ValueError, TypeError):
        return ServiceTier.SERVICE


def tier_profile(tier: ServiceTier | int, ref: ReferenceData = DEFAULT_REFERENCE) -> TierProfile:
    return ref.tier_profiles[coerce_tier(tier)]


def tier_label(tier: ServiceTier | int, ref: ReferenceData = DEFAULT_REFERENCE) -> str:
    return tier_profile(tier, ref).name


def tier_color(tier: ServiceTier | int, ref: ReferenceData = DEFAULT_REFERENCE) -> str:
    return tier_profile(tier, ref).color


def normalize_lead_type(raw: str | None) -> LeadType:
    """Case-insensitive match against the known lead types, defaulting to Homeowner."""
    normalized = str(getattr(raw, "value", raw) or "").strip().lower()
    for lead_type in LeadType:
        if lead_type.value.lower() == normalized:
            return lead_type
    return LeadType.homeowner
