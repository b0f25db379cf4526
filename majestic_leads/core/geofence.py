"""Virginia geofencing: decide whether a ZIP/state pair is inside the service area.

validate_location() never raises. Malformed or out-of-area input comes back
as an invalid GeoValidationResult so batch callers can keep going; the lead
is then stored as archived rather than rejected.
"""

import re

from pydantic import BaseModel, ConfigDict

from majestic_leads.reference import DEFAULT_REFERENCE, ReferenceData

_NON_DIGITS = re.compile(r"\D")


class GeoValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    is_serviceable: bool
    county: str | None = None
    region: str | None = None
    message: str = ""


def clean_zip(zip_code: str | None) -> str:
    """Digits only, truncated to 5."""
    return _NON_DIGITS.sub("", zip_code or "")[:5]


def is_in_service_area(zip_code: str | None, ref: ReferenceData = DEFAULT_REFERENCE) -> bool:
    """Prefix-only check for quick UI validation."""
    cleaned = clean_zip(zip_code)
    if len(cleaned) != 5:
        return False
    return cleaned[:2] in ref.zip_prefixes and cleaned[:3] not in ref.excluded_zip_prefixes


def county_from_zip(zip_code: str | None, ref: ReferenceData = DEFAULT_REFERENCE) -> str | None:
    return ref.zip_to_county.get(clean_zip(zip_code))


def region_for_county(county: str | None, ref: ReferenceData = DEFAULT_REFERENCE) -> str | None:
    if not county:
        return None
    target = county.lower()
    for region, counties in ref.regions.items():
        if any(c.lower() == target for c in counties):
            return region
    return None


def is_service_state(state: str, ref: ReferenceData = DEFAULT_REFERENCE) -> bool:
    s = state.strip()
    return s.upper() == ref.state_code.upper() or s.lower() == ref.state_name.lower()


def validate_location(
    zip_code: str | None,
    state: str | None = None,
    ref: ReferenceData = DEFAULT_REFERENCE,
) -> GeoValidationResult:
    if state and not is_service_state(state, ref):
        return GeoValidationResult(
            is_valid=False,
            is_serviceable=False,
            message=f"Lead is outside {ref.state_name} service area ({state})",
        )

    cleaned = clean_zip(zip_code)
    if len(cleaned) != 5:
        return GeoValidationResult(
            is_valid=False,
            is_serviceable=False,
            message="Invalid ZIP code format",
        )

    if not is_in_service_area(cleaned, ref):
        return GeoValidationResult(
            is_valid=False,
            is_serviceable=False,
            message=f"ZIP code is outside {ref.state_name}",
        )

    county = county_from_zip(cleaned, ref)
    return GeoValidationResult(
        is_valid=True,
        is_serviceable=True,
        county=county,
        region=region_for_county(county, ref),
        message=(
            f"Valid {ref.state_name} location: {county}" if county
            else f"Valid {ref.state_name} ZIP code"
        ),
    )


def should_archive(
    zip_code: str | None,
    state: str | None = None,
    ref: ReferenceData = DEFAULT_REFERENCE,
) -> bool:
    """Out-of-area leads are kept but stored as archived."""
    return not validate_location(zip_code, state, ref).is_serviceable


def resolve_search_location(
    location: str,
    location_type: str = "city",
    ref: ReferenceData = DEFAULT_REFERENCE,
) -> str | None:
    """Normalize a lead-finder search location, or None if it's not in-state.

    Counties come back as "<Name> County"; cities as the canonical city name.
    Exact matches win over partial ones.
    """
    if location_type == "county":
        cleaned = re.sub(r"county", "", location, flags=re.IGNORECASE).strip().lower()
        match = _match_name(cleaned, ref.county_names)
        return f"{match} County" if match else None

    return _match_name(location.strip().lower(), ref.cities)


def _match_name(needle: str, names: tuple[str, ...]) -> str | None:
    if not needle:
        return None
    for name in names:
        if name.lower() == needle:
            return name
    for name in names:
        lowered = name.lower()
        if needle in lowered or lowered in needle:
            return name
    return None
