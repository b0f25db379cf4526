"""Static reference tables for classification, geofencing, tagging and scoring.

Everything here is loaded once into a frozen ``ReferenceData`` and passed to
the core functions through their ``ref=`` keyword, so tests can substitute
their own tables.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from majestic_leads.config import settings
from majestic_leads.models import ServiceTier


@dataclass(frozen=True)
class TierProfile:
    name: str
    description: str
    color: str
    min_value: float
    max_value: float
    base_score: int


# Order matters: classification walks this table top to bottom.
_SERVICE_TO_TIER = {
    # Tier 1 - Epic
    "New Construction": ServiceTier.EPIC,
    "Full Renovation": ServiceTier.EPIC,
    "Home Addition": ServiceTier.EPIC,
    # Tier 2 - Modernize
    "Kitchen Remodel": ServiceTier.MODERNIZE,
    "Bathroom Remodel": ServiceTier.MODERNIZE,
    "Basement Remodel": ServiceTier.MODERNIZE,
    "Condo Renovation": ServiceTier.MODERNIZE,
    # Tier 3 - Exterior
    "Roofing": ServiceTier.EXTERIOR,
    "Deck": ServiceTier.EXTERIOR,
    "Concrete": ServiceTier.EXTERIOR,
    "Siding": ServiceTier.EXTERIOR,
    "Fence": ServiceTier.EXTERIOR,
    "She-Shed": ServiceTier.EXTERIOR,
    # Tier 4 - Service
    "Painting": ServiceTier.SERVICE,
    "Drywall": ServiceTier.SERVICE,
    "Flooring": ServiceTier.SERVICE,
    "Windows/Doors": ServiceTier.SERVICE,
}

_TIER_PROFILES = {
    ServiceTier.EPIC: TierProfile(
        "Epic", "Whale leads - high value, long-term projects", "#F4B400", 100_000, 500_000, 80,
    ),
    ServiceTier.MODERNIZE: TierProfile(
        "Modernize", "Core revenue - bread and butter projects", "#006070", 30_000, 150_000, 60,
    ),
    ServiceTier.EXTERIOR: TierProfile(
        "Exterior", "Specialty - entry point projects", "#7C3AED", 10_000, 50_000, 40,
    ),
    ServiceTier.SERVICE: TierProfile(
        "Service", "High volume - quick turnaround", "#10B981", 2_000, 30_000, 20,
    ),
}

_SCOPE_SCORES = {
    "small": 20,
    "medium": 50,
    "large": 75,
    "enterprise": 100,
}

# Fuzzy fallback for AI-extracted service text, checked in order
_SERVICE_KEYWORDS = (
    ("kitchen", "Kitchen Remodel"),
    ("bath", "Bathroom Remodel"),
    ("bathroom", "Bathroom Remodel"),
    ("basement", "Basement Remodel"),
    ("condo", "Condo Renovation"),
    ("roof", "Roofing"),
    ("deck", "Deck"),
    ("concrete", "Concrete"),
    ("siding", "Siding"),
    ("fence", "Fence"),
    ("shed", "She-Shed"),
    ("paint", "Painting"),
    ("drywall", "Drywall"),
    ("floor", "Flooring"),
    ("window", "Windows/Doors"),
    ("door", "Windows/Doors"),
    ("addition", "Home Addition"),
    ("renovation", "Full Renovation"),
    ("remodel", "Full Renovation"),
    ("new home", "New Construction"),
    ("build", "New Construction"),
)

_SERVICEABLE_ZIP_PREFIXES = frozenset({"20", "22", "23"})

# DC (200, 202-205) and Maryland (206-209) share the "20" prefix; only 201xx is Virginia
_EXCLUDED_ZIP_PREFIXES = frozenset({"200", "202", "203", "204", "205", "206", "207", "208", "209"})

_REGIONS = {
    # Primary market
    "northernVA": (
        "Fairfax", "Fairfax City", "Arlington", "Alexandria", "Loudoun",
        "Prince William", "Manassas", "Manassas Park", "Falls Church",
        "Fauquier", "Stafford", "Spotsylvania", "Fredericksburg",
    ),
    # Secondary market
    "richmondMetro": (
        "Richmond", "Henrico", "Chesterfield", "Hanover", "Goochland",
        "Powhatan", "Colonial Heights", "Petersburg",
    ),
    "hamptonRoads": (
        "Virginia Beach", "Norfolk", "Newport News", "Hampton", "Chesapeake",
        "Portsmouth", "Suffolk", "Williamsburg", "James City", "York",
    ),
    "centralVA": (
        "Albemarle", "Charlottesville", "Lynchburg", "Bedford", "Roanoke",
        "Salem", "Montgomery", "Blacksburg",
    ),
}

# Partial coverage; a serviceable ZIP missing here just has no county.
_ZIP_TO_COUNTY = {
    # Fairfax
    "22030": "Fairfax", "22031": "Fairfax", "22032": "Fairfax", "22033": "Fairfax",
    "22034": "Fairfax", "22035": "Fairfax", "22039": "Fairfax", "22041": "Fairfax",
    "22042": "Fairfax", "22043": "Fairfax", "22044": "Fairfax", "22046": "Falls Church",
    "22060": "Fairfax", "22079": "Fairfax", "22101": "Fairfax", "22102": "Fairfax",
    "22124": "Fairfax", "22150": "Fairfax", "22151": "Fairfax", "22152": "Fairfax",
    "22153": "Fairfax", "22180": "Fairfax", "22181": "Fairfax", "22182": "Fairfax",
    # Arlington
    "22201": "Arlington", "22202": "Arlington", "22203": "Arlington", "22204": "Arlington",
    "22205": "Arlington", "22206": "Arlington", "22207": "Arlington", "22209": "Arlington",
    "22211": "Arlington", "22213": "Arlington",
    # Alexandria
    "22301": "Alexandria", "22302": "Alexandria", "22303": "Alexandria", "22304": "Alexandria",
    "22305": "Alexandria", "22306": "Fairfax", "22307": "Fairfax", "22308": "Fairfax",
    "22309": "Fairfax", "22310": "Fairfax", "22311": "Alexandria", "22312": "Fairfax",
    "22314": "Alexandria", "22315": "Fairfax",
    # Loudoun
    "20105": "Loudoun", "20117": "Loudoun", "20120": "Loudoun", "20121": "Loudoun",
    "20129": "Loudoun", "20130": "Loudoun", "20132": "Loudoun", "20135": "Loudoun",
    "20141": "Loudoun", "20147": "Loudoun", "20148": "Loudoun", "20152": "Loudoun",
    "20158": "Loudoun", "20164": "Loudoun", "20165": "Loudoun", "20166": "Loudoun",
    "20175": "Loudoun", "20176": "Loudoun",
    # Prince William
    "22025": "Prince William", "22026": "Prince William", "22110": "Prince William",
    "22111": "Prince William", "22112": "Prince William", "22172": "Prince William",
    "22191": "Prince William", "22192": "Prince William", "22193": "Prince William",
    "22194": "Prince William", "20109": "Prince William", "20110": "Manassas",
    "20111": "Manassas", "20112": "Prince William", "20155": "Prince William",
    "20169": "Prince William", "20181": "Prince William",
    # Richmond area
    "23173": "Richmond", "23219": "Richmond", "23220": "Richmond", "23221": "Richmond",
    "23222": "Richmond", "23223": "Richmond", "23224": "Richmond", "23225": "Richmond",
    "23226": "Richmond", "23227": "Richmond", "23228": "Henrico", "23229": "Henrico",
    "23230": "Richmond", "23231": "Henrico", "23233": "Henrico", "23234": "Chesterfield",
    "23235": "Chesterfield", "23236": "Chesterfield", "23237": "Chesterfield",
    "23238": "Henrico", "23294": "Henrico",
}

# Counties only; independent cities are not listed
_COUNTY_NAMES = (
    "Accomack", "Albemarle", "Alleghany", "Amelia", "Amherst", "Appomattox",
    "Arlington", "Augusta", "Bath", "Bedford", "Bland", "Botetourt", "Brunswick",
    "Buchanan", "Buckingham", "Campbell", "Caroline", "Carroll", "Charles City",
    "Charlotte", "Chesterfield", "Clarke", "Craig", "Culpeper", "Cumberland",
    "Dickenson", "Dinwiddie", "Essex", "Fairfax", "Fauquier", "Floyd", "Fluvanna",
    "Franklin", "Frederick", "Giles", "Gloucester", "Goochland", "Grayson", "Greene",
    "Greensville", "Halifax", "Hanover", "Henrico", "Henry", "Highland",
    "Isle of Wight", "James City", "King and Queen", "King George", "King William",
    "Lancaster", "Lee", "Loudoun", "Louisa", "Lunenburg", "Madison", "Mathews",
    "Mecklenburg", "Middlesex", "Montgomery", "Nelson", "New Kent", "Northampton",
    "Northumberland", "Nottoway", "Orange", "Page", "Patrick", "Pittsylvania",
    "Powhatan", "Prince Edward", "Prince George", "Prince William", "Pulaski",
    "Rappahannock", "Richmond", "Roanoke", "Rockbridge", "Rockingham", "Russell",
    "Scott", "Shenandoah", "Smyth", "Southampton", "Spotsylvania", "Stafford",
    "Surry", "Sussex", "Tazewell", "Warren", "Washington", "Westmoreland", "Wise",
    "Wythe", "York",
)

_CITIES = (
    # NoVA
    "Fairfax", "Arlington", "Alexandria", "McLean", "Great Falls", "Vienna",
    "Reston", "Herndon", "Falls Church", "Tysons", "Ashburn", "Leesburg",
    "Sterling", "Centreville", "Chantilly", "Annandale", "Springfield",
    "Burke", "Lorton", "Woodbridge", "Manassas", "Gainesville", "Dumfries",
    # Richmond metro
    "Richmond", "Henrico", "Chesterfield", "Midlothian", "Glen Allen",
    "Short Pump", "Mechanicsville", "Colonial Heights", "Petersburg",
    # Hampton Roads
    "Virginia Beach", "Norfolk", "Newport News", "Hampton", "Chesapeake",
    "Portsmouth", "Suffolk", "Williamsburg",
    # Central
    "Charlottesville", "Lynchburg", "Roanoke", "Blacksburg", "Salem",
    # Other
    "Fredericksburg", "Stafford", "Winchester", "Harrisonburg",
)

_LUXURY_AREAS = (
    "McLean", "Great Falls", "Vienna", "Oakton", "Clifton", "Potomac Falls",
    "Aldie", "Leesburg", "Purcellville",
    "Old Town Alexandria", "Belle Haven", "Rosemont",
    "Charlottesville", "Virginia Beach", "Williamsburg",
)

_LUXURY_COUNTIES = ("Fairfax", "Loudoun", "Arlington", "Alexandria", "Falls Church")

# Location premium in scoring (NoVA core)
_PREMIUM_COUNTIES = (
    "Fairfax", "Arlington", "Alexandria", "Loudoun", "Prince William", "Falls Church",
)

_TAG_BONUSES = {
    "Whale": 15,
    "Luxury": 10,
    "Multi-Unit": 8,
    "Commercial": 5,
    "Quick-Turn": 3,
}

_TAG_PRIORITY = {
    "Whale": 1,
    "Luxury": 2,
    "Commercial": 3,
    "Multi-Unit": 4,
    "Quick-Turn": 5,
}


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class ReferenceData:
    service_to_tier: Mapping[str, ServiceTier] = field(default_factory=lambda: _frozen(_SERVICE_TO_TIER))
    tier_profiles: Mapping[ServiceTier, TierProfile] = field(default_factory=lambda: _frozen(_TIER_PROFILES))
    scope_scores: Mapping[str, int] = field(default_factory=lambda: _frozen(_SCOPE_SCORES))
    service_keywords: tuple[tuple[str, str], ...] = _SERVICE_KEYWORDS
    state_code: str = settings.service_state_code
    state_name: str = settings.service_state_name
    zip_prefixes: frozenset[str] = _SERVICEABLE_ZIP_PREFIXES
    excluded_zip_prefixes: frozenset[str] = _EXCLUDED_ZIP_PREFIXES
    regions: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: _frozen(_REGIONS))
    zip_to_county: Mapping[str, str] = field(default_factory=lambda: _frozen(_ZIP_TO_COUNTY))
    county_names: tuple[str, ...] = _COUNTY_NAMES
    cities: tuple[str, ...] = _CITIES
    luxury_areas: tuple[str, ...] = _LUXURY_AREAS
    luxury_counties: tuple[str, ...] = _LUXURY_COUNTIES
    premium_counties: tuple[str, ...] = _PREMIUM_COUNTIES
    whale_value_threshold: float = settings.whale_value_threshold
    tag_bonuses: Mapping[str, int] = field(default_factory=lambda: _frozen(_TAG_BONUSES))
    tag_priority: Mapping[str, int] = field(default_factory=lambda: _frozen(_TAG_PRIORITY))

    @property
    def whale_services(self) -> tuple[str, ...]:
        return self.services_in(ServiceTier.EPIC)

    @property
    def quick_turn_services(self) -> tuple[str, ...]:
        return self.services_in(ServiceTier.SERVICE)

    def services_in(self, tier: ServiceTier) -> tuple[str, ...]:
        return tuple(s for s, t in self.service_to_tier.items() if t == tier)


DEFAULT_REFERENCE = ReferenceData()
