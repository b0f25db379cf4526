from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Optional

from sqlmodel import Field, SQLModel


# Timestamps are stored as naive UTC; SQLite keeps no offset.

def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def naive_utc(value: datetime | None) -> datetime | None:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# --- Enums ---

class ServiceTier(IntEnum):
    EPIC = 1        # whales: new construction, full renovation, additions
    MODERNIZE = 2   # core revenue: kitchen, bath, basement, condo
    EXTERIOR = 3    # specialty: roof, deck, concrete, siding, fence, she-shed
    SERVICE = 4     # high volume: paint, drywall, flooring, windows/doors


class PipelineStage(str, Enum):
    new = "new"
    contacted = "contacted"
    design_phase = "design_phase"
    quoted = "quoted"
    closed = "closed"


class LeadStatus(str, Enum):
    active = "active"
    archived = "archived"      # outside service area, or manually shelved
    converted = "converted"
    lost = "lost"


class ProjectScope(str, Enum):
    small = "small"            # under $10k
    medium = "medium"          # $10k - $50k
    large = "large"            # $50k - $150k
    enterprise = "enterprise"  # $150k+


class LeadType(str, Enum):
    investor = "Investor"
    property_manager = "Property Manager"
    hoa_manager = "HOA Manager"
    homeowner = "Homeowner"
    commercial = "Commercial"


class LeadTag(str, Enum):
    whale = "Whale"
    quick_turn = "Quick-Turn"
    luxury = "Luxury"
    commercial = "Commercial"
    multi_unit = "Multi-Unit"


# --- Models ---

class Lead(SQLModel, table=True):
    __tablename__ = "leads"

    id: Optional[int] = Field(default=None, primary_key=True)

    # Contact
    name: str = Field(index=True)
    email: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = None

    # Location
    location: str = ""  # city/area name
    zip_code: str = Field(default="", index=True)
    county: Optional[str] = Field(default=None, index=True)
    state: str = "VA"
    address: Optional[str] = None

    # Service
    service_type: str
    service_tier: int = Field(default=ServiceTier.SERVICE, index=True)
    project_scope: Optional[ProjectScope] = None
    estimated_value: Optional[float] = None

    # Scoring & pipeline
    lead_score: int = 0  # 0-100
    pipeline_stage: PipelineStage = Field(default=PipelineStage.new, index=True)
    status: LeadStatus = Field(default=LeadStatus.active, index=True)

    # Lead finder
    lead_type: Optional[LeadType] = None
    company: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    tags: str = ""  # comma-separated LeadTag values
    confidence_score: Optional[int] = None  # 0-100, AI discovery only
    service_need: Optional[str] = None

    notes: Optional[str] = None
    last_contacted_at: Optional[datetime] = None
    discovered_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def tag_list(self) -> list[str]:
        return [t for t in self.tags.split(",") if t]


class PipelineStageEntry(SQLModel, table=True):
    __tablename__ = "pipeline_stages"

    id: Optional[int] = Field(default=None, primary_key=True)
    lead_id: int = Field(foreign_key="leads.id", index=True)
    stage: PipelineStage
    entered_at: datetime = Field(default_factory=utcnow)
