"""SQLModel-backed lead store — the persistence side of duplicate detection and listing."""

from sqlmodel import Session, col, select

from majestic_leads.config import settings
from majestic_leads.core.duplicates import ExistingLead, normalize_email, normalize_name, normalize_phone
from majestic_leads.models import Lead


def to_existing(lead: Lead) -> ExistingLead:
    return ExistingLead(
        id=lead.id,
        name=lead.name,
        email=lead.email,
        phone=lead.phone,
        location=lead.location,
    )


class SqlLeadStore:
    """Lead queries over a single session."""

    def __init__(self, session: Session):
        self.session = session

    # --- duplicate-detection lookups ---

    # SQL lower(), trim() and like() only fold ASCII, so matching happens in
    # memory with the same normalizers the snapshot check uses.

    def find_by_email(self, email: str) -> list[ExistingLead]:
        rows = self.session.exec(
            select(Lead).where(col(Lead.email).is_not(None)).order_by(Lead.id)
        ).all()
        return [to_existing(r) for r in rows if normalize_email(r.email) == email]

    def find_by_normalized_phone(self, digits: str) -> list[ExistingLead]:
        rows = self.session.exec(
            select(Lead).where(col(Lead.phone).is_not(None)).order_by(Lead.id)
        ).all()
        return [to_existing(r) for r in rows if normalize_phone(r.phone) == digits]

    def find_by_name_location(self, name: str, location: str) -> list[ExistingLead]:
        rows = self.session.exec(select(Lead).order_by(Lead.id)).all()
        return [
            to_existing(r) for r in rows
            if name in normalize_name(r.name) and location in (r.location or "").lower()
        ]

    def fetch_all(self) -> list[ExistingLead]:
        rows = self.session.exec(select(Lead).order_by(Lead.id)).all()
        return [to_existing(r) for r in rows]

    # --- lead records ---

    def get(self, lead_id: int) -> Lead | None:
        return self.session.get(Lead, lead_id)

    def add(self, lead: Lead) -> Lead:
        self.session.add(lead)
        self.session.flush()
        return lead

    def list_leads(
        self,
        status: str | None = None,
        tier: int | None = None,
        stage: str | None = None,
        lead_type: str | None = None,
        min_score: int | None = None,
        max_score: int | None = None,
        in_state_only: bool = True,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Lead]:
        query = select(Lead).order_by(col(Lead.created_at).desc(), col(Lead.id).desc())
        if status:
            query = query.where(Lead.status == status)
        if tier:
            query = query.where(Lead.service_tier == tier)
        if stage:
            query = query.where(Lead.pipeline_stage == stage)
        if lead_type:
            query = query.where(Lead.lead_type == lead_type)
        if min_score is not None:
            query = query.where(Lead.lead_score >= min_score)
        if max_score is not None:
            query = query.where(Lead.lead_score <= max_score)
        if in_state_only:
            query = query.where(Lead.state == settings.service_state_code)
        return list(self.session.exec(query.offset(offset).limit(limit)).all())
