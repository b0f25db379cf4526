"""Duplicate lead detection.

Matchers run in priority order and the first hit wins:
  1. email          lower-cased, trimmed, exact
  2. phone          digits only, at least 10 digits, exact
  3. name_location  existing name contains candidate name AND
                    existing location contains candidate location

find_duplicate() asks the store for each strategy in turn.
batch_find_duplicates() fetches one snapshot and checks every candidate
against it, so candidates in the same batch never match each other.

Store errors are not caught here; the caller decides whether to carry on
without a duplicate check.
"""

import logging
import re
from typing import Callable, Iterable, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
_WHITESPACE = re.compile(r"\s+")

MIN_PHONE_DIGITS = 10


class DuplicateCandidate(BaseModel):
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    location: str = ""
    address: Optional[str] = None


class ExistingLead(BaseModel):
    """What the detector needs to know about a stored lead."""

    id: int | str
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None


class DuplicateCheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_duplicate: bool = False
    matched_lead_id: int | str | None = None
    match_type: Optional[str] = None  # email | phone | address | name_location


NO_DUPLICATE = DuplicateCheckResult()


class LeadSource(Protocol):
    def find_by_email(self, email: str) -> Sequence[ExistingLead]: ...

    def find_by_normalized_phone(self, digits: str) -> Sequence[ExistingLead]: ...

    def find_by_name_location(self, name: str, location: str) -> Sequence[ExistingLead]: ...

    def fetch_all(self) -> Sequence[ExistingLead]: ...


# --- Normalization ---

def normalize_email(email: str | None) -> str | None:
    if not email:
        return None
    return email.lower().strip() or None


def normalize_phone(phone: str | None) -> str | None:
    if not phone:
        return None
    return _NON_DIGITS.sub("", phone) or None


def normalize_name(name: str | None) -> str:
    return _WHITESPACE.sub(" ", (name or "").lower().strip())


def normalize_location(location: str | None) -> str:
    return (location or "").lower().strip()


# --- Matchers ---

def match_email(candidate: DuplicateCandidate, leads: Iterable[ExistingLead]) -> ExistingLead | None:
    email = normalize_email(candidate.email)
    if not email:
        return None
    return next((lead for lead in leads if normalize_email(lead.email) == email), None)


def match_phone(candidate: DuplicateCandidate, leads: Iterable[ExistingLead]) -> ExistingLead | None:
    phone = normalize_phone(candidate.phone)
    if not phone or len(phone) < MIN_PHONE_DIGITS:
        return None
    return next((lead for lead in leads if normalize_phone(lead.phone) == phone), None)


def match_name_location(candidate: DuplicateCandidate, leads: Iterable[ExistingLead]) -> ExistingLead | None:
    name = normalize_name(candidate.name)
    if not name:
        return None
    location = normalize_location(candidate.location)
    for lead in leads:
        if name in normalize_name(lead.name) and location in (lead.location or "").lower():
            return lead
    return None


Matcher = Callable[[DuplicateCandidate, Iterable[ExistingLead]], Optional[ExistingLead]]

MATCHERS: list[tuple[str, Matcher]] = [
    ("email", match_email),
    ("phone", match_phone),
    ("name_location", match_name_location),
]


def check_snapshot(candidate: DuplicateCandidate, leads: Sequence[ExistingLead]) -> DuplicateCheckResult:
    """Run the matcher cascade against an in-memory list of existing leads."""
    for match_type, matcher in MATCHERS:
        match = matcher(candidate, leads)
        if match is not None:
            return DuplicateCheckResult(is_duplicate=True, matched_lead_id=match.id, match_type=match_type)
    return NO_DUPLICATE


# --- Store-backed checks ---

def _lookup(match_type: str, candidate: DuplicateCandidate, source: LeadSource) -> Sequence[ExistingLead]:
    if match_type == "email":
        email = normalize_email(candidate.email)
        return source.find_by_email(email) if email else []
    if match_type == "phone":
        phone = normalize_phone(candidate.phone)
        if not phone or len(phone) < MIN_PHONE_DIGITS:
            return []
        return source.find_by_normalized_phone(phone)
    name = normalize_name(candidate.name)
    if not name:
        return []
    return source.find_by_name_location(name, normalize_location(candidate.location))


def find_duplicate(candidate: DuplicateCandidate, source: LeadSource) -> DuplicateCheckResult:
    """Check one candidate, issuing at most one store lookup per strategy."""
    for match_type, matcher in MATCHERS:
        rows = _lookup(match_type, candidate, source)
        match = matcher(candidate, rows) if rows else None
        if match is not None:
            logger.debug("Duplicate of lead %s by %s: %s", match.id, match_type, candidate.name)
            return DuplicateCheckResult(is_duplicate=True, matched_lead_id=match.id, match_type=match_type)
    return NO_DUPLICATE


def batch_find_duplicates(
    candidates: Sequence[DuplicateCandidate],
    source: LeadSource,
) -> dict[int, DuplicateCheckResult]:
    """Check many candidates against a single snapshot of the store."""
    if not candidates:
        return {}
    snapshot = list(source.fetch_all())
    results = {i: check_snapshot(c, snapshot) for i, c in enumerate(candidates)}
    dupes = sum(1 for r in results.values() if r.is_duplicate)
    logger.info("Batch duplicate check: %d/%d candidates already in store", dupes, len(candidates))
    return results
