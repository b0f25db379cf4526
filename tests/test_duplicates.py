"""Tests for duplicate lead detection, in memory and against the SQL store."""

import pytest

from majestic_leads.core.duplicates import (
    DuplicateCandidate,
    ExistingLead,
    batch_find_duplicates,
    check_snapshot,
    find_duplicate,
    normalize_name,
    normalize_phone,
)
from majestic_leads.leads.store import SqlLeadStore
from majestic_leads.models import Lead


class FakeSource:
    """In-memory lead source that records which lookups were made."""

    def __init__(self, leads, error=None):
        self.leads = list(leads)
        self.error = error
        self.calls = []

    def _record(self, name):
        self.calls.append(name)
        if self.error:
            raise self.error

    def find_by_email(self, email):
        self._record("email")
        return [l for l in self.leads if (l.email or "").lower().strip() == email]

    def find_by_normalized_phone(self, digits):
        self._record("phone")
        return [l for l in self.leads if normalize_phone(l.phone) == digits]

    def find_by_name_location(self, name, location):
        self._record("name_location")
        return [l for l in self.leads if location in (l.location or "").lower()]

    def fetch_all(self):
        self._record("fetch_all")
        return list(self.leads)


EXISTING = [
    ExistingLead(id=1, name="John Smith", email="john@x.com", phone="(703) 555-0101", location="McLean"),
    ExistingLead(id=2, name="Sarah Johnson Jr", email=None, phone="804.555.0202", location="Richmond, VA"),
    ExistingLead(id=3, name="Acme Properties", email="ops@acme.com", phone=None, location="Norfolk"),
]


@pytest.fixture
def source():
    return FakeSource(EXISTING)


class TestFindDuplicate:
    def test_email_is_case_insensitive(self, source):
        result = find_duplicate(DuplicateCandidate(name="John Smith", email="JOHN@X.COM"), source)
        assert result.is_duplicate
        assert result.match_type == "email"
        assert result.matched_lead_id == 1

    def test_email_hit_stops_the_cascade(self, source):
        find_duplicate(DuplicateCandidate(name="John Smith", email="john@x.com", phone="7035550101"), source)
        assert source.calls == ["email"]

    def test_phone_ignores_formatting(self, source):
        result = find_duplicate(DuplicateCandidate(name="S. Johnson", phone="804-555-0202"), source)
        assert result.match_type == "phone"
        assert result.matched_lead_id == 2

    def test_short_phone_never_matches(self, source):
        result = find_duplicate(DuplicateCandidate(name="Someone", phone="555-0101"), source)
        assert not result.is_duplicate
        assert "phone" not in source.calls

    def test_name_and_location_substring(self, source):
        result = find_duplicate(DuplicateCandidate(name="sarah   johnson", location="richmond"), source)
        assert result.is_duplicate
        assert result.match_type == "name_location"
        assert result.matched_lead_id == 2

    def test_name_match_needs_location_match(self, source):
        result = find_duplicate(DuplicateCandidate(name="John Smith", location="Norfolk"), source)
        assert not result.is_duplicate

    def test_empty_name_never_matches(self, source):
        result = find_duplicate(DuplicateCandidate(name="  ", location="McLean"), source)
        assert not result.is_duplicate
        assert "name_location" not in source.calls

    def test_no_match(self, source):
        result = find_duplicate(
            DuplicateCandidate(name="New Person", email="new@y.com", phone="5715550000", location="Vienna"),
            source,
        )
        assert not result.is_duplicate
        assert result.matched_lead_id is None
        assert result.match_type is None

    def test_idempotent(self, source):
        candidate = DuplicateCandidate(name="Acme Properties", location="norfolk")
        assert find_duplicate(candidate, source) == find_duplicate(candidate, source)

    def test_store_errors_propagate(self):
        failing = FakeSource(EXISTING, error=ConnectionError("store unreachable"))
        with pytest.raises(ConnectionError):
            find_duplicate(DuplicateCandidate(name="John", email="john@x.com"), failing)


class TestBatchFindDuplicates:
    CANDIDATES = [
        DuplicateCandidate(name="John Smith", email="JOHN@X.COM"),
        DuplicateCandidate(name="Nobody", email="nobody@z.com", location="Vienna"),
        DuplicateCandidate(name="Sarah Johnson", location="Richmond"),
        DuplicateCandidate(name="Acme", phone="757-555-9999", location="norfolk"),
    ]

    def test_matches_single_checks(self, source):
        batch = batch_find_duplicates(self.CANDIDATES, source)
        for i, candidate in enumerate(self.CANDIDATES):
            assert batch[i] == find_duplicate(candidate, FakeSource(EXISTING))

    def test_single_snapshot(self, source):
        batch_find_duplicates(self.CANDIDATES, source)
        assert source.calls == ["fetch_all"]

    def test_keys_are_indexes(self, source):
        batch = batch_find_duplicates(self.CANDIDATES, source)
        assert sorted(batch) == [0, 1, 2, 3]
        assert [r.is_duplicate for r in batch.values()] == [True, False, True, True]

    def test_candidates_do_not_match_each_other(self):
        empty = FakeSource([])
        twins = [DuplicateCandidate(name="Twin", email="t@x.com")] * 2
        assert not any(r.is_duplicate for r in batch_find_duplicates(twins, empty).values())

    def test_empty_batch_skips_store(self, source):
        assert batch_find_duplicates([], source) == {}
        assert source.calls == []

    def test_snapshot_errors_propagate(self):
        failing = FakeSource(EXISTING, error=ConnectionError("store unreachable"))
        with pytest.raises(ConnectionError):
            batch_find_duplicates(self.CANDIDATES, failing)


class TestNormalization:
    def test_phone(self):
        assert normalize_phone("(703) 555-0101") == "7035550101"
        assert normalize_phone("n/a") is None
        assert normalize_phone(None) is None

    def test_name(self):
        assert normalize_name("  John   SMITH ") == "john smith"

    def test_snapshot_priority(self):
        leads = [
            ExistingLead(id="a", name="Pat Lee", phone="7035551111", location="Vienna"),
            ExistingLead(id="b", name="Other", email="pat@lee.com"),
        ]
        result = check_snapshot(DuplicateCandidate(name="Pat Lee", email="pat@lee.com", phone="7035551111"), leads)
        assert result.match_type == "email"
        assert result.matched_lead_id == "b"


class TestSqlLeadStore:
    @pytest.fixture
    def store(self, db_session):
        db_session.add(Lead(name="John Smith", email=" John@X.com ", phone="(703) 555-0101",
                            location="McLean", zip_code="22101", service_type="Deck"))
        db_session.add(Lead(name="Sarah Johnson", phone="804.555.0202",
                            location="Richmond, VA", zip_code="23220", service_type="Painting"))
        db_session.commit()
        return SqlLeadStore(db_session)

    def test_email_lookup(self, store):
        result = find_duplicate(DuplicateCandidate(name="J", email="JOHN@x.com"), store)
        assert result.match_type == "email"
        assert result.matched_lead_id == 1

    def test_phone_lookup(self, store):
        result = find_duplicate(DuplicateCandidate(name="S", phone="804-555-0202"), store)
        assert result.match_type == "phone"
        assert result.matched_lead_id == 2

    def test_name_location_lookup(self, store):
        result = find_duplicate(DuplicateCandidate(name="sarah johnson", location="RICHMOND"), store)
        assert result.match_type == "name_location"

    def test_batch_matches_single(self, store):
        candidates = [
            DuplicateCandidate(name="John Smith", location="mclean"),
            DuplicateCandidate(name="Nobody", email="no@body.com"),
        ]
        batch = batch_find_duplicates(candidates, store)
        assert batch == {i: find_duplicate(c, store) for i, c in enumerate(candidates)}

    def test_non_ascii_and_padded_values_match_batch(self, db_session):
        db_session.add(Lead(name="Élise Dubois", email="ÉLISE@x.com", location="Ærø",
                            zip_code="22101", service_type="Deck"))
        db_session.add(Lead(name="Tab Person", email="tab@x.com\t", location="Vienna",
                            zip_code="22180", service_type="Deck"))
        db_session.commit()
        store = SqlLeadStore(db_session)

        candidates = [
            DuplicateCandidate(name="Someone", email="élise@x.com"),
            DuplicateCandidate(name="Someone Else", email="tab@x.com"),
            DuplicateCandidate(name="élise dubois", location="ærø"),
        ]
        single = {i: find_duplicate(c, store) for i, c in enumerate(candidates)}

        assert batch_find_duplicates(candidates, store) == single
        assert [r.match_type for r in single.values()] == ["email", "email", "name_location"]
        assert [r.matched_lead_id for r in single.values()] == [1, 2, 1]
