"""Tests for service classification and tier lookup."""

import pytest

from majestic_leads.core.categorization import (
    classify_service,
    coerce_tier,
    is_valid_service,
    normalize_lead_type,
    services_for_tier,
    tier_color,
    tier_for_service,
    tier_label,
)
from majestic_leads.models import LeadType, ServiceTier
from majestic_leads.reference import DEFAULT_REFERENCE, ReferenceData


class TestClassifyService:
    def test_exact_match_is_case_insensitive(self):
        assert classify_service("kitchen remodel") == "Kitchen Remodel"
        assert classify_service("  ROOFING ") == "Roofing"

    def test_fuzzy_substring(self):
        service = classify_service("kitchen remodeling")
        assert service == "Kitchen Remodel"
        assert tier_for_service(service) == ServiceTier.MODERNIZE

    def test_canonical_name_inside_longer_text(self):
        assert classify_service("looking for a deck builder") == "Deck"

    def test_keyword_fallback(self):
        assert classify_service("need a new roof") == "Roofing"
        assert classify_service("garden shed") == "She-Shed"
        assert classify_service("hardwood floors") == "Flooring"

    def test_unmatched_returns_none(self):
        assert classify_service("quantum computing") is None
        assert classify_service("") is None
        assert classify_service(None) is None

    def test_substring_wins_over_keyword(self):
        # "bathroom remodel" contains a canonical name, the keyword map is never consulted
        assert classify_service("master bathroom remodel") == "Bathroom Remodel"

    def test_uses_injected_reference(self):
        ref = ReferenceData(service_to_tier={"Pool": ServiceTier.EXTERIOR}, service_keywords=())
        assert classify_service("pool install", ref) == "Pool"
        assert classify_service("kitchen", ref) is None


class TestTiers:
    def test_every_service_has_one_tier(self):
        assert len(DEFAULT_REFERENCE.service_to_tier) == 17
        for service, tier in DEFAULT_REFERENCE.service_to_tier.items():
            assert tier_for_service(service) == tier
            assert is_valid_service(service)

    def test_unknown_service_falls_to_service_tier(self):
        assert tier_for_service("Pool Cleaning") == ServiceTier.SERVICE
        assert tier_for_service(None) == ServiceTier.SERVICE

    def test_services_for_tier(self):
        assert services_for_tier(ServiceTier.EPIC) == ["New Construction", "Full Renovation", "Home Addition"]
        assert "Windows/Doors" in services_for_tier(4)

    @pytest.mark.parametrize("raw", [0, 9, None, "x"])
    def test_coerce_tier_fails_closed(self, raw):
        assert coerce_tier(raw) == ServiceTier.SERVICE

    def test_labels_and_colors(self):
        assert tier_label(1) == "Epic"
        assert tier_label(ServiceTier.SERVICE) == "Service"
        assert tier_color(ServiceTier.MODERNIZE) == "#006070"


class TestNormalizeLeadType:
    def test_case_insensitive(self):
        assert normalize_lead_type("property manager") == LeadType.property_manager
        assert normalize_lead_type("HOA MANAGER") == LeadType.hoa_manager

    def test_accepts_enum(self):
        assert normalize_lead_type(LeadType.investor) == LeadType.investor

    def test_unknown_defaults_to_homeowner(self):
        assert normalize_lead_type("landlord") == LeadType.homeowner
        assert normalize_lead_type(None) == LeadType.homeowner
