"""Tests for strategic tags and tag bonuses."""

from majestic_leads.core.tagging import assign_tags, primary_tag, sort_tags, tag_bonus, tag_priority
from majestic_leads.models import LeadTag, LeadType


class TestAssignTags:
    def test_whale_luxury(self):
        tags = assign_tags("New Construction", "McLean", "Fairfax")
        assert tags == ["Whale", "Luxury"]
        assert tag_bonus(tags) == 25

    def test_quick_turn(self):
        assert assign_tags("Painting", "Norfolk", None) == ["Quick-Turn"]

    def test_luxury_county_without_luxury_area(self):
        assert assign_tags("Deck", "Ashburn", "Loudoun") == ["Luxury"]

    def test_luxury_area_is_substring_match(self):
        assert "Luxury" in assign_tags("Deck", "Old Town Alexandria, VA", None)

    def test_multi_unit_lead_types(self):
        assert assign_tags("Kitchen Remodel", "Richmond", "Richmond", lead_type="Investor") == ["Multi-Unit"]
        assert assign_tags("Kitchen Remodel", "Richmond", None, lead_type=LeadType.property_manager) == ["Multi-Unit"]

    def test_commercial_lead_types(self):
        assert assign_tags("Roofing", "Norfolk", None, lead_type=LeadType.hoa_manager) == ["Commercial"]
        assert assign_tags("Roofing", "Norfolk", None, lead_type="Commercial") == ["Commercial"]

    def test_homeowner_gets_no_type_tag(self):
        assert assign_tags("Roofing", "Norfolk", None, lead_type=LeadType.homeowner) == []

    def test_value_whale_crosses_tiers(self):
        tags = assign_tags("Painting", "Norfolk", None, estimated_value=150_000)
        assert tags == ["Whale", "Quick-Turn"]

    def test_below_whale_threshold(self):
        assert assign_tags("Deck", "Norfolk", None, estimated_value=99_999) == []

    def test_all_tags_in_fixed_order(self):
        tags = assign_tags("Painting", "Great Falls", "Fairfax", lead_type="Commercial", estimated_value=200_000)
        assert tags == ["Whale", "Quick-Turn", "Luxury", "Commercial"]


class TestTagBonus:
    def test_sum(self):
        assert tag_bonus(["Whale", "Luxury", "Multi-Unit", "Commercial", "Quick-Turn"]) == 41

    def test_duplicates_count_once(self):
        assert tag_bonus(["Whale", "Whale"]) == 15

    def test_accepts_enum_members(self):
        assert tag_bonus([LeadTag.luxury, LeadTag.quick_turn]) == 13

    def test_empty_and_unknown(self):
        assert tag_bonus([]) == 0
        assert tag_bonus(None) == 0
        assert tag_bonus(["VIP"]) == 0


class TestTagOrdering:
    def test_sort_by_priority(self):
        assert sort_tags(["Quick-Turn", "Whale", "Multi-Unit", "Luxury"]) == [
            "Whale", "Luxury", "Multi-Unit", "Quick-Turn",
        ]

    def test_primary_tag(self):
        assert primary_tag(["Quick-Turn", "Commercial"]) == "Commercial"
        assert primary_tag([]) is None

    def test_unknown_tag_sorts_last(self):
        assert tag_priority("VIP") == 99
        assert sort_tags(["VIP", "Quick-Turn"]) == ["Quick-Turn", "VIP"]
