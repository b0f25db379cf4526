"""Lead records — intake, storage, pipeline updates and lead-finder processing."""

from majestic_leads.leads.discovery import discover, process_found_leads, save_discovered
from majestic_leads.leads.intake import LeadPayload, build_lead
from majestic_leads.leads.service import (
    archive_lead,
    create_lead,
    get_lead,
    lead_view,
    list_leads,
    mark_contacted,
    move_stage,
    prioritized,
    update_lead,
)

__all__ = [
    "LeadPayload",
    "build_lead",
    "create_lead",
    "get_lead",
    "update_lead",
    "move_stage",
    "mark_contacted",
    "archive_lead",
    "list_leads",
    "lead_view",
    "prioritized",
    "discover",
    "process_found_leads",
    "save_discovered",
]
