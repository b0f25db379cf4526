"""Manually add a lead to the database."""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from majestic_leads.core.scoring import score_label
from majestic_leads.database import init_db
from majestic_leads.errors import LeadValidationError
from majestic_leads.leads.service import create_lead
from majestic_leads.models import LeadType, ProjectScope


def main():
    parser = argparse.ArgumentParser(description="Add a lead manually")
    parser.add_argument("--name", required=True)
    parser.add_argument("--location", required=True, help="City or area, e.g. 'McLean'")
    parser.add_argument("--zip", dest="zip_code", required=True)
    parser.add_argument("--service", default="", help="Service requested (free text is fine)")
    parser.add_argument("--email", default="")
    parser.add_argument("--phone", default="")
    parser.add_argument("--state", default="")
    parser.add_argument("--address", default="")
    parser.add_argument("--scope", default="", choices=[""] + [s.value for s in ProjectScope])
    parser.add_argument("--value", default="", help="Estimated value, e.g. 45000 or 45k")
    parser.add_argument("--lead-type", default="", choices=[""] + [t.value for t in LeadType])
    parser.add_argument("--company", default="")
    parser.add_argument("--notes", default="")
    args = parser.parse_args()

    init_db()

    try:
        lead = create_lead({
            "name": args.name,
            "location": args.location,
            "zip_code": args.zip_code,
            "service_type": args.service,
            "email": args.email,
            "phone": args.phone,
            "state": args.state,
            "address": args.address,
            "project_scope": args.scope,
            "estimated_value": args.value,
            "lead_type": args.lead_type,
            "company": args.company,
            "notes": args.notes,
        })
    except LeadValidationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Added lead: {lead.name} (ID: {lead.id})")
    print(f"  Service: {lead.service_type} (tier {lead.service_tier})")
    print(f"  Score:   {lead.lead_score} ({score_label(lead.lead_score)})")
    print(f"  Tags:    {lead.tags or 'none'}")
    if lead.status.value == "archived":
        print(f"  Archived: outside service area ({lead.county or lead.zip_code})")


if __name__ == "__main__":
    main()
