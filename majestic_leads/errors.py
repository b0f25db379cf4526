"""Exceptions raised by the lead service layer."""


class LeadError(Exception):
    pass


class LeadValidationError(LeadError, ValueError):
    """Raised when submitted lead data is missing a required field or uses an unknown value."""


class LeadNotFoundError(LeadError, LookupError):
    def __init__(self, lead_id: int):
        super().__init__(f"Lead {lead_id} not found")
        self.lead_id = lead_id
