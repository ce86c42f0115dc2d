from datetime import date
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from ninja import Schema


class LinkRoundSchema(Schema):
    id: UUID
    label: str
    team_category: str
    start_date: date
    end_date: date
    notes: str


class LinkProspectSchema(Schema):
    display_name: str
    username: str
    in_game_name: str
    position: str


class AvailabilityLinkSchema(Schema):
    """Everything a token holder may see."""

    round: LinkRoundSchema
    prospect: LinkProspectSchema
    matrix: Dict[str, Dict[str, bool]]
    timezone: str
    submitted_at: Optional[datetime] = None
    selected_count: int


class SubmitAvailabilitySchema(Schema):
    # Structure is checked by squadhub.tryouts.matrix.normalize
    matrix: Dict[str, Any]
    timezone: Optional[str] = None


class PresetSchema(Schema):
    preset: str
    matrix: Dict[str, Dict[str, bool]]
    selected_count: int
