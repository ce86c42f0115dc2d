from datetime import date
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from ninja import Schema


class WeeklyAvailabilitySchema(Schema):
    id: UUID
    player_id: int
    team_id: UUID
    week_start: date
    week_end: date
    time_slots: Dict[str, Dict[str, bool]]
    notes: str
    submitted_at: Optional[datetime] = None
    updated_at: datetime


class WeeklyAvailabilitySaveSchema(Schema):
    team_id: str
    week_start: date
    matrix: Dict[str, Any]
    player_id: Optional[int] = None
    notes: str = ""
