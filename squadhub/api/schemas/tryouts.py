from datetime import date
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from ninja import Schema


class RoundSchema(Schema):
    id: UUID
    team_category: str
    label: str
    start_date: date
    end_date: date
    notes: str
    status: str
    created_at: datetime
    updated_at: datetime


class RoundListItemSchema(RoundSchema):
    entry_count: int = 0
    submitted_count: int = 0


class RoundCreateSchema(Schema):
    team_category: str
    start_date: date
    end_date: Optional[date] = None
    label: str = ""
    notes: str = ""
    prospect_ids: List[str]


class RoundUpdateSchema(Schema):
    label: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    team_category: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class IssuedLinkSchema(Schema):
    prospect_id: UUID
    token: str
    link: str


class RoundCreatedSchema(Schema):
    round: RoundSchema
    links: List[IssuedLinkSchema]


class ParticipantsSchema(Schema):
    prospect_ids: List[str]


class TemplateSchema(Schema):
    """Either a preset name or an explicit matrix."""

    preset: Optional[str] = None
    template: Optional[Dict[str, Any]] = None


class SeededSchema(Schema):
    updated: int


class ProspectBriefSchema(Schema):
    id: UUID
    username: str
    in_game_name: str
    display_name: str
    position: str
    status: str


class EntrySchema(Schema):
    id: UUID
    prospect: ProspectBriefSchema
    token: str
    link: str
    time_slots: Dict[str, Dict[str, bool]]
    submitted_at: Optional[datetime] = None
    has_response: bool
    selected_count: int


class SummarySchema(Schema):
    total: int
    responded_count: int
    pending_count: int
    submitted_count: int
    heatmap: Dict[str, Dict[str, int]]
    players_by_slot: Dict[str, Dict[str, List[str]]]


class RoundDetailSchema(Schema):
    round: RoundSchema
    entries: List[EntrySchema]
    summary: SummarySchema


class ProspectSchema(Schema):
    id: UUID
    username: str
    full_name: str
    in_game_name: str
    display_name: str
    team_category: str
    position: str
    is_igl: bool
    nationality: str
    agent_pool: List[str]
    rank: str
    tracker_url: str
    twitter_url: str
    discord: str
    links: str
    notes: str
    status: str
    contacted_by_id: Optional[int] = None
    last_contacted_at: Optional[datetime] = None
    managed_by_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ProspectCreateSchema(Schema):
    username: str
    team_category: str
    full_name: str = ""
    in_game_name: str = ""
    position: str = ""
    is_igl: bool = False
    nationality: str = ""
    agent_pool: List[str] = []
    rank: str = ""
    tracker_url: str = ""
    twitter_url: str = ""
    discord: str = ""
    links: str = ""
    notes: str = ""
    status: Optional[str] = None


class ProspectUpdateSchema(Schema):
    username: Optional[str] = None
    team_category: Optional[str] = None
    full_name: Optional[str] = None
    in_game_name: Optional[str] = None
    position: Optional[str] = None
    is_igl: Optional[bool] = None
    nationality: Optional[str] = None
    agent_pool: Optional[List[str]] = None
    rank: Optional[str] = None
    tracker_url: Optional[str] = None
    twitter_url: Optional[str] = None
    discord: Optional[str] = None
    links: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None


class StatusChangeSchema(Schema):
    status: str


class PromoteSchema(Schema):
    team_id: Optional[str] = None


class RosterMemberSchema(Schema):
    id: UUID
    team_id: UUID
    prospect_id: Optional[UUID] = None
    username: str
    full_name: str
    in_game_name: str
    position: str
    is_igl: bool
    nationality: str
    agent_pool: List[str]
    rank: str
    tracker_url: str
    twitter_url: str
    created_at: datetime
