from typing import List, Optional

from django.http import HttpRequest
from ninja import Router

from squadhub.api.auth import get_actor
from squadhub.api.schemas.teams import WeeklyAvailabilitySaveSchema
from squadhub.api.schemas.teams import WeeklyAvailabilitySchema
from squadhub.api.schemas.tryouts import SummarySchema
from squadhub.teams.services import WeeklyAvailabilityService

router = Router()


@router.get("/", response=List[WeeklyAvailabilitySchema])
def list_availability(
    request: HttpRequest,
    player_id: Optional[int] = None,
    team_id: Optional[str] = None,
    week_start: Optional[str] = None,
):
    return WeeklyAvailabilityService.list_for(
        get_actor(request),
        player_id=player_id,
        team_id=team_id,
        week_start=week_start,
    )


@router.get("/summary", response=SummarySchema)
def team_summary(request: HttpRequest, team_id: str, week_start: str):
    """Heatmap of who on the team is available when."""
    return WeeklyAvailabilityService.team_summary(get_actor(request), team_id, week_start)


@router.put("/", response=WeeklyAvailabilitySchema)
def save_availability(request: HttpRequest, payload: WeeklyAvailabilitySaveSchema):
    return WeeklyAvailabilityService.save(
        get_actor(request),
        team_id=payload.team_id,
        week_start=payload.week_start,
        matrix=payload.matrix,
        player_id=payload.player_id,
        notes=payload.notes,
    )


@router.delete("/{record_id}", response={204: None})
def delete_availability(request: HttpRequest, record_id: str):
    WeeklyAvailabilityService.delete(get_actor(request), record_id)
    return 204, None
