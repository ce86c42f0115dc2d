from typing import Dict, List, Optional

from django.http import HttpRequest
from ninja import Router

from squadhub.api.auth import get_actor
from squadhub.api.schemas.tryouts import IssuedLinkSchema
from squadhub.api.schemas.tryouts import ParticipantsSchema
from squadhub.api.schemas.tryouts import PromoteSchema
from squadhub.api.schemas.tryouts import ProspectCreateSchema
from squadhub.api.schemas.tryouts import ProspectSchema
from squadhub.api.schemas.tryouts import ProspectUpdateSchema
from squadhub.api.schemas.tryouts import RosterMemberSchema
from squadhub.api.schemas.tryouts import RoundCreatedSchema
from squadhub.api.schemas.tryouts import RoundCreateSchema
from squadhub.api.schemas.tryouts import RoundDetailSchema
from squadhub.api.schemas.tryouts import RoundListItemSchema
from squadhub.api.schemas.tryouts import RoundSchema
from squadhub.api.schemas.tryouts import RoundUpdateSchema
from squadhub.api.schemas.tryouts import SeededSchema
from squadhub.api.schemas.tryouts import StatusChangeSchema
from squadhub.api.schemas.tryouts import TemplateSchema
from squadhub.core.exceptions import ValidationError
from squadhub.tryouts import matrix as availability_matrix
from squadhub.tryouts.lifecycle import ProspectLifecycleService
from squadhub.tryouts.services import ProspectService
from squadhub.tryouts.services import SchedulingService
from squadhub.tryouts.tokens import availability_link

router = Router()


def _issued_links(tokens) -> List[dict]:
    return [
        {"prospect_id": prospect_id, "token": token, "link": availability_link(token)}
        for prospect_id, token in tokens.items()
    ]


def _entry_view(entry) -> dict:
    return {
        "id": entry.id,
        "prospect": entry.prospect,
        "token": entry.token,
        "link": availability_link(entry.token),
        "time_slots": availability_matrix.normalize(entry.time_slots),
        "submitted_at": entry.submitted_at,
        "has_response": availability_matrix.has_response(entry.time_slots),
        "selected_count": availability_matrix.count_selected(entry.time_slots),
    }


# Scheduling rounds
@router.get("/rounds", response=List[RoundListItemSchema])
def list_rounds(
    request: HttpRequest,
    team_category: Optional[str] = None,
    status: Optional[str] = None,
):
    return SchedulingService.list_rounds(get_actor(request), team_category=team_category, status=status)


@router.post("/rounds", response={201: RoundCreatedSchema})
def create_round(request: HttpRequest, payload: RoundCreateSchema):
    """Create a round and one availability link per selected prospect."""
    scheduling_round, tokens = SchedulingService.create_round(
        get_actor(request),
        team_category=payload.team_category,
        start_date=payload.start_date,
        end_date=payload.end_date,
        prospect_ids=payload.prospect_ids,
        label=payload.label,
        notes=payload.notes,
    )
    return 201, {"round": scheduling_round, "links": _issued_links(tokens)}


@router.get("/rounds/{round_id}", response=RoundDetailSchema)
def get_round(request: HttpRequest, round_id: str):
    detail = SchedulingService.round_detail(get_actor(request), round_id)
    return {
        "round": detail["round"],
        "entries": [_entry_view(entry) for entry in detail["entries"]],
        "summary": detail["summary"].as_dict(),
    }


@router.patch("/rounds/{round_id}", response=RoundSchema)
def update_round(request: HttpRequest, round_id: str, payload: RoundUpdateSchema):
    return SchedulingService.update_round(
        get_actor(request), round_id, **payload.dict(exclude_unset=True)
    )


@router.delete("/rounds/{round_id}", response={204: None})
def delete_round(request: HttpRequest, round_id: str):
    SchedulingService.delete_round(get_actor(request), round_id)
    return 204, None


@router.post("/rounds/{round_id}/participants", response={201: List[IssuedLinkSchema]})
def add_participants(request: HttpRequest, round_id: str, payload: ParticipantsSchema):
    tokens = SchedulingService.add_participants(get_actor(request), round_id, payload.prospect_ids)
    return 201, _issued_links(tokens)


@router.post("/rounds/{round_id}/template", response=SeededSchema)
def seed_template(request: HttpRequest, round_id: str, payload: TemplateSchema):
    if payload.preset:
        template = availability_matrix.quick_fill(payload.preset)
    elif payload.template is not None:
        template = payload.template
    else:
        raise ValidationError("Provide a preset or a template", errors={"template": "required"})
    updated = SchedulingService.seed_from_template(get_actor(request), round_id, template)
    return {"updated": updated}


# Prospects
@router.get("/prospects", response=List[ProspectSchema])
def list_prospects(
    request: HttpRequest,
    status: Optional[str] = None,
    position: Optional[str] = None,
    search: Optional[str] = None,
    team_category: Optional[str] = None,
    eligible: bool = False,
):
    return ProspectService.list_prospects(
        get_actor(request),
        status=status,
        position=position,
        search=search,
        team_category=team_category,
        eligible=eligible,
    )


@router.post("/prospects", response={201: ProspectSchema})
def create_prospect(request: HttpRequest, payload: ProspectCreateSchema):
    prospect = ProspectService.create_prospect(get_actor(request), payload.dict())
    return 201, prospect


# Registered before /prospects/{prospect_id} so "summary" is not read as an id
@router.get("/prospects/summary", response=Dict[str, int])
def prospect_summary(request: HttpRequest, team_category: Optional[str] = None):
    """Number of prospects in each pipeline status."""
    return ProspectService.status_summary(get_actor(request), team_category=team_category)


@router.get("/prospects/{prospect_id}", response=ProspectSchema)
def get_prospect(request: HttpRequest, prospect_id: str):
    return ProspectService.get_prospect(get_actor(request), prospect_id)


@router.patch("/prospects/{prospect_id}", response=ProspectSchema)
def update_prospect(request: HttpRequest, prospect_id: str, payload: ProspectUpdateSchema):
    return ProspectService.update_prospect(
        get_actor(request), prospect_id, payload.dict(exclude_unset=True)
    )


@router.delete("/prospects/{prospect_id}", response={204: None})
def delete_prospect(request: HttpRequest, prospect_id: str):
    ProspectService.delete_prospect(get_actor(request), prospect_id)
    return 204, None


@router.post("/prospects/{prospect_id}/status", response=ProspectSchema)
def set_prospect_status(request: HttpRequest, prospect_id: str, payload: StatusChangeSchema):
    return ProspectLifecycleService.set_status(prospect_id, payload.status, get_actor(request))


@router.post("/prospects/{prospect_id}/promote", response={201: RosterMemberSchema})
def promote_prospect(request: HttpRequest, prospect_id: str, payload: PromoteSchema):
    member = ProspectLifecycleService.promote(prospect_id, payload.team_id, get_actor(request))
    return 201, member
