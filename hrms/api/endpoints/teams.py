# hrms/api/endpoints/teams.py
from typing import List

from fastapi import APIRouter, Depends, status

from hrms.api.dependencies import get_team_manager
from hrms.api.schemas.common import CreatedResponse, MessageResponse
from hrms.api.schemas.employees import EmployeeResponse
from hrms.api.schemas.teams import TeamInput, TeamResponse
from hrms.auth.dependencies import get_current_principal, get_request_meta
from hrms.core.results import unwrap
from hrms.services.audit import RequestMeta
from hrms.services.identity import Principal
from hrms.services.teams import TeamManager

router = APIRouter()


@router.get("", response_model=List[TeamResponse])
async def list_teams(
        principal: Principal = Depends(get_current_principal),
        teams: TeamManager = Depends(get_team_manager),
):
    return unwrap(await teams.list(principal))


@router.get("/{team_id}/members", response_model=List[EmployeeResponse])
async def list_team_members(
        team_id: str,
        principal: Principal = Depends(get_current_principal),
        teams: TeamManager = Depends(get_team_manager),
):
    return unwrap(await teams.members(principal, team_id))


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
        payload: TeamInput,
        principal: Principal = Depends(get_current_principal),
        meta: RequestMeta = Depends(get_request_meta),
        teams: TeamManager = Depends(get_team_manager),
):
    team_id = unwrap(await teams.create(principal, payload, meta))
    return {"id": team_id, "message": "Team created successfully"}


@router.put("/{team_id}", response_model=MessageResponse)
async def update_team(
        team_id: str,
        payload: TeamInput,
        principal: Principal = Depends(get_current_principal),
        meta: RequestMeta = Depends(get_request_meta),
        teams: TeamManager = Depends(get_team_manager),
):
    unwrap(await teams.update(principal, team_id, payload, meta))
    return {"message": "Team updated successfully"}


@router.delete("/{team_id}", response_model=MessageResponse)
async def delete_team(
        team_id: str,
        principal: Principal = Depends(get_current_principal),
        meta: RequestMeta = Depends(get_request_meta),
        teams: TeamManager = Depends(get_team_manager),
):
    unwrap(await teams.delete(principal, team_id, meta))
    return {"message": "Team deleted successfully"}
