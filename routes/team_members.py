# routes/team_members.py
from fastapi import APIRouter, Depends, status
from typing import List

from core.deps import fetched, get_current_user, get_workspace, require_permission, to_http_error
from schemas.team_member_schema import TeamMemberCreate, TeamMemberRead, TeamMemberUpdate
from schemas.user_schema import UserProfile
from services.errors import OperationFailed, ValidationFailed
from services.visibility import team_members_for_role
from services.workspace import Workspace

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["Team Members"])

# admins manage every roster; company owners manage their own
can_manage_team = require_permission("write")


@router.get("/", response_model=List[TeamMemberRead])
def get_team_members(
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    members = fetched(workspace.team_members)
    projects = fetched(workspace.projects) if current_user.is_client else []
    return team_members_for_role(current_user, projects, members)


@router.post("/", response_model=TeamMemberRead, status_code=status.HTTP_201_CREATED)
def add_team_member(
    data: TeamMemberCreate,
    current_user: UserProfile = Depends(can_manage_team),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.team_members.create(data)
    except (ValidationFailed, OperationFailed) as e:
        raise to_http_error(e)


@router.put("/{member_id}", response_model=TeamMemberRead)
def update_team_member(
    member_id: str,
    data: TeamMemberUpdate,
    current_user: UserProfile = Depends(can_manage_team),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.team_members.update(member_id, data)
    except OperationFailed as e:
        raise to_http_error(e)


@router.post("/{member_id}/deactivate")
def deactivate_team_member(
    member_id: str,
    current_user: UserProfile = Depends(can_manage_team),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        workspace.team_members.deactivate(member_id)
    except OperationFailed as e:
        raise to_http_error(e)
    return {"message": "Team member deactivated successfully"}


@router.delete("/{member_id}")
def delete_team_member(
    member_id: str,
    current_user: UserProfile = Depends(can_manage_team),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        workspace.team_members.delete(member_id)
    except OperationFailed as e:
        raise to_http_error(e)
    logger.info(f"🗑️ Team member {member_id} removed by {current_user.email}")
    return {"message": "Team member removed successfully"}
