# routes/users.py
from fastapi import APIRouter, Depends
from typing import List

from core.deps import fetched, get_admin_user, get_workspace, to_http_error
from schemas.user_schema import ProfileRead, ProfileRoleUpdate, ProfileStatusUpdate, UserProfile
from services.errors import OperationFailed
from services.workspace import Workspace

import logging
logger = logging.getLogger(__name__)


router = APIRouter(tags=["Users"])


# ----------------------------------------------------------------------
# ✅ List All Users (Admin)
# ----------------------------------------------------------------------
@router.get("/", response_model=List[ProfileRead])
def get_all_users(
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    return fetched(workspace.profiles)


# ----------------------------------------------------------------------
# ✅ Activate / Deactivate User (Admin)
# ----------------------------------------------------------------------
@router.patch("/{user_id}/status", response_model=ProfileRead)
def update_user_status(
    user_id: str,
    data: ProfileStatusUpdate,
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        profile = workspace.profiles.update_status(user_id, data.status)
    except OperationFailed as e:
        raise to_http_error(e)
    logger.info(f"✅ {current_user.email} set user {user_id} to {data.status}")
    return profile


# ----------------------------------------------------------------------
# ✅ Change User Role (Admin)
# ----------------------------------------------------------------------
@router.patch("/{user_id}/role", response_model=ProfileRead)
def update_user_role(
    user_id: str,
    data: ProfileRoleUpdate,
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        profile = workspace.profiles.update_role(user_id, data.role)
    except OperationFailed as e:
        raise to_http_error(e)
    logger.info(f"✅ {current_user.email} changed role of {user_id} to {data.role}")
    return profile
