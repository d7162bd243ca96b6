# routes/projects.py
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List

from core.deps import fetched, get_current_user, get_workspace, require_permission, to_http_error
from schemas.project_schema import ProjectCreate, ProjectRead, ProjectUpdate, TeamAssignment, ProjectHistoryRead
from schemas.user_schema import UserProfile
from services.errors import OperationFailed, ValidationFailed
from services.visibility import projects_for_role
from services.workspace import Workspace

router = APIRouter(tags=["Projects"])


# ==================================================================
#  ✅ Get All Projects (scoped by role)
# ==================================================================
@router.get("/", response_model=List[ProjectRead])
def get_projects(
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    return projects_for_role(current_user, fetched(workspace.projects))


# ==================================================================
#  ✅ Create New Project
# ==================================================================
@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    data: ProjectCreate,
    current_user: UserProfile = Depends(require_permission("write")),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.projects.create(data)
    except (ValidationFailed, OperationFailed) as e:
        raise to_http_error(e)


# ==================================================================
#  ✅ Get Single Project
# ==================================================================
@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: str,
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    fetched(workspace.projects)
    project = workspace.projects.get(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


# ==================================================================
#  ✅ Update Project
# ==================================================================
@router.put("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: str,
    data: ProjectUpdate,
    current_user: UserProfile = Depends(require_permission("write")),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.projects.update(project_id, data)
    except (ValidationFailed, OperationFailed) as e:
        raise to_http_error(e)


# ==================================================================
#  ✅ Delete Project
# ==================================================================
@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    current_user: UserProfile = Depends(require_permission("write")),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        workspace.projects.delete(project_id)
    except OperationFailed as e:
        raise to_http_error(e)
    return {"message": "Project deleted successfully"}


# ==================================================================
#  ✅ Assign Project to Team
# ==================================================================
@router.put("/{project_id}/team", response_model=ProjectRead)
def assign_project_to_team(
    project_id: str,
    data: TeamAssignment,
    current_user: UserProfile = Depends(require_permission("write")),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.projects.assign_to_team(project_id, data.member_ids)
    except (ValidationFailed, OperationFailed) as e:
        raise to_http_error(e)


# ==================================================================
#  ✅ Project History
# ==================================================================
@router.get("/{project_id}/history", response_model=List[ProjectHistoryRead])
def get_project_history(
    project_id: str,
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    fetched(workspace.history)
    return workspace.history.for_project(project_id)
