# routes/issues.py
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List

from core.deps import fetched, get_current_user, get_workspace, to_http_error
from schemas.issue_schema import CommentCreate, IssueCommentRead, IssueCreate, IssueRead, IssueUpdate
from schemas.user_schema import UserProfile
from services.errors import OperationFailed
from services.visibility import issues_for_role
from services.workspace import Workspace

router = APIRouter(tags=["Issues"])


# ==================================================================
#  ✅ Get Issues (with comments)
# ==================================================================
@router.get("/", response_model=List[IssueRead])
def get_issues(
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    projects = fetched(workspace.projects)
    return issues_for_role(current_user, projects, fetched(workspace.issues))


@router.get("/{issue_id}", response_model=IssueRead)
def get_issue(
    issue_id: str,
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    fetched(workspace.issues)
    issue = workspace.issues.get(issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")
    return issue


# ==================================================================
#  ✅ Raise Issue
# ==================================================================
@router.post("/", response_model=IssueRead, status_code=status.HTTP_201_CREATED)
def create_issue(
    data: IssueCreate,
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.issues.create(data)
    except OperationFailed as e:
        raise to_http_error(e)


@router.put("/{issue_id}", response_model=IssueRead)
def update_issue(
    issue_id: str,
    data: IssueUpdate,
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.issues.update(issue_id, data)
    except OperationFailed as e:
        raise to_http_error(e)


# ==================================================================
#  ✅ Comments
# ==================================================================
@router.post("/{issue_id}/comments", response_model=IssueCommentRead, status_code=status.HTTP_201_CREATED)
def add_comment(
    issue_id: str,
    data: CommentCreate,
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.issues.add_comment(issue_id, data)
    except OperationFailed as e:
        raise to_http_error(e)
