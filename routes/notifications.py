# routes/notifications.py
from fastapi import APIRouter, Depends, status
from typing import List

from core.deps import fetched, get_admin_user, get_current_user, get_workspace, to_http_error
from schemas.notification_schema import NotificationCreate, NotificationRead
from schemas.user_schema import UserProfile
from services.errors import OperationFailed
from services.workspace import Workspace

router = APIRouter(tags=["Notifications"])


@router.get("/", response_model=List[NotificationRead])
def get_notifications(
    unread_only: bool = False,
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    fetched(workspace.notifications)
    return workspace.notifications.unread if unread_only else workspace.notifications.items


@router.get("/unread-count")
def get_unread_count(
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    fetched(workspace.notifications)
    return {"unread": workspace.notifications.unread_count}


@router.post("/", status_code=status.HTTP_201_CREATED)
def send_notification(
    data: NotificationCreate,
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        notification_id = workspace.notifications.send(data)
    except OperationFailed as e:
        raise to_http_error(e)
    return {"id": notification_id}


@router.post("/{notification_id}/read")
def mark_as_read(
    notification_id: str,
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        workspace.notifications.mark_as_read(notification_id)
    except OperationFailed as e:
        raise to_http_error(e)
    return {"message": "Notification marked as read"}


@router.post("/read-all")
def mark_all_as_read(
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        count = workspace.notifications.mark_all_as_read()
    except OperationFailed as e:
        raise to_http_error(e)
    return {"updated": count}
