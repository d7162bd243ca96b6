# routes/clients.py
from fastapi import APIRouter, Depends
from typing import List

from core.deps import fetched, get_current_user, get_workspace, require_permission, to_http_error
from schemas.client_schema import ClientRead, ClientStatusUpdate
from schemas.user_schema import UserProfile
from services.errors import OperationFailed
from services.workspace import Workspace

router = APIRouter(tags=["Clients"])


@router.get("/", response_model=List[ClientRead])
def get_clients(
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    return fetched(workspace.clients)


@router.patch("/{client_id}/status", response_model=ClientRead)
def update_client_status(
    client_id: str,
    data: ClientStatusUpdate,
    current_user: UserProfile = Depends(require_permission("write")),
    workspace: Workspace = Depends(get_workspace),
):
    """Activate or deactivate a client of the caller's company."""
    try:
        return workspace.clients.update_status(client_id, data.status)
    except OperationFailed as e:
        raise to_http_error(e)
