# core/deps.py
from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlmodel import Session

from core.database import get_session
from core.security import oauth2_scheme
from schemas.user_schema import UserProfile
from services.errors import NotAuthenticated, OperationFailed, ValidationFailed
from services.workspace import Workspace


def get_workspace(
    token: Optional[str] = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> Workspace:
    """One workspace per request, bound to the caller's bearer token (if any)."""
    return Workspace.for_session(session, token)


def get_current_user(workspace: Workspace = Depends(get_workspace)) -> UserProfile:
    user = workspace.identity.current_user()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_permission(permission: str):
    """
    Dependency factory: only callers whose role grants `permission` get through.
    """
    def checker(current_user: UserProfile = Depends(get_current_user)) -> UserProfile:
        if permission not in current_user.permissions:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return current_user
    return checker


def get_admin_user(current_user: UserProfile = Depends(get_current_user)) -> UserProfile:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


def to_http_error(error: Exception) -> HTTPException:
    """Map a service failure onto the matching HTTP error."""
    if isinstance(error, ValidationFailed):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=error.errors)
    if isinstance(error, NotAuthenticated):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=error.message)
    if isinstance(error, OperationFailed):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.message)
    return HTTPException(status_code=500, detail="An unexpected error occurred. Please try again later.")


def fetched(service):
    """Fetch a service's collection, answering 503 when the store could not be read."""
    items = service.fetch()
    if service.last_fetch_failed:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=service.feedback.last_error or f"Failed to fetch {service.entity}",
        )
    return items
