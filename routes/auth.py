from fastapi import APIRouter, HTTPException, Depends, status

from schemas.user_schema import RegistrationForm, UserLogin, UserProfile, TokenResponse
from core.deps import get_workspace, get_current_user, to_http_error
from services.errors import ValidationFailed
from services.workspace import Workspace

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


def _token_response(workspace: Workspace) -> TokenResponse:
    return TokenResponse(access_token=workspace.identity.token, user=workspace.identity.current_user())


# ==========================================================
# ✅ Register: admin, company owner or client
# ==========================================================
@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(form: RegistrationForm, workspace: Workspace = Depends(get_workspace)):
    """Create an account; company owners get their company, clients join the one they picked."""
    logger.info(f"📝 Registration attempt for {form.email}")
    try:
        ok = workspace.identity.register(form)
    except ValidationFailed as e:
        raise to_http_error(e)

    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=workspace.feedback.last_error)
    return _token_response(workspace)


# ==========================================================
# ✅ Login
# ==========================================================
@router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin, workspace: Workspace = Depends(get_workspace)):
    if not workspace.identity.login(credentials.email, credentials.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=workspace.feedback.last_error,
            headers={"WWW-Authenticate": "Bearer"},
        )

    if workspace.identity.current_user() is None:
        # valid password but the profile is missing or not active
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Your account is inactive. Contact your admin.")
    return _token_response(workspace)


# ==========================================================
# ✅ Logout
# ==========================================================
@router.post("/logout")
def logout(workspace: Workspace = Depends(get_workspace)):
    """Tokens are stateless; the client simply drops it."""
    workspace.identity.logout()
    return {"message": "Logged out successfully"}


# ==========================================================
# ✅ Get Current Authenticated User
# ==========================================================
@router.get("/me", response_model=UserProfile)
def get_current_user_info(current_user: UserProfile = Depends(get_current_user)):
    """Return the authenticated user's profile and permissions"""
    return current_user
