# routes/pricing.py
from fastapi import APIRouter, Depends, status
from typing import List

from core.deps import fetched, get_admin_user, get_current_user, get_workspace, to_http_error
from schemas.pricing_schema import PricingDecision, PricingRequestCreate, PricingRequestRead
from schemas.user_schema import UserProfile
from services.errors import OperationFailed, ValidationFailed
from services.workspace import Workspace

router = APIRouter(prefix="/pricing-requests", tags=["Pricing"])


@router.get("/", response_model=List[PricingRequestRead])
def get_pricing_requests(
    pending_only: bool = False,
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    """Admins see every request, everyone else their own"""
    requests = fetched(workspace.pricing_requests)
    return workspace.pricing_requests.pending if pending_only else requests


@router.post("/", response_model=PricingRequestRead, status_code=status.HTTP_201_CREATED)
def submit_pricing_request(
    data: PricingRequestCreate,
    workspace: Workspace = Depends(get_workspace),
):
    # anonymous callers get the service's own "please log in" answer
    try:
        return workspace.pricing_requests.submit(data)
    except OperationFailed as e:
        raise to_http_error(e)


@router.post("/{request_id}/decision", response_model=PricingRequestRead)
def decide_pricing_request(
    request_id: str,
    decision: PricingDecision,
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.pricing_requests.decide(request_id, decision)
    except (ValidationFailed, OperationFailed) as e:
        raise to_http_error(e)
