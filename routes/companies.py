# routes/companies.py
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List

from core.deps import fetched, get_admin_user, get_current_user, get_workspace, to_http_error
from schemas.company_schema import CompanyCreate, CompanyRead, CompanyUpdate, RenewRequest, SubscriptionUpdate
from schemas.user_schema import UserProfile
from services.errors import OperationFailed
from services.workspace import Workspace

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])


# ==================================================================
#  ✅ PUBLIC DIRECTORY (client sign-up)
# ==================================================================
@router.get("/directory")
def get_company_directory(workspace: Workspace = Depends(get_workspace)):
    """Active companies a new client can join"""
    return workspace.companies.directory()


# ==================================================================
#  ✅ GET MY COMPANY
# ==================================================================
@router.get("/my-company", response_model=CompanyRead)
def get_my_company(
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    """Get current user's company"""
    fetched(workspace.companies)
    company = workspace.companies.get(current_user.company_id or "")
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return company


@router.get("/my-company/trial-days-left")
def get_trial_days_left(
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    return {"days_left": workspace.companies.trial_days_left()}


@router.put("/my-company", response_model=CompanyRead)
def update_my_company(
    data: CompanyUpdate,
    current_user: UserProfile = Depends(get_current_user),
    workspace: Workspace = Depends(get_workspace),
):
    """Company owners edit their own company"""
    if not current_user.company_id:
        raise HTTPException(status_code=404, detail="Company not found")
    try:
        return workspace.companies.update(current_user.company_id, data)
    except OperationFailed as e:
        raise to_http_error(e)


# ==================================================================
#  ✅ ADMIN: ALL COMPANIES
# ==================================================================
@router.get("/", response_model=List[CompanyRead])
def get_all_companies(
    active_only: bool = False,
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    """Get all companies (admin only)"""
    companies = fetched(workspace.companies)
    return workspace.companies.active_companies if active_only else companies


@router.post("/", response_model=CompanyRead, status_code=status.HTTP_201_CREATED)
def create_company(
    data: CompanyCreate,
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.companies.create(data)
    except OperationFailed as e:
        raise to_http_error(e)


@router.put("/{company_id}", response_model=CompanyRead)
def update_company(
    company_id: str,
    data: CompanyUpdate,
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.companies.update(company_id, data)
    except OperationFailed as e:
        raise to_http_error(e)


# ==================================================================
#  ✅ ADMIN: SUBSCRIPTIONS
# ==================================================================
@router.put("/{company_id}/subscription", response_model=CompanyRead)
def update_subscription(
    company_id: str,
    data: SubscriptionUpdate,
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.companies.update_subscription(company_id, data)
    except OperationFailed as e:
        raise to_http_error(e)


@router.post("/{company_id}/renew", response_model=CompanyRead)
def renew_subscription(
    company_id: str,
    data: RenewRequest,
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        return workspace.companies.renew(company_id, data.subscription_plan)
    except OperationFailed as e:
        raise to_http_error(e)


@router.post("/deactivate-expired")
def deactivate_expired(
    current_user: UserProfile = Depends(get_admin_user),
    workspace: Workspace = Depends(get_workspace),
):
    """Expire every subscription whose end date has passed"""
    try:
        count = workspace.companies.deactivate_expired()
    except OperationFailed as e:
        raise to_http_error(e)
    logger.info(f"🧹 {current_user.email} swept {count} expired subscriptions")
    return {"deactivated": count}
