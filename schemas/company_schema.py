# company_schema.py
from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional, Dict, Any
from datetime import datetime

from models.models import CompanyStatus, SubscriptionPlan, SubscriptionStatus


class CompanyRead(BaseModel):
    id: str
    name: str
    email: str
    status: str
    subscription_plan: str
    subscription_status: str
    subscription_end_date: Optional[datetime] = None
    trial_start_date: Optional[datetime] = None
    trial_end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "CompanyRead":
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            status=row.get("status") or CompanyStatus.ACTIVE.value,
            subscription_plan=row.get("subscription_plan") or SubscriptionPlan.TRIAL.value,
            subscription_status=row.get("subscription_status") or SubscriptionStatus.TRIAL.value,
            subscription_end_date=row.get("subscription_end_date"),
            trial_start_date=row.get("trial_start_date"),
            trial_end_date=row.get("trial_end_date"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    status: CompanyStatus = CompanyStatus.ACTIVE
    subscription_plan: SubscriptionPlan = SubscriptionPlan.TRIAL
    subscription_status: SubscriptionStatus = SubscriptionStatus.TRIAL

    model_config = ConfigDict(use_enum_values=True)


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    status: Optional[CompanyStatus] = None

    @field_validator("name", "email", "status", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    model_config = ConfigDict(use_enum_values=True)


class SubscriptionUpdate(BaseModel):
    subscription_plan: SubscriptionPlan
    subscription_status: SubscriptionStatus

    model_config = ConfigDict(use_enum_values=True)


class RenewRequest(BaseModel):
    subscription_plan: Optional[SubscriptionPlan] = None

    model_config = ConfigDict(use_enum_values=True)
