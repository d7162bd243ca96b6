# pricing_schema.py
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime

from models.models import PricingRequestStatus


class PricingRequestRead(BaseModel):
    id: str
    user_id: str
    plan_name: str
    plan_price: str
    company_name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    status: str = PricingRequestStatus.PENDING.value
    notes: Optional[str] = None
    requested_at: datetime
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "PricingRequestRead":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            plan_name=row["plan_name"],
            plan_price=row["plan_price"],
            company_name=row.get("company_name"),
            email=row["email"],
            phone=row.get("phone"),
            status=row.get("status") or PricingRequestStatus.PENDING.value,
            notes=row.get("notes"),
            requested_at=row["requested_at"],
            approved_at=row.get("approved_at"),
            approved_by=row.get("approved_by"),
        )


class PricingRequestCreate(BaseModel):
    plan_name: str = Field(..., min_length=1, max_length=50)
    plan_price: str = Field(..., min_length=1, max_length=100)  # display string, e.g. "KES 50,000/month"
    company_name: Optional[str] = None
    phone: Optional[str] = None


class PricingDecision(BaseModel):
    approved: bool
    notes: Optional[str] = Field(default=None, max_length=2000)
