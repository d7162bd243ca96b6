# client_schema.py
from pydantic import BaseModel, ConfigDict
from typing import Optional, Dict, Any
from datetime import datetime

from models.models import ClientStatus
from schemas.user_schema import display_name, initials


class ClientRead(BaseModel):
    id: str
    full_name: str
    email: str
    status: str = ClientStatus.ACTIVE.value
    company_id: str
    user_id: Optional[str] = None
    phone: Optional[str] = None
    avatar: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ClientRead":
        name = display_name(row.get("full_name"), row["email"])
        return cls(
            id=row["id"],
            full_name=name,
            email=row["email"],
            status=row.get("status") or ClientStatus.ACTIVE.value,
            company_id=row["company_id"],
            user_id=row.get("user_id") or None,
            phone=row.get("phone"),
            avatar=initials(name, upper=True),
            created_at=row.get("created_at"),
        )


class ClientStatusUpdate(BaseModel):
    status: ClientStatus

    model_config = ConfigDict(use_enum_values=True)
