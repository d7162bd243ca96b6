# team_member_schema.py
from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional, List, Dict, Any
from datetime import date

from models.models import MemberStatus
from schemas.user_schema import initials


class TeamMemberRead(BaseModel):
    id: str
    name: str
    email: str
    role: str
    avatar: str = ""
    projects: List[str] = Field(default_factory=list)
    status: str = MemberStatus.ACTIVE.value
    department: str = "Engineering"
    phone: str = ""
    hire_date: str = ""
    salary: float = 0.0
    permissions: List[str] = Field(default_factory=list)
    company_id: str
    user_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TeamMemberRead":
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            role=row["role"],
            avatar=row.get("avatar") or initials(row["name"]),
            projects=list(row.get("projects") or []),
            status=row.get("status") or MemberStatus.ACTIVE.value,
            department=row.get("department") or "Engineering",
            phone=row.get("phone") or "",
            hire_date=row.get("hire_date") or date.today().isoformat(),
            salary=float(row.get("salary") or 0),
            permissions=list(row.get("permissions") or []),
            company_id=row["company_id"],
            user_id=row.get("user_id") or None,
        )

    @property
    def recipient_id(self) -> str:
        """Who gets this member's notifications: the linked login when there is one."""
        return self.user_id or self.id


class TeamMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    role: str = Field(..., min_length=1, max_length=100)
    avatar: Optional[str] = None
    status: MemberStatus = MemberStatus.ACTIVE
    department: Optional[str] = None
    phone: Optional[str] = None
    hire_date: Optional[date] = None
    salary: float = Field(default=0.0, ge=0)
    permissions: List[str] = Field(default_factory=list)
    user_id: Optional[str] = None
    # only admins pick the company; company users always add to their own roster
    company_id: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[str] = Field(default=None, min_length=1, max_length=100)
    avatar: Optional[str] = None
    status: Optional[MemberStatus] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    hire_date: Optional[date] = None
    salary: Optional[float] = Field(default=None, ge=0)
    permissions: Optional[List[str]] = None
    user_id: Optional[str] = None

    @field_validator("name", "email", "role", "status", "permissions", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    model_config = ConfigDict(use_enum_values=True)
