# user_schema.py
from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import datetime

from models.models import UserRole, ProfileStatus


def display_name(full_name: Optional[str], email: str) -> str:
    """Full name, or the local part of the email when no name is stored."""
    return (full_name or "").strip() or email.split("@")[0]


def initials(name: str, upper: bool = False) -> str:
    value = "".join(part[0] for part in name.split() if part)
    return value.upper() if upper else value


# ---------------------------
# Current user
# ---------------------------
class UserProfile(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    status: str = ProfileStatus.ACTIVE.value
    permissions: List[str] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_row(cls, row: Dict[str, Any], permissions: List[str]) -> "UserProfile":
        return cls(
            id=row["id"],
            name=display_name(row.get("full_name"), row["email"]),
            email=row["email"],
            role=row["role"],
            company_id=row.get("company_id") or None,
            company_name=row.get("company_name") or None,
            status=row.get("status") or ProfileStatus.ACTIVE.value,
            permissions=permissions,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_company(self) -> bool:
        return self.role == UserRole.COMPANY.value

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT.value


# ---------------------------
# Admin user management
# ---------------------------
class ProfileRead(BaseModel):
    id: str
    full_name: str
    email: str
    role: str
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    phone: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ProfileRead":
        return cls(
            id=row["id"],
            full_name=display_name(row.get("full_name"), row["email"]),
            email=row["email"],
            role=row["role"],
            company_id=row.get("company_id"),
            company_name=row.get("company_name"),
            phone=row.get("phone"),
            status=row.get("status") or ProfileStatus.ACTIVE.value,
            created_at=row.get("created_at"),
        )


class ProfileStatusUpdate(BaseModel):
    status: ProfileStatus

    model_config = ConfigDict(use_enum_values=True)


class ProfileRoleUpdate(BaseModel):
    role: UserRole

    model_config = ConfigDict(use_enum_values=True)


# ---------------------------
# Create & Auth
# ---------------------------
class RegistrationForm(BaseModel):
    # Plain strings: every rule is checked by services.validation so the
    # caller gets ordered, human-readable messages.
    email: str = ""
    password: str = ""
    confirm_password: Optional[str] = None
    full_name: str = ""
    role: Optional[str] = None
    company_name: Optional[str] = None
    company_id: Optional[str] = None


class UserLogin(BaseModel):
    email: str
    password: str


class ExternalIdentity(BaseModel):
    """An identity vouched for by a third-party provider (OAuth)."""
    id: str
    email: EmailStr
    provider: str = Field(..., max_length=50)
    user_metadata: Dict[str, Any] = Field(default_factory=dict)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Optional[UserProfile] = None
