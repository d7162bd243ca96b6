# models/models.py
from typing import Optional, List
from datetime import datetime
from enum import Enum
from uuid import uuid4
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON


def new_id() -> str:
    return str(uuid4())


# ============================================================
# ENUMS
# ============================================================
class UserRole(str, Enum):
    ADMIN = "admin"
    COMPANY = "company"
    CLIENT = "client"


class ProfileStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class CompanyStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class SubscriptionPlan(str, Enum):
    TRIAL = "trial"
    BASIC = "basic"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, Enum):
    TRIAL = "trial"
    ACTIVE = "active"
    EXPIRED = "expired"


class ProjectStatus(str, Enum):
    PLANNING = "Planning"
    IN_PROGRESS = "In Progress"
    TESTING = "Testing"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class MemberStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class IssueStatus(str, Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class PricingRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# ============================================================
# AUTH (credentials, kept apart from profiles)
# ============================================================
class AuthUser(SQLModel, table=True):
    __tablename__ = "auth_users"

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True, unique=True, max_length=255)
    password_hash: Optional[str] = None
    provider: str = Field(default="email", max_length=50)
    user_metadata: dict = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_sign_in_at: Optional[datetime] = None


# ============================================================
# PROFILES
# ============================================================
class Profile(SQLModel, table=True):
    __tablename__ = "profiles"

    id: str = Field(primary_key=True)
    email: str = Field(index=True, max_length=255)
    full_name: Optional[str] = Field(default=None, max_length=255)
    role: str = Field(default=UserRole.CLIENT.value, max_length=20, index=True)
    company_id: Optional[str] = Field(default=None, index=True)
    company_name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    status: Optional[str] = Field(default=ProfileStatus.ACTIVE.value, max_length=20)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================
# COMPANY (tenant)
# ============================================================
class Company(SQLModel, table=True):
    __tablename__ = "companies"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    status: str = Field(default=CompanyStatus.ACTIVE.value, max_length=20)
    subscription_plan: Optional[str] = Field(default=SubscriptionPlan.TRIAL.value, max_length=20)
    subscription_status: Optional[str] = Field(default=SubscriptionStatus.TRIAL.value, max_length=20, index=True)
    subscription_end_date: Optional[datetime] = Field(default=None, index=True)
    trial_start_date: Optional[datetime] = None
    trial_end_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================
# PROJECTS
# ============================================================
class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(max_length=255)
    description: Optional[str] = None
    status: str = Field(default=ProjectStatus.PLANNING.value, max_length=20)
    progress: int = Field(default=0, ge=0, le=100)
    due_date: Optional[str] = None
    priority: str = Field(default=Priority.MEDIUM.value, max_length=20)
    client: Optional[str] = None
    client_id: Optional[str] = Field(default=None, index=True)
    company_id: str = Field(index=True)
    budget: Optional[float] = 0.0
    spent: Optional[float] = 0.0
    phase: Optional[str] = None
    next_milestone: Optional[str] = None
    assigned_to: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================
# TEAM MEMBERS (company roster)
# ============================================================
class TeamMember(SQLModel, table=True):
    __tablename__ = "team_members"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    role: str = Field(max_length=100)
    avatar: Optional[str] = None
    projects: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    status: str = Field(default=MemberStatus.ACTIVE.value, max_length=20)
    department: Optional[str] = None
    phone: Optional[str] = None
    hire_date: Optional[str] = None
    salary: Optional[float] = 0.0
    permissions: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    company_id: str = Field(index=True)
    user_id: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================
# CLIENTS (as seen by a company)
# ============================================================
class Client(SQLModel, table=True):
    __tablename__ = "clients"

    id: str = Field(default_factory=new_id, primary_key=True)
    full_name: Optional[str] = None
    email: str = Field(max_length=255)
    status: Optional[str] = Field(default=ClientStatus.ACTIVE.value, max_length=20)
    company_id: str = Field(index=True)
    user_id: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================
# ISSUES
# ============================================================
class Issue(SQLModel, table=True):
    __tablename__ = "issues"

    id: str = Field(default_factory=new_id, primary_key=True)
    title: str = Field(max_length=255)
    description: Optional[str] = None
    status: str = Field(default=IssueStatus.OPEN.value, max_length=20)
    priority: str = Field(default=Priority.MEDIUM.value, max_length=20)
    project_id: Optional[str] = Field(default=None, index=True)
    assigned_to: Optional[str] = None
    created_by: Optional[str] = Field(default=None, index=True)
    labels: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class IssueComment(SQLModel, table=True):
    __tablename__ = "issue_comments"

    id: str = Field(default_factory=new_id, primary_key=True)
    issue_id: Optional[str] = Field(default=None, index=True)
    user_id: str
    content: str = Field(max_length=5000)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================
# NOTIFICATIONS
# ============================================================
class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    title: str = Field(max_length=255)
    message: str
    type: Optional[str] = Field(default=NotificationType.INFO.value, max_length=20)
    read: Optional[bool] = Field(default=False)
    action_url: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================
# PROJECT HISTORY (append-only audit trail)
# ============================================================
class ProjectHistory(SQLModel, table=True):
    __tablename__ = "project_history"

    id: str = Field(default_factory=new_id, primary_key=True)
    project_id: Optional[str] = Field(default=None, index=True)
    changed_by: Optional[str] = None
    action: str = Field(max_length=100)
    field_changed: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================
# PRICING REQUESTS
# ============================================================
class PricingRequest(SQLModel, table=True):
    __tablename__ = "pricing_requests"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    plan_name: str = Field(max_length=50)
    plan_price: str = Field(max_length=100)
    company_name: Optional[str] = None
    email: str = Field(max_length=255)
    phone: Optional[str] = None
    status: str = Field(default=PricingRequestStatus.PENDING.value, max_length=20)
    notes: Optional[str] = None
    requested_at: datetime = Field(default_factory=datetime.utcnow)
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    # store orders every table by created_at
    created_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================
# TABLE REGISTRY (store gateway lookup)
# ============================================================
TABLES = {
    "auth_users": AuthUser,
    "profiles": Profile,
    "companies": Company,
    "projects": Project,
    "team_members": TeamMember,
    "clients": Client,
    "issues": Issue,
    "issue_comments": IssueComment,
    "notifications": Notification,
    "project_history": ProjectHistory,
    "pricing_requests": PricingRequest,
}
