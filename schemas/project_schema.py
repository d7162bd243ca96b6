# project_schema.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Dict, Any
from datetime import date, datetime

from models.models import ProjectStatus, Priority


class ProjectRead(BaseModel):
    id: str
    name: str
    description: str = ""
    status: str = ProjectStatus.PLANNING.value
    progress: int = 0
    due_date: str = ""
    priority: str = Priority.MEDIUM.value
    client: str = ""
    client_id: Optional[str] = None
    company_id: str
    budget: float = 0.0
    spent: float = 0.0
    phase: str = ""
    next_milestone: str = ""
    last_update: str = ""
    created_by: str = ""
    assigned_to: List[str] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ProjectRead":
        updated_at = row.get("updated_at")
        return cls(
            id=row["id"],
            name=row["name"],
            description=row.get("description") or "",
            status=row.get("status") or ProjectStatus.PLANNING.value,
            progress=row.get("progress") or 0,
            due_date=row.get("due_date") or "",
            priority=row.get("priority") or Priority.MEDIUM.value,
            client=row.get("client") or "",
            client_id=row.get("client_id") or None,
            company_id=row["company_id"],
            budget=float(row.get("budget") or 0),
            spent=float(row.get("spent") or 0),
            phase=row.get("phase") or "",
            next_milestone=row.get("next_milestone") or "",
            last_update=updated_at.date().isoformat() if isinstance(updated_at, datetime) else "",
            created_by=row.get("created_by") or "",
            assigned_to=list(row.get("assigned_to") or []),
        )


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    status: ProjectStatus = ProjectStatus.PLANNING
    progress: int = Field(default=0, ge=0, le=100)
    due_date: Optional[date] = None
    priority: Priority = Priority.MEDIUM
    client: Optional[str] = None
    client_id: Optional[str] = None
    # Company users always create inside their own company; admins must name one.
    company_id: Optional[str] = None
    budget: float = Field(default=0.0, ge=0)
    spent: float = Field(default=0.0, ge=0)
    phase: Optional[str] = None
    next_milestone: Optional[str] = None
    assigned_to: List[str] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True)


class ProjectUpdate(BaseModel):
    # no company_id: it is fixed at creation
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    status: Optional[ProjectStatus] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    due_date: Optional[date] = None
    priority: Optional[Priority] = None
    client: Optional[str] = None
    client_id: Optional[str] = None
    budget: Optional[float] = Field(default=None, ge=0)
    spent: Optional[float] = Field(default=None, ge=0)
    phase: Optional[str] = None
    next_milestone: Optional[str] = None

    @field_validator("name", "status", "progress", "priority", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    model_config = ConfigDict(use_enum_values=True)


class TeamAssignment(BaseModel):
    member_ids: List[str] = Field(default_factory=list)


class ProjectHistoryRead(BaseModel):
    id: str
    project_id: str = ""
    action: str
    field_changed: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    changed_by: str = ""
    created_at: datetime

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ProjectHistoryRead":
        return cls(
            id=row["id"],
            project_id=row.get("project_id") or "",
            action=row["action"],
            field_changed=row.get("field_changed") or None,
            old_value=row.get("old_value"),
            new_value=row.get("new_value"),
            changed_by=row.get("changed_by") or "",
            created_at=row["created_at"],
        )
