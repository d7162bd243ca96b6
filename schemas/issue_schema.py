# issue_schema.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from models.models import IssueStatus, Priority


# Comments
class IssueCommentRead(BaseModel):
    id: str
    issue_id: str
    user_id: str
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "IssueCommentRead":
        return cls(
            id=row["id"],
            issue_id=row.get("issue_id") or "",
            user_id=row["user_id"],
            content=row["content"],
            created_at=row["created_at"],
            updated_at=row.get("updated_at"),
        )


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


# Issues
class IssueRead(BaseModel):
    id: str
    title: str
    description: str = ""
    status: str = IssueStatus.OPEN.value
    priority: str = Priority.MEDIUM.value
    project_id: str = ""
    assigned_to: Optional[str] = None
    created_by: str = ""
    labels: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    comments: List[IssueCommentRead] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row: Dict[str, Any], comments: Optional[List[IssueCommentRead]] = None) -> "IssueRead":
        return cls(
            id=row["id"],
            title=row["title"],
            description=row.get("description") or "",
            status=row.get("status") or IssueStatus.OPEN.value,
            priority=row.get("priority") or Priority.MEDIUM.value,
            project_id=row.get("project_id") or "",
            assigned_to=row.get("assigned_to") or None,
            created_by=row.get("created_by") or "",
            labels=list(row.get("labels") or []),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            comments=comments or [],
        )


class IssueCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: IssueStatus = IssueStatus.OPEN
    priority: Priority = Priority.MEDIUM
    project_id: str
    assigned_to: Optional[str] = None
    labels: List[str] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True)


class IssueUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: Optional[IssueStatus] = None
    priority: Optional[Priority] = None
    assigned_to: Optional[str] = None
    labels: Optional[List[str]] = None

    @field_validator("title", "status", "priority", "labels", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    model_config = ConfigDict(use_enum_values=True)
