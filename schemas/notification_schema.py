# notification_schema.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Dict, Any
from datetime import datetime

from models.models import NotificationType


class NotificationRead(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: str = NotificationType.INFO.value
    read: bool = False
    action_url: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "NotificationRead":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            message=row["message"],
            type=row.get("type") or NotificationType.INFO.value,
            read=bool(row.get("read")),
            action_url=row.get("action_url") or None,
            created_at=row["created_at"],
        )


class NotificationCreate(BaseModel):
    user_id: str
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.INFO
    action_url: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)
