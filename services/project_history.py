# services/project_history.py
from typing import Any, List, Optional
import logging

from core.store import StoreError, eq, in_
from schemas.project_schema import ProjectHistoryRead
from schemas.user_schema import UserProfile
from services.base import EntityService, append_item

logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


class ProjectHistoryService(EntityService[ProjectHistoryRead]):
    """Append-only audit trail of project changes."""

    table = "project_history"
    entity = "project history"
    record = ProjectHistoryRead

    def load(self, user: UserProfile) -> List[ProjectHistoryRead]:
        if user.is_admin:
            rows = self.store.select(self.table)
        else:
            scope = [eq("company_id", user.company_id)] if user.is_company else [eq("client_id", user.id)]
            if user.is_company and not user.company_id:
                return []
            project_ids = [p["id"] for p in self.store.select("projects", scope, columns="id", order_by=None)]
            if not project_ids:
                return []
            rows = self.store.select(self.table, [in_("project_id", project_ids)])
        return [ProjectHistoryRead.from_row(row) for row in rows]

    def record(
        self,
        project_id: str,
        action: str,
        field_changed: Optional[str] = None,
        old_value: Any = None,
        new_value: Any = None,
    ) -> Optional[ProjectHistoryRead]:
        """
        Append one history entry. History is secondary to the change it
        describes, so a failed write is logged and returns None.
        """
        user = self.identity.current_user()
        try:
            row = self.store.insert(
                self.table,
                {
                    "project_id": project_id,
                    "changed_by": user.id if user else None,
                    "action": action,
                    "field_changed": field_changed,
                    "old_value": _text(old_value),
                    "new_value": _text(new_value),
                },
            )
        except StoreError as e:
            logger.error(f"❌ Failed to record '{action}' for project {project_id}: {e}")
            return None

        entry = ProjectHistoryRead.from_row(row)
        self.items = append_item(self.items, entry)
        return entry

    def for_project(self, project_id: str) -> List[ProjectHistoryRead]:
        return [entry for entry in self.items if entry.project_id == project_id]
