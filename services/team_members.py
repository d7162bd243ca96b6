# services/team_members.py
from typing import List
import logging

from core.store import StoreError, eq, in_
from models.models import MemberStatus
from schemas.team_member_schema import TeamMemberCreate, TeamMemberRead, TeamMemberUpdate
from schemas.user_schema import UserProfile
from services.base import EntityService, append_item
from services.errors import ValidationFailed

logger = logging.getLogger(__name__)


class TeamMembersService(EntityService[TeamMemberRead]):
    """A company's roster. Clients see the members working on their projects."""

    table = "team_members"
    entity = "team members"
    record = TeamMemberRead

    def scope(self, user: UserProfile):
        if user.is_admin:
            return []
        if user.is_company:
            return [eq("company_id", user.company_id)] if user.company_id else None
        return None

    def load(self, user: UserProfile) -> List[TeamMemberRead]:
        if not user.is_client:
            return super().load(user)

        projects = self.store.select("projects", [eq("client_id", user.id)], columns="assigned_to", order_by=None)
        member_ids = {member_id for p in projects for member_id in (p["assigned_to"] or [])}
        if not member_ids:
            return []
        rows = self.store.select(self.table, [in_("id", sorted(member_ids))])
        return [TeamMemberRead.from_row(row) for row in rows]

    def create(self, data: TeamMemberCreate) -> TeamMemberRead:
        message = "Failed to add team member"
        user = self.require_user(message)
        if self.write_scope(user) is None:
            raise self.fail(message)

        company_id = user.company_id if user.is_company else data.company_id
        if not company_id:
            raise ValidationFailed(["Team member must belong to a company"])

        row = data.model_dump(mode="json")
        row["company_id"] = company_id
        created = TeamMemberRead.from_row(self.run(message, lambda: self.store.insert(self.table, row)))
        self.items = append_item(self.items, created)
        logger.info(f"👥 Added {created.email} to company {company_id}")

        self.reconcile()
        self.feedback.success("Team member added successfully")
        return self.get(created.id) or created

    def update(self, member_id: str, data: TeamMemberUpdate) -> TeamMemberRead:
        message = "Failed to update team member"
        user = self.require_user(message)
        patch = data.model_dump(exclude_unset=True, mode="json")
        current = self.scoped_row(user, member_id, message)
        if patch:
            self.scoped_update(user, member_id, patch, message)

        self.reconcile()
        self.feedback.success("Team member updated successfully")
        return self.get(member_id) or TeamMemberRead.from_row({**current, **patch})

    def deactivate(self, member_id: str) -> None:
        message = "Failed to deactivate team member"
        user = self.require_user(message)
        self.scoped_update(user, member_id, {"status": MemberStatus.INACTIVE.value}, message)
        logger.info(f"🚫 Team member {member_id} deactivated by {user.id}")

        self.reconcile()
        self.feedback.success("Team member deactivated successfully")

    def delete(self, member_id: str) -> None:
        message = "Failed to delete team member"
        user = self.require_user(message)
        current = self.scoped_row(user, member_id, message)
        self.scoped_delete(user, member_id, message)

        # take the member off every project that listed them
        for project_id in current.get("projects") or []:
            try:
                rows = self.store.select("projects", [eq("id", project_id)], columns="assigned_to", order_by=None)
                if rows and member_id in (rows[0]["assigned_to"] or []):
                    remaining = [m for m in rows[0]["assigned_to"] if m != member_id]
                    self.store.update("projects", {"assigned_to": remaining}, [eq("id", project_id)])
            except StoreError as e:
                logger.error(f"❌ Could not remove member {member_id} from project {project_id}: {e}")

        self.reconcile()
        self.feedback.success("Team member removed successfully")

    @property
    def active(self) -> List[TeamMemberRead]:
        return [m for m in self.items if m.status == MemberStatus.ACTIVE.value]
