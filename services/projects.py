# services/projects.py
from typing import List, Tuple
import logging

from core.store import StoreError, eq, in_
from schemas.project_schema import ProjectCreate, ProjectRead, ProjectUpdate
from schemas.team_member_schema import TeamMemberRead
from schemas.user_schema import UserProfile
from services.base import EntityService, append_item, apply_patch
from services.errors import ValidationFailed
from services.fanout import NotificationFanout
from services.project_history import ProjectHistoryService

logger = logging.getLogger(__name__)

ASSIGN_FAILED = "Failed to assign project to team"
FOREIGN_MEMBERS = "All team members must belong to the project's company"


def _dedupe(ids) -> List[str]:
    seen, ordered = set(), []
    for value in ids:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


class ProjectsService(EntityService[ProjectRead]):
    table = "projects"
    entity = "projects"
    record = ProjectRead

    def __init__(self, store, identity, feedback, history: ProjectHistoryService, fanout: NotificationFanout):
        super().__init__(store, identity, feedback)
        self.history = history
        self.fanout = fanout

    def scope(self, user: UserProfile):
        if user.is_admin:
            return []
        if user.is_company:
            return [eq("company_id", user.company_id)] if user.company_id else None
        if user.is_client:
            return [eq("client_id", user.id)]
        return None

    def write_scope(self, user: UserProfile):
        # clients only read projects
        return None if user.is_client else self.scope(user)

    # ==========================================================
    # Members of a company
    # ==========================================================
    def _company_members(self, company_id: str, member_ids: List[str], message: str) -> List[TeamMemberRead]:
        """Load `member_ids`, failing validation unless every one belongs to `company_id`."""
        if not member_ids:
            return []
        rows = self.run(message, lambda: self.store.select("team_members", [in_("id", member_ids)], order_by=None))
        members = {row["id"]: TeamMemberRead.from_row(row) for row in rows}
        if len(members) != len(member_ids) or any(m.company_id != company_id for m in members.values()):
            logger.warning(f"⚠️ Rejected members {member_ids} for company {company_id}")
            raise ValidationFailed([FOREIGN_MEMBERS])
        return [members[member_id] for member_id in member_ids]

    # ==========================================================
    # Create / update / delete
    # ==========================================================
    def create(self, data: ProjectCreate) -> ProjectRead:
        message = "Failed to create project"
        user = self.require_user(message)
        if user.is_client:
            raise self.fail(message)

        company_id = user.company_id if user.is_company else data.company_id
        if not company_id:
            raise ValidationFailed(["Project must belong to a company"])

        assigned = _dedupe(data.assigned_to)
        members = self._company_members(company_id, assigned, message)

        row = data.model_dump(mode="json")
        row.update(company_id=company_id, assigned_to=[], created_by=user.id)
        created = ProjectRead.from_row(self.run(message, lambda: self.store.insert(self.table, row)))
        if assigned:
            try:
                self.store.update(self.table, {"assigned_to": assigned}, [eq("id", created.id)])
                self._write_team(created.id, [], assigned)
            except StoreError as e:
                self._discard(created.id)
                raise self.fail(message, e) from e
            created = created.model_copy(update={"assigned_to": assigned})
        self.items = append_item(self.items, created)
        logger.info(f"📁 Project '{created.name}' created in company {company_id}")

        self.history.record(created.id, "created", new_value=created.name)
        self.fanout.project_assignment(created.name, [m.recipient_id for m in members])

        self.reconcile()
        self.feedback.success("Project created successfully")
        return self.get(created.id) or created

    def update(self, project_id: str, data: ProjectUpdate) -> ProjectRead:
        message = "Failed to update project"
        user = self.require_user(message)
        patch = data.model_dump(exclude_unset=True, mode="json")
        current = self.scoped_row(user, project_id, message)
        if patch:
            self.scoped_update(user, project_id, patch, message)
            for field, new_value in patch.items():
                if current.get(field) != new_value:
                    self.history.record(project_id, "updated", field, current.get(field), new_value)

        self.reconcile()
        self.feedback.success("Project updated successfully")
        return self.get(project_id) or ProjectRead.from_row({**current, **patch})

    def delete(self, project_id: str) -> None:
        message = "Failed to delete project"
        user = self.require_user(message)
        current = self.scoped_row(user, project_id, message)
        self.scoped_delete(user, project_id, message)
        logger.info(f"🗑️ Project {project_id} deleted by {user.id}")

        # drop the project from its members' lists
        for member_id in current.get("assigned_to") or []:
            try:
                self._unlink_member(member_id, project_id)
            except StoreError as e:
                logger.error(f"❌ Could not unlink member {member_id} from deleted project {project_id}: {e}")

        self.reconcile()
        self.feedback.success("Project deleted successfully")

    # ==========================================================
    # Team assignment
    # ==========================================================
    def _member_projects(self, member_id: str) -> List[str]:
        rows = self.store.select("team_members", [eq("id", member_id)], columns="projects", order_by=None)
        if not rows:
            raise StoreError(f"Team member {member_id} not found")
        return list(rows[0]["projects"] or [])

    def _set_member_projects(self, member_id: str, projects: List[str]) -> None:
        self.store.update("team_members", {"projects": projects}, [eq("id", member_id)])

    def _unlink_member(self, member_id: str, project_id: str) -> List[str]:
        before = self._member_projects(member_id)
        if project_id in before:
            self._set_member_projects(member_id, [p for p in before if p != project_id])
        return before

    def _discard(self, project_id: str) -> None:
        """Remove a project whose team could not be linked during creation."""
        try:
            self.store.delete(self.table, [eq("id", project_id)])
        except StoreError as e:
            logger.error(f"❌ Could not remove half-created project {project_id}: {e}")

    def _write_team(self, project_id: str, old_assigned: List[str], new_assigned: List[str]) -> None:
        """
        Mirror a project's new assigned_to onto its members' projects lists.
        On a StoreError every write already made, the project's own included,
        is reverted before the error propagates.
        """
        dropped = [m for m in old_assigned if m not in new_assigned]
        applied: List[Tuple[str, List[str]]] = []
        try:
            for member_id in new_assigned:
                before = self._member_projects(member_id)
                if project_id not in before:
                    self._set_member_projects(member_id, before + [project_id])
                    applied.append((member_id, before))
            for member_id in dropped:
                before = self._unlink_member(member_id, project_id)
                applied.append((member_id, before))
        except StoreError:
            self._compensate(project_id, old_assigned, applied)
            raise

    def _compensate(self, project_id: str, old_assigned: List[str], applied: List[Tuple[str, List[str]]]) -> None:
        for member_id, before in reversed(applied):
            try:
                self._set_member_projects(member_id, before)
            except StoreError as e:
                logger.error(f"❌ Could not restore projects of member {member_id}: {e}")
        try:
            self.store.update(self.table, {"assigned_to": old_assigned}, [eq("id", project_id)])
        except StoreError as e:
            logger.error(f"❌ Could not restore assignment of project {project_id}: {e}")

    def assign_to_team(self, project_id: str, member_ids: List[str]) -> ProjectRead:
        """
        Make `member_ids` the project's team. The project's assigned_to and
        every affected member's projects list change together; if any member
        write fails, the writes already made are reverted.
        """
        user = self.require_user(ASSIGN_FAILED)
        project = self.scoped_row(user, project_id, ASSIGN_FAILED)
        new_assigned = _dedupe(member_ids)
        members = self._company_members(project["company_id"], new_assigned, ASSIGN_FAILED)

        old_assigned = list(project.get("assigned_to") or [])

        self.scoped_update(user, project_id, {"assigned_to": new_assigned}, ASSIGN_FAILED)
        try:
            self._write_team(project_id, old_assigned, new_assigned)
        except StoreError as e:
            self.items = apply_patch(self.items, project_id, {"assigned_to": old_assigned})
            raise self.fail(ASSIGN_FAILED, e) from e

        self.history.record(project_id, "team_assigned", "assigned_to", old_assigned, new_assigned)
        self.fanout.project_assignment(project["name"], [m.recipient_id for m in members])

        self.reconcile()
        self.feedback.success("Project assigned to team successfully")
        return self.get(project_id) or ProjectRead.from_row({**project, "assigned_to": new_assigned})
