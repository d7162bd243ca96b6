# services/issues.py
"""
Issues and their comment threads.

Company users see the issues of their company's projects; clients see the
issues on projects they own plus any issue they raised themselves.
"""
from typing import Dict, List, Optional
import logging

from core.store import StoreError, any_of, eq, in_
from schemas.issue_schema import CommentCreate, IssueCommentRead, IssueCreate, IssueRead, IssueUpdate
from schemas.user_schema import UserProfile
from services.base import EntityService, append_item, apply_patch
from services.fanout import NotificationFanout

logger = logging.getLogger(__name__)


class IssuesService(EntityService[IssueRead]):
    table = "issues"
    entity = "issues"
    record = IssueRead

    def __init__(self, store, identity, feedback, fanout: NotificationFanout):
        super().__init__(store, identity, feedback)
        self.fanout = fanout

    # ---------- scope ----------
    def _project_ids(self, user: UserProfile) -> Optional[List[str]]:
        if user.is_company:
            if not user.company_id:
                return None
            filters = [eq("company_id", user.company_id)]
        elif user.is_client:
            filters = [eq("client_id", user.id)]
        else:
            return None
        return [p["id"] for p in self.store.select("projects", filters, columns="id", order_by=None)]

    def scope(self, user: UserProfile):
        if user.is_admin:
            return []
        project_ids = self._project_ids(user)
        if user.is_client:
            return [any_of(in_("project_id", project_ids or []), eq("created_by", user.id))]
        if not project_ids:
            return None
        return [in_("project_id", project_ids)]

    def write_scope(self, user: UserProfile):
        # clients may only edit issues they raised
        if user.is_client:
            return [eq("created_by", user.id)]
        return self.scope(user)

    # ---------- reading ----------
    def _comments(self, issue_ids: List[str]) -> Dict[str, List[IssueCommentRead]]:
        grouped: Dict[str, List[IssueCommentRead]] = {issue_id: [] for issue_id in issue_ids}
        if not issue_ids:
            return grouped
        rows = self.store.select("issue_comments", [in_("issue_id", issue_ids)], desc=False)
        for row in rows:
            comment = IssueCommentRead.from_row(row)
            grouped.setdefault(comment.issue_id, []).append(comment)
        return grouped

    def load(self, user: UserProfile) -> List[IssueRead]:
        filters = self.scope(user)
        if filters is None:
            return []
        rows = self.store.select(self.table, filters)
        comments = self._comments([row["id"] for row in rows])
        return [IssueRead.from_row(row, comments.get(row["id"])) for row in rows]

    # ---------- mutations ----------
    def _recipient(self, assignee_id: str) -> str:
        """An assignee may be a team member; notify their login when they have one."""
        try:
            rows = self.store.select("team_members", [eq("id", assignee_id)], columns="user_id", order_by=None)
        except StoreError as e:
            logger.warning(f"⚠️ Could not resolve assignee {assignee_id}: {e}")
            return assignee_id
        return (rows[0]["user_id"] if rows else None) or assignee_id

    def create(self, data: IssueCreate) -> IssueRead:
        message = "Failed to create issue"
        user = self.require_user(message)

        if user.is_admin:
            found = self.run(
                message, lambda: self.store.select("projects", [eq("id", data.project_id)], columns="id", order_by=None)
            )
        else:
            found = data.project_id in (self.run(message, lambda: self._project_ids(user)) or [])
        if not found:
            raise self.fail(message)

        row = data.model_dump(mode="json")
        row["created_by"] = user.id
        created = IssueRead.from_row(self.run(message, lambda: self.store.insert(self.table, row)))
        self.items = append_item(self.items, created)
        logger.info(f"🐞 Issue '{created.title}' raised on project {created.project_id}")

        if created.assigned_to:
            self.fanout.issue_assignment(created.title, self._recipient(created.assigned_to))

        self.reconcile()
        self.feedback.success("Issue created successfully")
        return self.get(created.id) or created

    def update(self, issue_id: str, data: IssueUpdate) -> IssueRead:
        message = "Failed to update issue"
        user = self.require_user(message)
        patch = data.model_dump(exclude_unset=True, mode="json")
        current = self.scoped_row(user, issue_id, message)
        if patch:
            self.scoped_update(user, issue_id, patch, message)

        new_assignee = patch.get("assigned_to")
        if new_assignee and new_assignee != current.get("assigned_to"):
            self.fanout.issue_assignment(patch.get("title") or current["title"], self._recipient(new_assignee))

        self.reconcile()
        self.feedback.success("Issue updated successfully")
        return self.get(issue_id) or IssueRead.from_row({**current, **patch})

    def add_comment(self, issue_id: str, data: CommentCreate) -> IssueCommentRead:
        message = "Failed to add comment"
        user = self.require_user(message)

        # anyone who can see the issue can comment on it
        filters = self.run(message, lambda: self.scope(user))
        if filters is None:
            raise self.fail(message)
        if not self.run(message, lambda: self.store.select(self.table, [eq("id", issue_id)] + filters, columns="id", order_by=None)):
            raise self.fail(message)

        row = self.run(
            message,
            lambda: self.store.insert("issue_comments", {"issue_id": issue_id, "user_id": user.id, "content": data.content}),
        )
        comment = IssueCommentRead.from_row(row)
        issue = self.get(issue_id)
        if issue is not None:
            self.items = apply_patch(self.items, issue_id, {"comments": issue.comments + [comment]})

        self.reconcile()
        self.feedback.success("Comment added successfully")
        return comment
