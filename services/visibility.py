# services/visibility.py
"""
Role-scoped views over already-loaded collections.

admin   -> everything
company -> rows of the caller's company
client  -> rows tied to the caller (client_id / created_by)
Anonymous callers see nothing.
"""
from typing import List, Optional, Sequence

from schemas.issue_schema import IssueRead
from schemas.project_schema import ProjectRead
from schemas.team_member_schema import TeamMemberRead
from schemas.user_schema import UserProfile


def projects_for_role(user: Optional[UserProfile], projects: Sequence[ProjectRead]) -> List[ProjectRead]:
    if user is None:
        return []
    if user.is_admin:
        return list(projects)
    if user.is_company:
        return [p for p in projects if user.company_id and p.company_id == user.company_id]
    if user.is_client:
        # projects without a client are never visible to clients
        return [p for p in projects if p.client_id and p.client_id == user.id]
    return []


def issues_for_role(
    user: Optional[UserProfile],
    projects: Sequence[ProjectRead],
    issues: Sequence[IssueRead],
) -> List[IssueRead]:
    if user is None:
        return []
    if user.is_admin:
        return list(issues)

    visible_ids = {p.id for p in projects_for_role(user, projects)}
    if user.is_company:
        return [i for i in issues if i.project_id in visible_ids]
    if user.is_client:
        return [i for i in issues if i.project_id in visible_ids or i.created_by == user.id]
    return []


def team_members_for_role(
    user: Optional[UserProfile],
    projects: Sequence[ProjectRead],
    members: Sequence[TeamMemberRead],
) -> List[TeamMemberRead]:
    if user is None:
        return []
    # company rosters are already scoped when fetched
    if user.is_admin or user.is_company:
        return list(members)
    if user.is_client:
        assigned = {member_id for p in projects_for_role(user, projects) for member_id in p.assigned_to}
        return [m for m in members if m.id in assigned]
    return []
