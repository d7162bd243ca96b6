"""Tests for the pure role-scoped view functions."""

import random

import pytest

from schemas.issue_schema import IssueRead
from schemas.project_schema import ProjectRead
from schemas.team_member_schema import TeamMemberRead
from schemas.user_schema import UserProfile
from services.visibility import issues_for_role, projects_for_role, team_members_for_role

COMPANIES = ["co-1", "co-2", "co-3"]
CLIENTS = ["cl-1", "cl-2", "cl-3"]


def user(role: str, user_id: str = "u-1", company_id=None) -> UserProfile:
    return UserProfile(id=user_id, name=user_id, email=f"{user_id}@example.com", role=role, company_id=company_id)


def project(project_id: str, company_id: str, client_id=None, assigned_to=()) -> ProjectRead:
    return ProjectRead(
        id=project_id, name=project_id, company_id=company_id, client_id=client_id, assigned_to=list(assigned_to)
    )


def issue(issue_id: str, project_id: str, created_by: str = "someone") -> IssueRead:
    return IssueRead(
        id=issue_id, title=issue_id, project_id=project_id, created_by=created_by,
        created_at="2026-01-01T00:00:00", updated_at="2026-01-01T00:00:00",
    )


def random_projects(rng: random.Random, count: int):
    return [
        project(f"p-{i}", rng.choice(COMPANIES), rng.choice(CLIENTS + [None]))
        for i in range(count)
    ]


class TestProjectsForRole:
    @pytest.mark.parametrize("seed", range(25))
    def test_matches_role_rule_on_random_sets(self, seed) -> None:
        rng = random.Random(seed)
        projects = random_projects(rng, rng.randint(0, 30))
        company_id = rng.choice(COMPANIES)
        client_id = rng.choice(CLIENTS)

        assert projects_for_role(user("admin"), projects) == projects
        assert projects_for_role(user("company", company_id=company_id), projects) == [
            p for p in projects if p.company_id == company_id
        ]
        assert projects_for_role(user("client", user_id=client_id), projects) == [
            p for p in projects if p.client_id == client_id
        ]
        assert projects_for_role(None, projects) == []

    def test_project_without_client_is_hidden_from_clients(self) -> None:
        projects = [project("p-1", "co-1", None)]
        assert projects_for_role(user("client", user_id="cl-1"), projects) == []

    def test_company_user_without_company_sees_nothing(self) -> None:
        assert projects_for_role(user("company"), [project("p-1", "co-1")]) == []


class TestIssuesForRole:
    def test_company_sees_issues_of_its_projects(self) -> None:
        projects = [project("p-1", "co-1"), project("p-2", "co-2")]
        issues = [issue("i-1", "p-1"), issue("i-2", "p-2")]

        visible = issues_for_role(user("company", company_id="co-1"), projects, issues)

        assert [i.id for i in visible] == ["i-1"]

    def test_client_sees_own_project_issues_and_issues_they_raised(self) -> None:
        projects = [project("p-1", "co-1", "cl-1"), project("p-2", "co-1", "cl-2")]
        issues = [issue("i-1", "p-1"), issue("i-2", "p-2"), issue("i-3", "p-2", created_by="cl-1")]

        visible = issues_for_role(user("client", user_id="cl-1"), projects, issues)

        assert [i.id for i in visible] == ["i-1", "i-3"]

    def test_admin_and_anonymous(self) -> None:
        issues = [issue("i-1", "p-1")]
        assert issues_for_role(user("admin"), [], issues) == issues
        assert issues_for_role(None, [], issues) == []


class TestTeamMembersForRole:
    def test_client_sees_members_on_their_projects(self) -> None:
        members = [
            TeamMemberRead(id=m, name=m, email=f"{m}@co.com", role="Dev", company_id="co-1")
            for m in ("m-1", "m-2", "m-3")
        ]
        projects = [
            project("p-1", "co-1", "cl-1", assigned_to=["m-1"]),
            project("p-2", "co-1", "cl-2", assigned_to=["m-2"]),
        ]

        visible = team_members_for_role(user("client", user_id="cl-1"), projects, members)

        assert [m.id for m in visible] == ["m-1"]
        assert team_members_for_role(user("company", company_id="co-1"), projects, members) == members
        assert team_members_for_role(None, projects, members) == []
