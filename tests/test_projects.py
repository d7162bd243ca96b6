"""Tests for the projects service: scoping, optimistic writes, team assignment."""

from datetime import date, datetime
from unittest.mock import MagicMock, patch

import pytest

from core.security import create_access_token
from core.store import Store, StoreError, eq
from schemas.project_schema import ProjectCreate, ProjectUpdate
from services.errors import NotAuthenticated, OperationFailed, ValidationFailed
from services.workspace import Workspace


class FlakyStore(Store):
    """A store that can be told to fail specific calls."""

    fail_member_update = None
    fail_project_reads = False
    break_reads_after_update = False

    def select(self, table, *args, **kwargs):
        if table == "projects" and self.fail_project_reads:
            raise StoreError("projects unavailable")
        return super().select(table, *args, **kwargs)

    def update(self, table, patch, filters):
        targeted = any(getattr(f, "value", None) == self.fail_member_update for f in filters)
        if table == "team_members" and self.fail_member_update is not None and targeted:
            raise StoreError("member write rejected")
        count = super().update(table, patch, filters)
        if self.break_reads_after_update:
            self.fail_project_reads = True
        return count


@pytest.fixture
def flaky(session) -> FlakyStore:
    return FlakyStore(session)


def ws_on(store, user_id) -> Workspace:
    return Workspace(store, create_access_token({"sub": user_id}))


class TestFetch:
    def test_anonymous_fetch_is_a_no_op(self) -> None:
        store = MagicMock()
        ws = Workspace(store)

        assert ws.projects.fetch() == []
        store.select.assert_not_called()
        assert ws.feedback.messages == []

    def test_fetch_twice_gives_equal_collections(self, owner_ws, seed, company_id) -> None:
        seed.project(company_id, "Alpha")
        seed.project(company_id, "Beta")

        assert owner_ws.projects.fetch() == owner_ws.projects.fetch()

    def test_company_sees_only_its_projects(self, owner_ws, admin_ws, seed, company_id) -> None:
        other = seed.company("Globex")
        seed.project(company_id, "Mine")
        seed.project(other, "Theirs")

        assert [p.name for p in owner_ws.projects.fetch()] == ["Mine"]
        assert sorted(p.name for p in admin_ws.projects.fetch()) == ["Mine", "Theirs"]

    def test_client_visibility(self, seed, company_id, client_id, workspace_for) -> None:
        other_client = seed.user("other@buyer.com", "client", company_id=company_id)
        mine = seed.project(company_id, "Mine", client_id=client_id)
        seed.project(company_id, "Nobody's")
        seed.project(company_id, "Someone else's", client_id=other_client)

        projects = workspace_for(client_id).projects.fetch()

        assert [p.id for p in projects] == [mine]

    def test_fetch_failure_keeps_previous_collection(self, flaky, owner_id, seed, company_id) -> None:
        seed.project(company_id, "Alpha")
        ws = ws_on(flaky, owner_id)
        loaded = ws.projects.fetch()

        flaky.fail_project_reads = True
        again = ws.projects.fetch()

        assert again == loaded
        assert ws.projects.last_fetch_failed is True
        assert ws.feedback.errors == ["Failed to fetch projects"]


class TestCreateUpdateDelete:
    def test_create_then_fetch_contains_the_input(self, owner_ws, company_id) -> None:
        data = ProjectCreate(
            name="Portal",
            description="Customer portal",
            status="In Progress",
            progress=25,
            due_date=date(2026, 12, 1),
            priority="High",
            budget=1000,
        )

        created = owner_ws.projects.create(data)
        fetched = owner_ws.projects.fetch()

        match = next(p for p in fetched if p.id == created.id)
        assert match.name == "Portal"
        assert match.description == "Customer portal"
        assert match.status == "In Progress"
        assert match.progress == 25
        assert match.due_date == "2026-12-01"
        assert match.priority == "High"
        assert match.budget == 1000
        assert match.company_id == company_id
        assert owner_ws.feedback.messages[-1].text == "Project created successfully"

    def test_create_records_history(self, owner_ws) -> None:
        created = owner_ws.projects.create(ProjectCreate(name="Portal"))
        owner_ws.history.fetch()

        entries = owner_ws.history.for_project(created.id)
        assert [e.action for e in entries] == ["created"]
        assert entries[0].new_value == "Portal"

    def test_admin_must_name_a_company(self, admin_ws) -> None:
        with pytest.raises(ValidationFailed):
            admin_ws.projects.create(ProjectCreate(name="Homeless"))

    def test_client_cannot_create(self, client_ws, store) -> None:
        with pytest.raises(OperationFailed):
            client_ws.projects.create(ProjectCreate(name="Nope"))
        assert client_ws.feedback.last_error == "Failed to create project"
        assert store.select("projects") == []

    def test_signed_out_create_is_rejected(self, store) -> None:
        with pytest.raises(NotAuthenticated):
            Workspace(store).projects.create(ProjectCreate(name="Nope"))

    def test_update_optimistic_then_reconciled(self, flaky, owner_id, seed, company_id) -> None:
        project_id = seed.project(company_id, "Old name")
        ws = ws_on(flaky, owner_id)
        ws.projects.fetch()

        # the reconciling fetch fails, so the optimistic state is what remains
        flaky.break_reads_after_update = True
        result = ws.projects.update(project_id, ProjectUpdate(name="New name", progress=50))

        assert result.name == "New name"
        assert ws.projects.get(project_id).progress == 50
        assert ws.projects.last_fetch_failed is True
        assert ws.feedback.errors == []

        flaky.break_reads_after_update = False
        flaky.fail_project_reads = False
        reconciled = ws.projects.fetch()[0]
        assert reconciled.name == "New name"
        assert reconciled.progress == 50
        assert reconciled.last_update == datetime.utcnow().date().isoformat()

    def test_update_records_one_history_entry_per_changed_field(self, owner_ws, seed, company_id) -> None:
        project_id = seed.project(company_id, "Portal", progress=10)

        owner_ws.projects.update(project_id, ProjectUpdate(name="Portal", progress=30, phase="Build"))
        owner_ws.history.fetch()

        changed = sorted(e.field_changed for e in owner_ws.history.for_project(project_id))
        assert changed == ["phase", "progress"]

    def test_update_outside_scope_fails(self, owner_ws, seed) -> None:
        foreign = seed.project(seed.company("Globex"), "Theirs")

        with pytest.raises(OperationFailed):
            owner_ws.projects.update(foreign, ProjectUpdate(name="Mine now"))
        assert owner_ws.feedback.last_error == "Failed to update project"

    def test_delete_unlinks_members(self, owner_ws, seed, store, company_id) -> None:
        member = seed.member(company_id)
        project_id = seed.project(company_id, "Portal", assigned_to=[member])
        store.update("team_members", {"projects": [project_id]}, [eq("id", member)])

        owner_ws.projects.delete(project_id)

        assert store.select("projects") == []
        assert store.select("team_members", [eq("id", member)])[0]["projects"] == []
        assert owner_ws.projects.items == []


class TestCreateWithTeam:
    def test_create_links_members_and_notifies_each(self, owner_ws, seed, store, company_id) -> None:
        members = [seed.member(company_id, f"Dev {i}") for i in range(3)]

        with patch.object(owner_ws.fanout, "send", return_value="n-1") as send:
            created = owner_ws.projects.create(ProjectCreate(name="Portal", assigned_to=members))

        assert created.assigned_to == members
        assert store.select("projects", [eq("id", created.id)])[0]["assigned_to"] == members
        for member_id in members:
            assert store.select("team_members", [eq("id", member_id)])[0]["projects"] == [created.id]
        assert send.call_count == 3
        assert [c.args[1] for c in send.call_args_list] == ["New Project Assignment"] * 3

    def test_failed_member_link_leaves_nothing_behind(self, flaky, owner_id, seed, company_id) -> None:
        m1 = seed.member(company_id, "Dev One")
        m2 = seed.member(company_id, "Dev Two")
        flaky.fail_member_update = m2
        ws = ws_on(flaky, owner_id)

        with pytest.raises(OperationFailed) as excinfo:
            ws.projects.create(ProjectCreate(name="Portal", assigned_to=[m1, m2]))

        assert excinfo.value.message == "Failed to create project"
        assert ws.feedback.errors == ["Failed to create project"]
        assert flaky.select("projects") == []
        assert flaky.select("team_members", [eq("id", m1)])[0]["projects"] == []
        assert flaky.select("project_history") == []
        assert flaky.select("notifications") == []
        assert ws.projects.items == []

    def test_foreign_member_rejects_create(self, owner_ws, seed, store) -> None:
        spy = seed.member(seed.company("Globex"), "Spy")

        with pytest.raises(ValidationFailed):
            owner_ws.projects.create(ProjectCreate(name="Portal", assigned_to=[spy]))
        assert store.select("projects") == []


class TestAssignToTeam:
    def test_links_project_and_members(self, owner_ws, seed, store, company_id) -> None:
        m1 = seed.member(company_id, "Dev One")
        m2 = seed.member(company_id, "Dev Two")
        project_id = seed.project(company_id, "Portal")

        result = owner_ws.projects.assign_to_team(project_id, [m1, m2])

        assert result.assigned_to == [m1, m2]
        for member_id in (m1, m2):
            row = store.select("team_members", [eq("id", member_id)])[0]
            assert project_id in row["projects"]

    def test_n_members_means_n_notifications(self, owner_ws, seed, company_id) -> None:
        members = [seed.member(company_id, f"Dev {i}") for i in range(3)]
        project_id = seed.project(company_id, "Portal")

        with patch.object(owner_ws.fanout, "send", return_value="n-1") as send:
            owner_ws.projects.assign_to_team(project_id, members)

        assert send.call_count == 3
        assert [c.args[1] for c in send.call_args_list] == ["New Project Assignment"] * 3

    def test_notifications_go_to_linked_login(self, owner_ws, seed, store, company_id) -> None:
        linked_user = seed.user("dev@acme.com", "company", company_id=company_id)
        linked = seed.member(company_id, "Linked", user_id=linked_user)
        unlinked = seed.member(company_id, "Unlinked")
        project_id = seed.project(company_id, "Portal")

        owner_ws.projects.assign_to_team(project_id, [linked, unlinked])

        recipients = sorted(row["user_id"] for row in store.select("notifications"))
        assert recipients == sorted([linked_user, unlinked])

    def test_existing_project_ids_are_kept(self, owner_ws, seed, store, company_id) -> None:
        m1 = seed.member(company_id, "Dev One", projects=["older-project"])
        project_id = seed.project(company_id, "Portal")

        owner_ws.projects.assign_to_team(project_id, [m1])

        assert store.select("team_members", [eq("id", m1)])[0]["projects"] == ["older-project", project_id]

    def test_dropped_members_are_unlinked(self, owner_ws, seed, store, company_id) -> None:
        m1 = seed.member(company_id, "Dev One")
        m2 = seed.member(company_id, "Dev Two")
        project_id = seed.project(company_id, "Portal")
        owner_ws.projects.assign_to_team(project_id, [m1, m2])

        owner_ws.projects.assign_to_team(project_id, [m2])

        assert store.select("team_members", [eq("id", m1)])[0]["projects"] == []
        assert store.select("projects", [eq("id", project_id)])[0]["assigned_to"] == [m2]

    def test_foreign_member_is_rejected_before_any_write(self, owner_ws, seed, store, company_id) -> None:
        mine = seed.member(company_id, "Dev One")
        foreign = seed.member(seed.company("Globex"), "Spy")
        project_id = seed.project(company_id, "Portal")

        with pytest.raises(ValidationFailed):
            owner_ws.projects.assign_to_team(project_id, [mine, foreign])

        assert store.select("projects", [eq("id", project_id)])[0]["assigned_to"] == []
        assert store.select("team_members", [eq("id", mine)])[0]["projects"] == []
        assert store.select("notifications") == []

    def test_member_failure_is_compensated(self, flaky, owner_id, seed, company_id) -> None:
        m1 = seed.member(company_id, "Dev One")
        m2 = seed.member(company_id, "Dev Two")
        project_id = seed.project(company_id, "Portal")
        flaky.fail_member_update = m2
        ws = ws_on(flaky, owner_id)
        ws.projects.fetch()

        with pytest.raises(OperationFailed) as excinfo:
            ws.projects.assign_to_team(project_id, [m1, m2])

        assert excinfo.value.message == "Failed to assign project to team"
        assert ws.feedback.last_error == "Failed to assign project to team"
        assert flaky.select("projects", [eq("id", project_id)])[0]["assigned_to"] == []
        assert flaky.select("team_members", [eq("id", m1)])[0]["projects"] == []
        assert ws.projects.get(project_id).assigned_to == []
        assert flaky.select("notifications") == []

    def test_clients_cannot_assign(self, client_ws, seed, company_id, client_id) -> None:
        member = seed.member(company_id)
        project_id = seed.project(company_id, "Portal", client_id=client_id)

        with pytest.raises(OperationFailed):
            client_ws.projects.assign_to_team(project_id, [member])
