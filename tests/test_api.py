"""End-to-end tests through the FastAPI app."""

from core.store import eq


class TestContactSupport:
    def test_missing_fields(self, api) -> None:
        response = api.post("/contact-support", json={"name": "Ann", "message": "hi"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing fields."}

    def test_invalid_email(self, api) -> None:
        response = api.post("/contact-support", json={"name": "Ann", "email": "ann@nowhere", "message": "hi"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid email."}

    def test_success_echoes_message_and_contact_info(self, api) -> None:
        response = api.post(
            "/contact-support", json={"name": "Ann", "email": "ann@example.com", "message": "Need help"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Message from Ann (ann@example.com): Need help"
        assert body["contactInfo"] == {"phone": "0793614592", "email": "ngumbaucephas2@gmail.com"}


class TestAuthRoutes:
    def test_register_validation_is_422_with_ordered_messages(self, api) -> None:
        response = api.post(
            "/auth/register",
            json={"email": "new@client.com", "password": "abc", "full_name": "New", "role": "client"},
        )

        assert response.status_code == 422
        assert response.json()["detail"] == [
            "Password must be at least 6 characters long",
            "Please select the company you are a client of",
        ]

    def test_register_then_me(self, api) -> None:
        response = api.post(
            "/auth/register",
            json={
                "email": "boss@globex.com",
                "password": "secret123",
                "full_name": "Gina Boss",
                "role": "company",
                "company_name": "Globex",
            },
        )
        assert response.status_code == 201
        token = response.json()["access_token"]

        me = api.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert me.status_code == 200
        assert me.json()["role"] == "company"
        assert me.json()["company_name"] == "Globex"

    def test_wrong_password_is_401(self, api, owner_id) -> None:
        response = api.post("/auth/login", json={"email": "owner@acme.com", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password. Please check your credentials."

    def test_login_returns_token_and_user(self, api, owner_id) -> None:
        response = api.post("/auth/login", json={"email": "owner@acme.com", "password": "secret123"})

        assert response.status_code == 200
        assert response.json()["user"]["id"] == owner_id

    def test_me_requires_token(self, api) -> None:
        assert api.get("/auth/me").status_code == 401


class TestScopedRoutes:
    def test_client_lists_only_their_projects(self, api, auth, seed, company_id, client_id) -> None:
        mine = seed.project(company_id, "Mine", client_id=client_id)
        seed.project(company_id, "Not mine")

        response = api.get("/projects/", headers=auth(client_id))

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [mine]

    def test_client_cannot_manage_team(self, api, auth, client_id) -> None:
        response = api.post(
            "/team-members/", json={"name": "X", "email": "x@x.com", "role": "Dev"}, headers=auth(client_id)
        )
        assert response.status_code == 403

    def test_owner_creates_project_and_assigns_team(self, api, auth, seed, owner_id, company_id) -> None:
        member = seed.member(company_id, "Dev One")

        created = api.post("/projects/", json={"name": "Portal"}, headers=auth(owner_id))
        assert created.status_code == 201
        project_id = created.json()["id"]

        assigned = api.put(f"/projects/{project_id}/team", json={"member_ids": [member]}, headers=auth(owner_id))
        assert assigned.status_code == 200
        assert assigned.json()["assigned_to"] == [member]

        history = api.get(f"/projects/{project_id}/history", headers=auth(owner_id))
        assert {h["action"] for h in history.json()} == {"created", "team_assigned"}

    def test_foreign_member_assignment_is_422(self, api, auth, seed, owner_id, company_id) -> None:
        project_id = seed.project(company_id, "Portal")
        spy = seed.member(seed.company("Globex"), "Spy")

        response = api.put(f"/projects/{project_id}/team", json={"member_ids": [spy]}, headers=auth(owner_id))

        assert response.status_code == 422

    def test_sweep_is_admin_only(self, api, auth, owner_id, admin_id) -> None:
        assert api.post("/companies/deactivate-expired", headers=auth(owner_id)).status_code == 403

        response = api.post("/companies/deactivate-expired", headers=auth(admin_id))
        assert response.status_code == 200
        assert response.json() == {"deactivated": 0}

    def test_health(self, api) -> None:
        assert api.get("/health").json()["status"] == "ok"


class TestWriteGuards:
    def test_null_for_required_column_is_422(self, api, auth, seed, store, owner_id, company_id) -> None:
        project_id = seed.project(company_id, "Portal")

        response = api.put(f"/projects/{project_id}", json={"status": None}, headers=auth(owner_id))

        assert response.status_code == 422
        assert store.select("projects", [eq("id", project_id)])[0]["status"] == "Planning"

    def test_null_issue_title_is_422(self, api, auth, owner_id) -> None:
        response = api.put("/issues/any-id", json={"title": None}, headers=auth(owner_id))
        assert response.status_code == 422

    def test_member_projects_only_change_through_assignment(
        self, api, auth, seed, store, owner_id, company_id
    ) -> None:
        member_id = seed.member(company_id, "Dev One")
        project_id = seed.project(company_id, "Portal")
        foreign = seed.project(seed.company("Globex"), "Theirs")

        updated = api.put(
            f"/team-members/{member_id}", json={"role": "Lead", "projects": [project_id]}, headers=auth(owner_id)
        )
        created = api.post(
            "/team-members/",
            json={"name": "New Dev", "email": "new.dev@acme.com", "role": "Dev", "projects": [foreign]},
            headers=auth(owner_id),
        )

        assert updated.status_code == 200
        assert updated.json()["role"] == "Lead"
        assert updated.json()["projects"] == []
        assert created.status_code == 201
        assert created.json()["projects"] == []
        assert store.select("projects", [eq("id", project_id)])[0]["assigned_to"] == []
        assert store.select("projects", [eq("id", foreign)])[0]["assigned_to"] == []
