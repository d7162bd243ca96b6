"""Tests for companies and the subscription lifecycle."""

from datetime import datetime, timedelta

import pytest

from core.store import eq
from schemas.company_schema import CompanyCreate, CompanyUpdate, SubscriptionUpdate
from services.companies import subscription_end_date
from services.errors import OperationFailed
from services.workspace import Workspace


def company_row(store, company_id):
    return store.select("companies", [eq("id", company_id)])[0]


class TestSweep:
    def test_sweep_expires_exactly_the_lapsed_rows(self, store, seed) -> None:
        now = datetime.utcnow()
        lapsed_active = seed.company("Lapsed", subscription_status="active", subscription_end_date=now - timedelta(days=1))
        current = seed.company("Current", subscription_status="active", subscription_end_date=now + timedelta(days=5))
        # a 30-day trial that started 31 days ago
        lapsed_trial = seed.company(
            "Trialist",
            subscription_status="trial",
            trial_start_date=now - timedelta(days=31),
            trial_end_date=now - timedelta(days=1),
            subscription_end_date=now - timedelta(days=1),
        )
        open_ended = seed.company("Forever", subscription_status="active", subscription_end_date=None)
        already = seed.company(
            "Gone", status="inactive", subscription_status="expired", subscription_end_date=now - timedelta(days=90)
        )

        count = Workspace(store).companies.deactivate_expired()

        assert count == 2
        for company_id in (lapsed_active, lapsed_trial):
            row = company_row(store, company_id)
            assert row["status"] == "inactive"
            assert row["subscription_status"] == "expired"
        for company_id in (current, open_ended):
            row = company_row(store, company_id)
            assert row["status"] == "active"
            assert row["subscription_status"] == "active"
        assert company_row(store, already)["subscription_status"] == "expired"

    def test_second_sweep_finds_nothing(self, store, seed) -> None:
        seed.company("Lapsed", subscription_status="active", subscription_end_date=datetime.utcnow() - timedelta(days=1))
        companies = Workspace(store).companies

        assert companies.deactivate_expired() == 1
        assert companies.deactivate_expired() == 0


class TestSubscriptionChanges:
    def test_trial_to_paid_sets_one_year(self, admin_ws, store, company_id) -> None:
        before = datetime.utcnow()
        admin_ws.companies.update_subscription(
            company_id, SubscriptionUpdate(subscription_plan="premium", subscription_status="active")
        )

        row = company_row(store, company_id)
        assert row["subscription_plan"] == "premium"
        assert row["subscription_status"] == "active"
        assert row["status"] == "active"
        assert before + timedelta(days=365) <= row["subscription_end_date"] <= datetime.utcnow() + timedelta(days=365)

    def test_expired_status_deactivates_and_clears_end_date(self, admin_ws, store, company_id) -> None:
        admin_ws.companies.update_subscription(
            company_id, SubscriptionUpdate(subscription_plan="basic", subscription_status="expired")
        )

        row = company_row(store, company_id)
        assert row["status"] == "inactive"
        assert row["subscription_end_date"] is None

    def test_renew_reactivates_expired_company(self, admin_ws, store, seed) -> None:
        company_id = seed.company(
            "Gone", status="inactive", subscription_plan="basic", subscription_status="expired",
            subscription_end_date=None,
        )

        renewed = admin_ws.companies.renew(company_id)

        assert renewed.status == "active"
        assert renewed.subscription_status == "active"
        assert renewed.subscription_plan == "basic"
        assert renewed.subscription_end_date > datetime.utcnow() + timedelta(days=364)

    def test_renew_onto_trial_plan_is_thirty_days(self, admin_ws, store, company_id) -> None:
        renewed = admin_ws.companies.renew(company_id, "trial")
        assert renewed.subscription_end_date < datetime.utcnow() + timedelta(days=31)

    def test_only_admins_change_subscriptions(self, owner_ws, company_id) -> None:
        with pytest.raises(OperationFailed):
            owner_ws.companies.update_subscription(
                company_id, SubscriptionUpdate(subscription_plan="enterprise", subscription_status="active")
            )
        assert owner_ws.feedback.last_error == "Failed to update subscription"

    def test_end_date_rule(self) -> None:
        start = datetime(2026, 1, 1)
        assert subscription_end_date("trial", start) == datetime(2026, 1, 31)
        assert subscription_end_date("premium", start) == datetime(2027, 1, 1)


class TestCompanyRecords:
    def test_admin_creates_trial_company(self, admin_ws) -> None:
        created = admin_ws.companies.create(CompanyCreate(name="Initech", email="hello@initech.com"))

        assert created.subscription_status == "trial"
        assert created.trial_end_date == created.subscription_end_date
        assert any(c.id == created.id for c in admin_ws.companies.items)

    def test_owner_sees_and_edits_only_their_company(self, owner_ws, seed, company_id) -> None:
        other = seed.company("Globex")

        assert [c.id for c in owner_ws.companies.fetch()] == [company_id]
        owner_ws.companies.update(company_id, CompanyUpdate(name="Acme Corp"))
        assert owner_ws.companies.get(company_id).name == "Acme Corp"
        with pytest.raises(OperationFailed):
            owner_ws.companies.update(other, CompanyUpdate(name="Mine"))

    def test_active_companies(self, admin_ws, seed) -> None:
        seed.company("Sleepy", status="inactive")
        seed.company("Busy")
        admin_ws.companies.fetch()

        assert [c.name for c in admin_ws.companies.active_companies] == ["Busy"]

    def test_trial_days_left(self, store, seed, workspace_for) -> None:
        company_id = seed.company(
            "Trialco", subscription_status="trial", trial_end_date=datetime.utcnow() + timedelta(days=7)
        )
        user_id = seed.user("t@trialco.com", "company", company_id=company_id)

        assert workspace_for(user_id).companies.trial_days_left() == 7
        assert Workspace(store).companies.trial_days_left() == 0

    def test_directory_lists_active_companies_by_name(self, store, seed) -> None:
        seed.company("Zeta")
        seed.company("Alpha")
        seed.company("Dormant", status="inactive")

        assert [c["name"] for c in Workspace(store).companies.directory()] == ["Alpha", "Zeta"]
