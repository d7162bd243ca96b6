# services/companies.py
"""
Companies and their subscription lifecycle.

    trial  --update_subscription(plan, active)-->  active
    active/trial  --deactivate_expired() once the end date passes-->  expired
    expired  --renew()-->  active

Nothing runs on a timer: expiry only happens when the sweep is called.
"""
from datetime import datetime, timedelta
from typing import List, Optional
import logging

from core.config import settings
from core.store import StoreError, eq, in_, lt
from models.models import CompanyStatus, SubscriptionPlan, SubscriptionStatus
from schemas.company_schema import CompanyCreate, CompanyRead, CompanyUpdate, SubscriptionUpdate
from schemas.user_schema import UserProfile
from services.base import EntityService, append_item

logger = logging.getLogger(__name__)


def subscription_end_date(plan: str, now: Optional[datetime] = None) -> datetime:
    """Trial plans run TRIAL_DAYS, paid plans PAID_PLAN_DAYS, counted from `now`."""
    now = now or datetime.utcnow()
    days = settings.TRIAL_DAYS if plan == SubscriptionPlan.TRIAL.value else settings.PAID_PLAN_DAYS
    return now + timedelta(days=days)


class CompaniesService(EntityService[CompanyRead]):
    table = "companies"
    entity = "companies"
    record = CompanyRead

    def scope(self, user: UserProfile):
        if user.is_admin:
            return []
        return [eq("id", user.company_id)] if user.company_id else None

    def write_scope(self, user: UserProfile):
        if user.is_admin:
            return []
        # company owners may edit their own company
        if user.is_company and user.company_id:
            return [eq("id", user.company_id)]
        return None

    # ==========================================================
    # CRUD
    # ==========================================================
    def create(self, data: CompanyCreate) -> CompanyRead:
        message = "Failed to create company"
        user = self.require_user(message)
        if not user.is_admin:
            raise self.fail(message)

        now = datetime.utcnow()
        row = data.model_dump(mode="json")
        row["subscription_end_date"] = subscription_end_date(data.subscription_plan, now)
        if data.subscription_status == SubscriptionStatus.TRIAL.value:
            row.update(trial_start_date=now, trial_end_date=row["subscription_end_date"])

        created = CompanyRead.from_row(self.run(message, lambda: self.store.insert(self.table, row)))
        self.items = append_item(self.items, created)
        logger.info(f"🏢 Company '{created.name}' created by {user.id}")

        self.reconcile()
        self.feedback.success("Company created successfully")
        return self.get(created.id) or created

    def update(self, company_id: str, data: CompanyUpdate) -> CompanyRead:
        message = "Failed to update company"
        user = self.require_user(message)
        patch = data.model_dump(exclude_unset=True, mode="json")
        current = self.scoped_row(user, company_id, message)
        if patch:
            self.scoped_update(user, company_id, patch, message)

        self.reconcile()
        self.feedback.success("Company updated successfully")
        return self.get(company_id) or CompanyRead.from_row({**current, **patch})

    # ==========================================================
    # Subscription lifecycle
    # ==========================================================
    def update_subscription(self, company_id: str, data: SubscriptionUpdate) -> CompanyRead:
        message = "Failed to update subscription"
        user = self.require_user(message)
        if not user.is_admin:
            raise self.fail(message)

        patch = {"subscription_plan": data.subscription_plan, "subscription_status": data.subscription_status}
        if data.subscription_status == SubscriptionStatus.EXPIRED.value:
            patch.update(status=CompanyStatus.INACTIVE.value, subscription_end_date=None)
        else:
            patch.update(
                status=CompanyStatus.ACTIVE.value,
                subscription_end_date=subscription_end_date(data.subscription_plan),
            )

        self.scoped_update(user, company_id, patch, message)
        logger.info(f"💳 Company {company_id} subscription -> {data.subscription_plan}/{data.subscription_status}")

        self.reconcile()
        self.feedback.success("Subscription updated successfully")
        return self.get(company_id)

    def renew(self, company_id: str, plan: Optional[str] = None) -> CompanyRead:
        """Reactivate a company, keeping its current plan unless a new one is given."""
        message = "Failed to renew subscription"
        user = self.require_user(message)
        if not user.is_admin:
            raise self.fail(message)

        current = self.scoped_row(user, company_id, message)
        plan = plan or current.get("subscription_plan") or SubscriptionPlan.TRIAL.value
        patch = {
            "status": CompanyStatus.ACTIVE.value,
            "subscription_status": SubscriptionStatus.ACTIVE.value,
            "subscription_plan": plan,
            "subscription_end_date": subscription_end_date(plan),
        }
        self.scoped_update(user, company_id, patch, message)
        logger.info(f"🔄 Company {company_id} renewed on {plan} until {patch['subscription_end_date']:%Y-%m-%d}")

        self.reconcile()
        self.feedback.success("Subscription renewed successfully")
        return self.get(company_id) or CompanyRead.from_row({**current, **patch})

    def deactivate_expired(self, now: Optional[datetime] = None) -> int:
        """
        Expire every active or trial subscription whose end date has passed.
        Returns how many companies were swept.
        """
        now = now or datetime.utcnow()
        try:
            count = self.store.update(
                self.table,
                {"status": CompanyStatus.INACTIVE.value, "subscription_status": SubscriptionStatus.EXPIRED.value},
                [
                    lt("subscription_end_date", now),
                    in_("subscription_status", [SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIAL.value]),
                ],
            )
        except StoreError as e:
            raise self.fail("Failed to deactivate expired subscriptions", e) from e

        logger.info(f"🧹 Subscription sweep expired {count} companies")
        self.reconcile()
        return count

    # ==========================================================
    # Derived views
    # ==========================================================
    @property
    def active_companies(self) -> List[CompanyRead]:
        return [c for c in self.items if c.status == CompanyStatus.ACTIVE.value]

    def directory(self) -> List[dict]:
        """Id and name of every active company, for the client sign-up picker. Needs no session."""
        try:
            return self.store.select(
                self.table, [eq("status", CompanyStatus.ACTIVE.value)], columns="id,name", order_by="name", desc=False
            )
        except StoreError as e:
            logger.error(f"❌ Failed to load company directory: {e}")
            self.feedback.error("Failed to fetch companies")
            return []

    def trial_days_left(self) -> int:
        """Days left on the caller's company subscription; 0 when unknown."""
        user = self.identity.current_user()
        if user is None:
            return 0
        try:
            return int(self.store.rpc("get_trial_days_left", user_id=user.id))
        except StoreError as e:
            logger.error(f"❌ Failed to get trial days left for {user.id}: {e}")
            return 0
