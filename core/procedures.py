# core/procedures.py
"""Named remote procedures exposed through Store.rpc()."""
from datetime import datetime
from typing import Optional
import math

from core.store import Store, eq, procedure
from models.models import NotificationType, SubscriptionStatus, UserRole


@procedure("send_notification")
def send_notification(
    store: Store,
    user_id: str,
    title: str,
    message: str,
    type: str = NotificationType.INFO.value,
    action_url: Optional[str] = None,
) -> str:
    row = store.insert(
        "notifications",
        {
            "user_id": user_id,
            "title": title,
            "message": message,
            "type": type,
            "read": False,
            "action_url": action_url,
        },
    )
    return row["id"]


@procedure("is_admin")
def is_admin(store: Store, user_id: str) -> bool:
    rows = store.select("profiles", [eq("id", user_id)], columns="role", order_by=None)
    return bool(rows) and rows[0]["role"] == UserRole.ADMIN.value


@procedure("get_trial_days_left")
def get_trial_days_left(store: Store, user_id: str) -> int:
    """
    Whole days left before the caller's company subscription (or trial) ends.
    Users without a company, or companies without an end date, get 0.
    """
    profiles = store.select("profiles", [eq("id", user_id)], columns="company_id", order_by=None)
    if not profiles or not profiles[0]["company_id"]:
        return 0

    companies = store.select("companies", [eq("id", profiles[0]["company_id"])], order_by=None)
    if not companies:
        return 0
    company = companies[0]

    end = company["subscription_end_date"]
    if company["subscription_status"] == SubscriptionStatus.TRIAL.value and company["trial_end_date"]:
        end = company["trial_end_date"]
    if end is None:
        return 0

    seconds_left = (end - datetime.utcnow()).total_seconds()
    return max(0, math.ceil(seconds_left / 86400))
