# services/fanout.py
"""
Cross-entity notification fan-out.

Every notification is its own remote call, sent one after another. A failed
call is logged and skipped; it never fails the mutation that triggered it.
"""
from typing import Iterable, Optional
import logging

from core.store import Store, StoreError
from models.models import NotificationType

logger = logging.getLogger(__name__)

PROJECT_ASSIGNMENT_TITLE = "New Project Assignment"
ISSUE_ASSIGNMENT_TITLE = "New Issue Assignment"
PRICING_REQUEST_TITLE = "Pricing Request Submitted"


class NotificationFanout:
    def __init__(self, store: Store):
        self.store = store

    def send(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str = NotificationType.INFO.value,
        action_url: Optional[str] = None,
    ) -> Optional[str]:
        """Send one notification; returns its id, or None if the call failed."""
        try:
            return self.store.rpc(
                "send_notification",
                user_id=user_id,
                title=title,
                message=message,
                type=type,
                action_url=action_url,
            )
        except StoreError as e:
            logger.error(f"❌ Failed to notify {user_id} ({title}): {e}")
            return None

    def project_assignment(self, project_name: str, recipient_ids: Iterable[str]) -> int:
        """Notify each assignee of a project; returns how many notifications went out."""
        sent = 0
        for recipient_id in recipient_ids:
            if self.send(
                recipient_id,
                PROJECT_ASSIGNMENT_TITLE,
                f"You have been assigned to project: {project_name}",
                NotificationType.INFO.value,
            ):
                sent += 1
        logger.info(f"📨 Project assignment fan-out for '{project_name}': {sent} sent")
        return sent

    def issue_assignment(self, issue_title: str, assignee_id: Optional[str]) -> bool:
        if not assignee_id:
            return False
        return self.send(
            assignee_id,
            ISSUE_ASSIGNMENT_TITLE,
            f"You have been assigned issue: {issue_title}",
            NotificationType.WARNING.value,
        ) is not None

    def pricing_request(self, requester_id: str, plan_name: str) -> bool:
        return self.send(
            requester_id,
            PRICING_REQUEST_TITLE,
            f"Your request for the {plan_name} plan was received. An admin will review it shortly.",
            NotificationType.INFO.value,
        ) is not None
