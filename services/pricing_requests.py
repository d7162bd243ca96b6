# services/pricing_requests.py
from datetime import datetime
import logging

from core.store import eq
from models.models import PricingRequestStatus
from schemas.pricing_schema import PricingDecision, PricingRequestCreate, PricingRequestRead
from schemas.user_schema import UserProfile
from services.base import EntityService, append_item
from services.errors import ValidationFailed
from services.fanout import NotificationFanout

logger = logging.getLogger(__name__)

SUBMIT_FAILED = "Failed to submit pricing request. Please try again."
ALREADY_DECIDED = "This pricing request has already been decided"


class PricingRequestsService(EntityService[PricingRequestRead]):
    """Plan upgrade requests: users submit, admins approve or reject."""

    table = "pricing_requests"
    entity = "pricing requests"
    record = PricingRequestRead

    def __init__(self, store, identity, feedback, fanout: NotificationFanout):
        super().__init__(store, identity, feedback)
        self.fanout = fanout

    def scope(self, user: UserProfile):
        if user.is_admin:
            return []
        return [eq("user_id", user.id)]

    def write_scope(self, user: UserProfile):
        return [] if user.is_admin else None

    def submit(self, data: PricingRequestCreate) -> PricingRequestRead:
        user = self.require_user("Please log in to submit a pricing request")

        row = data.model_dump()
        row.update(
            user_id=user.id,
            email=user.email,
            company_name=data.company_name or user.company_name,
            status=PricingRequestStatus.PENDING.value,
        )
        created = PricingRequestRead.from_row(self.run(SUBMIT_FAILED, lambda: self.store.insert(self.table, row)))
        self.items = append_item(self.items, created)
        logger.info(f"💼 Pricing request for {created.plan_name} from {user.email}")

        self.fanout.pricing_request(user.id, created.plan_name)

        self.reconcile()
        self.feedback.success("Pricing request submitted! Admin will review your request.")
        return self.get(created.id) or created

    def decide(self, request_id: str, decision: PricingDecision) -> PricingRequestRead:
        """Approve or reject a pending request. Only approvals carry an approval time."""
        message = "Failed to update pricing request"
        user = self.require_user(message)
        current = self.scoped_row(user, request_id, message)
        if current.get("status") != PricingRequestStatus.PENDING.value:
            raise ValidationFailed([ALREADY_DECIDED])

        status = PricingRequestStatus.APPROVED.value if decision.approved else PricingRequestStatus.REJECTED.value
        patch = {
            "status": status,
            "notes": decision.notes,
            "approved_at": datetime.utcnow() if decision.approved else None,
            "approved_by": user.id,
        }
        self.scoped_update(user, request_id, patch, message)
        logger.info(f"✅ Pricing request {request_id} {status} by {user.id}")

        self.reconcile()
        self.feedback.success(f"Pricing request {status}")
        return self.get(request_id)

    @property
    def pending(self):
        return [r for r in self.items if r.status == PricingRequestStatus.PENDING.value]
