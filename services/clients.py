# services/clients.py
import logging

from core.store import eq
from models.models import ClientStatus
from schemas.client_schema import ClientRead
from schemas.user_schema import UserProfile
from services.base import EntityService

logger = logging.getLogger(__name__)


class ClientsService(EntityService[ClientRead]):
    table = "clients"
    entity = "clients"
    record = ClientRead

    def scope(self, user: UserProfile):
        if user.is_admin:
            return []
        if user.is_company:
            return [eq("company_id", user.company_id)] if user.company_id else None
        if user.is_client:
            return [eq("user_id", user.id)]
        return None

    def write_scope(self, user: UserProfile):
        return None if user.is_client else self.scope(user)

    def update_status(self, client_id: str, status: str) -> ClientRead:
        message = "Failed to update client status"
        user = self.require_user(message)
        self.scoped_update(user, client_id, {"status": status}, message)
        logger.info(f"🔁 Client {client_id} set to {status} by {user.id}")

        self.reconcile()
        verb = "activated" if status == ClientStatus.ACTIVE.value else "deactivated"
        self.feedback.success(f"Client {verb} successfully")
        return self.get(client_id)
