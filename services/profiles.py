# services/profiles.py
import logging

from core.store import eq
from schemas.user_schema import ProfileRead, UserProfile
from services.base import EntityService

logger = logging.getLogger(__name__)


class ProfilesService(EntityService[ProfileRead]):
    """User profiles. Admins manage everyone; other users only see themselves."""

    table = "profiles"
    entity = "users"
    record = ProfileRead

    def scope(self, user: UserProfile):
        if user.is_admin:
            return []
        return [eq("id", user.id)]

    def write_scope(self, user: UserProfile):
        return [] if user.is_admin else None

    def update_status(self, profile_id: str, status: str) -> ProfileRead:
        message = "Failed to update user status"
        user = self.require_user(message)
        self.scoped_update(user, profile_id, {"status": status}, message)
        logger.info(f"🔁 Profile {profile_id} status -> {status} by {user.id}")

        self.reconcile()
        self.feedback.success("User status updated successfully")
        return self.get(profile_id)

    def update_role(self, profile_id: str, role: str) -> ProfileRead:
        message = "Failed to update user role"
        user = self.require_user(message)
        self.scoped_update(user, profile_id, {"role": role}, message)
        logger.info(f"🔁 Profile {profile_id} role -> {role} by {user.id}")

        self.reconcile()
        self.feedback.success("User role updated successfully")
        return self.get(profile_id)
