# services/base.py
"""
Shared plumbing for the entity services.

Each service keeps the caller's view of one table in `items`. Mutations go
to the store first, then the local collection is patched (optimistic state),
then one reconciling fetch replaces it with what the store now holds.
"""
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar
import logging

from pydantic import BaseModel

from core.store import FilterLike, Store, StoreError, eq
from schemas.user_schema import UserProfile
from services.errors import NotAuthenticated, OperationFailed
from services.feedback import Feedback

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


# ========================================
# 🧮 Pure collection helpers
# ========================================
def apply_patch(items: Sequence[R], item_id: str, patch: Dict[str, Any]) -> List[R]:
    """Return a new list where the item with `item_id` carries `patch`. Unknown keys are ignored."""
    patched = []
    for item in items:
        if getattr(item, "id", None) == item_id:
            known = {k: v for k, v in patch.items() if k in type(item).model_fields}
            item = item.model_copy(update=known)
        patched.append(item)
    return patched


def append_item(items: Sequence[R], item: R) -> List[R]:
    """New items go first: collections are ordered newest first."""
    return [item] + [i for i in items if getattr(i, "id", None) != getattr(item, "id", None)]


def remove_item(items: Sequence[R], item_id: str) -> List[R]:
    return [i for i in items if getattr(i, "id", None) != item_id]


# ========================================
# 🧱 Base service
# ========================================
class EntityService(Generic[R]):
    table: str = ""
    entity: str = ""  # plural label used in feedback, e.g. "projects"
    record: type = BaseModel

    def __init__(self, store: Store, identity, feedback: Feedback):
        self.store = store
        self.identity = identity
        self.feedback = feedback
        self.items: List[R] = []
        self.last_fetch_failed = False

    # ---------- scope ----------
    def scope(self, user: UserProfile) -> Optional[List[FilterLike]]:
        """
        Filters limiting what `user` may read. [] means unfiltered, None means
        nothing is visible.
        """
        return None

    def write_scope(self, user: UserProfile) -> Optional[List[FilterLike]]:
        return self.scope(user)

    # ---------- reading ----------
    def load(self, user: UserProfile) -> List[R]:
        filters = self.scope(user)
        if filters is None:
            return []
        rows = self.store.select(self.table, filters)
        return [self.record.from_row(row) for row in rows]

    def fetch(self, notify: bool = True) -> List[R]:
        user = self.identity.current_user()
        if user is None:
            return self.items

        try:
            self.items = self.load(user)
        except StoreError as e:
            logger.error(f"❌ Failed to fetch {self.entity} for {user.id}: {e}")
            self.last_fetch_failed = True
            if notify:
                self.feedback.error(f"Failed to fetch {self.entity}")
            return self.items

        self.last_fetch_failed = False
        return self.items

    def reconcile(self) -> List[R]:
        """Refetch after a write; a failure here leaves the optimistic state in place."""
        return self.fetch(notify=False)

    def get(self, item_id: str) -> Optional[R]:
        return next((item for item in self.items if item.id == item_id), None)

    # ---------- failure helpers ----------
    def fail(self, message: str, error: Optional[Exception] = None) -> OperationFailed:
        if error is not None:
            logger.error(f"❌ {message}: {error}")
        else:
            logger.warning(f"⚠️ {message}")
        self.feedback.error(message)
        return OperationFailed(message)

    def require_user(self, message: str) -> UserProfile:
        user = self.identity.current_user()
        if user is None:
            logger.warning(f"⚠️ {message}: no signed-in user")
            self.feedback.error(message)
            raise NotAuthenticated(message)
        return user

    def run(self, message: str, call: Callable[[], Any]) -> Any:
        """Run one store call, turning a StoreError into OperationFailed(message)."""
        try:
            return call()
        except StoreError as e:
            raise self.fail(message, e) from e

    # ---------- scoped writes ----------
    def scoped_row(self, user: UserProfile, item_id: str, message: str) -> Dict[str, Any]:
        """The row `item_id` if `user` may write it, else OperationFailed(message)."""
        filters = self.run(message, lambda: self.write_scope(user))
        if filters is None:
            raise self.fail(message)
        rows = self.run(message, lambda: self.store.select(self.table, [eq("id", item_id)] + filters, order_by=None))
        if not rows:
            raise self.fail(message)
        return rows[0]

    def scoped_update(self, user: UserProfile, item_id: str, patch: Dict[str, Any], message: str) -> int:
        filters = self.run(message, lambda: self.write_scope(user))
        if filters is None:
            raise self.fail(message)
        count = self.run(message, lambda: self.store.update(self.table, patch, [eq("id", item_id)] + filters))
        if not count:
            raise self.fail(message)
        self.items = apply_patch(self.items, item_id, patch)
        return count

    def scoped_delete(self, user: UserProfile, item_id: str, message: str) -> int:
        filters = self.run(message, lambda: self.write_scope(user))
        if filters is None:
            raise self.fail(message)
        count = self.run(message, lambda: self.store.delete(self.table, [eq("id", item_id)] + filters))
        if not count:
            raise self.fail(message)
        self.items = remove_item(self.items, item_id)
        return count
