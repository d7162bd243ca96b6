# services/workspace.py
from typing import Optional

from sqlmodel import Session

from core.store import Store
from services.clients import ClientsService
from services.companies import CompaniesService
from services.fanout import NotificationFanout
from services.feedback import Feedback
from services.identity import IdentityProvider
from services.issues import IssuesService
from services.notifications import NotificationsService
from services.pricing_requests import PricingRequestsService
from services.profiles import ProfilesService
from services.project_history import ProjectHistoryService
from services.projects import ProjectsService
from services.team_members import TeamMembersService


class Workspace:
    """
    Everything one caller works with: their identity, a feedback channel and
    one service per entity, all sharing a single store.
    """

    def __init__(self, store: Store, token: Optional[str] = None):
        self.store = store
        self.feedback = Feedback()
        self.identity = IdentityProvider(store, token, self.feedback)
        self.fanout = NotificationFanout(store)

        self.history = ProjectHistoryService(store, self.identity, self.feedback)
        self.projects = ProjectsService(store, self.identity, self.feedback, self.history, self.fanout)
        self.team_members = TeamMembersService(store, self.identity, self.feedback)
        self.issues = IssuesService(store, self.identity, self.feedback, self.fanout)
        self.clients = ClientsService(store, self.identity, self.feedback)
        self.notifications = NotificationsService(store, self.identity, self.feedback)
        self.companies = CompaniesService(store, self.identity, self.feedback)
        self.profiles = ProfilesService(store, self.identity, self.feedback)
        self.pricing_requests = PricingRequestsService(store, self.identity, self.feedback, self.fanout)

    @classmethod
    def for_session(cls, session: Session, token: Optional[str] = None) -> "Workspace":
        return cls(Store(session), token)

    @property
    def user(self):
        return self.identity.current_user()
