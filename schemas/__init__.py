from .client_schema import ClientRead, ClientStatusUpdate
from .company_schema import CompanyCreate, CompanyRead, CompanyUpdate, SubscriptionUpdate, RenewRequest
from .contact_schema import ContactRequest, ContactResponse, ContactInfo
from .issue_schema import IssueCreate, IssueRead, IssueUpdate, IssueCommentRead, CommentCreate
from .notification_schema import NotificationCreate, NotificationRead
from .pricing_schema import PricingRequestCreate, PricingRequestRead, PricingDecision
from .project_schema import ProjectCreate, ProjectRead, ProjectUpdate, TeamAssignment, ProjectHistoryRead
from .team_member_schema import TeamMemberCreate, TeamMemberRead, TeamMemberUpdate
from .user_schema import (
    UserProfile, ProfileRead, ProfileStatusUpdate, ProfileRoleUpdate,
    RegistrationForm, UserLogin, ExternalIdentity, TokenResponse,
)

__all__ = [
    # Client
    "ClientRead", "ClientStatusUpdate",

    # Company
    "CompanyCreate", "CompanyRead", "CompanyUpdate", "SubscriptionUpdate", "RenewRequest",

    # Contact
    "ContactRequest", "ContactResponse", "ContactInfo",

    # Issue
    "IssueCreate", "IssueRead", "IssueUpdate", "IssueCommentRead", "CommentCreate",

    # Notification
    "NotificationCreate", "NotificationRead",

    # Pricing
    "PricingRequestCreate", "PricingRequestRead", "PricingDecision",

    # Project
    "ProjectCreate", "ProjectRead", "ProjectUpdate", "TeamAssignment", "ProjectHistoryRead",

    # Team member
    "TeamMemberCreate", "TeamMemberRead", "TeamMemberUpdate",

    # User
    "UserProfile", "ProfileRead", "ProfileStatusUpdate", "ProfileRoleUpdate",
    "RegistrationForm", "UserLogin", "ExternalIdentity", "TokenResponse",
]
