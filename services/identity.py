# services/identity.py
"""
Identity provider adapter: bearer-token sessions, the signed-in user's
profile and role-derived permissions.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional
import logging

from core.config import settings
from core.security import create_access_token, decode_token, hash_password, verify_password
from core.store import Store, StoreError, eq
from models.models import (
    ClientStatus, CompanyStatus, ProfileStatus, SubscriptionPlan, SubscriptionStatus, UserRole,
)
from schemas.user_schema import ExternalIdentity, RegistrationForm, UserProfile, display_name
from services.errors import ValidationFailed
from services.feedback import Feedback
from services.validation import validate_registration

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password. Please check your credentials."
DUPLICATE_EMAIL = "An account with this email already exists."
COMPANY_SETUP_FAILED = "Failed to create company. Please contact support."

ROLE_PERMISSIONS = {
    UserRole.ADMIN.value: ["read", "write", "delete", "manage"],
    UserRole.COMPANY.value: ["read", "write", "manage-team"],
    UserRole.CLIENT.value: ["read"],
}


def permissions_for_role(role: Optional[str]) -> List[str]:
    return list(ROLE_PERMISSIONS.get(role or "", ["read"]))


@dataclass
class AuthSession:
    access_token: str
    user_id: str
    email: str
    expires_at: Optional[datetime] = None


class IdentityProvider:
    def __init__(self, store: Store, token: Optional[str] = None, feedback: Optional[Feedback] = None):
        self.store = store
        self.token = token
        self.feedback = feedback or Feedback()
        self._user: Optional[UserProfile] = None
        self._user_loaded = False

    permissions_for_role = staticmethod(permissions_for_role)

    # ==========================================================
    # Session
    # ==========================================================
    def get_session(self) -> Optional[AuthSession]:
        if not self.token:
            return None
        payload = decode_token(self.token)
        if not payload or not payload.get("sub"):
            return None
        expires_at = datetime.utcfromtimestamp(payload["exp"]) if payload.get("exp") else None
        return AuthSession(
            access_token=self.token,
            user_id=payload["sub"],
            email=payload.get("email", ""),
            expires_at=expires_at,
        )

    def _start_session(self, user_id: str, email: str) -> AuthSession:
        self.token = create_access_token(
            data={"sub": user_id, "email": email},
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        self._user = None
        self._user_loaded = False
        try:
            self.store.update("auth_users", {"last_sign_in_at": datetime.utcnow()}, [eq("id", user_id)])
        except StoreError as e:
            logger.warning(f"⚠️ Could not record sign-in time for {email}: {e}")
        return self.get_session()

    def current_user(self) -> Optional[UserProfile]:
        """
        The signed-in user's profile, loaded once per provider.
        Any doubt (bad token, missing or inactive profile, store failure) yields None.
        """
        if self._user_loaded:
            return self._user

        session = self.get_session()
        if session is None:
            return None

        self._user_loaded = True
        try:
            rows = self.store.select("profiles", [eq("id", session.user_id)], order_by=None)
        except StoreError as e:
            logger.error(f"❌ Failed to load profile {session.user_id}: {e}")
            return None

        if not rows:
            logger.warning(f"⚠️ No profile for session user {session.user_id}")
            return None
        row = rows[0]
        if (row.get("status") or ProfileStatus.ACTIVE.value) != ProfileStatus.ACTIVE.value:
            logger.warning(f"⚠️ Profile {session.user_id} is {row.get('status')}; treating as signed out")
            return None

        self._user = UserProfile.from_row(row, permissions_for_role(row.get("role")))
        return self._user

    # ==========================================================
    # Login / logout
    # ==========================================================
    def login(self, email: str, password: str) -> bool:
        email = (email or "").strip().lower()
        try:
            rows = self.store.select("auth_users", [eq("email", email)], order_by=None)
        except StoreError as e:
            logger.error(f"❌ Login lookup failed for {email}: {e}")
            self.feedback.error(INVALID_CREDENTIALS)
            return False

        # unknown user and wrong password answer the same way
        if not rows or not verify_password(password or "", rows[0].get("password_hash")):
            logger.info(f"🔒 Rejected login for {email}")
            self.feedback.error(INVALID_CREDENTIALS)
            return False

        self._start_session(rows[0]["id"], email)
        logger.info(f"✅ Login successful for {email}")
        self.feedback.success("Welcome back!")
        return True

    def logout(self) -> None:
        self.token = None
        self._user = None
        self._user_loaded = False
        self.feedback.success("Logged out successfully")

    # ==========================================================
    # Registration
    # ==========================================================
    def register(self, form: RegistrationForm) -> bool:
        """
        Create credentials + profile, then the role's extra rows:
        a company account gets its companies row, a client joins the roster of
        the company they picked. Raises ValidationFailed before touching the store.
        """
        errors = validate_registration(form)
        if errors:
            raise ValidationFailed(errors)

        email = form.email.strip().lower()
        try:
            if self.store.select("auth_users", [eq("email", email)], columns="id", order_by=None):
                self.feedback.error(DUPLICATE_EMAIL)
                return False

            account = self.store.insert(
                "auth_users",
                {"email": email, "password_hash": hash_password(form.password), "provider": "email",
                 "user_metadata": {"full_name": form.full_name.strip(), "role": form.role}},
            )
            self.store.insert(
                "profiles",
                {
                    "id": account["id"],
                    "email": email,
                    "full_name": form.full_name.strip(),
                    "role": form.role,
                    "status": ProfileStatus.ACTIVE.value,
                    "company_id": form.company_id if form.role == UserRole.CLIENT.value else None,
                },
            )
        except StoreError as e:
            logger.error(f"❌ Registration failed for {email}: {e}")
            self.feedback.error("Failed to create account. Please try again.")
            return False

        if form.role == UserRole.COMPANY.value and not self._create_company(account["id"], email, form.company_name.strip()):
            return False
        if form.role == UserRole.CLIENT.value:
            self._join_client_roster(account["id"], email, form)

        self._start_session(account["id"], email)
        logger.info(f"✅ Registered {email} as {form.role}")
        self.feedback.success("Account created successfully!")
        return True

    def _create_company(self, user_id: str, email: str, name: str) -> bool:
        now = datetime.utcnow()
        trial_end = now + timedelta(days=settings.TRIAL_DAYS)
        try:
            company = self.store.insert(
                "companies",
                {
                    "name": name,
                    "email": email,
                    "status": CompanyStatus.ACTIVE.value,
                    "subscription_plan": SubscriptionPlan.TRIAL.value,
                    "subscription_status": SubscriptionStatus.TRIAL.value,
                    "subscription_end_date": trial_end,
                    "trial_start_date": now,
                    "trial_end_date": trial_end,
                },
            )
            self.store.update("profiles", {"company_id": company["id"], "company_name": name}, [eq("id", user_id)])
        except StoreError as e:
            logger.error(f"❌ Company setup failed for {email}: {e}")
            self.feedback.error(COMPANY_SETUP_FAILED)
            return False
        logger.info(f"🏢 Company '{name}' created for {email}")
        return True

    def _join_client_roster(self, user_id: str, email: str, form: RegistrationForm) -> None:
        try:
            self.store.insert(
                "clients",
                {
                    "full_name": form.full_name.strip(),
                    "email": email,
                    "status": ClientStatus.ACTIVE.value,
                    "company_id": form.company_id,
                    "user_id": user_id,
                },
            )
        except StoreError as e:
            # the account itself is usable; the company can add the client later
            logger.error(f"❌ Could not add {email} to client roster of {form.company_id}: {e}")

    # ==========================================================
    # External (OAuth) sign-in
    # ==========================================================
    def sign_in_external(self, identity: ExternalIdentity) -> bool:
        """
        Sign in with an identity vouched for by a third-party provider.
        First-time users get a client profile.
        """
        email = identity.email.lower()
        try:
            accounts = self.store.select("auth_users", [eq("email", email)], order_by=None)
            if accounts:
                account = accounts[0]
            else:
                account = self.store.insert(
                    "auth_users",
                    {"id": identity.id, "email": email, "provider": identity.provider,
                     "user_metadata": dict(identity.user_metadata)},
                )

            if not self.store.select("profiles", [eq("id", account["id"])], columns="id", order_by=None):
                metadata = identity.user_metadata or {}
                full_name = display_name(metadata.get("full_name") or metadata.get("name"), email)
                self.store.insert(
                    "profiles",
                    {
                        "id": account["id"],
                        "email": email,
                        "full_name": full_name,
                        "role": UserRole.CLIENT.value,
                        "status": ProfileStatus.ACTIVE.value,
                    },
                )
                logger.info(f"👤 Created client profile for {identity.provider} user {email}")
        except StoreError as e:
            logger.error(f"❌ External sign-in failed for {email}: {e}")
            self.feedback.error("Failed to sign in. Please try again.")
            return False

        self._start_session(account["id"], email)
        self.feedback.success("Welcome!")
        return True
