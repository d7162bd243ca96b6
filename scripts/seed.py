# scripts/seed.py

import os
import sys
import argparse

from dotenv import load_dotenv

# ✅ Load environment variables before settings are read
load_dotenv()

# Ensure root path for relative imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlmodel import Session

from core.database import create_db_and_tables, engine
from models.models import UserRole
from schemas.project_schema import ProjectCreate
from schemas.team_member_schema import TeamMemberCreate
from schemas.user_schema import RegistrationForm
from services.workspace import Workspace


def sign_in(session: Session, form: RegistrationForm) -> Workspace:
    """Register the account, or log into it when it already exists."""
    workspace = Workspace.for_session(session)
    if workspace.identity.register(form):
        print(f"✅ Registered {form.email} ({form.role})")
    elif not workspace.identity.login(form.email, form.password):
        raise SystemExit(f"❌ Could not sign in as {form.email}: {workspace.feedback.last_error}")
    return workspace


def seed_dev_data():
    """Seed development database with an admin, a demo company and its first project."""
    print("🌱 Seeding development data...")
    create_db_and_tables()

    with Session(engine) as session:
        # -----------------------------
        # 👑 Admin User
        # -----------------------------
        sign_in(session, RegistrationForm(
            email="admin@projecthub.dev", password="admin123", full_name="Admin User", role=UserRole.ADMIN.value,
        ))

        # -----------------------------
        # 🏢 Demo Company + owner
        # -----------------------------
        owner = sign_in(session, RegistrationForm(
            email="owner@demo.com", password="owner123", full_name="Demo Owner",
            role=UserRole.COMPANY.value, company_name="Demo Company",
        ))
        company_id = owner.identity.current_user().company_id

        # -----------------------------
        # 🤝 Client of the demo company
        # -----------------------------
        client = sign_in(session, RegistrationForm(
            email="client@demo.com", password="client123", full_name="Demo Client",
            role=UserRole.CLIENT.value, company_id=company_id,
        ))
        client_user = client.identity.current_user()

        # -----------------------------
        # 👥 Team member + project
        # -----------------------------
        owner.team_members.fetch()
        member = next((m for m in owner.team_members.items if m.email == "dev@demo.com"), None)
        if member is None:
            member = owner.team_members.create(TeamMemberCreate(
                name="Demo Developer", email="dev@demo.com", role="Developer", department="Engineering",
            ))

        owner.projects.fetch()
        if not any(p.name == "Website Redesign" for p in owner.projects.items):
            owner.projects.create(ProjectCreate(
                name="Website Redesign",
                description="Refresh the marketing site",
                client=client_user.name,
                client_id=client_user.id,
                assigned_to=[member.id],
            ))
            print("✅ Added demo project")

    print("🌱 Development data seeding complete.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the ProjectHub database.")
    parser.add_argument(
        "--env",
        choices=["dev"],
        default="dev",
        help="Select environment to seed",
    )
    args = parser.parse_args()

    if args.env == "dev":
        seed_dev_data()
