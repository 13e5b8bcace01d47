"""Seed demo data: one HQ admin, two JVs with a partner each, a few pool candidates."""

import os
from datetime import datetime

from sqlalchemy import func, select

from talentbridge import db
from talentbridge.models import Candidate, CandidateStatus, JointVenture, User, UserRole
from talentbridge.services.auth_service import AuthService
from config.settings import settings

DEMO_JVS = [
    ("TechCorp", "partner@techcorp.com"),
    ("SalesForce", "partner@salesforce.com"),
]

DEMO_CANDIDATES = [
    {
        "name": "Alice Wong",
        "email": "alice@example.com",
        "function_role": "Product Manager",
        "status": CandidateStatus.READY,
        "tags": ["Product", "SaaS"],
        "interview_notes": "Strong cross-functional experience",
    },
    {
        "name": "Ben Tan",
        "email": "ben@example.com",
        "function_role": "Sales Lead",
        "status": CandidateStatus.INTERVIEWING,
        "tags": ["Sales", "APAC"],
        "interview_notes": "Need comp alignment",
    },
]


def seed_demo_data(admin_email=None, password=None):
    """
    Seed demo users, JVs and candidates.

    Skipped entirely when an HQ admin already exists.

    Returns:
        True if data was created
    """
    admin_email = admin_email or os.getenv("DEFAULT_HQ_ADMIN_EMAIL", "admin@hq.com")
    password = password or settings.seed_password  # Change in production!

    print("Seeding demo data...")

    admin_count = db.session.scalar(
        select(func.count(User.id)).where(User.role == UserRole.HQ_ADMIN)
    )
    if admin_count:
        print("  ⏭️  Skipped: an HQ admin already exists")
        return False

    password_hash = AuthService.hash_password(password)

    db.session.add(User(
        email=admin_email,
        password_hash=password_hash,
        name="HQ Admin",
        role=UserRole.HQ_ADMIN,
        is_active=True,
    ))

    for jv_name, partner_email in DEMO_JVS:
        jv = JointVenture(name=jv_name)
        db.session.add(jv)
        db.session.flush()
        db.session.add(User(
            email=partner_email,
            password_hash=password_hash,
            name=f"{jv_name} Partner",
            role=UserRole.JV_PARTNER,
            jv_id=jv.id,
            is_active=True,
        ))
        print(f"  ✅ Created JV {jv_name} with partner {partner_email}")

    now = datetime.utcnow()
    for fields in DEMO_CANDIDATES:
        db.session.add(Candidate(**fields, last_status_update=now))

    db.session.commit()

    print(f"  ✅ Created HQ admin: {admin_email}")
    print(f"  ✅ Created {len(DEMO_CANDIDATES)} candidates")
    print(f"  🔑 Password for all demo users: {password}")
    print("  ⚠️  IMPORTANT: Change the passwords after first login!")
    return True


if __name__ == "__main__":
    from talentbridge import create_app

    app = create_app()
    with app.app_context():
        seed_demo_data()
