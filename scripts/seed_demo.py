"""
Seed a demo ashram with an admin, needs, an event and a verified vendor

Safe to run more than once: existing rows are left alone.

    python scripts/seed_demo.py
"""

import sys
import os
from datetime import timedelta
from decimal import Decimal

# Add project root to path
root_path = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, root_path)

from sqlmodel import Session, select
import structlog

from ashram_connect.core.auth import hash_password
from ashram_connect.core.clock import utc_now
from ashram_connect.core.database import engine, init_db
from ashram_connect.models import (
    AppRole, Ashram, AshramAdmin, ChildrenNeed, Event, FeedPost, NeedCategory,
    NeedUrgency, Product, Profile, User, UserRole, Vendor, VendorCategory
)

logger = structlog.get_logger(__name__)

DEMO_PASSWORD = "changeme123"


def get_or_create_user(session: Session, email: str, full_name: str, role: AppRole) -> User:
    user = session.exec(select(User).where(User.email == email)).first()
    if user:
        return user

    user = User(email=email, password_hash=hash_password(DEMO_PASSWORD))
    session.add(user)
    session.flush()
    session.add(Profile(user_id=user.id, full_name=full_name, email=email))
    session.add(UserRole(user_id=user.id, role=role))
    logger.info(f"Created {role.value} {email}")
    return user


def seed_demo(session: Session) -> dict:
    """Create the demo tenant and its content"""
    try:
        admin = get_or_create_user(session, "admin@ashramconnect.org", "Platform Admin", AppRole.ADMIN)
        warden = get_or_create_user(session, "warden@ashramconnect.org", "Sunrise Warden", AppRole.USER)
        vendor_owner = get_or_create_user(session, "kitchen@ashramconnect.org", "Annapurna Kitchen", AppRole.USER)

        ashram = session.exec(select(Ashram).where(Ashram.slug == "sunrise")).first()
        if ashram:
            logger.info("Demo ashram already present, nothing to do")
            session.commit()
            return {"created": False, "ashram_id": str(ashram.id)}

        ashram = Ashram(
            name="Sunrise Children's Ashram",
            slug="sunrise",
            description="Home to 60 children in the hills above Pune",
            city="Pune",
            state="Maharashtra",
            primary_color="#f97316",
            secondary_color="#fde68a",
            accent_color="#16a34a",
        )
        session.add(ashram)
        session.flush()

        session.add(AshramAdmin(ashram_id=ashram.id, user_id=warden.id))

        session.add_all([
            ChildrenNeed(
                ashram_id=ashram.id,
                title="School notebooks",
                category=NeedCategory.EDUCATION,
                urgency=NeedUrgency.HIGH,
                quantity_needed=50,
                quantity_fulfilled=30,
                created_by=admin.id,
            ),
            ChildrenNeed(
                ashram_id=ashram.id,
                title="Winter blankets",
                category=NeedCategory.CLOTHING,
                urgency=NeedUrgency.CRITICAL,
                quantity_needed=60,
                estimated_cost=Decimal("36000.00"),
                created_by=admin.id,
            ),
            ChildrenNeed(
                ashram_id=ashram.id,
                title="Monthly rice supply",
                category=NeedCategory.FOOD,
                urgency=NeedUrgency.MEDIUM,
                quantity_needed=200,
                quantity_fulfilled=120,
                created_by=admin.id,
            ),
        ])

        session.add(Event(
            ashram_id=ashram.id,
            title="Annual Sports Day",
            event_date=utc_now() + timedelta(days=21),
            location="Ashram grounds",
            created_by=admin.id,
        ))

        session.add(FeedPost(
            ashram_id=ashram.id,
            title="New library corner",
            content="Thanks to our donors the children now have a reading corner.",
            created_by=admin.id,
        ))

        vendor = Vendor(
            user_id=vendor_owner.id,
            ashram_id=ashram.id,
            business_name="Annapurna Kitchen",
            category=VendorCategory.CLOUD_KITCHEN,
            charity_percentage=15,
            is_verified=True,
        )
        session.add(vendor)
        session.flush()
        session.add(Product(vendor_id=vendor.id, name="Veg Thali", price=Decimal("180.00")))

        session.commit()
        logger.info(f"Seeded demo ashram {ashram.id}")
        return {"created": True, "ashram_id": str(ashram.id)}

    except Exception as e:
        session.rollback()
        logger.error(f"Error seeding demo data: {e}")
        raise


def main():
    """Main entry point for the seed job"""
    logger.info("Starting demo seed")

    try:
        init_db()
        with Session(engine) as session:
            results = seed_demo(session)
        logger.info(f"Demo seed complete: {results}")

    except Exception as e:
        logger.error(f"Fatal error seeding demo data: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
