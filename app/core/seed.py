"""Seed a demo catalogue (branches, categories, services) on app startup.

Only runs when ``SEED_DEMO_DATA`` is enabled and the branches table is empty.
"""

import logging
from sqlalchemy import func, select
from app.core.database import async_session
from app.models.branch import Branch
from app.models.service import BranchService, Service, ServiceCategory

logger = logging.getLogger(__name__)

DEMO_BRANCHES = [
    {
        "name": "Jubilee Hills - Hyderabad",
        "code": "HYD-JH-001",
        "address": "Plot No. 123, Road No. 36, Jubilee Hills",
        "city": "Hyderabad",
        "state": "Telangana",
        "pincode": "500033",
        "phone": "+914040123456",
        "latitude": 17.4326,
        "longitude": 78.4071,
    },
    {
        "name": "Vizag - Visakhapatnam",
        "code": "VSP-001",
        "address": "12-34-567, Dwaraka Nagar Main Road, Visakhapatnam",
        "city": "Visakhapatnam",
        "state": "Andhra Pradesh",
        "pincode": "530016",
        "phone": "+918912345678",
        "latitude": 17.7231,
        "longitude": 83.3012,
    },
]

DEMO_CATEGORIES = {
    "weight-loss": ("Weight Loss", "Non-surgical slimming treatments and body contouring"),
    "skin-care": ("Skin Care", "Facial treatments, laser therapy and skin rejuvenation"),
    "hair-care": ("Hair Care", "Hair restoration, PRP therapy and scalp treatments"),
}

# (category slug, name, slug, duration, price, discount price, popular)
DEMO_SERVICES = [
    ("weight-loss", "CoolSculpting - Fat Freezing", "coolsculpting-fat-freezing", 60, 25000, 22000, True),
    ("weight-loss", "Ultrasound Cavitation", "ultrasound-cavitation", 45, 8000, 6500, True),
    ("skin-care", "Hydrafacial", "hydrafacial", 60, 6000, None, True),
    ("skin-care", "Laser Hair Removal", "laser-hair-removal", 30, 4000, 3500, False),
    ("hair-care", "PRP Hair Therapy", "prp-hair-therapy", 60, 9000, 7500, False),
]


async def seed_demo_catalog():
    """Create demo branches and services if the database has none."""
    async with async_session() as db:
        try:
            existing = (await db.execute(select(func.count(Branch.id)))).scalar()
            if existing:
                logger.info("Catalogue already present (%s branches), skipping demo seed", existing)
                return

            branches = [Branch(**data) for data in DEMO_BRANCHES]
            db.add_all(branches)

            categories = {}
            for sort_order, (slug, (name, description)) in enumerate(DEMO_CATEGORIES.items(), start=1):
                categories[slug] = ServiceCategory(
                    name=name, slug=slug, description=description, sort_order=sort_order
                )
            db.add_all(categories.values())
            await db.flush()

            for category_slug, name, slug, duration, price, discount_price, popular in DEMO_SERVICES:
                service = Service(
                    name=name,
                    slug=slug,
                    description=name,
                    duration=duration,
                    price=price,
                    discount_price=discount_price,
                    is_popular=popular,
                    category_id=categories[category_slug].id,
                )
                db.add(service)
                await db.flush()
                db.add_all(BranchService(branch_id=b.id, service_id=service.id) for b in branches)

            await db.commit()
            logger.info(
                "Demo catalogue created: %d branches, %d services", len(branches), len(DEMO_SERVICES)
            )

        except Exception as e:
            logger.error("Failed to seed demo catalogue: %s", e)
            await db.rollback()
