"""
Seed script to create a demo broker with sample Rajkot listings.

Run with: python -m scripts.seed_properties
"""
import asyncio
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select, func

from app.database import async_session_maker, init_db, close_db
from app.models import Broker, Property, PropertyOwner, PropertyType, PropertyStatus, FurnishedStatus
from app.services.activity_log import describe_property_created
from app.models.property_log import PropertyLog, LogAction
from app.services.auth import get_password_hash


# Demo broker credentials
DEMO_NAME = "Demo Broker"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "DemoPassword123"


SAMPLE_PROPERTIES = [
    {
        "property_type": PropertyType.PLOT,
        "status": PropertyStatus.AVAILABLE,
        "city": "Rajkot",
        "area": "Kalawad Road",
        "locality": "Near Sahajanand Society",
        "address": "Plot No 45, Kalawad Road, Rajkot",
        "lat": 22.264308,
        "lng": 70.717853,
        "total_price": 6000000,
        "price_per_sqft": 3000,
        "plot_area": 2000,
        "survey_no": "S-234",
        "notes": "Corner plot, main road facing, good for construction",
        "owner": ("Ramesh Patel", "9876543210"),
    },
    {
        "property_type": PropertyType.AGRICULTURE,
        "status": PropertyStatus.AVAILABLE,
        "city": "Rajkot",
        "area": "Gondal Road",
        "address": "Survey No 789, Gondal Road, Rajkot",
        "lat": 22.267897,
        "lng": 70.740907,
        "total_price": 12000000,
        "plot_area": 10000,
        "survey_no": "AG-789",
        "notes": "Agriculture land, bore well available, canal nearby",
        "owner": ("Bharat Virani", "9825012345"),
    },
    {
        "property_type": PropertyType.RESIDENTIAL,
        "status": PropertyStatus.RENTED,
        "city": "Rajkot",
        "area": "Gondal Road",
        "locality": "Krishna Residency",
        "address": "Flat 502, Krishna Residency, Gondal Road, Rajkot",
        "lat": 22.261826,
        "lng": 70.739878,
        "total_price": 5500000,
        "built_up_area": 1200,
        "carpet_area": 950,
        "bhk": 2,
        "furnished_status": FurnishedStatus.FURNISHED,
        "floor_number": 5,
        "total_floors": 9,
        "notes": "2BHK fully furnished flat, currently rented at 15k/month, lift, gym",
        "owner": ("Nisha Sharma", "9812345678"),
    },
    {
        "property_type": PropertyType.RESIDENTIAL,
        "status": PropertyStatus.AVAILABLE,
        "city": "Rajkot",
        "area": "150 Feet Ring Road",
        "locality": "RK Prime",
        "address": "Flat 1302, RK Prime, 150 Feet Ring Road, Rajkot",
        "lat": 22.275567,
        "lng": 70.778880,
        "total_price": 9500000,
        "built_up_area": 1950,
        "carpet_area": 1600,
        "bhk": 3,
        "furnished_status": FurnishedStatus.SEMI_FURNISHED,
        "floor_number": 13,
        "total_floors": 15,
        "notes": "3BHK in premium tower, 13th floor city view, modular kitchen",
        "owner": ("Vijay Kothari", "9867890123"),
    },
    {
        "property_type": PropertyType.COMMERCIAL,
        "status": PropertyStatus.AVAILABLE,
        "city": "Rajkot",
        "area": "Nana Mava Road",
        "locality": "Jai Bhimnagar",
        "address": "Shop No 7, Nana Mava Main Road, Rajkot",
        "lat": 22.269706,
        "lng": 70.760536,
        "total_price": 3500000,
        "built_up_area": 400,
        "carpet_area": 350,
        "notes": "Ground floor shop on main road, high footfall, good for retail",
        "owner": ("Mahesh Bhai", "9845678901"),
    },
]


async def seed_properties():
    """Create the demo broker (if missing) and seed listings for an empty portfolio"""
    await init_db()

    async with async_session_maker() as session:
        result = await session.execute(select(Broker).where(Broker.email == DEMO_EMAIL))
        broker = result.scalar_one_or_none()

        if not broker:
            broker = Broker(
                name=DEMO_NAME,
                email=DEMO_EMAIL,
                hashed_password=get_password_hash(DEMO_PASSWORD),
            )
            session.add(broker)
            await session.commit()
            await session.refresh(broker)
            print(f"Created broker {DEMO_EMAIL} / {DEMO_PASSWORD}")

        existing = await session.scalar(
            select(func.count()).select_from(Property).where(Property.broker_id == broker.id)
        )
        if existing:
            print(f"Broker already has {existing} properties, skipping seed")
            return

        for sample in SAMPLE_PROPERTIES:
            data = dict(sample)
            owner_name, phone_number = data.pop("owner")

            prop = Property(**data, broker_id=broker.id)
            session.add(prop)
            await session.flush()

            session.add(PropertyOwner(
                property_id=prop.id,
                broker_id=broker.id,
                owner_name=owner_name,
                phone_number=phone_number,
                is_current_owner=True,
            ))
            session.add(PropertyLog(
                property_id=prop.id,
                broker_id=broker.id,
                action=LogAction.CREATED,
                description=describe_property_created(data),
            ))
            print(f"  + {prop.property_type.value:<12} {prop.address}")

        await session.commit()

        print(f"\n{'='*50}")
        print(f"Seeded {len(SAMPLE_PROPERTIES)} properties for {DEMO_EMAIL}")
        print(f"{'='*50}\n")


async def main():
    try:
        await seed_properties()
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
