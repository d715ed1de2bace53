"""
Database Seeding Script for the landing analytics API
Creates demo content and synthetic traffic for dashboard development
"""

import argparse
import asyncio
import random
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.config import settings
from app.core.database import Base
from app.models import AnalyticsEvent, EventType, SiteContent


# Database configuration
engine = create_async_engine(settings.DATABASE_URL, echo=False)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

SEED_DAYS = 30

LOCATIONS = [
    ("Sao Paulo", "SP", "Brazil"),
    ("Campinas", "SP", "Brazil"),
    ("Rio de Janeiro", "RJ", "Brazil"),
    ("Belo Horizonte", "MG", "Brazil"),
    ("Recife", "PE", "Brazil"),
    ("Lisbon", "11", "Portugal"),
    (None, None, None),
]

SOURCES = ["google", "instagram", "facebook", "tiktok", None]

# Relative weight of each event type in generated traffic
TRAFFIC_MIX = {
    EventType.VISIT: 20,
    EventType.CLICK_WHATSAPP: 4,
    EventType.CLICK_PLAYSTORE: 3,
    EventType.CLICK_APPSTORE: 2,
}


async def create_tables(reset: bool):
    """Create all database tables, dropping them first when reset is requested"""
    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    print("[OK] Database tables ready")


async def create_content(session: AsyncSession):
    """Create sample landing page content"""
    items = [
        SiteContent(section="hero", type="text", title="Download the app", content="Book in two taps.", order=0),
        SiteContent(section="hero", type="text", title="Talk to us", content="We answer on WhatsApp.", order=1),
        SiteContent(section="video", type="youtube", title="How it works", url="dQw4w9WgXcQ", order=0),
        SiteContent(section="faq", type="text", title="Is it free?", content="Yes.", order=0, is_active=False),
    ]
    session.add_all(items)
    await session.flush()
    print(f"[OK] Created {len(items)} content items")


async def create_events(session: AsyncSession, rng: random.Random):
    """Create synthetic visits and clicks spread over the last SEED_DAYS days"""
    now = datetime.now(timezone.utc)
    types = list(TRAFFIC_MIX)
    weights = list(TRAFFIC_MIX.values())

    events = []
    for day in range(SEED_DAYS):
        for _ in range(rng.randint(5, 40)):
            city, region, country = rng.choice(LOCATIONS)
            events.append(AnalyticsEvent(
                type=rng.choices(types, weights=weights)[0],
                date=now - timedelta(days=day, seconds=rng.randint(0, 86399)),
                user_agent="seed-script",
                city=city,
                region=region,
                country=country,
                utm_source=rng.choice(SOURCES),
            ))

    session.add_all(events)
    await session.flush()
    print(f"[OK] Created {len(events)} analytics events")


async def seed_database(reset: bool = False, seed: int = 42):
    """Main seeding function"""
    print("\n>>> Starting database seeding...")

    await create_tables(reset)

    async with AsyncSessionLocal() as session:
        try:
            await create_content(session)
            await create_events(session, random.Random(seed))

            await session.commit()
            print("\n[OK] Database seeding completed successfully!")

        except Exception as e:
            await session.rollback()
            print(f"\n[ERROR] Error during seeding: {e}")
            raise

    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the landing analytics database")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
    parser.add_argument("--seed", type=int, default=42, help="random seed for generated traffic")
    args = parser.parse_args()

    asyncio.run(seed_database(reset=args.reset, seed=args.seed))
