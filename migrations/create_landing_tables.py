"""
Migration to create the landing analytics tables
"""

import asyncio
from sqlalchemy import text

from app.core.database import Base, engine, async_session
from app.models import AnalyticsEvent, IntegrationConfig, SiteContent

TABLES = [AnalyticsEvent.__table__, SiteContent.__table__, IntegrationConfig.__table__]


async def create_tables():
    """Create the analytics, content and integration tables if they don't exist"""
    try:
        print("Creating landing analytics tables...")

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, tables=TABLES)

        print("[OK] Tables created")

    except Exception as e:
        print(f"[ERROR] Error creating tables: {e}")
        raise


async def verify_tables():
    """Verify that every table exists and is queryable"""
    async with async_session() as session:
        for table in TABLES:
            result = await session.execute(text(f"SELECT COUNT(*) FROM {table.name}"))
            print(f"[OK] {table.name} verified - current record count: {result.scalar()}")


async def main():
    print("Starting landing analytics migration...")

    await create_tables()
    await verify_tables()
    await engine.dispose()

    print("Migration completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
