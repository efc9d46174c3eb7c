"""
Database Seed Data Module

Loads the demo fixtures (the same records mock mode serves) into the
configured database.
Run with: python -m app.db.seed_data [clear]
"""
import asyncio
from typing import Dict

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import init_db, session_scope
from app.db.fixtures import build_fixtures
from app.models import MODEL_FOR_ENTITY
from app.models.enums import Entity

# Insert order; profiles first since every other table points at them
SEED_ORDER = [
    Entity.PROFILES,
    Entity.CERTIFICATES,
    Entity.ACTIVITIES,
    Entity.ACADEMIC_RECORDS,
    Entity.NOTIFICATIONS,
    Entity.INSTITUTIONAL_REPORTS,
]


async def is_seeded(db: AsyncSession) -> bool:
    model = MODEL_FOR_ENTITY[Entity.PROFILES]
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one() > 0


async def seed_fixtures(db: AsyncSession) -> Dict[str, int]:
    """Add every fixture record to the session; returns counts per table"""
    fixtures = build_fixtures()
    counts: Dict[str, int] = {}
    for entity in SEED_ORDER:
        model = MODEL_FOR_ENTITY[entity]
        records = fixtures.get(entity, [])
        db.add_all(model(**record) for record in records)
        await db.flush()
        counts[entity.value] = len(records)
    return counts


async def seed_all():
    """Create tables and seed the demo records unless data already exists"""
    print("Creating tables...")
    await init_db()

    async with session_scope() as db:
        if await is_seeded(db):
            print("Database already has profiles, skipping seed")
            return
        counts = await seed_fixtures(db)

    print("=" * 50)
    for table, count in counts.items():
        print(f"  {table}: {count}")
    print("Database seeding completed successfully!")
    print("=" * 50)


async def clear_all():
    """Clear all data from database"""
    print("Clearing all data...")
    async with session_scope() as db:
        # Delete in reverse order of dependencies
        for entity in reversed(SEED_ORDER):
            await db.execute(delete(MODEL_FOR_ENTITY[entity]))
        print("All data cleared!")


def main():
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "clear":
        asyncio.run(clear_all())
    else:
        asyncio.run(seed_all())


if __name__ == "__main__":
    main()
