"""
Database setup script - create tables, the default admin and sample clients
"""
import asyncio
from logitrack.config import get_settings
from logitrack.database import AsyncSessionLocal, create_tables, engine
from logitrack.services.seed import seed_defaults
from logitrack.services.storage import Storage

settings = get_settings()


async def setup_database():
    """Create tables and seed initial data"""
    print("Creating database tables...")
    await create_tables()
    print("Tables created")

    async with AsyncSessionLocal() as session:
        await seed_defaults(Storage(session), sample_data=True)
    print("Seed data created")

    await engine.dispose()

    print("\nDatabase setup complete!")
    print("\nDefault login:")
    print(f"  Username: {settings.DEFAULT_ADMIN_USERNAME}")
    print(f"  Password: {settings.DEFAULT_ADMIN_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(setup_database())
