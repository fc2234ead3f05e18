"""
Initialize the database: create all tables.
Run with: python -m scripts.init_db
"""

import asyncio
from aish.config import get_settings
from aish.database import Database


async def init():
    settings = get_settings()
    db = Database(settings.database_url)
    print("Creating database tables...")
    await db.create_all()
    print("All tables created successfully.")
    await db.dispose()


if __name__ == "__main__":
    asyncio.run(init())
