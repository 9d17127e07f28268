"""
Database connectivity and row count check
"""
import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loguru import logger
from sqlalchemy import func, select

from hrms.core.config import Settings
from hrms.db.database import Database
from hrms.db.models import AuditLog, Employee, EmployeeTeam, Organisation, Team, User

TABLES = [
    ("Organisations", Organisation),
    ("Users", User),
    ("Employees", Employee),
    ("Teams", Team),
    ("Team memberships", EmployeeTeam),
    ("Audit log entries", AuditLog),
]


async def check_database():
    """Check database connectivity and table status"""
    database = Database(Settings())
    logger.info("Checking database connectivity...")

    try:
        await database.ping()
        logger.info("Database connection successful")

        async with database.session_factory() as db:
            logger.info("Database statistics:")
            for label, model in TABLES:
                count = await db.scalar(select(func.count()).select_from(model))
                logger.info(f"   {label}: {count}")

    except Exception as e:
        logger.error(f"Database check failed: {e}")
        raise
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(check_database())
