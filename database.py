import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from config import Settings

logger = logging.getLogger(__name__)

USERS = "users"
EMPLOYEES = "employees"


def connect(settings: Settings) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(settings.MONGO_URI, tz_aware=True)


def get_database(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    return client[settings.MONGO_DB]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the unique email indexes that back the duplicate checks."""
    for name in (USERS, EMPLOYEES):
        await db[name].create_index([("email", ASCENDING)], unique=True)
    await db[EMPLOYEES].create_index([("created_at", ASCENDING)])
    logger.info("MongoDB indexes ensured on '%s' and '%s'", USERS, EMPLOYEES)
