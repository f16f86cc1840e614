import logging

from motor.motor_asyncio import AsyncIOMotorClient
from .config import settings

logger = logging.getLogger(__name__)

class MongoDB:
    client: AsyncIOMotorClient = None
    db = None

mongodb = MongoDB()

async def connect_to_mongo():
    mongodb.client = AsyncIOMotorClient(settings.MONGO_URI)
    mongodb.db = mongodb.client[settings.MONGO_DB]
    await ensure_indexes()
    logger.info("Connected to MongoDB: %s", settings.MONGO_DB)

async def ensure_indexes():
    videos = mongodb.db["videos"]
    await videos.create_index("mux_upload_id", unique=True)
    await videos.create_index(
        "mux_asset_id",
        unique=True,
        partialFilterExpression={"mux_asset_id": {"$type": "string"}},
    )

async def close_mongo_connection():
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("MongoDB connection closed")
