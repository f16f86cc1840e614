from src.core.database import mongodb

VIDEOS_COLLECTION = "videos"


def get_videos_collection():
    if mongodb.db is None:
        raise RuntimeError("MongoDB not initialized")
    return mongodb.db[VIDEOS_COLLECTION]
