import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent  # go up to project root
env_path = BASE_DIR / ".env.development"

load_dotenv(env_path)

class Settings:
    MONGO_URI: str = os.getenv("MONGO_URI")
    MONGO_DB: str = os.getenv("MONGO_DB", "streamhost_db")

    # Mux
    MUX_WEBHOOK_SECRET: str = os.getenv("MUX_WEBHOOK_SECRET")
    MUX_WEBHOOK_TOLERANCE_SECONDS: int = int(os.getenv("MUX_WEBHOOK_TOLERANCE_SECONDS", "300"))
    MUX_TOKEN_ID: str = os.getenv("MUX_TOKEN_ID")
    MUX_TOKEN_SECRET: str = os.getenv("MUX_TOKEN_SECRET")
    MUX_API_BASE_URL: str = os.getenv("MUX_API_BASE_URL", "https://api.mux.com")
    MUX_IMAGE_BASE_URL: str = os.getenv("MUX_IMAGE_BASE_URL", "https://image.mux.com")
    UPLOAD_CORS_ORIGIN: str = os.getenv("UPLOAD_CORS_ORIGIN", "*")

    # Owned asset storage
    AWS_S3_BUCKET: str = os.getenv("AWS_S3_BUCKET")
    AWS_REGION: str = os.getenv("AWS_REGION")
    AWS_ACCESS_KEY_ID: str = os.getenv("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: str = os.getenv("AWS_SECRET_ACCESS_KEY")
    ASSET_PUBLIC_BASE_URL: str = os.getenv("ASSET_PUBLIC_BASE_URL")
    ASSET_MIRROR_TIMEOUT_SECONDS: float = float(os.getenv("ASSET_MIRROR_TIMEOUT_SECONDS", "10"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s")

settings = Settings()


def get_settings() -> Settings:
    return settings
