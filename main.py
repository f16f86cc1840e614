from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
from src.core.config import settings
from src.core.database import connect_to_mongo, close_mongo_connection
from src.core.logging import configure_logging
from src.api.routes_videos import router as videos_router
from src.api.routes_webhooks import router as webhooks_router

configure_logging(settings)

app = FastAPI(title="streamhost")

@app.on_event("startup")
async def startup_event():
    await connect_to_mongo()

@app.on_event("shutdown")
async def shutdown_event():
    await close_mongo_connection()

app.include_router(webhooks_router, prefix="/videos", tags=["webhooks"])
app.include_router(videos_router, prefix="/videos", tags=["videos"])

# Allow CORS (for frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Replace with your frontend URL in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"message": "Hello World"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("main:app", host="0.0.0.0", port=port)
