import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from backend.app.api.v1.router import api_router
from backend.app.config import get_settings
from backend.app.database import create_tables

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    create_tables()
    logger.info("Starting up budget engine...")
    yield
    logger.info("Shutting down budget engine...")

app = FastAPI(lifespan=lifespan)

# Include all API routes
app.include_router(api_router, prefix="/api/v1")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("backend.app.main:app", host="0.0.0.0", port=8000, reload=True)
