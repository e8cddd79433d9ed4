import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from database.database import db_manager
from routers import router
from utils.constants import ENVIRONMENT

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler()
    ],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info("Starting application...")

    try:
        await db_manager.create_tables()
        logger.info("Database initialization completed successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    yield

    logger.info("Shutting down application...")
    try:
        await asyncio.wait_for(db_manager.close(), timeout=5.0)
        logger.info("Database connections closed successfully")
    except asyncio.TimeoutError:
        logger.warning("Database close timed out - forcing shutdown")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")

    logger.info("Application shutdown completed")


app = FastAPI(
    title="Ledgerly API",
    description="Small-business bookkeeping from plain-language transaction descriptions",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def read_root() -> dict:
    return {"message": "Ledgerly API"}


@app.get("/health")
async def health_check():
    """Health check with database connectivity test."""
    db_status = "unknown"
    try:
        async for db in db_manager.get_session():
            result = await db.execute(text("SELECT 1"))
            db_status = "connected" if result else "disconnected"
            break
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "error"

    return {
        "status": "healthy",
        "database": db_status,
        "environment": ENVIRONMENT,
    }
