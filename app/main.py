"""FastAPI Application Entry Point.

Exercise tracker API built with FastAPI, featuring:
- User creation and listing
- Exercise logging per user
- Date-filtered, limited exercise logs (MongoDB storage)
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.logging import configure_logging, setup_request_logging, get_logger
from app.core.exceptions import setup_exception_handlers
from app.core.db_client import MongoManager
from app.core.middleware import setup_all_middleware

# Configure logging first
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info(
        "Starting application",
        project_name=settings.PROJECT_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
    )

    mongo = MongoManager(settings)
    await mongo.connect()
    app.state.mongo = mongo

    startup_tasks = []
    if await mongo.test_connection():
        startup_tasks.append("MongoDB connected")
        if settings.MONGO_ENSURE_INDEXES:
            try:
                await mongo.ensure_indexes()
                startup_tasks.append("Indexes ensured")
            except Exception as e:
                logger.error("Failed to create indexes", error=str(e))
                if settings.is_production:
                    await mongo.close()
                    raise
                logger.warning("Indexes will be created on first request")
    else:
        logger.warning("MongoDB connection test failed")
        if settings.is_production:
            await mongo.close()
            raise RuntimeError("MongoDB is not reachable")
        if settings.MONGO_ENSURE_INDEXES:
            logger.warning("Indexes will be created on first request")

    logger.info("Application startup completed", tasks=startup_tasks)

    yield

    logger.info("Shutting down application")
    await mongo.close()
    logger.info("Application shutdown completed")


API_DESCRIPTION = """# Exercise Tracker API

## Overview
Create users, log exercises against them and read back each user's
exercise log, optionally bounded by date and limited in length.

## Errors
Invalid input and unknown users are answered with **HTTP 200** and a body
of the form `{"error": "..."}`. Store failures return HTTP 500 with the
same body shape.
"""

# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=API_DESCRIPTION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
    license_info={
        "name": "MIT License",
        "url": "https://opensource.org/licenses/MIT",
    },
)

setup_all_middleware(app)

setup_exception_handlers(app)

setup_request_logging(app)


# Include health router (root level endpoints)
from app.api.health import router as health_router, static_dir

app.include_router(health_router)

from app.api.users import router as users_router
from app.api.exercises import router as exercises_router

app.include_router(users_router, prefix="/api", tags=["Users"])
app.include_router(exercises_router, prefix="/api", tags=["Exercises"])

app.mount(
    "/public",
    StaticFiles(directory=static_dir(), check_dir=False),
    name="public",
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
    )
