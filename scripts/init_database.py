#!/usr/bin/env python3
"""
Initialize the MongoDB database.

Creates the indexes the Exercise Tracker API relies on (a unique index on
usernames and a user/date index for log queries). The API also does this
at startup unless MONGO_ENSURE_INDEXES is false; run this script when that
is disabled or as part of deployment.

Usage:
    python scripts/init_database.py            # create indexes
    python scripts/init_database.py status     # ping and show collection sizes

    # With environment file
    ENV_FILE=.env.production python scripts/init_database.py

Environment Variables:
    MONGO_URI - MongoDB connection string
    MONGO_DB_NAME - Database name (optional, defaults to the one in MONGO_URI)
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

# Configure logging for CLI output
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def load_environment() -> None:
    """Load variables from ENV_FILE (default .env) if it exists."""
    from dotenv import load_dotenv

    env_file = os.environ.get("ENV_FILE", ".env")
    env_path = project_root / env_file
    if env_path.exists():
        load_dotenv(env_path)
        logger.info(f"Loaded environment from: {env_path}")
    else:
        logger.info("No environment file found, using system environment variables")


async def init_indexes() -> int:
    """Create indexes. Returns a process exit code."""
    from app.core.config import Settings
    from app.core.db_client import MongoManager

    settings = Settings()
    manager = MongoManager(settings)
    await manager.connect()

    try:
        logger.info("=== MongoDB Initialization ===")
        if not await manager.test_connection():
            logger.error("Could not connect to MongoDB, check MONGO_URI")
            return 1

        try:
            await manager.ensure_indexes()
        except Exception as e:
            logger.error(f"Failed to create indexes: {e}")
            return 1

        logger.info(f"Indexes ready in database '{settings.mongo_database_name}'")
        return 0
    finally:
        await manager.close()


async def show_status() -> int:
    """Ping the server and report collection sizes."""
    from app.core.config import Settings
    from app.core.db_client import EXERCISES_COLLECTION, USERS_COLLECTION, MongoManager

    settings = Settings()
    manager = MongoManager(settings)
    database = await manager.connect()

    try:
        if not await manager.test_connection():
            logger.error("Could not connect to MongoDB")
            return 1

        logger.info(f"Database: {settings.mongo_database_name}")
        for name in (USERS_COLLECTION, EXERCISES_COLLECTION):
            count = await database[name].count_documents({})
            logger.info(f"  - {name}: {count} documents")
        return 0
    finally:
        await manager.close()


def main(argv=None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Initialize MongoDB for the Exercise Tracker API"
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="init",
        choices=["init", "status"],
        help="Command to run (default: init)"
    )

    args = parser.parse_args(argv)
    load_environment()

    if args.command == "status":
        return asyncio.run(show_status())
    return asyncio.run(init_indexes())


if __name__ == "__main__":
    sys.exit(main())
