import logging

from tortoise import Tortoise

from app.core.config import TORTOISE_ORM

logger = logging.getLogger(__name__)


async def init_db(config: dict = TORTOISE_ORM) -> None:
    """Initialize Tortoise ORM and its connection pool."""
    await Tortoise.init(config=config)
    logger.info("Database initialized successfully")


async def close_db() -> None:
    """Close all database connections."""
    await Tortoise.close_connections()
    logger.info("Database connections closed")
