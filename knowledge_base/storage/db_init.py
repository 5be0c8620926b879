import os

from loguru import logger
from tortoise import Tortoise, connections

from knowledge_base.utils.db_utils import sqlite_file_path, to_tortoise_url

MODEL_MODULES = [
    "knowledge_base.storage.models.page_model",
    "knowledge_base.storage.models.domain_model",
]


async def init_storage(database_url: str) -> None:
    """
    Connect Tortoise to the knowledge base database and create missing tables.
    """
    db_url = to_tortoise_url(database_url)

    db_file = sqlite_file_path(db_url)
    if db_file and os.path.dirname(db_file):
        os.makedirs(os.path.dirname(db_file), exist_ok=True)

    logger.info("Initializing knowledge base storage...")
    await Tortoise.init(db_url=db_url, modules={"models": MODEL_MODULES})
    await Tortoise.generate_schemas(safe=True)
    logger.info("Knowledge base tables created or verified.")


async def close_storage() -> None:
    await connections.close_all()
