import logging

from tourbook.core.config import Settings
from tourbook.storage.mongo import MongoRepository
from tourbook.storage.repository import InMemoryRepository, Repository

logger = logging.getLogger(__name__)


def build_repository(settings: Settings) -> Repository:
    if not settings.mongodb_uri:
        logger.info("MONGODB_URI not set, using in-memory storage")
        return InMemoryRepository()
    repository = MongoRepository(settings.mongodb_uri, settings.mongodb_db)
    repository.ensure_indexes()
    logger.info("Using MongoDB database %s", settings.mongodb_db)
    return repository
