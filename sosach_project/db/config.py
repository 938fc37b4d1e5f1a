import logging
import threading

from django.conf import settings
from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Process-wide MongoDB client holder. Every instantiation returns the same manager."""

    __instance = None
    __lock = threading.Lock()

    def __new__(cls):
        if cls.__instance is None:
            with cls.__lock:
                if cls.__instance is None:
                    instance = super().__new__(cls)
                    instance._database_client = None
                    instance._db = None
                    cls.__instance = instance
        return cls.__instance

    @classmethod
    def reset(cls):
        """Drop the cached client so the next access reconnects with current settings."""
        if cls.__instance is not None and cls.__instance._database_client is not None:
            cls.__instance._database_client.close()
        cls.__instance = None

    def _get_database_client(self) -> MongoClient:
        if self._database_client is None:
            self._database_client = MongoClient(settings.MONGODB_URI, tz_aware=True)
        return self._database_client

    def get_database(self):
        if self._db is None:
            self._db = self._get_database_client()[settings.DB_NAME]
        return self._db

    def get_collection(self, collection_name: str):
        return self.get_database()[collection_name]

    def check_database_health(self) -> bool:
        try:
            self._get_database_client().admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"Database health check failed: {e}")
            return False
