import logging
import time

from pymongo import ASCENDING, DESCENDING

from sosach_project.db.config import DatabaseManager
from sosach.models.audit_log import AuditLogModel
from sosach.models.notification import NotificationModel
from sosach.models.task_assignment import TaskAssignmentModel

logger = logging.getLogger(__name__)

INDEXES = {
    AuditLogModel.collection_name: [
        [("user", ASCENDING), ("createdAt", DESCENDING)],
        [("action", ASCENDING), ("createdAt", DESCENDING)],
        [("resource", ASCENDING), ("createdAt", DESCENDING)],
        [("status", ASCENDING), ("createdAt", DESCENDING)],
        [("createdAt", DESCENDING)],
        [("ipAddress", ASCENDING), ("createdAt", DESCENDING)],
    ],
    TaskAssignmentModel.collection_name: [
        [("assignedTo", ASCENDING), ("status", ASCENDING)],
        [("assignedBy", ASCENDING), ("status", ASCENDING)],
        [("deadline", ASCENDING), ("status", ASCENDING)],
        [("unit", ASCENDING), ("department", ASCENDING)],
        [("bookId", ASCENDING), ("bookEntryId", ASCENDING)],
        [("reminders.sent", ASCENDING), ("reminders.scheduledAt", ASCENDING)],
        [("createdAt", DESCENDING)],
    ],
    NotificationModel.collection_name: [
        [("recipient", ASCENDING), ("isRead", ASCENDING)],
        [("type", ASCENDING)],
        [("priority", ASCENDING)],
        [("createdAt", DESCENDING)],
    ],
}


def create_notification_ttl_index(db_manager: DatabaseManager) -> None:
    """Expired notifications are deleted by MongoDB once `expiresAt` has passed."""
    collection = db_manager.get_collection(NotificationModel.collection_name)
    collection.create_index([("expiresAt", ASCENDING)], expireAfterSeconds=0, name="expiresAt_ttl")


def ensure_indexes(db_manager: DatabaseManager | None = None) -> None:
    db_manager = db_manager or DatabaseManager()
    for collection_name, indexes in INDEXES.items():
        collection = db_manager.get_collection(collection_name)
        for keys in indexes:
            collection.create_index(keys)
    create_notification_ttl_index(db_manager)
    logger.info("Database indexes ensured")


def initialize_database(max_retries=5, retry_delay=2):
    """
    Wait for MongoDB to become reachable, then create the indexes the core relies on.
    Includes retry logic for Docker environments.
    """
    db_manager = DatabaseManager()

    for attempt in range(max_retries):
        if db_manager.check_database_health():
            break
        if attempt < max_retries - 1:
            logger.warning(
                f"Database health check failed, attempt {attempt + 1}. Retrying in {retry_delay} seconds..."
            )
            time.sleep(retry_delay)
        else:
            logger.error("All database connection attempts failed")
            return False

    try:
        ensure_indexes(db_manager)
        logger.info("Database initialization completed successfully")
        return True
    except Exception as e:
        logger.error(f"Error initializing database: {str(e)}")
        return False
