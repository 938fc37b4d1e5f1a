from datetime import datetime
from typing import Any, Dict, List, Tuple

from pymongo import ASCENDING, DESCENDING

from sosach.models.audit_log import AuditLogModel
from sosach.repositories.common.mongo_repository import MongoRepository


class AuditLogRepository(MongoRepository):
    collection_name = AuditLogModel.collection_name

    @classmethod
    def create(cls, audit_log: AuditLogModel) -> AuditLogModel:
        audit_log.id = cls.insert(audit_log.to_document())
        return audit_log

    @classmethod
    def get_logs(cls, filters: Dict[str, Any], page: int = 1, limit: int = 50) -> Tuple[List[AuditLogModel], int]:
        collection = cls.get_collection()
        skip = (page - 1) * limit
        cursor = collection.find(filters).sort("createdAt", DESCENDING).skip(skip).limit(limit)
        logs = [AuditLogModel(**doc) for doc in cursor]
        return logs, collection.count_documents(filters)

    @classmethod
    def _group_counts(cls, since: datetime, group_key: Any, sort: Dict[str, int]) -> List[Dict[str, Any]]:
        pipeline = [
            {"$match": {"createdAt": {"$gte": since}}},
            {"$group": {"_id": group_key, "count": {"$sum": 1}}},
            {"$sort": sort},
        ]
        return list(cls.get_collection().aggregate(pipeline))

    @classmethod
    def get_stats(cls, since: datetime) -> Dict[str, Any]:
        collection = cls.get_collection()
        by_count = {"count": DESCENDING}
        return {
            "totalLogs": collection.count_documents({"createdAt": {"$gte": since}}),
            "logsByAction": cls._group_counts(since, "$action", by_count),
            "logsByResource": cls._group_counts(since, "$resource", by_count),
            "logsByStatus": cls._group_counts(since, "$status", by_count),
            "logsByDay": cls._group_counts(
                since, {"$dateToString": {"format": "%Y-%m-%d", "date": "$createdAt"}}, {"_id": ASCENDING}
            ),
            "topUsers": cls._group_counts(since, "$user", by_count)[:10],
        }

    @classmethod
    def get_user_activity_summary(cls, user_id, since: datetime) -> List[Dict[str, Any]]:
        pipeline = [
            {"$match": {"user": cls.to_object_id(user_id), "createdAt": {"$gte": since}}},
            {
                "$group": {
                    "_id": {"action": "$action", "resource": "$resource"},
                    "count": {"$sum": 1},
                    "lastActivity": {"$max": "$createdAt"},
                }
            },
            {"$sort": {"count": DESCENDING}},
        ]
        return list(cls.get_collection().aggregate(pipeline))
