from typing import Any, Dict, List, Optional

from bson import ObjectId

from sosach_project.db.config import DatabaseManager


class MongoRepository:
    """
    Class-level access to one collection. Subclasses set `collection_name`.
    Classes themselves act as stores: findById / find / insert / updateById.
    """

    collection_name: str = None

    @classmethod
    def get_collection(cls):
        return DatabaseManager().get_collection(cls.collection_name)

    @staticmethod
    def to_object_id(value) -> ObjectId:
        return value if isinstance(value, ObjectId) else ObjectId(str(value))

    @classmethod
    def find_by_id(cls, document_id) -> Optional[Dict[str, Any]]:
        return cls.get_collection().find_one({"_id": cls.to_object_id(document_id)})

    @classmethod
    def find(cls, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        return list(cls.get_collection().find(filters))

    @classmethod
    def insert(cls, document: Dict[str, Any]) -> ObjectId:
        return cls.get_collection().insert_one(document).inserted_id

    @classmethod
    def update_by_id(cls, document_id, patch: Dict[str, Any]) -> bool:
        result = cls.get_collection().update_one({"_id": cls.to_object_id(document_id)}, {"$set": patch})
        return result.matched_count == 1
