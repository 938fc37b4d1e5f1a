from typing import Optional

from bson.errors import InvalidId

from sosach.models.user import UserModel
from sosach.repositories.common.mongo_repository import MongoRepository
from sosach.repositories.reference_repository import DepartmentRepository, UnitRepository


class UserRepository(MongoRepository):
    collection_name = UserModel.collection_name

    @classmethod
    def get_by_id(cls, user_id) -> Optional[UserModel]:
        try:
            doc = cls.find_by_id(user_id)
        except InvalidId:
            return None
        return UserModel(**doc) if doc else None

    @classmethod
    def get_actor_info(cls, user_id) -> Optional[dict]:
        """
        Build the acting-user object the audit trail snapshots:
        {_id, fullName, email, role, department, unit} with department and unit as names.
        """
        user = cls.get_by_id(user_id)
        if not user:
            return None

        department = DepartmentRepository.find_by_id(user.department) if user.department else None
        unit = UnitRepository.find_by_id(user.unit) if user.unit else None

        return {
            "_id": user.id,
            "fullName": user.fullName,
            "email": user.email,
            "role": user.role,
            "department": department.get("name") if department else None,
            "unit": unit.get("name") if unit else None,
            "departmentId": user.department,
            "unitId": user.unit,
        }
