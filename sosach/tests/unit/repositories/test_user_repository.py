from unittest import TestCase
from unittest.mock import MagicMock, patch

from bson import ObjectId

from sosach.models.user import UserModel
from sosach.repositories.user_repository import UserRepository
from sosach.tests.fixtures.user import users_db_data


class UserRepositoryTests(TestCase):
    def setUp(self) -> None:
        self.mock_collection = MagicMock()
        self.mock_db_manager = MagicMock()
        self.mock_db_manager.get_collection.return_value = self.mock_collection

    @patch("sosach.repositories.common.mongo_repository.DatabaseManager")
    def test_get_by_id_success(self, mock_db_manager):
        mock_db_manager.return_value = self.mock_db_manager
        user_id = str(users_db_data[0]["_id"])
        self.mock_collection.find_one.return_value = users_db_data[0]

        result = UserRepository.get_by_id(user_id)

        self.mock_collection.find_one.assert_called_once_with({"_id": ObjectId(user_id)})
        self.assertIsInstance(result, UserModel)
        self.assertEqual(result.username, "admin")
        self.assertEqual(result.role, "admin")

    @patch("sosach.repositories.common.mongo_repository.DatabaseManager")
    def test_get_by_id_not_found(self, mock_db_manager):
        mock_db_manager.return_value = self.mock_db_manager
        self.mock_collection.find_one.return_value = None

        self.assertIsNone(UserRepository.get_by_id(str(ObjectId())))

    @patch("sosach.repositories.common.mongo_repository.DatabaseManager")
    def test_get_by_id_invalid(self, mock_db_manager):
        mock_db_manager.return_value = self.mock_db_manager

        self.assertIsNone(UserRepository.get_by_id("123"))
        self.mock_collection.find_one.assert_not_called()

    @patch("sosach.repositories.user_repository.UnitRepository.find_by_id")
    @patch("sosach.repositories.user_repository.DepartmentRepository.find_by_id")
    @patch("sosach.repositories.user_repository.UserRepository.get_by_id")
    def test_get_actor_info_resolves_names(self, mock_get_user, mock_find_department, mock_find_unit):
        user = UserModel(**users_db_data[2])
        mock_get_user.return_value = user
        mock_find_department.return_value = {"name": "Phòng Kế hoạch"}
        mock_find_unit.return_value = {"name": "Đơn vị 1"}

        actor = UserRepository.get_actor_info(str(user.id))

        mock_find_department.assert_called_once_with(user.department)
        mock_find_unit.assert_called_once_with(user.unit)
        self.assertEqual(
            actor,
            {
                "_id": user.id,
                "fullName": user.fullName,
                "email": user.email,
                "role": "staff",
                "department": "Phòng Kế hoạch",
                "unit": "Đơn vị 1",
                "departmentId": user.department,
                "unitId": user.unit,
            },
        )

    @patch("sosach.repositories.user_repository.UserRepository.get_by_id")
    def test_get_actor_info_for_missing_user(self, mock_get_user):
        mock_get_user.return_value = None

        self.assertIsNone(UserRepository.get_actor_info(str(ObjectId())))
