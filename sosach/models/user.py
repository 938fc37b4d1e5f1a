from datetime import datetime, timezone
from typing import ClassVar

from pydantic import Field

from sosach.constants.role import UserRole
from sosach.models.common.document import Document
from sosach.models.common.pyobjectid import PyObjectId


class UserModel(Document):
    """
    Read model of a user. The password hash is stored in the same document
    but is never loaded into this model.
    """

    collection_name: ClassVar[str] = "users"

    username: str
    email: str
    fullName: str
    role: UserRole = UserRole.STAFF
    rank: PyObjectId | None = None
    unit: PyObjectId | None = None
    department: PyObjectId | None = None
    position: PyObjectId | None = None
    phone: str | None = None
    isActive: bool = True
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updatedAt: datetime | None = None
