from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from sosach.models.common.pyobjectid import PyObjectId


class Document(BaseModel):
    """Base class for every model persisted as a MongoDB document."""

    collection_name: ClassVar[str]

    id: PyObjectId | None = Field(None, alias="_id")

    model_config = ConfigDict(
        populate_by_name=True, arbitrary_types_allowed=True, use_enum_values=True, validate_default=True
    )

    def to_document(self) -> dict:
        """Dump for insertion: aliases applied, native ObjectId/datetime kept."""
        return self.model_dump(by_alias=True, exclude_none=True)
