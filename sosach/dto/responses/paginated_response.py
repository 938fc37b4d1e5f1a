import math

from pydantic import BaseModel, computed_field


class PaginatedResponse(BaseModel):
    total: int = 0
    page: int = 1
    limit: int = 50

    @computed_field
    @property
    def totalPages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
