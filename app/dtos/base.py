"""Common DTO base classes."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.base import BaseEntity, PyObjectIdStr


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BaseResponse(ApiModel):
    """Shared response fields for API DTOs."""

    # Dashboards address records by their Mongo-style "_id" key.
    id: PyObjectIdStr = Field(..., alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, entity: BaseEntity):
        return cls.model_validate(entity.model_dump())


class PageMeta(ApiModel):
    total_pages: int
    total: int = 0
    page: int = 1


class SuccessResponse(ApiModel):
    success: bool = True
    message: Optional[str] = Field(default=None)
