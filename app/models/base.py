from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    WithJsonSchema,
)


def validate_object_id(v: Any) -> Optional[ObjectId]:
    """Validate and convert to ObjectId for entity models."""
    if v is None:
        return None
    if isinstance(v, ObjectId):
        return v
    if isinstance(v, str):
        if not ObjectId.is_valid(v):
            raise ValueError(f"Invalid ObjectId: {v}")
        return ObjectId(v)
    raise ValueError(f"Invalid ObjectId: {v}")


def validate_object_id_str(v: Any) -> Optional[str]:
    """Validate and convert to string for DTOs."""
    if v is None:
        return None
    if isinstance(v, ObjectId):
        return str(v)
    if isinstance(v, str):
        if not ObjectId.is_valid(v):
            raise ValueError(f"Invalid ObjectId: {v}")
        return v
    raise ValueError(f"Invalid ObjectId: {v}")


# Entities keep ObjectId (for DB), DTOs keep str (for JSON)
PyObjectId = Annotated[
    ObjectId,
    BeforeValidator(validate_object_id),
    PlainSerializer(lambda x: str(x), return_type=str, when_used="json"),
    WithJsonSchema({"type": "string"}, mode="serialization"),
]

PyObjectIdStr = Annotated[str, BeforeValidator(validate_object_id_str)]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseEntity(BaseModel):
    """Base entity with common fields for all database entities"""

    id: Optional[PyObjectId] = Field(None, alias="_id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    def to_mongo(self) -> dict:
        """Convert to MongoDB document"""
        return self.model_dump(by_alias=True, exclude_none=True)
