"""Base repository providing common MongoDB CRUD helpers."""

from abc import ABC
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from app.models.base import BaseEntity


class CollectionName(str, Enum):
    USERS = "users"
    JOB_POSTINGS = "job_postings"
    APPLICATIONS = "applications"


T = TypeVar("T", bound=BaseModel)


class BaseRepository(ABC, Generic[T]):
    """Base repository providing common CRUD operations for MongoDB collections."""

    def __init__(
        self,
        db: Database,
        collection_name: Union[CollectionName, str],
        model_class: Type[T],
    ):
        self.db = db
        self.collection_name: str = (
            collection_name.value
            if isinstance(collection_name, CollectionName)
            else collection_name
        )
        self.collection: Collection = db[self.collection_name]
        self.model_class = model_class

    def ensure_indexes(self) -> None:
        """Create the indexes this collection relies on."""

    def find_by_id(
        self, entity_id: Union[str, ObjectId], query: Optional[Dict[str, Any]] = None
    ) -> Optional[T]:
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return None
        doc = self.collection.find_one({**(query or {}), "_id": identifier})
        return self._to_model(doc)

    def find_one(self, query: Dict[str, Any]) -> Optional[T]:
        doc = self.collection.find_one(query)
        return self._to_model(doc)

    def find_many(
        self,
        query: Dict[str, Any],
        sort: Optional[List[tuple]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[T]:
        cursor = self.collection.find(query)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [self._to_model(doc) for doc in cursor]

    def paginate(
        self,
        query: Dict[str, Any],
        sort: Optional[List[tuple]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[List[T], int]:
        """Return one page of results plus the total count for the query."""
        items = self.find_many(query, sort=sort, skip=skip, limit=limit)
        total = self.count(query)
        return items, total

    def insert_one(self, document: Union[T, Dict[str, Any]]) -> T:
        if isinstance(document, BaseEntity):
            doc_dict = document.to_mongo()
        else:
            doc_dict = dict(document)

        result = self.collection.insert_one(doc_dict)
        doc_dict["_id"] = result.inserted_id
        return self._to_model(doc_dict)

    def update_one(
        self,
        entity_id: Union[str, ObjectId],
        updates: Dict[str, Any],
        query: Optional[Dict[str, Any]] = None,
    ) -> Optional[T]:
        """Apply ``$set`` updates and return the updated document, if it matched."""
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return None
        doc = self.collection.find_one_and_update(
            {**(query or {}), "_id": identifier},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(doc)

    def delete_one(
        self, entity_id: Union[str, ObjectId], query: Optional[Dict[str, Any]] = None
    ) -> bool:
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return False
        result = self.collection.delete_one({**(query or {}), "_id": identifier})
        return result.deleted_count > 0

    def delete_many(self, query: Dict[str, Any]) -> int:
        result = self.collection.delete_many(query)
        return result.deleted_count

    def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        if query is None:
            query = {}
        return self.collection.count_documents(query)

    def _to_model(self, doc: Optional[Dict[str, Any]]) -> Optional[T]:
        if not doc:
            return None
        return self.model_class.model_validate(doc)

    @staticmethod
    def _to_object_id(value: Union[str, ObjectId, None]) -> Optional[ObjectId]:
        if value is None:
            return None
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str):
            try:
                return ObjectId(value)
            except (InvalidId, TypeError):
                return None
        return None
