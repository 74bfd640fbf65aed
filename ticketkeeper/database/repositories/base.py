"""Base repository for MongoDB database operations."""
import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pymongo.errors import PyMongoError

from ..models.base import BaseModel
from ...core.exceptions import DatabaseError

T = TypeVar('T', bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """Key-value access to one MongoDB collection, keyed by ``_id``."""

    model_class: Type[T] = BaseModel

    def __init__(self, collection):
        """Initialize repository.

        Args:
            collection: motor collection holding the records
        """
        self.collection = collection

    async def all(self) -> List[T]:
        """Return every document as a model."""
        try:
            docs = await self.collection.find({}).to_list(length=None)
        except PyMongoError as e:
            raise DatabaseError(f"Failed to read {self.collection.name}: {e}") from e
        return [self.model_class.from_dict(doc) for doc in docs]

    async def get(self, id_value: str) -> Optional[T]:
        """Find a document by ID.

        Returns:
            Model instance or None
        """
        try:
            doc = await self.collection.find_one({'_id': str(id_value)})
        except PyMongoError as e:
            raise DatabaseError(f"Failed to read {id_value} from {self.collection.name}: {e}") from e

        if doc:
            return self.model_class.from_dict(doc)
        return None

    async def set(self, id_value: str, data: Dict[str, Any]) -> None:
        """Create or replace a document."""
        doc = dict(data)
        doc['_id'] = str(id_value)
        try:
            await self.collection.replace_one({'_id': doc['_id']}, doc, upsert=True)
        except PyMongoError as e:
            raise DatabaseError(f"Failed to write {id_value} to {self.collection.name}: {e}") from e

    async def update(self, id_value: str, fields: Dict[str, Any]) -> None:
        """Set fields on an existing document."""
        if not fields:
            return
        try:
            await self.collection.update_one({'_id': str(id_value)}, {'$set': fields})
        except PyMongoError as e:
            raise DatabaseError(f"Failed to update {id_value} in {self.collection.name}: {e}") from e

    async def delete(self, id_value: str) -> None:
        """Delete a document; deleting a missing one is not an error."""
        try:
            result = await self.collection.delete_one({'_id': str(id_value)})
        except PyMongoError as e:
            raise DatabaseError(f"Failed to delete {id_value} from {self.collection.name}: {e}") from e
        logger.debug(f"Deleted {result.deleted_count} document(s) with id {id_value} from {self.collection.name}")
