"""
Document store — key -> whole JSON document, read as a snapshot, written as a
full replace.

Two implementations share one contract:
  - InMemoryDocumentStore   dev mode (no DATABASE_URL) and tests
  - SqlDocumentStore        async SQLAlchemy over ``stored_documents``
"""
import copy
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from quotehub.config import DEFAULT_STORE_OWNER
from quotehub.models.orm_models import StoredDocument

logger = logging.getLogger("quotehub-store")


class DocumentStore:
    """Interface for the storage collaborator."""

    async def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    async def put(self, key: str, document: Any) -> Any:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def list_keys(self) -> List[str]:
        raise NotImplementedError


class InMemoryDocumentStore(DocumentStore):
    """Process-local store; every read and write is a deep copy."""

    def __init__(self, documents: Optional[Dict[str, Any]] = None) -> None:
        self._documents: Dict[str, Any] = copy.deepcopy(documents or {})

    async def get(self, key: str) -> Optional[Any]:
        if key not in self._documents:
            return None
        return copy.deepcopy(self._documents[key])

    async def put(self, key: str, document: Any) -> Any:
        self._documents[key] = copy.deepcopy(document)
        return copy.deepcopy(document)

    async def delete(self, key: str) -> None:
        self._documents.pop(key, None)

    async def list_keys(self) -> List[str]:
        return sorted(self._documents)


class SqlDocumentStore(DocumentStore):
    """Store backed by one row per (owner, key) in ``stored_documents``."""

    def __init__(self, session: AsyncSession, owner: str = DEFAULT_STORE_OWNER) -> None:
        self.session = session
        self.owner = owner

    async def _row(self, key: str) -> Optional[StoredDocument]:
        result = await self.session.execute(
            select(StoredDocument).where(
                StoredDocument.owner == self.owner,
                StoredDocument.storage_key == key,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, key: str) -> Optional[Any]:
        row = await self._row(key)
        return None if row is None else copy.deepcopy(row.storage_value)

    async def put(self, key: str, document: Any) -> Any:
        row = await self._row(key)
        if row:
            row.storage_value = copy.deepcopy(document)
        else:
            row = StoredDocument(owner=self.owner, storage_key=key, storage_value=copy.deepcopy(document))
            self.session.add(row)
        await self.session.flush()
        logger.debug(f"Stored document {key!r} for {self.owner}")
        return document

    async def delete(self, key: str) -> None:
        await self.session.execute(
            delete(StoredDocument).where(
                StoredDocument.owner == self.owner,
                StoredDocument.storage_key == key,
            )
        )

    async def list_keys(self) -> List[str]:
        result = await self.session.execute(
            select(StoredDocument.storage_key)
            .where(StoredDocument.owner == self.owner)
            .order_by(StoredDocument.storage_key)
        )
        return list(result.scalars().all())
