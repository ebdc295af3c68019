"""FastAPI dependency injection — storage and clock collaborators."""
from datetime import datetime
from typing import AsyncGenerator
from fastapi import Depends

from quotehub import config
from quotehub.db import AsyncSessionLocal
from quotehub.services.document_store import DocumentStore, InMemoryDocumentStore, SqlDocumentStore
from quotehub.services.quote_repository import QuoteRepository

# Dev mode (no DATABASE_URL): documents live for the life of the process
_dev_store = InMemoryDocumentStore()


async def get_document_store() -> AsyncGenerator[DocumentStore, None]:
    if not config.DATABASE_URL:
        yield _dev_store
        return
    async with AsyncSessionLocal() as session:
        try:
            yield SqlDocumentStore(session)
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_repository(store: DocumentStore = Depends(get_document_store)) -> QuoteRepository:
    return QuoteRepository(store)


def get_now() -> datetime:
    """Clock collaborator; overridden in tests for deterministic windows."""
    return datetime.now()
