"""ORM Models for QuoteHub — SQLAlchemy 2.0"""
from datetime import datetime
from typing import Any
from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from quotehub.db import Base


# ── DOCUMENT STORE ────────────────────────────────────────────────────────────
class StoredDocument(Base):
    """One whole JSON document per (owner, key); writes replace the document."""
    __tablename__ = "stored_documents"
    __table_args__ = (UniqueConstraint("owner", "storage_key", name="uq_stored_documents_owner_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    storage_key: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_value: Mapped[Any] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
