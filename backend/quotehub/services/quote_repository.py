"""
QuoteRepository — quotes, resourcing worksheets and the team roster on top of
a DocumentStore.

Every save recomputes quote totals from the quote's own effort and cost data;
persisted totals are never taken from the caller.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from quotehub.config import (
    QUOTE_STATUSES,
    QUOTES_STORAGE_KEY,
    ROSTER_STORAGE_KEY,
    WORKSHEET_KEY_PREFIX,
)
from quotehub.services.document_store import DocumentStore
from quotehub.services.effort_models import Quote
from quotehub.services.fee_engine import QuoteTotals, department_breakdown, recompute
from quotehub.services.perf_monitor import timed_async
from quotehub.services.resourcing_engine import ResourceAssignment, ResourcingWorksheet
from quotehub.services.utilization_engine import Person, Team, parse_roster

logger = logging.getLogger("quotehub-store")


class QuoteNotFoundError(LookupError):
    def __init__(self, quote_id: str) -> None:
        super().__init__(f"Quote {quote_id} not found")
        self.quote_id = quote_id


class QuoteRepository:

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    async def _load_documents(self) -> List[Dict[str, Any]]:
        saved = await self.store.get(QUOTES_STORAGE_KEY)
        if not isinstance(saved, list):
            if saved is not None:
                logger.warning(f"Ignoring malformed {QUOTES_STORAGE_KEY!r} document")
            return []
        return [doc for doc in saved if isinstance(doc, dict)]

    async def list_quotes(self, project_number: Optional[str] = None) -> List[Quote]:
        quotes = [Quote.from_document(doc) for doc in await self._load_documents()]
        if project_number is not None:
            quotes = [q for q in quotes if q.project_number == project_number]
        return quotes

    async def get_quote(self, quote_id: str) -> Quote:
        for doc in await self._load_documents():
            if doc.get("id") == quote_id:
                return Quote.from_document(doc)
        raise QuoteNotFoundError(quote_id)

    @timed_async
    async def save_quote(self, quote: Quote, now: datetime) -> Tuple[Quote, QuoteTotals]:
        """Recompute totals, stamp timestamps and replace/append the quote."""
        documents = await self._load_documents()
        index = next((i for i, d in enumerate(documents) if d.get("id") == quote.id), None)

        stamp = now.isoformat()
        if index is not None and not quote.created_date:
            quote.created_date = documents[index].get("createdDate") or stamp
        quote.created_date = quote.created_date or stamp
        quote.last_modified = stamp

        totals = recompute(quote)
        quote.stored_totals = {
            "totalRevenue": totals.total_revenue,
            "totalFees": totals.total_fees,
            "productionTotal": totals.production_total,
            "departmentBreakdown": department_breakdown(quote.effort),
            "totalsComputedAt": stamp,
        }

        document = quote.to_document()
        if index is None:
            documents.append(document)
        else:
            documents[index] = document
        await self.store.put(QUOTES_STORAGE_KEY, documents)
        logger.info(
            f"Saved quote {quote.id} (revenue {totals.total_revenue} {totals.currency})",
            extra={"quote_id": quote.id, "project_number": quote.project_number},
        )
        return quote, totals

    async def delete_quote(self, quote_id: str) -> None:
        documents = await self._load_documents()
        remaining = [d for d in documents if d.get("id") != quote_id]
        if len(remaining) == len(documents):
            raise QuoteNotFoundError(quote_id)
        await self.store.put(QUOTES_STORAGE_KEY, remaining)

    async def update_status(self, quote_id: str, status: str, now: datetime) -> Quote:
        if status not in QUOTE_STATUSES:
            raise ValueError(f"Unknown quote status {status!r}; expected one of {QUOTE_STATUSES}")
        documents = await self._load_documents()
        for doc in documents:
            if doc.get("id") == quote_id:
                doc["status"] = status
                doc["lastModified"] = now.isoformat()
                await self.store.put(QUOTES_STORAGE_KEY, documents)
                return Quote.from_document(doc)
        raise QuoteNotFoundError(quote_id)

    # ------------------------------------------------------------------
    # Resourcing worksheets
    # ------------------------------------------------------------------

    @staticmethod
    def worksheet_key(project_number: str) -> str:
        return f"{WORKSHEET_KEY_PREFIX}{project_number}"

    async def load_worksheet(self, project_number: str) -> ResourcingWorksheet:
        """Saved worksheet as stored; only assignee/dates are trusted on reload."""
        doc = await self.store.get(self.worksheet_key(project_number))
        return ResourcingWorksheet.from_document(doc if isinstance(doc, dict) else None)

    async def save_worksheet(
        self, project_number: str, worksheet: ResourcingWorksheet
    ) -> ResourcingWorksheet:
        await self.store.put(self.worksheet_key(project_number), worksheet.to_document())
        logger.info(
            f"Saved resourcing worksheet for project {project_number} ({len(worksheet)} roles)",
            extra={"project_number": project_number},
        )
        return worksheet

    async def all_assignments(self) -> List[ResourceAssignment]:
        """Every saved assignment across all projects (input to coverage)."""
        assignments: List[ResourceAssignment] = []
        for key in await self.store.list_keys():
            if key.startswith(WORKSHEET_KEY_PREFIX):
                assignments.extend(await self.load_worksheet(key[len(WORKSHEET_KEY_PREFIX):]))
        return assignments

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    async def load_roster_entries(self) -> List[Dict[str, Any]]:
        doc = await self.store.get(ROSTER_STORAGE_KEY)
        if not isinstance(doc, list):
            return []
        return [entry for entry in doc if isinstance(entry, dict)]

    async def load_roster(self) -> Tuple[List[Person], List[Team]]:
        return parse_roster(await self.load_roster_entries())

    async def save_roster(self, entries: List[Dict[str, Any]]) -> None:
        await self.store.put(ROSTER_STORAGE_KEY, entries)
