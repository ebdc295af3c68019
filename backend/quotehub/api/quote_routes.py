"""
Quote routes — totals, persistence and cost summaries.

POST   /api/quotes/totals            — totals for an unsaved quote body
GET    /api/quotes                   — list quote summaries (?project=<number>)
GET    /api/quotes/{id}              — stored quote document
PUT    /api/quotes/{id}              — save quote; totals recomputed server-side
DELETE /api/quotes/{id}
PUT    /api/quotes/{id}/status       — draft | pending | approved | completed
GET    /api/quotes/{id}/costs        — production cost overview
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from quotehub.api.deps import get_now, get_repository
from quotehub.models.api_models import (
    CostSummaryResponse,
    QuoteDocument,
    QuoteStatusUpdate,
    QuoteSummary,
    QuoteTotalsResponse,
)
from quotehub.services.cost_aggregator import CostAggregator
from quotehub.services.effort_models import Quote
from quotehub.services.fee_engine import QuoteTotals, department_breakdown, recompute
from quotehub.services.quote_repository import QuoteNotFoundError, QuoteRepository

router = APIRouter(prefix="/api/quotes", tags=["Quotes"])
logger = logging.getLogger("quotehub-api")


def _totals_response(
    quote: Quote, totals: QuoteTotals, computed_at: Optional[str] = None
) -> QuoteTotalsResponse:
    return QuoteTotalsResponse(
        quote_id=quote.id or None,
        fee_subtotal=totals.fee_subtotal,
        resourcing_surcharge=totals.resourcing_surcharge,
        surcharge_by_department=totals.surcharge_by_department,
        total_fees=totals.total_fees,
        production_total=totals.production_total,
        total_revenue=totals.total_revenue,
        department_breakdown=department_breakdown(quote.effort),
        currency=totals.currency,
        computed_at=computed_at,
    )


async def _load(repo: QuoteRepository, quote_id: str) -> Quote:
    try:
        return await repo.get_quote(quote_id)
    except QuoteNotFoundError:
        raise HTTPException(status_code=404, detail=f"Quote {quote_id} not found")


@router.post("/totals", response_model=QuoteTotalsResponse)
async def compute_quote_totals(body: QuoteDocument):
    """Live totals for the authoring surface; nothing is persisted."""
    quote = Quote.from_document(body.model_dump())
    return _totals_response(quote, recompute(quote))


@router.get("", response_model=List[QuoteSummary])
async def list_quotes(
    project: Optional[str] = None,
    repo: QuoteRepository = Depends(get_repository),
):
    quotes = await repo.list_quotes(project)
    return [
        QuoteSummary(
            id=q.id,
            project_number=q.project_number,
            budget_label=q.budget_label,
            client_name=q.client_name,
            project_name=q.project_name,
            status=q.status,
            currency=q.currency,
            total_revenue=q.stored_totals.get("totalRevenue"),
            last_modified=q.last_modified,
        )
        for q in quotes
    ]


@router.get("/{quote_id}")
async def get_quote(quote_id: str, repo: QuoteRepository = Depends(get_repository)) -> Dict[str, Any]:
    quote = await _load(repo, quote_id)
    return quote.to_document()


@router.put("/{quote_id}", response_model=QuoteTotalsResponse)
async def save_quote(
    quote_id: str,
    body: QuoteDocument,
    repo: QuoteRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    if body.id and body.id != quote_id:
        raise HTTPException(status_code=400, detail="Quote id in body does not match URL")
    document = body.model_dump()
    document["id"] = quote_id
    quote, totals = await repo.save_quote(Quote.from_document(document), now)
    return _totals_response(quote, totals, computed_at=quote.last_modified)


@router.delete("/{quote_id}")
async def delete_quote(quote_id: str, repo: QuoteRepository = Depends(get_repository)):
    try:
        await repo.delete_quote(quote_id)
    except QuoteNotFoundError:
        raise HTTPException(status_code=404, detail=f"Quote {quote_id} not found")
    return {"ok": True}


@router.put("/{quote_id}/status")
async def update_quote_status(
    quote_id: str,
    req: QuoteStatusUpdate,
    repo: QuoteRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    try:
        quote = await repo.update_status(quote_id, req.status, now)
    except QuoteNotFoundError:
        raise HTTPException(status_code=404, detail=f"Quote {quote_id} not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"id": quote.id, "status": quote.status, "last_modified": quote.last_modified}


@router.get("/{quote_id}/costs", response_model=CostSummaryResponse)
async def get_cost_summary(quote_id: str, repo: QuoteRepository = Depends(get_repository)):
    quote = await _load(repo, quote_id)
    summary = CostAggregator(quote.cost_sheets).summary(quote.currency)
    return CostSummaryResponse(quote_id=quote.id, **summary)
