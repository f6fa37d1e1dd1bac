from datetime import date
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from electrical_pm.api.deps import authorize
from electrical_pm.core.database import get_db
from electrical_pm.core.permissions import Action, Resource
from electrical_pm.core.responses import PageParams, ok, paginated
from electrical_pm.models.quote import QuoteStatus
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from electrical_pm.schemas.quote import (
    QuoteCreate, QuoteDuplicate, QuoteResponse, QuoteStats, QuoteStatusUpdate, QuoteUpdate
)
from electrical_pm.services.quote_service import quote_service

router = APIRouter(prefix="/quotes", tags=["Quotes"])


@router.get("/stats", response_model=ApiResponse[QuoteStats])
async def get_quote_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.QUOTES, Action.READ))
):
    """Quote counts and values by status."""
    return ok(quote_service.get_stats(db))


@router.get("", response_model=PaginatedResponse[QuoteResponse])
async def list_quotes(
    page: PageParams = Depends(),
    client_id: Optional[int] = None,
    status: Optional[QuoteStatus] = None,
    created_by: Optional[int] = None,
    search: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.QUOTES, Action.READ))
):
    """List quotes, newest first."""
    quotes, total = quote_service.list_quotes(
        db, page.offset, page.limit,
        client_id=client_id,
        status=status.value if status else None,
        created_by=created_by,
        search=search,
        start_date=start_date,
        end_date=end_date
    )
    return paginated(quotes, total, page)


@router.get("/{quote_id}", response_model=ApiResponse[QuoteResponse])
async def get_quote(
    quote_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.QUOTES, Action.READ))
):
    """Get quote by ID."""
    return ok(quote_service.get_quote(db, quote_id))


@router.post("", response_model=ApiResponse[QuoteResponse], status_code=status.HTTP_201_CREATED)
async def create_quote(
    data: QuoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.QUOTES, Action.CREATE))
):
    """Create a quote; totals are computed from the line items."""
    return ok(quote_service.create_quote(db, data, current_user.id), "Quote created successfully")


@router.put("/{quote_id}", response_model=ApiResponse[QuoteResponse])
async def update_quote(
    quote_id: int,
    data: QuoteUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.QUOTES, Action.UPDATE))
):
    """Update quote."""
    return ok(quote_service.update_quote(db, quote_id, data, current_user.id), "Quote updated successfully")


@router.put("/{quote_id}/status", response_model=ApiResponse[QuoteResponse])
async def update_quote_status(
    quote_id: int,
    data: QuoteStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.QUOTES, Action.UPDATE))
):
    """Change the quote status."""
    return ok(quote_service.update_status(db, quote_id, data.status, current_user.id), "Quote status updated")


@router.post(
    "/{quote_id}/duplicate",
    response_model=ApiResponse[QuoteResponse],
    status_code=status.HTTP_201_CREATED
)
async def duplicate_quote(
    quote_id: int,
    data: Optional[QuoteDuplicate] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.QUOTES, Action.CREATE))
):
    """Copy a quote into a new draft with a fresh number."""
    quote = quote_service.duplicate_quote(
        db, quote_id, current_user.id,
        new_project_name=data.new_project_name if data else None
    )
    return ok(quote, "Quote duplicated successfully")


@router.delete("/{quote_id}", response_model=MessageResponse)
async def delete_quote(
    quote_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.QUOTES, Action.DELETE))
):
    """Delete quote."""
    quote_service.delete_quote(db, quote_id, current_user.id)
    return ok(None, "Quote deleted successfully")
