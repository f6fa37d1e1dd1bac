from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from electrical_pm.core.config import settings
from electrical_pm.core.exceptions import ConflictError, NotFoundError, ValidationError
from electrical_pm.models.client import Client
from electrical_pm.models.quote import Quote, QuoteStatus
from electrical_pm.schemas.quote import LineItem, QuoteCreate, QuoteUpdate
from electrical_pm.services.client_service import client_service
import logging

logger = logging.getLogger(__name__)

LINE_ITEM_TOLERANCE = 0.01
QUOTE_NUMBER_ATTEMPTS = 3


def validate_line_items(line_items: List[LineItem]) -> None:
    if not line_items:
        raise ValidationError("At least one line item is required")

    for index, item in enumerate(line_items, start=1):
        if not item.description or not item.description.strip():
            raise ValidationError(f"Line item {index}: description is required")
        if item.quantity <= 0:
            raise ValidationError(f"Line item {index}: quantity must be greater than 0")
        if item.unit_price < 0:
            raise ValidationError(f"Line item {index}: unit price cannot be negative")
        if not item.unit or not item.unit.strip():
            raise ValidationError(f"Line item {index}: unit is required")

        expected = item.quantity * item.unit_price
        if abs(item.total - expected) > LINE_ITEM_TOLERANCE:
            raise ValidationError(
                f"Line item total mismatch for \"{item.description}\": "
                f"expected {expected:.2f}, got {item.total:.2f}"
            )


def calculate_totals(line_items: List[LineItem], tax: Optional[float] = None) -> Dict[str, float]:
    """Subtotal of the line items, tax at the fixed rate unless supplied, and grand total."""
    subtotal = round(sum(item.total for item in line_items), 2)
    if tax is None:
        tax = subtotal * settings.QUOTE_TAX_RATE
    tax = round(tax, 2)
    return {"subtotal": subtotal, "tax": tax, "total": round(subtotal + tax, 2)}


class QuoteService:

    def generate_quote_number(self, db: Session) -> str:
        """Next number of the form Q<year><sequence>, zero-padded to at least 4 digits."""
        prefix = f"Q{datetime.utcnow().year}"
        # Longer numbers sort first so Q<year>10000 follows Q<year>9999
        latest = db.query(Quote.quote_number).filter(
            Quote.quote_number.like(f"{prefix}%")
        ).order_by(func.length(Quote.quote_number).desc(), Quote.quote_number.desc()).first()

        sequence = 1
        if latest:
            try:
                sequence = int(latest[0][len(prefix):]) + 1
            except ValueError:
                sequence = db.query(Quote).filter(Quote.quote_number.like(f"{prefix}%")).count() + 1
        return f"{prefix}{sequence:04d}"

    def _insert(self, db: Session, quote: Quote) -> Quote:
        """Insert with a fresh number, retrying if a concurrent insert took it."""
        for attempt in range(QUOTE_NUMBER_ATTEMPTS):
            quote.quote_number = self.generate_quote_number(db)
            db.add(quote)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning(f"Quote number {quote.quote_number} taken, retrying ({attempt + 1})")
                continue
            db.refresh(quote)
            return quote
        raise ConflictError("Could not allocate a quote number, please retry")

    def get_quote(self, db: Session, quote_id: int) -> Quote:
        quote = db.query(Quote).filter(Quote.id == quote_id).first()
        if not quote:
            raise NotFoundError("Quote not found")
        return quote

    def list_quotes(
        self,
        db: Session,
        offset: int = 0,
        limit: int = 20,
        client_id: Optional[int] = None,
        status: Optional[str] = None,
        created_by: Optional[int] = None,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> Tuple[List[Quote], int]:
        query = db.query(Quote).join(Client, Quote.client_id == Client.id)

        if client_id:
            query = query.filter(Quote.client_id == client_id)
        if status:
            query = query.filter(Quote.status == status)
        if created_by:
            query = query.filter(Quote.created_by == created_by)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Quote.quote_number.ilike(pattern),
                Quote.project_name.ilike(pattern),
                Client.name.ilike(pattern)
            ))
        if start_date:
            query = query.filter(Quote.created_at >= datetime.combine(start_date, datetime.min.time()))
        if end_date:
            query = query.filter(Quote.created_at <= datetime.combine(end_date, datetime.max.time()))

        total = query.count()
        quotes = query.order_by(Quote.created_at.desc(), Quote.id.desc()).offset(offset).limit(limit).all()
        return quotes, total

    def create_quote(self, db: Session, data: QuoteCreate, actor_id: int) -> Quote:
        client_service.get_client(db, data.client_id)
        validate_line_items(data.line_items)
        totals = calculate_totals(data.line_items, data.tax)

        quote = Quote(
            client_id=data.client_id,
            project_name=data.project_name,
            project_address=data.project_address,
            status=data.status,
            line_items=[item.model_dump() for item in data.line_items],
            valid_until=data.valid_until,
            notes=data.notes,
            terms=data.terms,
            created_by=actor_id,
            updated_by=actor_id,
            **totals
        )
        self._insert(db, quote)

        logger.info(f"Quote {quote.quote_number} created by user {actor_id}: total {quote.total}")
        return quote

    def update_quote(self, db: Session, quote_id: int, data: QuoteUpdate, actor_id: int) -> Quote:
        quote = self.get_quote(db, quote_id)
        update_data = data.model_dump(exclude_unset=True, exclude={"line_items", "tax"})

        if update_data.get("client_id"):
            client_service.get_client(db, update_data["client_id"])

        if data.line_items is not None or "tax" in data.model_fields_set:
            line_items = data.line_items
            if line_items is None:
                line_items = [LineItem(**item) for item in quote.line_items]
            validate_line_items(line_items)
            tax = data.tax if "tax" in data.model_fields_set else None
            quote.line_items = [item.model_dump() for item in line_items]
            for field, value in calculate_totals(line_items, tax).items():
                setattr(quote, field, value)

        for field, value in update_data.items():
            setattr(quote, field, value)
        quote.updated_by = actor_id

        db.commit()
        db.refresh(quote)

        logger.info(f"Quote {quote.quote_number} updated by user {actor_id}")
        return quote

    def update_status(self, db: Session, quote_id: int, status: str, actor_id: int) -> Quote:
        quote = self.get_quote(db, quote_id)
        previous = quote.status
        quote.status = status
        quote.updated_by = actor_id
        db.commit()
        db.refresh(quote)

        logger.info(f"Quote {quote.quote_number} status {previous} -> {status} by user {actor_id}")
        return quote

    def delete_quote(self, db: Session, quote_id: int, actor_id: int) -> None:
        quote = self.get_quote(db, quote_id)
        number = quote.quote_number
        db.delete(quote)
        db.commit()

        logger.info(f"Quote {number} deleted by user {actor_id}")

    def duplicate_quote(
        self,
        db: Session,
        quote_id: int,
        actor_id: int,
        new_project_name: Optional[str] = None
    ) -> Quote:
        original = self.get_quote(db, quote_id)

        copy = Quote(
            client_id=original.client_id,
            project_name=new_project_name or f"{original.project_name} (Copy)",
            project_address=original.project_address,
            status=QuoteStatus.DRAFT.value,
            line_items=[dict(item) for item in original.line_items],
            subtotal=original.subtotal,
            tax=original.tax,
            total=original.total,
            valid_until=original.valid_until,
            notes=original.notes,
            terms=original.terms,
            created_by=actor_id,
            updated_by=actor_id
        )
        self._insert(db, copy)

        logger.info(f"Quote {original.quote_number} duplicated as {copy.quote_number} by user {actor_id}")
        return copy

    def get_stats(self, db: Session) -> Dict:
        by_status = dict(
            db.query(Quote.status, func.count(Quote.id)).group_by(Quote.status).all()
        )
        total_value = db.query(func.coalesce(func.sum(Quote.total), 0.0)).scalar()
        accepted_value = db.query(func.coalesce(func.sum(Quote.total), 0.0)).filter(
            Quote.status == QuoteStatus.ACCEPTED.value
        ).scalar()

        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "total_value": round(float(total_value), 2),
            "accepted_value": round(float(accepted_value), 2),
        }


# Singleton instance
quote_service = QuoteService()
