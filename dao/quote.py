# dao/quote.py
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from configs import db
from dao import user as user_dao
from db.models.client import Client
from db.models.product import Product
from db.models.quote import Quote, QuoteKind, QuoteLine, QuoteStatus
from db.models.user import UserRole
from utils.auth import Identity
from utils.dates import parse_date, utcnow
from utils.errors import Forbidden, NotFound, ValidationError
from utils.validators import dec, parse_int, parse_money

logger = logging.getLogger(__name__)

DEFAULT_VALIDITY = timedelta(days=30)

# each quote kind keeps its own vocabulary
QUOTE_TRANSITIONS: Dict[QuoteKind, Dict[QuoteStatus, frozenset]] = {
    QuoteKind.REQUEST: {
        QuoteStatus.PENDING: frozenset({QuoteStatus.APPROVED, QuoteStatus.REJECTED}),
        QuoteStatus.APPROVED: frozenset(),
        QuoteStatus.REJECTED: frozenset(),
    },
    QuoteKind.OFFER: {
        QuoteStatus.PENDING: frozenset({QuoteStatus.ACCEPTED, QuoteStatus.REJECTED}),
        QuoteStatus.ACCEPTED: frozenset(),
        QuoteStatus.REJECTED: frozenset(),
    },
}


def to_quote_status(kind: QuoteKind, value) -> QuoteStatus:
    try:
        status = QuoteStatus((value or "").strip().lower())
    except (ValueError, AttributeError):
        raise ValidationError("Invalid status")
    if status not in QUOTE_TRANSITIONS[kind]:
        raise ValidationError(f"Invalid status for a quote {kind.value}")
    return status


# ======== Queries ========
def get_quote(quote_id: int) -> Optional[Quote]:
    return db.session.get(Quote, quote_id)


def list_quotes_by_client(client_id: int) -> List[Quote]:
    return (
        Quote.query.filter(Quote.client_id == client_id)
        .order_by(Quote.created_at.desc(), Quote.id.desc())
        .all()
    )


def list_quotes_by_supplier(supplier_id: int) -> List[Quote]:
    return (
        Quote.query.filter(Quote.supplier_id == supplier_id)
        .order_by(Quote.created_at.desc(), Quote.id.desc())
        .all()
    )


def _check_party(identity: Identity, quote: Quote) -> None:
    """Owning client, targeted supplier, or admin; anyone else is refused."""
    if identity.role is UserRole.ADMIN:
        return
    if identity.role is UserRole.CLIENT:
        client = user_dao.require_client(identity)
        if client.id == quote.client_id:
            return
    elif identity.role is UserRole.SUPPLIER:
        supplier = user_dao.require_supplier(identity)
        if quote.supplier_id is not None and supplier.id == quote.supplier_id:
            return
    raise Forbidden("You don't have permission to access this quote")


def get_quote_for(identity: Identity, quote_id: int) -> Quote:
    quote = get_quote(quote_id)
    if not quote:
        raise NotFound("Quote not found")
    _check_party(identity, quote)
    return quote


# ======== Mutations ========
def _normalize_lines(lines, supplier_id: int | None = None, priced: bool = False):
    if not lines or not isinstance(lines, list):
        raise ValidationError("A quote needs at least one line")
    out = []
    for idx, ln in enumerate(lines, 1):
        if not isinstance(ln, dict):
            raise ValidationError(f"Line {idx}: invalid line")
        product_id = parse_int(ln.get("productId"), f"Line {idx}: productId")
        quantity = parse_int(ln.get("quantity"), f"Line {idx}: quantity", minimum=1)
        product = db.session.get(Product, product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")
        if supplier_id is not None and product.supplier_id != supplier_id:
            raise ValidationError(
                f"Line {idx}: product {product_id} is not offered by this supplier"
            )
        if priced and ln.get("price") is not None:
            price = parse_money(ln.get("price"), f"Line {idx}: price")
        else:
            price = dec(product.price)
        out.append({"product_id": product.id, "quantity": quantity, "price": price})
    return out


def _valid_until(value):
    if value is None or value == "":
        return utcnow() + DEFAULT_VALIDITY
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError("validUntil must be an ISO date")
    return parsed


def _write_quote(quote: Quote, norm: list) -> Quote:
    quote.total = sum((ln["price"] * ln["quantity"] for ln in norm), Decimal("0.00"))
    try:
        db.session.add(quote)
        db.session.flush()
        for ln in norm:
            db.session.add(
                QuoteLine(
                    quote_id=quote.id,
                    product_id=ln["product_id"],
                    quantity=ln["quantity"],
                    price_at_quote=ln["price"],
                )
            )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info("quote %s (%s) created total=%s", quote.id, quote.kind.value, quote.total)
    return quote


def create_quote(
    client_id: int, lines, supplier_id: int | None = None, valid_until=None
) -> Quote:
    """Quote requested by a client, priced from the current catalogue."""
    if not db.session.get(Client, client_id):
        raise NotFound("Client profile not found")
    if supplier_id is not None and not user_dao.get_supplier(supplier_id):
        raise NotFound("Supplier not found")
    norm = _normalize_lines(lines)
    quote = Quote(
        kind=QuoteKind.REQUEST,
        client_id=client_id,
        supplier_id=supplier_id,
        status=QuoteStatus.PENDING,
        valid_until=_valid_until(valid_until),
    )
    return _write_quote(quote, norm)


def create_supplier_quote(supplier_id: int, client_id, items, valid_until=None) -> Quote:
    """Offer issued by a supplier to a client; line prices may be negotiated."""
    client_id = parse_int(client_id, "clientId")
    if not db.session.get(Client, client_id):
        raise NotFound("Client not found")
    norm = _normalize_lines(items, supplier_id=supplier_id, priced=True)
    quote = Quote(
        kind=QuoteKind.OFFER,
        client_id=client_id,
        supplier_id=supplier_id,
        status=QuoteStatus.PENDING,
        valid_until=_valid_until(valid_until),
    )
    return _write_quote(quote, norm)


def update_quote_status(identity: Identity, quote_id: int, new_status) -> Quote:
    quote = get_quote(quote_id)
    if not quote:
        raise NotFound("Quote not found")
    status = to_quote_status(quote.kind, new_status)
    _check_party(identity, quote)
    if status not in QUOTE_TRANSITIONS[quote.kind][quote.status]:
        raise ValidationError(
            f"Cannot move quote from {quote.status.value} to {status.value}"
        )
    quote.status = status
    _commit()
    logger.info("quote %s -> %s by user %s", quote_id, status.value, identity.user_id)
    return quote


def delete_quote(quote_id: int) -> bool:
    quote = get_quote(quote_id)
    if not quote:
        return False
    db.session.delete(quote)
    _commit()
    return True


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
