"""Order desk API routes: inquiries, quotes, orders, delivery orders, catalog."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from orderdesk.api.schemas import (
    DirectOrderCreate,
    InquiryCreate,
    OrderCreate,
    StatusUpdate,
    inquiry_payload,
    order_payload,
)
from orderdesk.orchestrator import (
    InquiryNotFoundError,
    InquiryNotParsedError,
    NothingToOrderError,
    OrderDesk,
    OrderNotFoundError,
)
from orderdesk.utils.logger import get_logger

logger = get_logger("orderdesk.api.routes")

router = APIRouter(tags=["orderdesk"])


def _desk(request: Request) -> OrderDesk:
    return request.app.state.desk


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, (InquiryNotFoundError, OrderNotFoundError)):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


@router.post("/inquiries", status_code=201)
async def create_inquiry(body: InquiryCreate, request: Request) -> dict[str, Any]:
    """Store and parse a dealer inquiry. Parsing always succeeds, possibly via the fallback."""
    inquiry_id, outcome = await _desk(request).submit_inquiry(
        body.raw_inquiry,
        dealer_name=body.dealer_name,
        dealer_email=body.dealer_email,
        dealer_phone=body.dealer_phone,
    )
    return {
        "inquiryId": inquiry_id,
        "parseSource": outcome.kind,
        "fallbackReason": getattr(outcome, "reason", None),
        "parsedData": outcome.inquiry.to_blob(),
    }


@router.get("/inquiries")
def list_inquiries(
    request: Request,
    status: str | None = None,
    limit: int = Query(50, ge=1, le=200),
) -> list[dict[str, Any]]:
    try:
        rows = _desk(request).list_inquiries(status=status, limit=limit)
    except ValueError as e:
        raise _http_error(e) from e
    return [inquiry_payload(row) for row in rows]


@router.get("/inquiries/{inquiry_id}")
def get_inquiry(inquiry_id: int, request: Request) -> dict[str, Any]:
    try:
        return inquiry_payload(_desk(request).get_inquiry(inquiry_id))
    except InquiryNotFoundError as e:
        raise _http_error(e) from e


@router.patch("/inquiries/{inquiry_id}/status")
def update_inquiry_status(inquiry_id: int, body: StatusUpdate, request: Request) -> dict[str, Any]:
    try:
        return inquiry_payload(_desk(request).update_inquiry_status(inquiry_id, body.status))
    except (InquiryNotFoundError, ValueError) as e:
        raise _http_error(e) from e


@router.post("/inquiries/{inquiry_id}/pricing")
def quote_inquiry(inquiry_id: int, request: Request) -> dict[str, Any]:
    """Price the parsed inquiry against the current catalog."""
    try:
        return _desk(request).quote_inquiry(inquiry_id).to_blob()
    except (InquiryNotFoundError, InquiryNotParsedError) as e:
        raise _http_error(e) from e


@router.post("/inquiries/{inquiry_id}/orders", status_code=201)
def create_order(inquiry_id: int, request: Request, body: OrderCreate | None = None) -> dict[str, Any]:
    """Convert an inquiry into an order from its resolved, available lines."""
    body = body or OrderCreate()
    try:
        order = _desk(request).convert_to_order(
            inquiry_id,
            dealer_name=body.dealer_name,
            dealer_email=body.dealer_email,
            dealer_phone=body.dealer_phone,
            delivery_address=body.delivery_address,
            requested_delivery_date=body.requested_delivery_date,
            notes=body.notes,
        )
    except (InquiryNotFoundError, InquiryNotParsedError, NothingToOrderError) as e:
        raise _http_error(e) from e
    logger.info("api.order_created", inquiry_id=inquiry_id, order_number=order.order_number)
    return order_payload(order)


@router.post("/orders", status_code=201)
def create_direct_order(body: DirectOrderCreate, request: Request) -> dict[str, Any]:
    """Create an order from explicit lines, without an inquiry."""
    try:
        order = _desk(request).create_direct_order(
            body.items,
            dealer_name=body.dealer_name,
            dealer_email=body.dealer_email,
            dealer_phone=body.dealer_phone,
            delivery_address=body.delivery_address,
            requested_delivery_date=body.requested_delivery_date,
            notes=body.notes,
        )
    except NothingToOrderError as e:
        raise _http_error(e) from e
    logger.info("api.direct_order_created", order_number=order.order_number)
    return order_payload(order)


@router.get("/orders/by-number/{order_number}")
def get_order_by_number(order_number: str, request: Request) -> dict[str, Any]:
    """Order tracking by DO number."""
    try:
        return order_payload(_desk(request).get_order_by_number(order_number))
    except OrderNotFoundError as e:
        raise _http_error(e) from e


@router.get("/orders/{order_id}")
def get_order(order_id: int, request: Request) -> dict[str, Any]:
    try:
        return order_payload(_desk(request).get_order(order_id))
    except OrderNotFoundError as e:
        raise _http_error(e) from e


@router.patch("/orders/{order_id}/status")
def update_order_status(order_id: int, body: StatusUpdate, request: Request) -> dict[str, Any]:
    try:
        return order_payload(_desk(request).update_order_status(order_id, body.status))
    except (OrderNotFoundError, ValueError) as e:
        raise _http_error(e) from e


@router.post("/orders/{order_id}/delivery-order")
def generate_delivery_order(order_id: int, request: Request) -> dict[str, Any]:
    """Delivery-order data for the renderer; totals are recomputed from the order lines."""
    try:
        return _desk(request).generate_delivery_order(order_id).to_blob()
    except OrderNotFoundError as e:
        raise _http_error(e) from e


@router.get("/products")
def list_products(request: Request) -> list[dict[str, Any]]:
    return [p.to_blob() for p in _desk(request).list_products()]


@router.get("/products/search")
def search_products(request: Request, q: str = Query(..., min_length=1)) -> list[dict[str, Any]]:
    return [p.to_blob() for p in _desk(request).search_products(q)]
