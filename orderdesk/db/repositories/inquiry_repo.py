"""Inquiry repository: create, attach parse/pricing blobs, update status."""

from typing import Any, Optional

from sqlalchemy import select

from orderdesk.db import Database
from orderdesk.db.models.orders import INQUIRY_STATUSES, Inquiry

STATUS_PENDING = "pending"
STATUS_PARSED = "parsed"
STATUS_QUOTED = "quoted"
STATUS_CONVERTED = "converted"


def _detached(session, row: Inquiry) -> Inquiry:
    session.flush()
    session.refresh(row)
    session.expunge(row)
    return row


def create(
    db: Database,
    raw_inquiry: str,
    dealer_name: Optional[str] = None,
    dealer_email: Optional[str] = None,
    dealer_phone: Optional[str] = None,
    dealer_id: Optional[int] = None,
) -> Inquiry:
    """Insert a pending inquiry."""
    with db.session() as session:
        row = Inquiry(
            raw_inquiry=raw_inquiry,
            dealer_id=dealer_id,
            dealer_name=dealer_name,
            dealer_email=dealer_email,
            dealer_phone=dealer_phone,
            status=STATUS_PENDING,
        )
        session.add(row)
        return _detached(session, row)


def get(db: Database, inquiry_id: int) -> Optional[Inquiry]:
    with db.session() as session:
        row = session.get(Inquiry, inquiry_id)
        if row is not None:
            session.expunge(row)
        return row


def attach_parse(
    db: Database,
    inquiry_id: int,
    parsed_data: dict[str, Any],
    parse_source: str,
    dealer_name: Optional[str] = None,
    dealer_email: Optional[str] = None,
    dealer_phone: Optional[str] = None,
    dealer_id: Optional[int] = None,
) -> bool:
    """Store the parsed blob and mark parsed. Dealer fields only overwrite when given."""
    with db.session() as session:
        row = session.get(Inquiry, inquiry_id)
        if row is None:
            return False
        row.parsed_data = parsed_data
        row.parse_source = parse_source
        row.status = STATUS_PARSED
        if dealer_name:
            row.dealer_name = dealer_name
        if dealer_email:
            row.dealer_email = dealer_email
        if dealer_phone:
            row.dealer_phone = dealer_phone
        if dealer_id is not None:
            row.dealer_id = dealer_id
        return True


def attach_pricing(db: Database, inquiry_id: int, pricing_response: dict[str, Any]) -> bool:
    """Store the latest pricing blob and mark quoted."""
    with db.session() as session:
        row = session.get(Inquiry, inquiry_id)
        if row is None:
            return False
        row.pricing_response = pricing_response
        row.status = STATUS_QUOTED
        return True


def update_status(db: Database, inquiry_id: int, status: str) -> bool:
    if status not in INQUIRY_STATUSES:
        raise ValueError(f"Unknown inquiry status {status!r}. Known: {list(INQUIRY_STATUSES)}")
    with db.session() as session:
        row = session.get(Inquiry, inquiry_id)
        if row is None:
            return False
        row.status = status
        return True


def list_recent(db: Database, status: Optional[str] = None, limit: int = 50) -> list[Inquiry]:
    with db.session() as session:
        q = select(Inquiry).order_by(Inquiry.created_at.desc(), Inquiry.id.desc()).limit(limit)
        if status:
            q = q.where(Inquiry.status == status)
        rows = list(session.scalars(q).all())
        for r in rows:
            session.expunge(r)
        return rows
