"""Dealer repository: dealers are keyed by email address."""

from typing import Optional

from sqlalchemy import select

from orderdesk.db import Database
from orderdesk.db.models.catalog import Dealer


def get_by_email(db: Database, email: str) -> Optional[Dealer]:
    with db.session() as session:
        row = session.scalars(select(Dealer).where(Dealer.email == email.strip().lower())).first()
        if row is not None:
            session.expunge(row)
        return row


def ensure_dealer(
    db: Database,
    email: Optional[str],
    name: Optional[str] = None,
    phone: Optional[str] = None,
) -> Optional[int]:
    """Return the dealer id for `email`, creating the dealer on first contact. None without an email."""
    if not email or not email.strip():
        return None
    key = email.strip().lower()
    with db.session() as session:
        row = session.scalars(select(Dealer).where(Dealer.email == key)).first()
        if row is None:
            row = Dealer(name=name or key, email=key, phone=phone)
            session.add(row)
            session.flush()
        elif phone and not row.phone:
            row.phone = phone
        return row.id
