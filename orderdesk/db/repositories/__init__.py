"""DB repositories: sync functions taking a Database."""

from orderdesk.db.repositories import dealer_repo, inquiry_repo, order_repo

__all__ = [
    "dealer_repo",
    "inquiry_repo",
    "order_repo",
]
