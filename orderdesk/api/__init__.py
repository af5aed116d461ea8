"""HTTP surface for the order desk (FastAPI)."""

from orderdesk.api.server import create_app

__all__ = ["create_app"]
