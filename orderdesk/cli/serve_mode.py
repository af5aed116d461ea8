"""Serve mode: run the HTTP API with uvicorn."""

import typer
import uvicorn

from orderdesk.api.server import create_app
from orderdesk.config import API_HOST, API_PORT

from .shared import console, logger


def serve(
    port: int = typer.Option(API_PORT, "--port", "-p", help="Port for the API server"),
    host: str = typer.Option(API_HOST, "--host", "-h", help="Bind host"),
) -> None:
    """Start the order desk API."""
    log = logger.bind(command="serve", host=host, port=port)
    log.info("serve.start")
    console.print(f"[dim]Serving on http://{host}:{port} (docs at /docs)[/dim]")
    uvicorn.run(create_app(), host=host, port=port, log_config=None)
    log.info("serve.stopped")
