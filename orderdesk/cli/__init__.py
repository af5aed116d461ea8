"""CLI commands: one module per mode (parse/quote, search, orders, serve)."""

from typer import Typer

from orderdesk.cli import (
    order_mode,
    parse_mode,
    search_mode,
    serve_mode,
    validate_config as validate_config_module,
)
from orderdesk.utils.tracing import init_tracing

init_tracing()

app = Typer(help="Wholesale order desk: inquiry parsing, quotes, orders and delivery orders")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(parse_mode.parse)
    app.command()(parse_mode.quote)
    app.command()(search_mode.search)
    app.command(name="init-db")(order_mode.init_db)
    app.command()(order_mode.order)
    app.command(name="delivery-order")(order_mode.delivery_order)
    app.command()(order_mode.track)
    app.command()(serve_mode.serve)
    app.command(name="validate-config")(validate_config_module.validate_config)


register_commands()
