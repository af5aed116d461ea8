"""Order modes: init the database, turn an inquiry into an order, generate delivery orders."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from orderdesk.config import DATABASE_URL
from orderdesk.db import Database
from orderdesk.orchestrator import InquiryNotFoundError, NothingToOrderError, OrderNotFoundError
from orderdesk.utils.logger import bind_context, clear_context
from orderdesk.utils.money import format_money

from .shared import (
    console,
    default_output_path,
    get_desk,
    logger,
    print_delivery_order,
    print_parse,
    print_quote,
    read_inquiry_text,
    write_json_result,
)


def init_db(
    seed: bool = typer.Option(True, "--seed/--no-seed", help="Seed products from products.csv when empty"),
) -> None:
    """Create tables (and seed the catalog)."""
    database = Database(DATABASE_URL)
    database.init(seed=seed)
    database.dispose()
    console.print(f"[green]Database ready: {DATABASE_URL}[/green]")
    logger.info("init_db.complete", seed=seed)


def order(
    text: Optional[str] = typer.Argument(None, help="Inquiry text"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read inquiry text from a file"),
    dealer_name: Optional[str] = typer.Option(None, "--dealer", help="Dealer name"),
    dealer_email: Optional[str] = typer.Option(None, "--email", help="Dealer email"),
    delivery_address: Optional[str] = typer.Option(None, "--address", help="Delivery address"),
    offline: bool = typer.Option(False, "--offline", help="Fallback parser only (no LLM)"),
) -> None:
    """Submit an inquiry, quote it and convert it into an order."""
    raw = read_inquiry_text(text, file)
    desk = get_desk(use_llm=not offline)
    try:
        inquiry_id, outcome = asyncio.run(
            desk.submit_inquiry(raw, dealer_name=dealer_name, dealer_email=dealer_email)
        )
        bind_context(command="order", inquiry_id=inquiry_id)
        print_parse(outcome)
        print_quote(desk.quote_inquiry(inquiry_id))
        try:
            created = desk.convert_to_order(
                inquiry_id,
                dealer_name=dealer_name,
                dealer_email=dealer_email,
                delivery_address=delivery_address,
            )
        except NothingToOrderError as e:
            console.print(f"[red]{e}[/red]")
            logger.warning("order.nothing_to_order", inquiry_id=inquiry_id)
            raise typer.Exit(1) from e
        console.print(
            f"[green]Order {created.order_number} (id {created.id}) created, "
            f"total ${format_money(created.total)}[/green]"
        )
        logger.info("order.complete", order_number=created.order_number)
    except InquiryNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    finally:
        clear_context()
        desk.close()


def delivery_order(
    order_id: int = typer.Argument(..., help="Order id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="DO JSON path"),
) -> None:
    """Generate delivery-order data for an order and write it as JSON."""
    desk = get_desk(use_llm=False)
    try:
        data = desk.generate_delivery_order(order_id)
    except OrderNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        logger.warning("delivery_order.not_found", order_id=order_id)
        raise typer.Exit(1) from e
    finally:
        desk.close()
    print_delivery_order(data)
    path = write_json_result(data.to_blob(), output or default_output_path(f"{data.order_number}.json"))
    console.print(f"[green]Wrote {path}[/green]")


def track(
    order_number: str = typer.Argument(..., help="Order number, e.g. DO20260302-0042"),
) -> None:
    """Show an order's status and total by its order number."""
    desk = get_desk(use_llm=False)
    try:
        found = desk.get_order_by_number(order_number)
    except OrderNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    finally:
        desk.close()
    console.print(
        f"[bold]{found.order_number}[/bold] {found.status}: {len(found.items)} line(s), "
        f"total ${format_money(found.total)}"
    )
    if found.do_generated_at:
        console.print(f"  Delivery order generated {found.do_generated_at:%Y-%m-%d %H:%M}")
