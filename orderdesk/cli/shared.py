"""Shared CLI helpers: console, logger, collaborator wiring, result printing and JSON output."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from orderdesk.agents.llm import DisabledLLM, InquiryLLM, build_llm
from orderdesk.catalog import Catalog, InMemoryCatalog, SqlCatalog
from orderdesk.config import CATALOG_CSV_PATH, DATABASE_URL, LLM_ENABLED, OPENAI_API_KEY, OUTPUT_DIR
from orderdesk.db import Database
from orderdesk.models.catalog import CatalogProduct
from orderdesk.models.delivery import DeliveryOrderData
from orderdesk.models.inquiry import ParseOutcome
from orderdesk.models.pricing import PricingResponse
from orderdesk.orchestrator import OrderDesk
from orderdesk.utils.logger import get_logger
from orderdesk.utils.money import format_money

console = Console()
logger = get_logger("orderdesk.cli")


def read_inquiry_text(text: Optional[str], file: Optional[Path]) -> str:
    """Inquiry text from the argument or a file; exits when neither has content."""
    if file is not None:
        text = file.read_text(encoding="utf-8")
    if not text or not text.strip():
        console.print("[red]Provide inquiry text or --file.[/red]")
        raise typer.Exit(1)
    return text


def get_llm(offline: bool) -> InquiryLLM:
    return DisabledLLM("offline run") if offline else build_llm(LLM_ENABLED, OPENAI_API_KEY)


def get_offline_catalog(csv_path: Optional[Path] = None) -> Catalog:
    """Catalog straight from products.csv, no database."""
    return InMemoryCatalog.from_csv(csv_path or CATALOG_CSV_PATH)


def get_catalog(offline: bool) -> Catalog:
    """products.csv when offline, else the database catalog."""
    if offline:
        return get_offline_catalog()
    database = Database(DATABASE_URL)
    database.init()
    return SqlCatalog(database)


def get_desk(use_llm: bool = True) -> OrderDesk:
    """Database-backed desk; without the LLM every inquiry goes through the fallback parser."""
    return OrderDesk.from_settings(llm=get_llm(offline=not use_llm))


def write_json_result(result_dict: dict, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(result_dict, f, indent=2, default=str)
    logger.info("results.write_json", path=str(path))
    return path


def default_output_path(name: str) -> Path:
    return OUTPUT_DIR / name


def print_parse(outcome: ParseOutcome) -> None:
    parsed = outcome.inquiry
    source = outcome.kind if outcome.kind == "primary" else f"fallback ({outcome.reason})"
    console.print("\n[bold]Parsed Inquiry[/bold]")
    console.print(f"  Source: {source}")
    console.print(f"  Confidence: {parsed.confidence:.2f}")
    if parsed.dealer_name or parsed.dealer_email:
        console.print(f"  Dealer: {parsed.dealer_name or ''} {parsed.dealer_email or ''}".rstrip())
    if parsed.requested_delivery_date:
        console.print(f"  Requested delivery: {parsed.requested_delivery_date}")
    if parsed.general_notes:
        console.print(f"  Notes: {parsed.general_notes}")
    table = Table(title="Items")
    table.add_column("SKU", style="cyan")
    table.add_column("Product")
    table.add_column("Qty", justify="right")
    table.add_column("Unit")
    for item in parsed.items:
        table.add_row(item.product_sku or "-", item.product_name, str(item.quantity), item.unit or "")
    console.print(table)


def print_quote(pricing: PricingResponse) -> None:
    table = Table(title="Quote")
    table.add_column("SKU", style="cyan")
    table.add_column("Product")
    table.add_column("Qty", justify="right")
    table.add_column("Unit price", justify="right")
    table.add_column("Line total", justify="right")
    table.add_column("Available", justify="center")
    table.add_column("Notes", style="dim")
    for item in pricing.items:
        table.add_row(
            item.product_sku,
            item.product_name,
            str(item.requested_quantity),
            format_money(item.unit_price),
            format_money(item.line_total),
            "[green]yes[/green]" if item.is_available else "[red]no[/red]",
            item.notes or "",
        )
    console.print(table)
    console.print(f"  Subtotal: ${format_money(pricing.subtotal)}")
    console.print(f"  Tax: ${format_money(pricing.estimated_tax)}")
    console.print(f"  [bold]Total: ${format_money(pricing.total)}[/bold]")
    console.print(f"  Earliest delivery: {pricing.earliest_delivery_date}")
    style = "green" if pricing.all_items_available else "yellow"
    console.print(f"[{style}]{pricing.message}[/{style}]")


def print_products(products: list[CatalogProduct]) -> None:
    table = Table(title=f"Products ({len(products)})")
    table.add_column("SKU", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Price", justify="right")
    table.add_column("Stock", justify="right")
    for p in products:
        table.add_row(p.sku, p.name, p.category, f"${format_money(p.unit_price)}/{p.unit}", str(p.stock_quantity))
    console.print(table)


def print_delivery_order(data: DeliveryOrderData) -> None:
    console.print(f"\n[bold]Delivery Order {data.order_number}[/bold] ({data.order_date})")
    console.print(f"  Dealer: {data.dealer_name}")
    if data.delivery_address:
        console.print(f"  Deliver to: {data.delivery_address}")
    for item in data.items:
        console.print(
            f"  {item.sku}  {item.product_name}  {item.quantity} {item.unit} x "
            f"${format_money(item.unit_price)} = ${format_money(item.line_total)}"
        )
    console.print(f"  Subtotal ${format_money(data.subtotal)}  Tax ${format_money(data.tax)}  "
                  f"[bold]Total ${format_money(data.total)}[/bold]")
