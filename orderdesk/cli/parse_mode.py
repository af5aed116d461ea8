"""Parse and quote modes: run the inquiry parser and pricing reconciler on one inquiry."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from orderdesk.agents.inquiry_parser import InquiryParser
from orderdesk.agents.pricing import PricingReconciler

from .shared import (
    console,
    get_catalog,
    get_llm,
    logger,
    print_parse,
    print_quote,
    read_inquiry_text,
    write_json_result,
)


def parse(
    text: Optional[str] = typer.Argument(None, help="Inquiry text"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read inquiry text from a file"),
    offline: bool = typer.Option(False, "--offline", help="CSV catalog and fallback parser only (no DB, no LLM)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the parsed inquiry as JSON"),
) -> None:
    """Parse a free-text inquiry into structured line items."""
    raw = read_inquiry_text(text, file)
    log = logger.bind(command="parse", offline=offline)
    log.info("parse.start", chars=len(raw))
    parser = InquiryParser(get_catalog(offline), get_llm(offline))
    outcome = asyncio.run(parser.parse(raw))
    print_parse(outcome)
    if output is not None:
        write_json_result(outcome.model_dump(mode="json", by_alias=True), output)
        console.print(f"[green]Wrote {output}[/green]")
    log.info("parse.complete", source=outcome.kind, items=len(outcome.inquiry.items))


def quote(
    text: Optional[str] = typer.Argument(None, help="Inquiry text"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read inquiry text from a file"),
    offline: bool = typer.Option(False, "--offline", help="CSV catalog and fallback parser only (no DB, no LLM)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the quote as JSON"),
) -> None:
    """Parse an inquiry and price it against the current catalog."""
    raw = read_inquiry_text(text, file)
    log = logger.bind(command="quote", offline=offline)
    log.info("quote.start", chars=len(raw))
    catalog = get_catalog(offline)
    outcome = asyncio.run(InquiryParser(catalog, get_llm(offline)).parse(raw))
    print_parse(outcome)
    pricing = PricingReconciler(catalog).price_inquiry(outcome.inquiry)
    print_quote(pricing)
    if output is not None:
        write_json_result(pricing.to_blob(), output)
        console.print(f"[green]Wrote {output}[/green]")
    log.info("quote.complete", total=str(pricing.total), all_available=pricing.all_items_available)
