"""Search mode: smart catalog search."""

import typer

from orderdesk.agents.smart_search import smart_search

from .shared import console, get_catalog, logger, print_products


def search(
    query: str = typer.Argument(..., help="Search text, e.g. 'safety gloves'"),
    offline: bool = typer.Option(False, "--offline", help="Search products.csv instead of the database"),
) -> None:
    """Search the catalog: whole query first, then each word."""
    log = logger.bind(command="search", query=query)
    products = smart_search(query, get_catalog(offline))
    if not products:
        console.print("[yellow]No matching products.[/yellow]")
        log.info("search.no_results")
        raise typer.Exit(1)
    print_products(products)
    log.info("search.complete", results=len(products))
