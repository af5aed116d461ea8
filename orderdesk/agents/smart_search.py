"""Assistive catalog lookup: whole query first, then per-word search merged and deduplicated."""

from orderdesk.catalog.protocol import Catalog
from orderdesk.models.catalog import CatalogProduct
from orderdesk.utils.logger import get_logger

logger = get_logger("orderdesk.agents.smart_search")

MIN_WORD_LENGTH = 3


def smart_search(query: str, catalog: Catalog) -> list[CatalogProduct]:
    results = catalog.search_by_text(query)
    if results:
        return results

    words = [w for w in query.split() if len(w) >= MIN_WORD_LENGTH]
    merged: list[CatalogProduct] = []
    seen: set[str] = set()
    for word in words:
        for product in catalog.search_by_text(word):
            if product.identity in seen:
                continue
            seen.add(product.identity)
            merged.append(product)
    logger.debug("smart_search.per_word", query=query, words=len(words), results=len(merged))
    return merged
