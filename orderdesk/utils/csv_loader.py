"""Load catalog data from CSV files."""

import csv
from pathlib import Path
from typing import Any

from orderdesk.config import CATALOG_CSV_PATH


def _read_csv(path: Path) -> list[dict[str, Any]]:
    """Read a CSV file and return list of row dicts."""
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        return list(reader)


def load_products(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load product catalog from products.csv."""
    path = csv_path or CATALOG_CSV_PATH
    return _read_csv(path)
