"""Utility modules."""

from orderdesk.utils.csv_loader import load_products
from orderdesk.utils.logger import get_logger, log_agent_step
from orderdesk.utils.money import TAX_RATE, format_money, quantize_money, tax_for, to_decimal
from orderdesk.utils.tracing import init_tracing

__all__ = [
    "load_products",
    "get_logger",
    "log_agent_step",
    "TAX_RATE",
    "format_money",
    "quantize_money",
    "tax_for",
    "to_decimal",
    "init_tracing",
]
