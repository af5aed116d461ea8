"""structlog setup for orderdesk: colored console plus a JSONL file under output/logs."""

from __future__ import annotations

import logging
from typing import Any

import structlog

from orderdesk.config import LOG_FILE, LOG_LEVEL, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# Client and engine loggers that emit a line per request/statement at INFO
QUIET_LOGGERS = ("openai", "httpx", "httpcore", "urllib3", "uvicorn.access", "sqlalchemy.engine")

PIPELINE_STEP_EVENT = "pipeline.step"

_configured = False


def _level_from_env(value: str) -> int:
    if value.isdigit():
        return int(value)
    return getattr(logging, value.upper(), logging.INFO)


def _handler(handler: logging.Handler, renderer: Any, level: int, pre_chain: list) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
    return handler


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = logging.DEBUG if VERBOSE_LOGGING else _level_from_env(LOG_LEVEL)
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    pre_chain = [structlog.contextvars.merge_contextvars, structlog.processors.add_log_level, timestamper]

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(_handler(logging.StreamHandler(), structlog.dev.ConsoleRenderer(colors=True), level, pre_chain))
    root.addHandler(
        _handler(
            logging.FileHandler(LOG_FILE, encoding="utf-8"),
            structlog.processors.JSONRenderer(),
            level,
            pre_chain,
        )
    )
    logging.captureWarnings(True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "orderdesk", **bindings: Any) -> BoundLogger:
    """Structured logger named after its module (`orderdesk.api.routes`), with optional bound fields."""
    if not _configured:
        _configure_logging()
    logger = structlog.get_logger(name)
    return logger.bind(**bindings) if bindings else logger


def bind_context(**context: Any) -> None:
    """Attach fields (command, inquiry_id) to every entry logged in this context."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def log_agent_step(agent_name: str, step: str, data: Any = None) -> None:
    """One `pipeline.step` entry per stage of parse -> quote -> order -> delivery order.

    `agent` names the component (InquiryParser, PricingReconciler, OrderDesk) and `step`
    what it did, so every stage can be filtered with a single event name in app.jsonl.
    Payloads go to DEBUG when VERBOSE_LOGGING is on.
    """
    logger = get_logger("orderdesk.pipeline", agent=agent_name, step=step)
    if data is None:
        logger.info(PIPELINE_STEP_EVENT)
    elif VERBOSE_LOGGING:
        logger.debug(PIPELINE_STEP_EVENT, data=data)
    else:
        logger.info(PIPELINE_STEP_EVENT, data=data)
