"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from cediwise_budget.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_allocation(
    request_id: str,
    strategy: str,
    fixed_cost_ratio: float,
    duration_ms: float,
) -> None:
    """Log structured allocation outcome"""
    logging.info(
        "Allocation computed",
        extra={
            "request_id": request_id,
            "step": "allocation_complete",
            "strategy": strategy,
            "fixed_cost_ratio": round(fixed_cost_ratio, 4),
            "duration_ms": duration_ms,
        },
    )


def log_reallocation(
    request_id: str,
    cycle_id: str,
    should_reallocate: bool,
    reason: str | None,
    duration_ms: float,
) -> None:
    """Log structured reallocation analysis outcome"""
    logging.info(
        "Reallocation analyzed",
        extra={
            "request_id": request_id,
            "cycle_id": cycle_id,
            "step": "reallocation_complete",
            "outcome": "suggested" if should_reallocate else "none",
            "reason": reason,
            "duration_ms": duration_ms,
        },
    )


def log_request(
    request_id: str,
    method: str,
    endpoint: str,
    status: int,
    duration_ms: float,
) -> None:
    """Log one line per served request"""
    logging.info(
        "Request served",
        extra={
            "request_id": request_id,
            "method": method,
            "endpoint": endpoint,
            "status": status,
            "duration_ms": round(duration_ms, 2),
        },
    )
