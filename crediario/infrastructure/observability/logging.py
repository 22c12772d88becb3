"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict, List
from pythonjsonlogger import jsonlogger

from crediario.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.utcnow().isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_operation(
    request_id: str,
    owner_id: str,
    account_id: str,
    amount: str,
    warnings: List[str],
    duration_ms: float,
) -> None:
    """Log structured debt operation outcome for reconciliation"""
    logging.info(
        "Debt operation completed",
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "account_id": account_id,
            "step": "operation_complete",
            "outcome": "partial" if warnings else "completed",
            "amount": amount,
            "warnings": warnings,
            "duration_ms": duration_ms,
        },
    )
