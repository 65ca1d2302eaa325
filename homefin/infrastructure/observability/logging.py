"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List
from pythonjsonlogger import jsonlogger
from homefin.config import settings
from homefin.domain.models import Anomaly


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_rate_fallback(reason: str, fallback_sell_rate: float) -> None:
    """Log that the live USD/NPR rate was unavailable and the fallback was served"""
    logging.warning(
        "Exchange rate fetch failed, using fallback rate",
        extra={
            "step": "exchange_rate_fallback",
            "reason": reason,
            "fallback_sell_rate": fallback_sell_rate,
        },
    )


def log_anomaly_check(request_id: str, user_id: str, anomalies: List[Anomaly]) -> None:
    """Log the outcome of checking a new expense for anomalies"""
    logging.info(
        "Anomaly check completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "anomaly_check",
            "anomaly_count": len(anomalies),
            "anomaly_types": [a.type for a in anomalies],
        },
    )
