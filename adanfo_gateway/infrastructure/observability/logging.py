"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from adanfo_gateway.config import settings


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


logger = logging.getLogger("adanfo_gateway")


def log_submission(request_id: str, borrower_ref: str, principal: float, duration_months: int, interest_rate: float) -> None:
    """Log a loan request entering the pool"""
    logger.info(
        "Loan request submitted",
        extra={
            "loan_request_id": request_id,
            "borrower_ref": borrower_ref,
            "step": "submit",
            "principal": principal,
            "duration_months": duration_months,
            "interest_rate": interest_rate,
        },
    )


def log_rejection(step: str, reason: str, **context: Any) -> None:
    """Log a business-rule rejection with its specific reason"""
    logger.warning(
        "Request rejected",
        extra={"step": step, "reason": reason, **context},
    )


def log_funding(request_id: str, funder_ref: str, funded_amount: float) -> None:
    """Log a successful Pending -> Funded transition"""
    logger.info(
        "Loan request funded",
        extra={
            "loan_request_id": request_id,
            "funder_ref": funder_ref,
            "step": "fund",
            "funded_amount": funded_amount,
        },
    )


def log_score_update(borrower_ref: str, loan_ref: str, on_time: bool, previous_score: int, new_score: int) -> None:
    """Log a credit score recomputation"""
    logger.info(
        "Credit score updated",
        extra={
            "borrower_ref": borrower_ref,
            "loan_ref": loan_ref,
            "step": "score_update",
            "on_time": on_time,
            "previous_score": previous_score,
            "new_score": new_score,
        },
    )
