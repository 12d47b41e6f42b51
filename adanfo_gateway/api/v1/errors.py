"""Translation of domain failures into HTTP errors"""

import logging
from fastapi import HTTPException

from adanfo_gateway.domain.exceptions import (
    ComputationError,
    DomainException,
    EligibilityError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
    VerifierAPIError,
)

STATUS_CODES = {
    ValidationError: 400,
    NotFoundError: 404,
    InvalidStateError: 409,
    EligibilityError: 422,
    ComputationError: 422,
    VerifierAPIError: 503,
}


def to_http_error(error: DomainException, request_id: str) -> HTTPException:
    """Map a domain failure to its status code, keeping the specific reason as detail"""
    status_code = STATUS_CODES.get(type(error), 500)
    if status_code >= 500:
        logging.error(f"{type(error).__name__}: {error}", extra={"request_id": request_id})
    else:
        logging.warning(f"{type(error).__name__}: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=status_code, detail=str(error))


def internal_error(error: Exception, request_id: str) -> HTTPException:
    logging.error(f"Unexpected error: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")
