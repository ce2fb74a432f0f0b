"""Translation of service failures into HTTP responses."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from videovault.services.errors import VerificationServiceError

logger = logging.getLogger(__name__)


@contextmanager
def service_errors(db: Session, operation: str) -> Iterator[None]:
    """Map domain errors to their status codes and storage errors to 500.

    Args:
        db: Session to roll back on a storage failure
        operation: Short label used in the error log
    """
    try:
        yield
    except VerificationServiceError as err:
        raise HTTPException(status_code=err.status_code, detail=err.detail) from err
    except SQLAlchemyError as err:
        db.rollback()
        logger.error("Storage failure during %s", operation, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error",
        ) from err
