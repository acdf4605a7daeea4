"""All-or-nothing request transactions."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.exceptions import ConflictError, TransactionError

logger = logging.getLogger(__name__)


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit on success, roll back on any error.

    Optimistic-lock failures surface as ConflictError; other persistence
    failures as TransactionError. Domain errors propagate unchanged after
    the rollback.
    """
    try:
        yield db
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning("Concurrent modification detected: %s", str(e))
        raise ConflictError(
            "The record was modified by another request. Reload and retry."
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Transaction failed and was rolled back")
        raise TransactionError("The operation could not be saved and was rolled back.") from e
    except Exception:
        db.rollback()
        raise
