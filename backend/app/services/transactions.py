from contextlib import contextmanager
from typing import Iterator, Optional
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import ConflictError, InternalError

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(
    db: Session,
    failure_message: str,
    conflict_message: Optional[str] = None
) -> Iterator[Session]:
    """
    Commit the work done inside the block as one transaction.

    Database failures roll the session back, are logged with their raw detail,
    and surface as ``InternalError(failure_message)``. When ``conflict_message``
    is given, integrity violations surface as ``ConflictError`` instead.
    Directory errors raised inside the block propagate unchanged.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if conflict_message is not None:
            logger.warning(f"{conflict_message}: {e.orig}")
            raise ConflictError(conflict_message)
        logger.error(f"{failure_message}: {e}")
        raise InternalError(failure_message)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{failure_message}: {e}")
        raise InternalError(failure_message)
