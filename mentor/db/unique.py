"""Inserts guarded by unique constraints.

Per-user rows (user, profile, preview, state, snapshot, plan versions) are
read-then-inserted. Two requests for the same user can both miss the read;
the second insert then violates the unique constraint. The insert runs in a
savepoint so the conflict rolls back only that insert and the caller can
re-read the row the other request stored.
"""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session


def insert_unique(session: Session, row: object) -> bool:
    """Insert a row inside a savepoint.

    Args:
        session: Database session (the outer transaction stays usable)
        row: New ORM instance

    Returns:
        True if the row was inserted, False if a unique constraint rejected it
    """
    savepoint = session.begin_nested()
    try:
        session.add(row)
        session.flush()
        savepoint.commit()
    except IntegrityError as e:
        savepoint.rollback()
        error_msg = str(e.orig).lower()
        if "unique" not in error_msg and "duplicate" not in error_msg:
            raise
        logger.debug(f"Concurrent insert of {type(row).__name__} detected, keeping stored row: {e.orig}")
        return False
    return True
