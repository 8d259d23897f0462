from contextlib import contextmanager
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from minigame import db
from minigame.errors import ConflictError, StorageError


@contextmanager
def unit_of_work(action: str, conflict: Optional[str] = None):
    """Run a block of session work and commit it, translating failures.

    - Any exception rolls the session back before propagating
    - ``IntegrityError`` becomes ``ConflictError(conflict)`` when a conflict
      message is given (the unique constraint is what actually guards
      usernames; pre-checks only make the common case cheap)
    - Other database errors are logged and surface as an opaque ``StorageError``
    """
    try:
        yield db.session
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if conflict is None:
            current_app.logger.exception(f"[storage] {action} failed")
            raise StorageError() from exc
        current_app.logger.info(f"[conflict] {action}: {conflict}")
        raise ConflictError(conflict) from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception(f"[storage] {action} failed")
        raise StorageError() from exc
    except Exception:
        db.session.rollback()
        raise


@contextmanager
def reading(action: str):
    """Wrap a read-only query so driver errors surface as ``StorageError``."""
    try:
        yield db.session
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception(f"[storage] {action} failed")
        raise StorageError() from exc
