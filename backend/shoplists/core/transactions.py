import logging
import os
from typing import Callable, TypeVar

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from shoplists.core.errors import ConcurrentModificationError, NotFoundError

logger = logging.getLogger("app.transactions")

T = TypeVar("T")


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def RunUnitOfWork(
    db: Session,
    work: Callable[[], T],
    *,
    label: str,
    exists: Callable[[], bool] | None = None,
    not_found_detail: str = "Not found",
) -> T:
    """Run ``work`` and commit it as one transaction.

    ``work`` must re-read everything it touches, because a version conflict on
    flush rolls the session back and runs it again. Before a retry the target is
    re-checked with ``exists`` so a concurrent delete surfaces as NotFound.
    Any other failure rolls back and propagates.
    """
    attempts = max(1, _read_int_env("SAVE_RETRY_ATTEMPTS", 3))
    for attempt in range(1, attempts + 1):
        try:
            result = work()
            db.commit()
            return result
        except StaleDataError as exc:
            db.rollback()
            logger.warning("%s hit a concurrent update (attempt %s/%s)", label, attempt, attempts)
            if exists is not None and not exists():
                raise NotFoundError(not_found_detail) from exc
            if attempt == attempts:
                raise ConcurrentModificationError(
                    "The record was changed by another request. Reload and try again."
                ) from exc
        except Exception:
            db.rollback()
            raise
    raise ConcurrentModificationError("The record was changed by another request. Reload and try again.")
