"""
Transaction Helpers

Commit-or-rollback scope and row locking shared by the ledger services.
"""

from contextlib import contextmanager

from .errors import RecordNotFoundError

_DEPTH_KEY = 'atomic_depth'


@contextmanager
def atomic(session):
    """
    Run a unit of work against session: commit on success, roll back and
    re-raise on any error.

    Nested atomic() blocks join the outermost one, which alone commits or
    rolls back.
    """
    depth = session.info.get(_DEPTH_KEY, 0)
    session.info[_DEPTH_KEY] = depth + 1
    try:
        yield session
        if depth == 0:
            session.commit()
    except Exception:
        if depth == 0:
            session.rollback()
        raise
    finally:
        session.info[_DEPTH_KEY] = depth


def get_or_raise(session, model, record_id, lock=False):
    """
    Load a row by primary key.

    With lock=True the row is read with SELECT ... FOR UPDATE and the
    in-session copy is refreshed from it, so the caller works on the values
    it holds the lock for.
    """
    record = _load(session, model, record_id, lock)
    if record is None:
        raise RecordNotFoundError(model.__name__, record_id)
    return record


def lock_rows(session, model, record_ids, skip_missing=False):
    """
    Lock rows of model in ascending id order and return them keyed by id.

    A consistent order means two transactions touching the same rows queue
    behind each other instead of deadlocking. With skip_missing, ids without
    a row are left out instead of raising RecordNotFoundError.
    """
    rows = {}
    for record_id in sorted(set(record_ids)):
        record = _load(session, model, record_id, lock=True)
        if record is None:
            if skip_missing:
                continue
            raise RecordNotFoundError(model.__name__, record_id)
        rows[record_id] = record
    return rows


def _load(session, model, record_id, lock):
    if lock:
        return session.get(model, record_id, with_for_update=True, populate_existing=True)
    return session.get(model, record_id)
