from contextlib import contextmanager

from flask import current_app

from landing_hub.extensions import db


@contextmanager
def transactional():
    """
    Unit of work of one page operation.

    Commits on success; rolls back and re-raises on any error, so the
    session is clean for the error handler.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.debug("Transaction rolled back", exc_info=True)
        raise
