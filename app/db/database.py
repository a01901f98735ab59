import logging

from sqlalchemy.exc import SQLAlchemyError

from app.db.session import Base, engine

logger = logging.getLogger(__name__)


def connect_to_database() -> bool:
    """Create all tables for the registered models.

    Returns False (and logs) instead of raising so the API can still start
    and report the failure through its endpoints.
    """
    # Import models so they register on Base.metadata
    from app.models import interview, question, resume  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.exception("Failed to initialise database: %s", e)
        return False

    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))
    return True


def close_database_connection() -> None:
    engine.dispose()
    logger.info("Database connections closed")
