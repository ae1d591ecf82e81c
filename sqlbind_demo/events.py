from sqlalchemy import event

from .logger import logger


def register_events(engine):
    """
    SQLite leaves foreign key enforcement off unless every connection asks
    for it.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        logger.debug("Enabling foreign keys on new SQLite connection")
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
