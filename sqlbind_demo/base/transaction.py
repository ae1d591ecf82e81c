from sqlalchemy import exc as sa_exc

from ..errors import ExecutionError, TransactionClosedError
from ..logger import logger
from .executor import QueryExecutor


class Transaction(QueryExecutor):
    """
    A query executor holding its own connection and an open transaction.

    Nothing executed here is visible to other connections until ``commit``.
    ``rollback`` or ``close`` discards the work. As a context manager it
    commits on a clean exit and rolls back when the block raises.
    """

    def __init__(self, connection):
        super().__init__(connection)
        self._transaction = connection.begin()
        logger.debug("Beginning transaction ...")

    @property
    def is_active(self):
        return self._transaction is not None and self._transaction.is_active

    @property
    def connection(self):
        if not self.is_active:
            raise TransactionClosedError("Transaction has already been committed or rolled back")
        return self._connection

    def commit(self):
        if not self.is_active:
            raise TransactionClosedError("Transaction has already been committed or rolled back")

        logger.debug("Committing ...")
        try:
            self._transaction.commit()
        except sa_exc.DBAPIError as e:
            raise ExecutionError(str(e.orig)) from e
        finally:
            self._release()

    def rollback(self):
        if self._transaction is None:
            return

        logger.debug("Rolling back ...")
        try:
            self._transaction.rollback()
        finally:
            self._release()

    close = rollback

    def _release(self):
        self._transaction = None
        self._connection.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.rollback()
        elif self.is_active:
            self.commit()
