from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy import exc as sa_exc

from ..errors import SchemaError, StoreConnectionError
from ..events import register_events
from ..logger import logger
from .executor import QueryExecutor
from .transaction import Transaction


def _is_memory_sqlite(url):
    url = make_url(url)
    if url.get_backend_name() != "sqlite":
        return False

    database = url.database or ""
    return (
        database in ("", ":memory:")
        or database.startswith("file::memory:")
        or url.query.get("mode") == "memory"
    )


class Store(QueryExecutor):
    """
    Owns the engine and one autocommit connection to the store.

    The store itself executes queries on that connection, each statement
    committing on its own. ``begin`` hands out a ``Transaction`` on a second
    connection.

        with Store("sqlite:///demo.db") as store:
            store.exec("DELETE FROM members WHERE email=?", "john.doe@example.com")
    """

    def __init__(self, url, echo=False, **engine_options):
        super().__init__()
        self.url = url
        self.echo = echo
        self.engine_options = engine_options
        self._engine = None

    def __repr__(self):
        state = "open" if self.is_open else "closed"
        return f"Store({self.url} {state})"

    @classmethod
    def from_settings(cls, settings):
        return cls(settings.database_url, echo=settings.echo)

    @property
    def is_open(self):
        return self._connection is not None

    @property
    def engine(self):
        if self._engine is None:
            raise StoreConnectionError("Store is not open")
        return self._engine

    def open(self):
        if self.is_open:
            return self

        try:
            if _is_memory_sqlite(self.url):
                raise StoreConnectionError(
                    f"Cannot open store {self.url}: in-memory SQLite shares one connection, "
                    "transactions would not be isolated"
                )
            self._engine = create_engine(self.url, echo=self.echo, **self.engine_options)
            register_events(self._engine)
            connection = self._engine.connect()
        except (sa_exc.ArgumentError, sa_exc.NoSuchModuleError, sa_exc.DBAPIError) as e:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
            raise StoreConnectionError(f"Cannot open store {self.url}: {e}") from e

        self._connection = connection.execution_options(isolation_level="AUTOCOMMIT")
        logger.debug(f"Opened store {self.url}")
        return self

    def close(self):
        if self._connection is not None:
            self._connection.close()
            self._connection = None

        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.debug(f"Closed store {self.url}")

    def __enter__(self):
        return self.open()

    def __exit__(self, *exc):
        self.close()

    def begin(self):
        try:
            connection = self.engine.connect()
        except sa_exc.DBAPIError as e:
            raise StoreConnectionError(f"Cannot open a connection to {self.url}: {e}") from e
        return Transaction(connection)

    def create_schema(self, metadata, drop_existing=False):
        """
        Create the tables of ``metadata``. Existing tables are kept unless
        ``drop_existing`` is set, in which case they are dropped first.
        """
        try:
            with self.engine.begin() as connection:
                if drop_existing:
                    logger.debug(f"Dropping tables {list(metadata.tables)}")
                    metadata.drop_all(connection)
                metadata.create_all(connection)
        except sa_exc.SQLAlchemyError as e:
            raise SchemaError(f"Cannot create schema: {e}") from e

        logger.debug(f"Created tables {list(metadata.tables)}")
