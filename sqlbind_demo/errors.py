"""
Exceptions raised by the store and the query executor.
"""


class SqlBindError(Exception):
    """Base class for all errors raised by this package."""


class StoreConnectionError(SqlBindError):
    """The store could not be reached, or was used while closed."""


class SchemaError(SqlBindError):
    """Creating or dropping tables failed."""


class BindError(SqlBindError):
    """A statement template and its parameters do not fit together."""


class ArityError(BindError):
    """Placeholder count and value count disagree."""

    def __init__(self, expected, given):
        super().__init__(f"statement expects {expected} argument(s), {given} given")
        self.expected = expected
        self.given = given


class EmptyListError(BindError):
    """An IN-clause list or a batch was empty."""


class UnboundNameError(BindError):
    """A named placeholder has no value in the parameter source."""

    def __init__(self, name, source=None):
        where = f" in {source}" if source else ""
        super().__init__(f"could not find name '{name}'{where}")
        self.name = name


class NotFoundError(SqlBindError):
    """A point lookup matched no row."""


class DecodeError(SqlBindError):
    """A row does not match the shape of the record it is decoded into."""


class ExecutionError(SqlBindError):
    """The driver rejected a statement."""


class ConstraintError(ExecutionError):
    """A uniqueness, NOT NULL or foreign key constraint was violated."""


class TransactionClosedError(SqlBindError):
    """A transaction was used after commit or rollback."""
