from sqlalchemy import exc as sa_exc

from ..errors import (
    BindError,
    ConstraintError,
    EmptyListError,
    ExecutionError,
    NotFoundError,
    StoreConnectionError,
)
from ..helpers.utils import is_list_like, preview
from ..logger import logger
from .binding import BindingTable, RecordBinding
from .cursor import ExecResult, RowCursor
from .params import ParamStyle, bind_args, compile_named, compile_positional, expand_in, rebind


class QueryExecutor:
    """
    Binds statement templates to parameters and runs them on a connection.

    Positional templates use ``?`` or ``$N`` markers, named templates use
    ``:name``. Templates are normalised to ``?`` form, then rebound to the
    paramstyle of the driver and sent through ``exec_driver_sql``, so values
    never end up inside the SQL text.
    """

    def __init__(self, connection=None):
        self._connection = connection

    @property
    def connection(self):
        if self._connection is None:
            raise StoreConnectionError("Store is not open")
        return self._connection

    @property
    def paramstyle(self):
        return ParamStyle(self.connection.dialect.paramstyle)

    def rebind(self, sql):
        """
        Rewrite the ``?`` markers of ``sql`` into this driver's native style,
        for SQL handed to the driver directly. The query methods of this class
        take ``?`` form and rebind on their own.
        """
        return rebind(sql, self.paramstyle)

    def _execute(self, sql, values):
        style = self.paramstyle
        native = rebind(sql, style)
        logger.debug(f"Executing {native!r} with {preview(values)}")

        try:
            return self.connection.exec_driver_sql(native, bind_args(style, values))
        except sa_exc.IntegrityError as e:
            raise ConstraintError(str(e.orig)) from e
        except sa_exc.DBAPIError as e:
            raise ExecutionError(str(e.orig)) from e

    def _execute_many(self, sql, value_sets):
        style = self.paramstyle
        native = rebind(sql, style)
        logger.debug(f"Executing {native!r} for a batch of {len(value_sets)}")

        try:
            return self.connection.exec_driver_sql(
                native,
                [bind_args(style, values) for values in value_sets],
            )
        except sa_exc.IntegrityError as e:
            raise ConstraintError(str(e.orig)) from e
        except sa_exc.DBAPIError as e:
            raise ExecutionError(str(e.orig)) from e

    @staticmethod
    def _cursor(result, into):
        binding = RecordBinding.for_type(into) if into is not None else None
        return RowCursor(result, binding)

    @staticmethod
    def _exec_result(result, batch=False):
        last_insert_id = None if batch else result.lastrowid
        return ExecResult(rows_affected=result.rowcount, last_insert_id=last_insert_id or None)

    def exec(self, template, *args):
        statement = compile_positional(template)
        return self._exec_result(self._execute(statement.sql, statement.bind(args)))

    def query(self, template, *args, into=None):
        statement = compile_positional(template)
        return self._cursor(self._execute(statement.sql, statement.bind(args)), into)

    def select(self, into, template, *args):
        with self.query(template, *args, into=into) as cursor:
            return cursor.all()

    def get_or_none(self, into, template, *args):
        return self.query(template, *args, into=into).first()

    def get(self, into, template, *args):
        record = self.get_or_none(into, template, *args)
        if record is None:
            raise NotFoundError(f"No row for {template!r} with {preview(args)}")
        return record

    def query_in(self, template, *args, into=None):
        sql, values = expand_in(template, *args)
        return self.query(sql, *values, into=into)

    def select_in(self, into, template, *args):
        with self.query_in(template, *args, into=into) as cursor:
            return cursor.all()

    def named_query(self, template, source, into=None):
        statement = compile_named(template)
        values = statement.bind(BindingTable.of(source))
        return self._cursor(self._execute(statement.sql, values), into)

    def named_exec(self, template, source):
        """
        Run a ``:name`` statement bound from a mapping, a record, or a
        sequence of records of the same type.

        A sequence is sent as one ``executemany``. Whether it is atomic
        depends on the connection: on an autocommit connection each row
        commits on its own and a failure leaves earlier rows in place.
        """
        statement = compile_named(template)

        if not is_list_like(source):
            values = statement.bind(BindingTable.of(source))
            return self._exec_result(self._execute(statement.sql, values))

        records = list(source)
        if not records:
            raise EmptyListError("Cannot run a named batch without records")

        if len({type(record) for record in records}) > 1:
            raise BindError("All records of a batch must have the same type")

        value_sets = [statement.bind(BindingTable.of(record)) for record in records]
        return self._exec_result(self._execute_many(statement.sql, value_sets), batch=True)

    def prepare(self, template, into=None):
        return PreparedStatement(self, template, into=into)


class PreparedStatement:
    """
    A positional template scanned once and run many times.
    """

    def __init__(self, executor, template, into=None):
        self.executor = executor
        self.template = template
        self.statement = compile_positional(template)
        self.into = into

    def __repr__(self):
        return f"PreparedStatement({self.template!r})"

    def _run(self, args):
        return self.executor._execute(self.statement.sql, self.statement.bind(args))

    def exec(self, *args):
        return self.executor._exec_result(self._run(args))

    def query(self, *args):
        return self.executor._cursor(self._run(args), self.into)

    def select(self, *args):
        with self.query(*args) as cursor:
            return cursor.all()

    def get(self, *args):
        record = self.query(*args).first()
        if record is None:
            raise NotFoundError(f"No row for {self.template!r} with {preview(args)}")
        return record
