from dataclasses import dataclass
from typing import Optional

from sqlalchemy import exc as sa_exc

from ..errors import DecodeError, ExecutionError


@dataclass(frozen=True)
class ExecResult:
    """
    Outcome of an INSERT, UPDATE or DELETE.
    """
    rows_affected: int
    last_insert_id: Optional[int] = None


class RowCursor:
    """
    A lazy, forward-only cursor over a query result.

    Rows are fetched from the driver one at a time and decoded through the
    record binding, if any. Once consumed the cursor is closed and cannot be
    restarted.
    """
    def __init__(self, result, binding=None):
        self._result = result
        self.binding = binding
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self):
        if self.closed:
            raise StopIteration

        try:
            row = self._result.fetchone()
        except sa_exc.DBAPIError as e:
            self.close()
            raise ExecutionError(str(e.orig)) from e

        if row is None:
            self.close()
            raise StopIteration

        if self.binding is None:
            return row

        try:
            return self.binding.decode(row)
        except DecodeError:
            self.close()
            raise

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def keys(self):
        return list(self._result.keys())

    def first(self):
        """
        Return the next record, or None, and close the cursor.
        """
        try:
            return next(self)
        except StopIteration:
            return None
        finally:
            self.close()

    def all(self):
        return list(self)

    def close(self):
        if not self.closed:
            self._result.close()
            self.closed = True
