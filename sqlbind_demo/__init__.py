from .base import (
    BindingTable,
    ExecResult,
    ParamStyle,
    ParamValue,
    PreparedStatement,
    QueryExecutor,
    RecordBinding,
    RowCursor,
    Store,
    Transaction,
    ValueKind,
    expand_in,
    rebind,
)

__all__ = [
    "BindingTable",
    "ExecResult",
    "ParamStyle",
    "ParamValue",
    "PreparedStatement",
    "QueryExecutor",
    "RecordBinding",
    "RowCursor",
    "Store",
    "Transaction",
    "ValueKind",
    "expand_in",
    "rebind",
]

__version__ = '0.1.0'
