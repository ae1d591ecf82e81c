from .binding import BindingTable, RecordBinding
from .cursor import ExecResult, RowCursor
from .executor import PreparedStatement, QueryExecutor
from .params import ParamStyle, ParamValue, ValueKind, expand_in, rebind
from .store import Store
from .transaction import Transaction

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
