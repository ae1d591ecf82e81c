"""
Placeholder scanning and rewriting.

Statement templates reach the executor in one of three marker styles:

- ``?`` positional markers, bound in order
- ``$N`` numbered markers, bound by index (an index may appear more than once)
- ``:name`` named markers, bound from a mapping or a record

Every template is first normalised to ``?`` markers plus an ordered value
list, then rebound to the paramstyle of the driver behind the connection.
Markers inside quoted strings, quoted identifiers and comments are ignored,
as is the ``::`` cast operator.
"""
import enum
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from functools import lru_cache

from ..errors import ArityError, BindError, EmptyListError, UnboundNameError
from ..helpers.utils import is_list_like

_TOKEN_RE = re.compile(
    r"""
    (?P<squote>'(?:[^']|'')*') |
    (?P<dquote>"(?:[^"]|"")*") |
    (?P<line_comment>--[^\n]*) |
    (?P<block_comment>/\*.*?\*/) |
    (?P<cast>::) |
    (?P<dollar>\$(?P<index>\d+)) |
    (?P<named>:(?P<name>[A-Za-z_]\w*)) |
    (?P<qmark>\?)
    """,
    re.VERBOSE | re.DOTALL,
)


class Marker(enum.Enum):
    QMARK = "?"
    DOLLAR = "$"
    NAMED = ":"


@dataclass(frozen=True)
class Placeholder:
    marker: Marker
    start: int
    end: int
    name: str = None
    index: int = None


class ParamStyle(str, enum.Enum):
    """
    Target marker styles. Values match DBAPI ``paramstyle`` strings, plus
    ``dollar`` for drivers that number markers as ``$1``.
    """
    QMARK = "qmark"
    NUMERIC = "numeric"
    NAMED = "named"
    FORMAT = "format"
    PYFORMAT = "pyformat"
    DOLLAR = "dollar"


_RENDERERS = {
    ParamStyle.QMARK: lambda n: "?",
    ParamStyle.NUMERIC: lambda n: f":{n}",
    ParamStyle.NAMED: lambda n: f":arg{n}",
    ParamStyle.FORMAT: lambda n: "%s",
    ParamStyle.PYFORMAT: lambda n: f"%(arg{n})s",
    ParamStyle.DOLLAR: lambda n: f"${n}",
}

_KEYWORD_STYLES = (ParamStyle.NAMED, ParamStyle.PYFORMAT)
_PERCENT_STYLES = (ParamStyle.FORMAT, ParamStyle.PYFORMAT)


class ValueKind(enum.Enum):
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    TEXT = "text"
    BLOB = "blob"


@dataclass(frozen=True)
class ParamValue:
    """
    A bound value tagged with the kind of SQL literal it stands for.
    """
    kind: ValueKind
    value: object

    @classmethod
    def of(cls, value):
        if isinstance(value, ParamValue):
            return value
        if value is None:
            return cls(ValueKind.NULL, None)
        # bool is a subclass of int
        if isinstance(value, bool):
            return cls(ValueKind.BOOL, value)
        if isinstance(value, int):
            return cls(ValueKind.INT, value)
        if isinstance(value, (float, Decimal)):
            return cls(ValueKind.FLOAT, float(value))
        if isinstance(value, str):
            return cls(ValueKind.TEXT, value)
        if isinstance(value, datetime):
            return cls(ValueKind.TEXT, value.isoformat(sep=" "))
        if isinstance(value, date):
            return cls(ValueKind.TEXT, value.isoformat())
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(ValueKind.BLOB, bytes(value))
        if isinstance(value, enum.Enum):
            return cls.of(value.value)

        raise BindError(f"Unsupported parameter type: {type(value).__name__}")


@lru_cache(maxsize=512)
def scan(sql):
    """
    Return the placeholders of ``sql`` in order of appearance.
    """
    placeholders = []
    for match in _TOKEN_RE.finditer(sql):
        if match.group("qmark"):
            placeholders.append(Placeholder(Marker.QMARK, match.start(), match.end()))
        elif match.group("dollar"):
            placeholders.append(Placeholder(
                Marker.DOLLAR, match.start(), match.end(), index=int(match.group("index"))
            ))
        elif match.group("named"):
            placeholders.append(Placeholder(
                Marker.NAMED, match.start(), match.end(), name=match.group("name")
            ))
    return tuple(placeholders)


def _splice(sql, placeholders, render, escape_percent=False):
    parts = []
    pos = 0
    for i, placeholder in enumerate(placeholders):
        text = sql[pos:placeholder.start]
        parts.append(text.replace("%", "%%") if escape_percent else text)
        parts.append(render(i, placeholder))
        pos = placeholder.end

    tail = sql[pos:]
    parts.append(tail.replace("%", "%%") if escape_percent else tail)
    return "".join(parts)


@dataclass(frozen=True)
class PositionalStatement:
    """
    A template normalised to ``?`` markers.

    ``order`` gives, for each marker, the index of the argument it takes,
    ``arity`` the number of arguments the caller must supply.
    """
    sql: str
    order: tuple
    arity: int

    def check_arity(self, args):
        if len(args) != self.arity:
            raise ArityError(self.arity, len(args))

    def bind(self, args):
        self.check_arity(args)
        return tuple(ParamValue.of(args[i]).value for i in self.order)


@dataclass(frozen=True)
class NamedStatement:
    """
    A template with its ``:name`` markers replaced by ``?``.
    """
    sql: str
    names: tuple

    def bind(self, table):
        values = []
        for name in self.names:
            if name not in table:
                raise UnboundNameError(name, getattr(table, "source", None))
            values.append(ParamValue.of(table[name]).value)
        return tuple(values)


@lru_cache(maxsize=512)
def compile_positional(sql):
    placeholders = scan(sql)

    for placeholder in placeholders:
        if placeholder.marker is Marker.NAMED:
            raise BindError(f"Named placeholder ':{placeholder.name}' in a positional statement")

    markers = {p.marker for p in placeholders}
    if markers == {Marker.QMARK, Marker.DOLLAR}:
        raise BindError("Cannot mix '?' and '$N' placeholders in one statement")

    if Marker.DOLLAR not in markers:
        return PositionalStatement(sql, tuple(range(len(placeholders))), len(placeholders))

    indexes = sorted({p.index for p in placeholders})
    if indexes != list(range(1, len(indexes) + 1)):
        raise BindError(f"'$N' placeholders must be numbered from $1 without gaps, got {indexes}")

    return PositionalStatement(
        _splice(sql, placeholders, lambda i, p: "?"),
        tuple(p.index - 1 for p in placeholders),
        len(indexes),
    )


@lru_cache(maxsize=512)
def compile_named(sql):
    placeholders = scan(sql)

    for placeholder in placeholders:
        if placeholder.marker is not Marker.NAMED:
            marker = sql[placeholder.start:placeholder.end]
            raise BindError(f"Positional placeholder '{marker}' in a named statement")

    return NamedStatement(
        _splice(sql, placeholders, lambda i, p: "?"),
        tuple(p.name for p in placeholders),
    )


def expand_in(sql, *args):
    """
    Expand every list-like argument into one ``?`` per element.

        >>> expand_in("SELECT * FROM authors WHERE id IN (?)", [1, 2, 3])
        ('SELECT * FROM authors WHERE id IN (?, ?, ?)', [1, 2, 3])

    Scalar arguments keep their single marker. The returned statement is in
    ``?`` form whatever the input style was; pass it through ``rebind``
    before handing it to a driver with another paramstyle.
    """
    statement = compile_positional(sql)
    statement.check_arity(args)

    ordered = [args[i] for i in statement.order]
    values = []

    def render(i, placeholder):
        arg = ordered[i]
        if not is_list_like(arg):
            values.append(arg)
            return "?"

        items = list(arg)
        if not items:
            raise EmptyListError(f"Empty list bound to placeholder {i + 1}, cannot expand IN clause")

        values.extend(items)
        return ", ".join(["?"] * len(items))

    expanded = _splice(statement.sql, scan(statement.sql), render)
    return expanded, values


def rebind(sql, style):
    """
    Rewrite the ``?`` markers of ``sql`` into ``style``.
    """
    style = ParamStyle(style)
    if style is ParamStyle.QMARK:
        return sql

    placeholders = [p for p in scan(sql) if p.marker is Marker.QMARK]
    render = _RENDERERS[style]
    return _splice(
        sql,
        placeholders,
        lambda i, p: render(i + 1),
        escape_percent=style in _PERCENT_STYLES,
    )


def bind_args(style, values):
    """
    Shape positional values the way a driver of ``style`` expects them.
    """
    if ParamStyle(style) in _KEYWORD_STYLES:
        return {f"arg{i}": value for i, value in enumerate(values, 1)}
    return tuple(values)
