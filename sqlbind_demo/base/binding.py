from collections.abc import Mapping
from functools import lru_cache

from sqlalchemy import inspect

from ..errors import BindError, DecodeError
from ..logger import logger
from .params import ParamValue


class RecordBinding:
    """
    Correspondence between parameter / column names and the attributes of a
    record type.

    Declarative models get theirs from the mapper's column attributes, so a
    column declared as ``mapped_column("join_date")`` on attribute
    ``joined_on`` resolves ``:join_date``. Any other class declares it
    explicitly with a ``__bind_fields__`` mapping of name to attribute.
    """

    def __init__(self, record_type, fields):
        self.record_type = record_type
        self.fields = dict(fields)

    def __repr__(self):
        return f"RecordBinding({self.record_type.__name__} {self.fields})"

    @classmethod
    def for_type(cls, record_type):
        return _binding_for_type(record_type)

    def values(self, record):
        """
        Return a name => value dict read from ``record``.
        """
        return {
            name: getattr(record, attr, None)
            for name, attr in self.fields.items()
        }

    def decode(self, row):
        """
        Build a record from a result row.

        Every column of the row needs a destination field. Fields with no
        matching column are left unset.
        """
        mapping = row._mapping if hasattr(row, "_mapping") else row

        kwargs = {}
        for column, value in mapping.items():
            column = str(column)
            attr = self.fields.get(column)
            if attr is None:
                raise DecodeError(
                    f"Missing destination name '{column}' in {self.record_type.__name__}"
                )
            kwargs[attr] = value

        try:
            return self.record_type(**kwargs)
        except TypeError as e:
            raise DecodeError(f"Cannot build {self.record_type.__name__} from row: {e}") from e


@lru_cache(maxsize=None)
def _binding_for_type(record_type):
    declared = getattr(record_type, "__bind_fields__", None)
    if declared is not None:
        fields = dict(declared)

    else:
        mapper = inspect(record_type, raiseerr=False)
        if mapper is None:
            raise BindError(
                f"{record_type.__name__} is neither a mapped class nor declares __bind_fields__"
            )

        fields = {
            prop.columns[0].name: prop.key
            for prop in mapper.column_attrs
        }

    logger.debug(f"Built binding for {record_type.__name__}: {fields}")
    return RecordBinding(record_type, fields)


class BindingTable(Mapping):
    """
    Immutable name => ParamValue table that named statements bind from.
    """

    def __init__(self, values, source=None):
        self._values = dict(values)
        self.source = source

    def __getitem__(self, name):
        # Converted on access, unreferenced entries never fail
        return ParamValue.of(self._values[name])

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return f"BindingTable({self.source} {self._values})"

    @classmethod
    def from_mapping(cls, mapping):
        return cls(mapping, source="mapping")

    @classmethod
    def from_record(cls, record):
        binding = RecordBinding.for_type(type(record))
        return cls(binding.values(record), source=type(record).__name__)

    @classmethod
    def of(cls, source):
        if isinstance(source, BindingTable):
            return source
        if isinstance(source, Mapping):
            return cls.from_mapping(source)
        return cls.from_record(source)
