"""Value types produced by the extraction layer.

A key's value is decided once, from the size the decoder reports for it:
size > 1 gives an ``Array``, anything else a ``Scalar``.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

import numpy as np


@dataclass(frozen=True)
class Scalar:
    value: Union[str, int, float, None]

    def to_python(self) -> Any:
        if isinstance(self.value, np.generic):
            return self.value.item()
        return self.value

    def __str__(self) -> str:
        return str(self.to_python())


@dataclass(frozen=True, eq=False)
class Array:
    """Array value. Masked (bitmapped) points stay masked and serialise as None."""
    value: np.ndarray

    def __post_init__(self):
        if isinstance(self.value, np.ma.MaskedArray):
            data = np.ma.array(self.value, copy=True)
        else:
            data = np.array(self.value)
        data.flags.writeable = False
        object.__setattr__(self, "value", data)

    @property
    def shape(self):
        return self.value.shape

    @property
    def masked(self) -> bool:
        return bool(np.ma.is_masked(self.value))

    def __len__(self) -> int:
        return self.value.size

    def __eq__(self, other) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        if self.value.shape != other.value.shape:
            return False
        mask = np.ma.getmaskarray(self.value)
        if not np.array_equal(mask, np.ma.getmaskarray(other.value)):
            return False
        return bool(np.array_equal(np.ma.getdata(self.value)[~mask], np.ma.getdata(other.value)[~mask]))

    __hash__ = None

    def to_python(self) -> List[Any]:
        # MaskedArray.tolist() turns masked points into None
        return self.value.tolist()

    def __str__(self) -> str:
        return " ".join(str(v) for v in self.value.ravel().tolist())


Value = Union[Scalar, Array]

# Keys in decoder iteration order
Record = Dict[str, Value]


def record_to_python(record: Record) -> Dict[str, Any]:
    """Plain dict of the record, suitable for JSON"""
    return {key: value.to_python() for key, value in record.items()}


def value_text(value: Value) -> str:
    """Textual form used for exact parameter-name comparison"""
    if isinstance(value, Array):
        return str(value)
    raw = value.to_python()
    if isinstance(raw, bytes):
        return raw.decode("utf-8")
    return str(raw)


@dataclass(frozen=True)
class ParameterName:
    """Name-key value of one message, tagged with its 1-based message index"""
    message_index: int
    value: Value

    @property
    def text(self) -> str:
        return value_text(self.value)


@dataclass
class ParameterLookupResult:
    """Outcome of a parameter lookup: found records, or an empty not-found result"""
    parameter_name: str
    name_key: str
    message_indices: List[int] = field(default_factory=list)
    records: List[Record] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def unwrap(self) -> Union[Record, List[Record]]:
        """Single record for one match, otherwise the (possibly empty) list of records"""
        if len(self.records) == 1:
            return self.records[0]
        return list(self.records)
