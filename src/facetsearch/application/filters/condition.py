"""Application filters – FilterCondition value object."""
from __future__ import annotations

import dataclasses
import re
from enum import Enum
from typing import Any

from facetsearch.kernel.types import new_id

FIELD_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

Scalar = str | int | float | bool


class FilterOperator(str, Enum):
    EQ = "="
    NE = "!="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    MATCH = ":"
    EXACT = ":="
    IN = "in"
    RANGE = "range"

    @property
    def is_numeric(self) -> bool:
        return self in _NUMERIC_OPERATORS


_NUMERIC_OPERATORS = frozenset(
    {FilterOperator.GT, FilterOperator.GE, FilterOperator.LT, FilterOperator.LE, FilterOperator.RANGE}
)


class LogicalOperator(str, Enum):
    AND = "AND"
    OR = "OR"

    @property
    def symbol(self) -> str:
        return "&&" if self is LogicalOperator.AND else "||"


@dataclasses.dataclass(frozen=True)
class FilterCondition:
    """One filter clause: ``field``, ``operator``, ``value``.

    ``logical_operator`` is the connective *preceding* this condition when
    conditions are combined; it is ignored on the first condition.
    ``id`` only tracks the UI row and does not take part in equality.
    """

    field: str
    operator: FilterOperator
    value: Any
    logical_operator: LogicalOperator | None = None
    id: str = dataclasses.field(default_factory=new_id, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.operator, FilterOperator):
            object.__setattr__(self, "operator", FilterOperator(self.operator))
        if self.logical_operator is not None and not isinstance(self.logical_operator, LogicalOperator):
            object.__setattr__(self, "logical_operator", LogicalOperator(self.logical_operator))

    def canonical(self, *, first: bool = False) -> "FilterCondition":
        """Return the form this condition takes after a serialize/parse trip.

        ``=`` becomes ``:=``, comma strings for ``in`` become tuples, numeric
        strings under numeric operators become numbers, and the connective is
        dropped on the first condition and defaults to AND elsewhere.
        """
        operator = FilterOperator.EXACT if self.operator is FilterOperator.EQ else self.operator
        value = self.value
        if operator is FilterOperator.IN:
            value = tuple(split_in_value(value))
        elif operator is FilterOperator.RANGE and isinstance(value, (list, tuple)):
            value = tuple(coerce_number(v) for v in value)
        elif operator.is_numeric:
            value = coerce_number(value)
        connective = None if first else (self.logical_operator or LogicalOperator.AND)
        return dataclasses.replace(self, operator=operator, value=value, logical_operator=connective)


def is_valid_field_name(name: str) -> bool:
    return isinstance(name, str) and FIELD_NAME_RE.fullmatch(name) is not None


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_number(value: Any) -> Any:
    """Turn numeric strings into ``int``/``float``; leave everything else as is."""
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return value
    return value


def split_in_value(value: Any) -> list[Any]:
    """Items of an ``in`` value: a sequence as is, a string split on commas."""
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def canonicalize(conditions: list[FilterCondition]) -> list[FilterCondition]:
    return [c.canonical(first=(i == 0)) for i, c in enumerate(conditions)]


__all__ = [
    "FIELD_NAME_RE",
    "FilterCondition",
    "FilterOperator",
    "LogicalOperator",
    "Scalar",
    "canonicalize",
    "coerce_number",
    "is_number",
    "is_valid_field_name",
    "split_in_value",
]
