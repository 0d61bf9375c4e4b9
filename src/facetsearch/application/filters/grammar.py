"""Application filters – the engine's textual ``filter_by`` grammar.

Clause forms::

    field:value          MATCH
    field:=value         EXACT (``=`` is an alias)
    field:!=value        NE
    field:>value         GT  (also >=, <, <=)
    field:[a,b,c]        IN
    field:[min..max]     RANGE

Clauses are joined with ``&&`` / ``||``. Conditions combine left to right;
whenever the connective changes the accumulated prefix is parenthesised so
the engine's own precedence cannot regroup it::

    [a, OR b, AND c]  ->  (a || b) && c

String values that are not plain identifiers, or that would read back as a
number or boolean, are wrapped in backticks.
"""
from __future__ import annotations

import dataclasses
import math
import re
from typing import Any, Iterable, Union

from facetsearch.application.filters.condition import (
    FilterCondition,
    FilterOperator,
    LogicalOperator,
    coerce_number,
    is_number,
    is_valid_field_name,
    split_in_value,
)
from facetsearch.kernel.errors import FilterSyntaxError, InvalidFieldNameError, TypeMismatchError

_INT_RE = re.compile(r"-?\d+")
_FLOAT_RE = re.compile(r"-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")
_BARE_RE = re.compile(r"[A-Za-z0-9_\-@/]+(?:\.[A-Za-z0-9_\-@/]+)*")
_NUMBER = r"-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?"
_RANGE_RE = re.compile(rf"\s*({_NUMBER})\s*\.\.\s*({_NUMBER})\s*")

_PREFIX: dict[FilterOperator, str] = {
    FilterOperator.MATCH: "",
    FilterOperator.EXACT: "=",
    FilterOperator.EQ: "=",
    FilterOperator.NE: "!=",
    FilterOperator.GT: ">",
    FilterOperator.GE: ">=",
    FilterOperator.LT: "<",
    FilterOperator.LE: "<=",
}

# Longest prefixes first.
_OPERATOR_TOKENS: tuple[tuple[str, FilterOperator], ...] = (
    ("!=", FilterOperator.NE),
    (">=", FilterOperator.GE),
    ("<=", FilterOperator.LE),
    (">", FilterOperator.GT),
    ("<", FilterOperator.LT),
    ("=", FilterOperator.EXACT),
)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize(condition: FilterCondition) -> str:
    """Render one condition as a ``filter_by`` clause.

    Raises:
        InvalidFieldNameError: the field name breaks the field-name rule.
        TypeMismatchError: the value does not fit the operator.
    """
    field = condition.field
    if not isinstance(field, str) or not is_valid_field_name(field):
        raise InvalidFieldNameError(str(field))
    operator = condition.operator
    value = condition.value

    if operator is FilterOperator.IN:
        items = split_in_value(value)
        if not items:
            raise TypeMismatchError("'in' needs at least one value", operator=operator.value, value=value)
        return f"{field}:[{','.join(format_literal(item, operator) for item in items)}]"

    if operator is FilterOperator.RANGE:
        if not isinstance(value, (list, tuple)) or len(value) != 2:  # noqa: PLR2004
            raise TypeMismatchError(
                "'range' needs a two-element numeric tuple", operator=operator.value, value=value
            )
        low, high = (_require_number(v, operator) for v in value)
        return f"{field}:[{format_literal(low, operator)}..{format_literal(high, operator)}]"

    if isinstance(value, (list, tuple, set, frozenset, dict)):
        raise TypeMismatchError(
            f"operator {operator.value!r} takes a single value", operator=operator.value, value=value
        )
    if operator.is_numeric:
        value = _require_number(value, operator)
    return f"{field}:{_PREFIX[operator]}{format_literal(value, operator)}"


def serialize_all(conditions: Iterable[FilterCondition]) -> str:
    """Join conditions left to right; no conditions means no filter (``""``)."""
    expr = ""
    previous: LogicalOperator | None = None
    for index, condition in enumerate(conditions):
        clause = serialize(condition)
        if index == 0:
            expr = clause
            continue
        connective = condition.logical_operator or LogicalOperator.AND
        if previous is not None and connective is not previous:
            expr = f"({expr})"
        expr = f"{expr} {connective.symbol} {clause}"
        previous = connective
    return expr


def format_literal(value: Any, operator: FilterOperator | None = None) -> str:
    op = operator.value if operator is not None else None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TypeMismatchError("value must be a finite number", operator=op, value=value)
        return repr(value)
    if isinstance(value, str):
        if not value:
            raise TypeMismatchError("value must not be empty", operator=op, value=value)
        if "`" in value:
            raise TypeMismatchError("value must not contain a backtick", operator=op, value=value)
        if _needs_quoting(value):
            return f"`{value}`"
        return value
    raise TypeMismatchError(
        f"unsupported value type {type(value).__name__}", operator=op, value=value
    )


def literal_from_text(text: str) -> Any:
    """Read an unquoted literal: booleans, integers, floats, else the string."""
    if text == "true":
        return True
    if text == "false":
        return False
    if _INT_RE.fullmatch(text):
        return int(text)
    if _FLOAT_RE.fullmatch(text):
        return float(text)
    return text


def _needs_quoting(text: str) -> bool:
    return not _BARE_RE.fullmatch(text) or literal_from_text(text) != text


def _require_number(value: Any, operator: FilterOperator) -> int | float:
    number = coerce_number(value)
    if not is_number(number):
        raise TypeMismatchError(
            f"operator {operator.value!r} needs a numeric value", operator=operator.value, value=value
        )
    if isinstance(number, float) and not math.isfinite(number):
        raise TypeMismatchError("value must be a finite number", operator=operator.value, value=value)
    return number


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

_Node = Union[FilterCondition, tuple[LogicalOperator, "_Node", "_Node"]]


def parse(text: str) -> list[FilterCondition]:
    """Parse a ``filter_by`` string back into a flat condition list.

    ``&&`` binds tighter than ``||`` and parentheses group. The expression
    must combine left to right (what :func:`serialize_all` produces, or an
    associative regrouping of it); anything else raises
    :class:`FilterSyntaxError`. An empty string means no filter.
    """
    if not text.strip():
        return []
    parser = _Parser(text)
    node = parser.parse_or()
    parser.skip_ws()
    if not parser.at_end():
        parser.fail("unexpected trailing input")
    return _flatten(node)


def _flatten(node: _Node) -> list[FilterCondition]:
    if isinstance(node, FilterCondition):
        return [node]
    op, left, right = node
    items = _flatten(left)
    for leaf in _chain(right, op):
        items.append(dataclasses.replace(leaf, logical_operator=op))
    return items


def _chain(node: _Node, op: LogicalOperator) -> list[FilterCondition]:
    if isinstance(node, FilterCondition):
        return [node]
    node_op, left, right = node
    if node_op is not op:
        raise FilterSyntaxError(
            "filter groups mixed connectives in a way that cannot be read left to right"
        )
    return _chain(left, op) + _chain(right, op)


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    # -- helpers ---------------------------------------------------------

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def skip_ws(self) -> None:
        while not self.at_end() and self.text[self.pos].isspace():
            self.pos += 1

    def peek(self, token: str) -> bool:
        return self.text.startswith(token, self.pos)

    def accept(self, token: str) -> bool:
        self.skip_ws()
        if self.peek(token):
            self.pos += len(token)
            return True
        return False

    def fail(self, message: str) -> None:
        raise FilterSyntaxError(f"{message} at position {self.pos}", position=self.pos)

    # -- grammar ---------------------------------------------------------

    def parse_or(self) -> _Node:
        node = self.parse_and()
        while self.accept("||"):
            node = (LogicalOperator.OR, node, self.parse_and())
        return node

    def parse_and(self) -> _Node:
        node = self.parse_primary()
        while self.accept("&&"):
            node = (LogicalOperator.AND, node, self.parse_primary())
        return node

    def parse_primary(self) -> _Node:
        if self.accept("("):
            node = self.parse_or()
            if not self.accept(")"):
                self.fail("expected ')'")
            return node
        return self.parse_condition()

    def parse_condition(self) -> FilterCondition:
        self.skip_ws()
        start = self.pos
        while not self.at_end() and self.text[self.pos] not in ":()" and not self.text[self.pos].isspace():
            self.pos += 1
        field = self.text[start:self.pos]
        if not field:
            self.fail("expected a field name")
        if not self.peek(":"):
            self.fail(f"expected ':' after field {field!r}")
        if not is_valid_field_name(field):
            raise InvalidFieldNameError(field)
        self.pos += 1

        operator = FilterOperator.MATCH
        for token, candidate in _OPERATOR_TOKENS:
            if self.peek(token):
                operator = candidate
                self.pos += len(token)
                break
        self.skip_ws()

        if self.peek("["):
            if operator not in (FilterOperator.MATCH, FilterOperator.EXACT):
                self.fail(f"operator {_PREFIX[operator]!r} cannot take a list")
            operator, value = self.parse_list()
        elif self.peek("`"):
            value = self.parse_quoted()
        else:
            value = literal_from_text(self.parse_bare())

        condition = FilterCondition(field=field, operator=operator, value=value)
        serialize(condition)
        return condition

    def parse_quoted(self) -> str:
        end = self.text.find("`", self.pos + 1)
        if end < 0:
            self.fail("unterminated backtick")
        value = self.text[self.pos + 1:end]
        self.pos = end + 1
        return value

    def parse_bare(self) -> str:
        start = self.pos
        while not self.at_end():
            ch = self.text[self.pos]
            if ch.isspace() or ch in "()" or self.peek("&&") or self.peek("||"):
                break
            self.pos += 1
        if self.pos == start:
            self.fail("expected a value")
        return self.text[start:self.pos]

    def parse_list(self) -> tuple[FilterOperator, Any]:
        self.pos += 1  # '['
        start = self.pos
        items: list[Any] = []
        current: list[str] = []
        quoted: str | None = None
        while True:
            if self.at_end():
                self.fail("unterminated '['")
            ch = self.text[self.pos]
            if ch == "`":
                quoted = self.parse_quoted()
                continue
            if ch in ",]":
                items.append(self._list_item(current, quoted))
                current, quoted = [], None
                self.pos += 1
                if ch == "]":
                    break
                continue
            current.append(ch)
            self.pos += 1

        content = self.text[start:self.pos - 1]
        match = _RANGE_RE.fullmatch(content)
        if match and "`" not in content:
            return FilterOperator.RANGE, (literal_from_text(match.group(1)), literal_from_text(match.group(2)))
        return FilterOperator.IN, tuple(items)

    def _list_item(self, chars: list[str], quoted: str | None) -> Any:
        text = "".join(chars).strip()
        if quoted is not None:
            if text:
                self.fail("unexpected text after quoted list item")
            return quoted
        if not text:
            self.fail("empty list item")
        return literal_from_text(text)


__all__ = ["format_literal", "literal_from_text", "parse", "serialize", "serialize_all"]
