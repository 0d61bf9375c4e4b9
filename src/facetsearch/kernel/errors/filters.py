"""Filter errors – raised by the filter grammar."""

from __future__ import annotations

from typing import Any

from facetsearch.kernel.errors.base import FacetSearchError


class FilterError(FacetSearchError):
    """A filter condition or filter expression is unusable."""

    default_code = "filter_error"
    default_user_message = "This filter cannot be applied."


class InvalidFieldNameError(FilterError):
    """The field name does not match the engine's field-name rule."""

    default_code = "invalid_field_name"

    def __init__(self, field_name: str, **kwargs: Any) -> None:
        super().__init__(f"Invalid field name {field_name!r}", **kwargs)
        self.field_name = field_name


class TypeMismatchError(FilterError):
    """The condition value does not fit its operator."""

    default_code = "type_mismatch"

    def __init__(
        self,
        message: str,
        *,
        operator: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.operator = operator
        self.value = value


class FilterSyntaxError(FilterError):
    """A filter string could not be parsed."""

    default_code = "filter_syntax_error"

    def __init__(self, message: str, *, position: int | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.position = position


__all__ = [
    "FilterError",
    "FilterSyntaxError",
    "InvalidFieldNameError",
    "TypeMismatchError",
]
