"""Validation errors – specification-level problems."""

from __future__ import annotations

import dataclasses
from typing import Any

from facetsearch.kernel.errors.base import FacetSearchError, InlineMessage


@dataclasses.dataclass(frozen=True)
class FieldError:
    """One problem with one attribute of a query specification.

    ``field`` is a path such as ``per_page`` or ``filter_conditions[1]``.
    """

    field: str
    message: str
    code: str = "invalid"

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message, "code": self.code}

    def inline(self, spec_id: str) -> InlineMessage:
        return InlineMessage(self.code, self.message, spec_id, self.field)


class ValidationError(FacetSearchError):
    """A query specification failed validation.

    ``errors`` holds every field-level failure, not just the first one.
    """

    default_code = "validation_error"
    default_user_message = "This search has problems to fix before it can run."

    def __init__(
        self,
        message: str,
        *,
        errors: list[FieldError] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[FieldError] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = [e.to_dict() for e in self.errors]
        return base


__all__ = ["FieldError", "ValidationError"]
