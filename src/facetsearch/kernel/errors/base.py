"""Kernel errors – the root error and the inline message every error renders to.

Nothing is reported globally: an error belongs to one search specification,
one field of it (a facet, a filter condition), or the batch as a whole, and
is shown there.
"""

from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True)
class InlineMessage:
    """A user-facing message anchored where the problem is.

    ``spec_id`` and ``field`` are both ``None`` for batch-wide problems.
    """

    code: str
    text: str
    spec_id: str | None = None
    field: str | None = None

    @property
    def scope(self) -> str:
        if self.spec_id is None:
            return "batch"
        return self.spec_id if self.field is None else f"{self.spec_id}/{self.field}"


class FacetSearchError(Exception):
    """Root of the error hierarchy.

    Args:
        message: Developer-facing description, used for logs.
        code: Machine-readable slug (defaults to ``default_code``).
        spec_id: Specification the error belongs to; ``None`` for the batch.
        field: Attribute or facet field inside that specification.
        user_message: Short text for the inline message (defaults to
            ``default_user_message``).
        detail: Extra structured context for logs.
        cause: Original exception that triggered this error.
    """

    default_code: str = "facetsearch_error"
    default_user_message: str = "Search failed."

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        spec_id: str | None = None,
        field: str | None = None,
        user_message: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.spec_id = spec_id
        self.field = field
        self.user_message = user_message or self.default_user_message
        self.detail: dict[str, Any] = detail or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.spec_id is None:
            return self.message
        return f"{self.inline().scope}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}, spec_id={self.spec_id!r})"

    def inline(self) -> InlineMessage:
        return InlineMessage(self.code, self.user_message, self.spec_id, self.field)

    def to_dict(self) -> dict[str, Any]:
        """Structured form for log events; ``detail`` and ``cause`` only when set."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "scope": self.inline().scope,
        }
        if self.detail:
            payload["detail"] = self.detail
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


__all__ = ["FacetSearchError", "InlineMessage"]
