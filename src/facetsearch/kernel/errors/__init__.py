"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    FacetSearchError
    ├── FilterError              (filters.py)
    │   ├── InvalidFieldNameError
    │   ├── TypeMismatchError
    │   └── FilterSyntaxError
    ├── ValidationError          (validation.py)
    ├── DispatchError            (dispatch.py)
    │   └── BatchTooLargeError
    └── InfrastructureError      (infrastructure.py)
        ├── TransportTimeoutError
        ├── ExternalServiceError
        └── SerializationError

``PerCollectionFault`` and ``FieldError`` are value objects, not exceptions.
Every error of either kind renders to an :class:`InlineMessage` anchored to
the specification or field it concerns.
"""

from facetsearch.kernel.errors.base import FacetSearchError, InlineMessage
from facetsearch.kernel.errors.dispatch import (
    BatchTooLargeError,
    DispatchError,
    PerCollectionFault,
)
from facetsearch.kernel.errors.filters import (
    FilterError,
    FilterSyntaxError,
    InvalidFieldNameError,
    TypeMismatchError,
)
from facetsearch.kernel.errors.infrastructure import (
    ExternalServiceError,
    InfrastructureError,
    SerializationError,
    TransportTimeoutError,
)
from facetsearch.kernel.errors.validation import FieldError, ValidationError

__all__ = [
    "BatchTooLargeError",
    "DispatchError",
    "ExternalServiceError",
    "FacetSearchError",
    "FieldError",
    "FilterError",
    "FilterSyntaxError",
    "InfrastructureError",
    "InlineMessage",
    "InvalidFieldNameError",
    "PerCollectionFault",
    "SerializationError",
    "TransportTimeoutError",
    "TypeMismatchError",
    "ValidationError",
]
