"""Kernel value types – public re-export surface.

Modules:
  ids.py    – new_id
  result.py – Ok, Err, Result
"""

from facetsearch.kernel.types.ids import new_id
from facetsearch.kernel.types.result import Err, Ok, Result

__all__ = ["Err", "Ok", "Result", "new_id"]
