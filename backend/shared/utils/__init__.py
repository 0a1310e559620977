"""
Utilities module: Exceptions, results, schemas.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    ValidationError,
    ConflictError,
    InternalError,
)
from shared.utils.result import Result, as_result

__all__ = [
    "AppException",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "InternalError",
    "Result",
    "as_result",
]
