"""
Uniform success/failure values returned by domain operations.

Domain services raise `AppException` subclasses internally; public
operations are wrapped with `as_result` so callers always receive a
`Result` and never an exception.

Usage:
    class ReservationService:
        @as_result
        def seat_customer(self, reservation_id: int) -> SeatResult:
            ...

    result = service.seat_customer(7)
    if result.ok:
        use(result.data)
    else:
        show(result.error)
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from shared.config.logging import get_logger
from shared.utils.exceptions import (
    AppException,
    DatabaseError,
    InternalError,
    ValidationError,
)

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a domain operation: either `data` or an `error` message."""

    ok: bool
    data: T | None = None
    error: str | None = None
    code: str | None = None
    status_code: int = 200

    @classmethod
    def success(cls, data: T) -> Result[T]:
        return cls(ok=True, data=data)

    @classmethod
    def fail(cls, exc: AppException) -> Result[T]:
        return cls(
            ok=False,
            error=exc.detail,
            code=exc.code,
            status_code=exc.status_code,
        )

    def unwrap(self) -> T:
        """Return data, raising if this is a failure (tests and scripts only)."""
        if not self.ok:
            raise RuntimeError(f"{self.code}: {self.error}")
        return self.data  # type: ignore[return-value]

    def to_response(self) -> dict[str, Any]:
        """JSON-ready body: {"success": true, "data": ...} or {"success": false, "error": ...}."""
        if self.ok:
            data = self.data
            if isinstance(data, BaseModel):
                data = data.model_dump(mode="json")
            elif isinstance(data, list):
                data = [
                    d.model_dump(mode="json") if isinstance(d, BaseModel) else d
                    for d in data
                ]
            return {"success": True, "data": data}
        return {"success": False, "error": self.error, "code": self.code}


def format_validation_error(exc: PydanticValidationError) -> str:
    """Flatten pydantic errors into one user-facing message."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "Datos inválidos: " + "; ".join(parts)


def as_result(func: Callable[..., T]) -> Callable[..., Result[T]]:
    """
    Wrap a service method so every outcome is a `Result`.

    - `AppException` -> failure carrying its message and code
    - pydantic validation errors -> `ValidationError` failure
    - `SQLAlchemyError` -> rollback, logged, generic `DatabaseError` failure
    - anything else -> rollback, logged, generic `InternalError` failure

    The wrapped method's instance must expose the session as `self._db`.
    """

    @functools.wraps(func)
    def wrapper(self, *args: Any, **kwargs: Any) -> Result[T]:
        operation = func.__name__
        try:
            return Result.success(func(self, *args, **kwargs))
        except AppException as exc:
            _rollback(self)
            return Result.fail(exc)
        except PydanticValidationError as exc:
            _rollback(self)
            return Result.fail(ValidationError(format_validation_error(exc), operation=operation))
        except SQLAlchemyError:
            _rollback(self)
            logger.error("Store failure", operation=operation, exc_info=True)
            return Result.fail(DatabaseError(operation))
        except Exception:
            _rollback(self)
            logger.error("Unexpected failure", operation=operation, exc_info=True)
            return Result.fail(InternalError(operation=operation))

    return wrapper


def _rollback(service: Any) -> None:
    db = getattr(service, "_db", None)
    if db is not None:
        db.rollback()
