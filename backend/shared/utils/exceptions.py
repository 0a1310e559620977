"""
Centralized domain exceptions for consistent error handling.

Domain services raise these; the `as_result` boundary converts them into
failure values, and routers map `status_code` onto the HTTP response.

Usage:
    from shared.utils.exceptions import NotFoundError, ConflictError, ValidationError

    raise NotFoundError("Mesa", table_id)
    raise ConflictError("La mesa ya tiene una ronda activa", table_id=table_id)
    raise ValidationError("Debe incluir al menos un producto")
"""

from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(Exception):
    """
    Base exception with automatic logging.

    All domain exceptions inherit from this class to ensure consistent
    logging and a uniform failure shape (code, status_code, detail).
    """

    code: str = "APP_ERROR"
    status_code: int = 400

    def __init__(
        self,
        detail: str,
        log_level: str = "warning",
        **log_context: Any,
    ):
        self.detail = detail
        self.context = log_context

        # Log the error with context
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, code=self.code, **log_context)

        super().__init__(detail)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Referenced entity does not exist (404).

    Usage:
        raise NotFoundError("Mesa", 5)
        raise NotFoundError("Ronda activa", table_id=5)
    """

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} con ID {entity_id} no encontrado"
        else:
            detail = f"{entity} no encontrado"

        super().__init__(detail, entity=entity, entity_id=entity_id, **log_context)


class ActiveRondaNotFoundError(NotFoundError):
    """Table has no open ronda to operate on."""

    def __init__(self, table_id: int | None = None, **log_context: Any):
        super().__init__("Ronda activa", table_id=table_id, **log_context)


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Malformed or missing input (400).

    Usage:
        raise ValidationError("Cantidad inválida", field="quantity", value=0)
    """

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(detail, **log_context)


class InvalidReferenceError(ValidationError):
    """Input references an entity that cannot be used (unknown or inactive product)."""

    code = "INVALID_REFERENCE"

    def __init__(self, entity: str, entity_ids: list[int], **log_context: Any):
        ids_str = ", ".join(str(i) for i in entity_ids)
        detail = f"{entity} inexistente o inactivo: {ids_str}"
        super().__init__(detail, entity=entity, entity_ids=entity_ids, **log_context)


class InvalidTransitionError(ValidationError):
    """Invalid status transition."""

    code = "INVALID_TRANSITION"

    def __init__(self, entity: str, from_status: str, to_status: str, **log_context: Any):
        detail = f"Transición inválida de '{from_status}' a '{to_status}' para {entity}"
        super().__init__(
            detail, entity=entity, from_status=from_status, to_status=to_status, **log_context
        )


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Operation would violate an invariant (409).

    Usage:
        raise ConflictError("La mesa ya tiene una ronda activa")
    """

    code = "CONFLICT"
    status_code = 409

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(detail, **log_context)


class DuplicateEntityError(ConflictError):
    """Entity with the same unique identifier already exists."""

    def __init__(self, entity: str, identifier: str | int, **log_context: Any):
        detail = f"{entity} con identificador '{identifier}' ya existe"
        super().__init__(detail, entity=entity, identifier=identifier, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Unexpected store failure (500). The detail is always generic.

    Usage:
        raise InternalError(operation="close_table")
    """

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, detail: str = "Error interno del servidor", **log_context: Any):
        super().__init__(detail, log_level="error", **log_context)


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Error de base de datos durante {operation}. Por favor intente de nuevo."
        super().__init__(detail, operation=operation, **log_context)
