"""
Base Service Classes.

Provides the common CRUD skeleton for reference-data services (zones, tables,
users, products). Lifecycle services (rondas, orders, groups, reservations)
hold their own transactional logic.

Architecture:
    Router (thin) → Service (business logic, returns Result) → Session → Model

Usage:
    from ronda_api.services.base_service import BaseCRUDService

    class ZoneService(BaseCRUDService[Zone, ZoneOutput]):
        def __init__(self, db: Session):
            super().__init__(
                db=db,
                model=Zone,
                output_schema=ZoneOutput,
                create_schema=ZoneCreate,
                update_schema=ZoneUpdate,
                entity_name="Zona",
            )

        def _validate_delete(self, entity: Zone) -> None:
            ...
"""

from __future__ import annotations

from typing import Any, Generic, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ronda_api.models import Base
from ronda_api.services.builders import build_output
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import DuplicateEntityError, NotFoundError
from shared.utils.result import as_result
from shared.utils.schemas import validate_payload

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
OutputT = TypeVar("OutputT", bound=BaseModel)


class BaseCRUDService(Generic[ModelT, OutputT]):
    """
    Base service for entities with CRUD operations.

    Public methods return `Result`; subclasses customize behaviour through
    the `_validate_*` hooks, `_list_query` and `to_output`.
    """

    # Columns an update may explicitly clear with null
    nullable_fields: frozenset[str] = frozenset()
    # Column reported when the store rejects a duplicate on commit
    unique_field: str | None = None

    def __init__(
        self,
        db: Session,
        model: Type[ModelT],
        output_schema: Type[OutputT],
        create_schema: Type[BaseModel],
        update_schema: Type[BaseModel],
        entity_name: str,
    ):
        self._db = db
        self._model = model
        self._output_schema = output_schema
        self._create_schema = create_schema
        self._update_schema = update_schema
        self._entity_name = entity_name

    @property
    def entity_name(self) -> str:
        """Human-readable entity name for messages."""
        return self._entity_name

    # =========================================================================
    # Read Operations
    # =========================================================================

    @as_result
    def get_by_id(self, entity_id: int) -> OutputT:
        return self.to_output(self._get_entity(entity_id))

    @as_result
    def list_all(self) -> list[OutputT]:
        entities = self._db.scalars(self._list_query()).all()
        return [self.to_output(e) for e in entities]

    # =========================================================================
    # Write Operations
    # =========================================================================

    @as_result
    def create(self, payload: BaseModel | dict[str, Any]) -> OutputT:
        """
        Create new entity.

        Raises (as failures):
            ValidationError: malformed payload
            ConflictError: uniqueness rules from `_validate_create`
        """
        data = validate_payload(self._create_schema, payload).model_dump()
        self._validate_create(data)

        entity = self._model(**data)
        self._db.add(entity)
        self._commit_unique(data)
        self._db.refresh(entity)

        logger.info(f"{self._entity_name} created", entity_id=entity.id)
        return self.to_output(entity)

    @as_result
    def update(self, entity_id: int, payload: BaseModel | dict[str, Any]) -> OutputT:
        """Partial update: only fields present in the payload are written."""
        data = {
            key: value
            for key, value in validate_payload(self._update_schema, payload)
            .model_dump(exclude_unset=True)
            .items()
            if value is not None or key in self.nullable_fields
        }
        entity = self._get_entity(entity_id, lock=True)

        self._validate_update(entity, data)

        for field_name, value in data.items():
            setattr(entity, field_name, value)

        self._commit_unique(data, entity)
        self._db.refresh(entity)

        logger.info(
            f"{self._entity_name} updated", entity_id=entity_id, fields=sorted(data.keys())
        )
        return self.to_output(entity)

    @as_result
    def delete(self, entity_id: int) -> dict[str, int]:
        entity = self._get_entity(entity_id, lock=True)
        self._validate_delete(entity)

        self._db.delete(entity)
        safe_commit(self._db)

        logger.info(f"{self._entity_name} deleted", entity_id=entity_id)
        return {"id": entity_id}

    # =========================================================================
    # Transformation and queries
    # =========================================================================

    def to_output(self, entity: ModelT) -> OutputT:
        """
        Convert entity to output DTO.

        Override this method for custom transformation logic.
        """
        return build_output(entity, self._output_schema)

    def _list_query(self):
        return select(self._model).order_by(self._model.id)

    def _get_entity(self, entity_id: int, *, lock: bool = False) -> ModelT:
        stmt = select(self._model).where(self._model.id == entity_id)
        if lock:
            stmt = stmt.with_for_update()
        entity = self._db.scalar(stmt)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id)
        return entity

    # =========================================================================
    # Validation Hooks (override in subclasses)
    # =========================================================================

    def _commit_unique(self, data: dict[str, Any], entity: ModelT | None = None) -> None:
        """
        Commit, mapping a unique-constraint violation to a Conflict.

        `_validate_*` checks uniqueness first; this covers a concurrent writer
        that commits the same value between that check and our commit.
        """
        try:
            safe_commit(self._db)
        except IntegrityError as exc:
            if self.unique_field is None:
                raise
            identifier = data.get(self.unique_field)
            if identifier is None and entity is not None:
                identifier = getattr(entity, self.unique_field)
            raise DuplicateEntityError(self._entity_name, identifier) from exc

    def _validate_create(self, data: dict[str, Any]) -> None:
        """
        Validate data before create.

        Raises:
            ValidationError / ConflictError: If validation fails.
        """
        pass

    def _validate_update(self, entity: ModelT, data: dict[str, Any]) -> None:
        pass

    def _validate_delete(self, entity: ModelT) -> None:
        """Check for dependent entities before delete."""
        pass
