"""
Base Service Classes.

Provides base classes for application services that:
- Use Repository for data access (not direct queries)
- Convert entities to Pydantic output schemas
- Handle business logic and orchestration
- Publish broadcast events after a successful commit

Architecture:
    Router (thin) → Service (business logic) → Repository (data access) → Model

Usage:
    from rest_api.services.base_service import BaseCRUDService

    class TableService(BaseCRUDService[DiningTable, TableOutput]):
        def __init__(self, db: Session, publisher: EventPublisher):
            super().__init__(
                db=db,
                model=DiningTable,
                output_schema=TableOutput,
                entity_name="Table",
                publisher=publisher,
            )
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, Type

from pydantic import BaseModel
from sqlalchemy.orm import Session

from rest_api.models import Base
from rest_api.services.crud.repository import BaseRepository
from shared.infrastructure.db import safe_commit
from shared.infrastructure.events import EventPublisher, LoggingEventPublisher
from shared.config.logging import get_logger
from shared.utils.exceptions import NotFoundError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
OutputT = TypeVar("OutputT", bound=BaseModel)


class BaseService(Generic[ModelT]):
    """
    Base service for domain operations.

    Subclasses implement specific business logic while this class
    provides common infrastructure (repository access, publishing).
    """

    def __init__(
        self,
        db: Session,
        model: Type[ModelT],
        publisher: EventPublisher | None = None,
    ):
        self._db = db
        self._model = model
        self._repo = BaseRepository(model, db)
        self._publisher = publisher or LoggingEventPublisher()

    @property
    def db(self) -> Session:
        """Database session."""
        return self._db

    @property
    def repo(self) -> BaseRepository[ModelT]:
        """Repository for data access."""
        return self._repo

    def publish(self, event_name: str, payload: Any) -> None:
        """Announce a committed change. Never raises."""
        self._publisher.publish(event_name, payload)


class BaseCRUDService(BaseService[ModelT], Generic[ModelT, OutputT]):
    """
    Base service for entities with CRUD operations.

    Provides standard CRUD methods; subclasses customize them through the
    validation and lifecycle hooks.
    """

    def __init__(
        self,
        db: Session,
        model: Type[ModelT],
        output_schema: Type[OutputT],
        entity_name: str,
        publisher: EventPublisher | None = None,
    ):
        super().__init__(db, model, publisher)
        self._output_schema = output_schema
        self._entity_name = entity_name

    @property
    def entity_name(self) -> str:
        """Human-readable entity name for messages."""
        return self._entity_name

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_entity(self, entity_id: int) -> ModelT:
        """
        Get raw entity (for internal use).

        Raises:
            NotFoundError: If entity not found.
        """
        entity = self._repo.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id)
        return entity

    def get_by_id(self, entity_id: int) -> OutputT:
        """
        Get entity by ID.

        Raises:
            NotFoundError: If entity not found.
        """
        return self.to_output(self.get_entity(entity_id))

    def list_all(self, **filters: Any) -> list[OutputT]:
        """List entities in creation order."""
        return [self.to_output(e) for e in self._repo.find_all(**filters)]

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: dict[str, Any]) -> OutputT:
        """
        Create new entity.

        Raises:
            ValidationError: If data is invalid.
            ConflictError: If a unique constraint is violated.
            DatabaseError: If creation fails.
        """
        self._validate_create(data)

        entity = self._model(**data)
        self._repo.add(entity)
        safe_commit(self._db, f"create {self._entity_name.lower()}")
        self._db.refresh(entity)

        self._after_create(entity)
        return self.to_output(entity)

    def update(self, entity_id: int, data: dict[str, Any]) -> OutputT:
        """
        Update existing entity.

        Raises:
            NotFoundError: If entity not found.
            ValidationError: If data is invalid.
            ConflictError: If a unique constraint is violated.
        """
        entity = self.get_entity(entity_id)
        self._validate_update(entity, data)

        for field_name, value in data.items():
            if hasattr(entity, field_name):
                setattr(entity, field_name, value)

        safe_commit(self._db, f"update {self._entity_name.lower()}")
        self._db.refresh(entity)

        self._after_update(entity)
        return self.to_output(entity)

    def delete(self, entity_id: int) -> None:
        """
        Delete entity.

        Raises:
            NotFoundError: If entity not found.
        """
        entity = self.get_entity(entity_id)
        self._validate_delete(entity)

        entity_info = self._get_entity_info_for_event(entity)
        self._repo.delete(entity)
        safe_commit(self._db, f"delete {self._entity_name.lower()}")

        self._after_delete(entity_info)

    # =========================================================================
    # Transformation
    # =========================================================================

    def to_output(self, entity: ModelT) -> OutputT:
        """Convert entity to output schema."""
        return self._output_schema.model_validate(entity)

    # =========================================================================
    # Validation Hooks (override in subclasses)
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> None:
        """Raise ValidationError/ConflictError to reject a create."""
        pass

    def _validate_update(self, entity: ModelT, data: dict[str, Any]) -> None:
        """Raise ValidationError/ConflictError to reject an update."""
        pass

    def _validate_delete(self, entity: ModelT) -> None:
        pass

    # =========================================================================
    # Lifecycle Hooks (override in subclasses)
    # =========================================================================

    def _after_create(self, entity: ModelT) -> None:
        """Hook called after the create is committed. Override for events."""
        pass

    def _after_update(self, entity: ModelT) -> None:
        pass

    def _after_delete(self, entity_info: dict[str, Any]) -> None:
        """Hook called after the delete is committed. Override for events."""
        pass

    def _get_entity_info_for_event(self, entity: ModelT) -> dict[str, Any]:
        """Entity info captured before deletion for event publishing."""
        return {"id": entity.id}
