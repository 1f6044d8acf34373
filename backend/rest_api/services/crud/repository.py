"""
Repository Pattern for database access.

Provides a thin abstraction between business logic and SQLAlchemy.
Listings are always returned in creation order (created_at, then id).

Usage:
    from rest_api.services.crud.repository import BaseRepository

    table_repo = BaseRepository(DiningTable, db)
    tables = table_repo.find_all()
    table = table_repo.find_by_id(42)
    table = table_repo.find_one_by(number=5)
"""

from __future__ import annotations

from typing import Any, Generic, Iterable, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from rest_api.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Common database operations for a single model."""

    def __init__(self, model: type[ModelT], session: Session):
        self._model = model
        self._session = session

    @property
    def model(self) -> type[ModelT]:
        """The SQLAlchemy model class."""
        return self._model

    @property
    def session(self) -> Session:
        """The database session."""
        return self._session

    def _base_query(self) -> Select:
        return select(self._model)

    def _creation_order(self) -> list[Any]:
        columns = []
        if hasattr(self._model, "created_at"):
            columns.append(self._model.created_at.asc())
        columns.append(self._model.id.asc())
        return columns

    def find_by_id(self, entity_id: int) -> ModelT | None:
        """Find entity by primary key. Returns None if not found."""
        return self._session.get(self._model, entity_id)

    def find_by_ids(self, entity_ids: Iterable[int]) -> Sequence[ModelT]:
        """Find all entities whose id is in `entity_ids` (missing ids are skipped)."""
        ids = list(entity_ids)
        if not ids:
            return []
        query = self._base_query().where(self._model.id.in_(ids))
        return self._session.scalars(query).all()

    def find_all(self, **filters: Any) -> Sequence[ModelT]:
        """
        Find entities in creation order.

        Keyword filters are equality conditions:
            repo.find_all(table_id=3)
        """
        query = self._base_query().filter_by(**filters).order_by(*self._creation_order())
        return self._session.scalars(query).all()

    def find_one_by(self, **filters: Any) -> ModelT | None:
        """Find the first entity matching equality filters."""
        query = self._base_query().filter_by(**filters).limit(1)
        return self._session.scalar(query)

    def exists(self, **filters: Any) -> bool:
        return self.find_one_by(**filters) is not None

    def add(self, entity: ModelT) -> ModelT:
        self._session.add(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        self._session.delete(entity)
