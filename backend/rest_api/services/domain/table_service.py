"""
Table Service - dining table management.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import DiningTable
from rest_api.services.base_service import BaseCRUDService
from shared.config.logging import get_logger
from shared.utils.exceptions import DuplicateEntityError
from shared.utils.schemas import TableOutput

logger = get_logger(__name__)


class TableService(BaseCRUDService[DiningTable, TableOutput]):
    """
    Service for table management.

    Business rules:
    - Table numbers are unique
    - Deleting a table leaves orders that reference it untouched
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=DiningTable,
            output_schema=TableOutput,
            entity_name="Table",
        )

    def create_table(self, number: int) -> TableOutput:
        table = self.create({"number": number})
        logger.info("Table created", table_id=table.id, number=number)
        return table

    def rename_table(self, table_id: int, number: int) -> TableOutput:
        table = self.update(table_id, {"number": number})
        logger.info("Table renumbered", table_id=table_id, number=number)
        return table

    def delete_table(self, table_id: int) -> None:
        self.delete(table_id)
        logger.info("Table deleted", table_id=table_id)

    def _ensure_number_free(self, number: int, exclude_id: int | None = None) -> None:
        existing = self._repo.find_one_by(number=number)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateEntityError("Table", number, existing_id=existing.id)

    def _validate_create(self, data: dict[str, Any]) -> None:
        self._ensure_number_free(data["number"])

    def _validate_update(self, entity: DiningTable, data: dict[str, Any]) -> None:
        self._ensure_number_free(data["number"], exclude_id=entity.id)
