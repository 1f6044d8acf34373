"""
Table Model: numbered dining tables.
"""

from __future__ import annotations

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdType, TimestampMixin


class DiningTable(TimestampMixin, Base):
    """
    Physical table orders are placed against.
    Orders reference tables by id only; deleting a table leaves its orders in place.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "dining_table"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<DiningTable(id={self.id}, number={self.number})>"
