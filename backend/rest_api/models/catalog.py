"""
Catalog Model: Product.
"""

from __future__ import annotations

from sqlalchemy import Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.config.constants import Limits
from .base import Base, IdType, TimestampMixin


class Product(TimestampMixin, Base):
    """
    Menu item with an uploaded image.
    Products are immutable after creation; deleting one also removes its image.
    """

    __tablename__ = "product"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(Limits.MAX_NAME_LENGTH), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    # Public URL handed to clients and the storage key used to delete the object
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    image_key: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
