"""
Order Models: Order, OrderItem.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import OrderStatus
from .base import Base, IdType, TimestampMixin


class Order(TimestampMixin, Base):
    """
    An order placed by a staff member for a table.

    table_id and account_id are plain references (no foreign keys): the
    table or account may disappear without touching the order, and reads
    resolve whatever still exists.
    """

    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    table_id: Mapped[int] = mapped_column(IdType, nullable=False, index=True)
    account_id: Mapped[int] = mapped_column(IdType, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=OrderStatus.PENDING)

    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.position",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'completed')", name="ck_order_status"),
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, table_id={self.table_id}, status='{self.status}')>"


class OrderItem(Base):
    """
    Line item: a product reference and a quantity.
    `position` preserves the order in which items were submitted.
    """

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("customer_order.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[int] = mapped_column(IdType, nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    order: Mapped["Order"] = relationship(back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_item_quantity"),
        Index("ix_order_item_order_position", "order_id", "position"),
    )

    def __repr__(self) -> str:
        return f"<OrderItem(order_id={self.order_id}, product_id={self.product_id}, quantity={self.quantity})>"
