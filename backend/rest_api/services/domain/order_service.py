"""
Order Service - order lifecycle.

Orders are created pending, flip between pending and completed any number
of times, and end only by explicit deletion. Every mutation is announced
on the broadcast channel after it is committed.

Usage:
    from rest_api.services.domain import OrderService

    service = OrderService(db, publisher)
    order = service.create_order(account_id, OrderCreate(table_id=1, items=[...]))
    order = service.toggle_status(order.id)
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from rest_api.models import Account, DiningTable, Order, OrderItem, Product
from rest_api.services.base_service import BaseService
from rest_api.services.crud.repository import BaseRepository
from rest_api.services.domain.order_resolver import OrderResolver
from shared.config.constants import OrderStatus, ORDER_STATUS_TOGGLE
from shared.config.logging import orders_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.infrastructure.events import (
    EventPublisher,
    ORDER_CREATED,
    ORDER_DELETED,
    ORDER_STATUS_CHANGED,
)
from shared.utils.exceptions import (
    AccountNotFoundError,
    EmptyOrderError,
    OrderNotFoundError,
    ProductNotFoundError,
    TableNotFoundError,
)
from shared.utils.schemas import OrderCreate, ResolvedOrder


class OrderService(BaseService[Order]):
    """
    Service for the order lifecycle.

    Business rules:
    - An order needs at least one line item, an existing table and existing products
    - Status toggles pending <-> completed; there is no terminal state besides deletion
    - Reads return resolved orders in creation order
    - With DELETE_TABLE_WITH_ORDER, deleting an order also deletes its table
    """

    def __init__(
        self,
        db: Session,
        publisher: EventPublisher | None = None,
        delete_table_with_order: bool | None = None,
    ):
        super().__init__(db, Order, publisher)
        self._tables = BaseRepository(DiningTable, db)
        self._accounts = BaseRepository(Account, db)
        self._products = BaseRepository(Product, db)
        if delete_table_with_order is None:
            delete_table_with_order = settings.delete_table_with_order
        self._delete_table_with_order = delete_table_with_order

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_order(self, order_id: int) -> Order:
        order = self._repo.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def _resolve(self, order: Order) -> ResolvedOrder:
        return OrderResolver(self._db).resolve(order)

    def _resolve_many(self, orders) -> list[ResolvedOrder]:
        return OrderResolver(self._db).resolve_many(orders)

    def _payload(self, order: ResolvedOrder) -> dict:
        return order.model_dump(mode="json", by_alias=True)

    # =========================================================================
    # Create
    # =========================================================================

    def create_order(self, account_id: int, data: OrderCreate) -> ResolvedOrder:
        """
        Persist a pending order and return it resolved.

        Raises:
            EmptyOrderError: No line items (nothing is written).
            TableNotFoundError: Table does not exist.
            ProductNotFoundError: A line item references an unknown product.
        """
        if not data.items:
            raise EmptyOrderError(account_id=account_id, table_id=data.table_id)

        if self._tables.find_by_id(data.table_id) is None:
            raise TableNotFoundError(data.table_id)

        product_ids = {item.product_id for item in data.items}
        found = {product.id for product in self._products.find_by_ids(product_ids)}
        missing = sorted(product_ids - found)
        if missing:
            raise ProductNotFoundError(missing[0], missing_product_ids=missing)

        order = Order(
            table_id=data.table_id,
            account_id=account_id,
            status=OrderStatus.PENDING,
            items=[
                OrderItem(product_id=item.product_id, quantity=item.quantity, position=position)
                for position, item in enumerate(data.items)
            ],
        )
        self._repo.add(order)
        safe_commit(self._db, "create order")
        self._db.refresh(order)

        resolved = self._resolve(order)
        logger.info(
            "Order created",
            order_id=order.id,
            table_id=order.table_id,
            account_id=account_id,
            items=len(order.items),
        )
        self.publish(ORDER_CREATED, self._payload(resolved))
        return resolved

    # =========================================================================
    # Reads
    # =========================================================================

    def get_order(self, order_id: int) -> ResolvedOrder:
        return self._resolve(self._get_order(order_id))

    def list_orders(self) -> list[ResolvedOrder]:
        return self._resolve_many(self._repo.find_all())

    def list_for_table(self, table_id: int) -> list[ResolvedOrder]:
        """
        Raises:
            TableNotFoundError: Table does not exist.
        """
        if self._tables.find_by_id(table_id) is None:
            raise TableNotFoundError(table_id)
        return self._resolve_many(self._repo.find_all(table_id=table_id))

    def list_for_account(self, account_id: int) -> list[ResolvedOrder]:
        """
        Raises:
            AccountNotFoundError: Account does not exist.
        """
        if self._accounts.find_by_id(account_id) is None:
            raise AccountNotFoundError(account_id)
        return self._resolve_many(self._repo.find_all(account_id=account_id))

    # =========================================================================
    # Mutations
    # =========================================================================

    def toggle_status(self, order_id: int) -> ResolvedOrder:
        """
        Flip pending <-> completed and return the resolved order.

        Concurrent toggles are not serialized; the last commit wins.

        Raises:
            OrderNotFoundError: Order does not exist.
        """
        order = self._get_order(order_id)
        old_status = order.status
        order.status = ORDER_STATUS_TOGGLE[order.status]
        safe_commit(self._db, "toggle order status")
        self._db.refresh(order)

        resolved = self._resolve(order)
        logger.info(
            "Order status toggled",
            order_id=order_id,
            old_status=old_status,
            new_status=order.status,
        )
        self.publish(ORDER_STATUS_CHANGED, self._payload(resolved))
        return resolved

    def delete_order(self, order_id: int) -> None:
        """
        Delete an order (and its line items).

        Raises:
            OrderNotFoundError: Order does not exist.
        """
        order = self._get_order(order_id)
        table_id = order.table_id

        self._repo.delete(order)
        table_deleted = False
        if self._delete_table_with_order:
            table = self._tables.find_by_id(table_id)
            if table is not None:
                self._tables.delete(table)
                table_deleted = True
        safe_commit(self._db, "delete order")

        logger.info(
            "Order deleted",
            order_id=order_id,
            table_id=table_id,
            table_deleted=table_deleted,
        )
        self.publish(ORDER_DELETED, {"id": order_id})
