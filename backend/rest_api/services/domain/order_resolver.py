"""
Order resolution.

Expands an order's table, account and product references into full
sub-objects for responses and broadcast payloads. Each entity type is
fetched with one query per batch of orders.

A reference that no longer resolves (table deleted, product removed from
the catalog) is returned as None; the rest of the order is still served.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from sqlalchemy.orm import Session

from rest_api.models import Account, DiningTable, Order, Product
from rest_api.services.crud.repository import BaseRepository
from shared.config.logging import orders_logger as logger
from shared.utils.batch_loading import DataLoader
from shared.utils.schemas import (
    AccountOutput,
    ProductOutput,
    ResolvedOrder,
    ResolvedOrderItem,
    TableOutput,
)


def _loader(db: Session, model: type) -> DataLoader:
    repo = BaseRepository(model, db)
    return DataLoader(batch_load_fn=repo.find_by_ids, key_fn=lambda entity: entity.id)


class OrderResolver:
    """Batch-loading resolver; one instance per request."""

    def __init__(self, db: Session):
        self._tables: DataLoader[int, DiningTable] = _loader(db, DiningTable)
        self._accounts: DataLoader[int, Account] = _loader(db, Account)
        self._products: DataLoader[int, Product] = _loader(db, Product)

    def resolve(self, order: Order) -> ResolvedOrder:
        return self.resolve_many([order])[0]

    def resolve_many(self, orders: Sequence[Order]) -> list[ResolvedOrder]:
        self._prefetch(orders)
        return [self._resolve(order) for order in orders]

    def _prefetch(self, orders: Iterable[Order]) -> None:
        orders = list(orders)
        self._tables.load_many(order.table_id for order in orders)
        self._accounts.load_many(order.account_id for order in orders)
        self._products.load_many(item.product_id for order in orders for item in order.items)

    def _resolve(self, order: Order) -> ResolvedOrder:
        table = self._tables.load(order.table_id)
        account = self._accounts.load(order.account_id)

        items = []
        for item in order.items:
            product = self._products.load(item.product_id)
            if product is None:
                logger.debug(
                    "Order item references a missing product",
                    order_id=order.id,
                    product_id=item.product_id,
                )
            items.append(
                ResolvedOrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    product=ProductOutput.model_validate(product) if product else None,
                )
            )

        if table is None or account is None:
            logger.debug(
                "Order has unresolved references",
                order_id=order.id,
                table_missing=table is None,
                account_missing=account is None,
            )

        return ResolvedOrder(
            id=order.id,
            table_id=order.table_id,
            account_id=order.account_id,
            status=order.status,
            created_at=order.created_at,
            table=TableOutput.model_validate(table) if table else None,
            account=AccountOutput.model_validate(account) if account else None,
            items=items,
        )
