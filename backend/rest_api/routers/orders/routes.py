"""
Order router.
All order operations require a bearer token; any role may use them.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from rest_api.core.context import get_app_settings, get_publisher
from rest_api.models import Account
from rest_api.routers._common import current_account
from rest_api.services.domain import OrderService
from shared.config.settings import Settings
from shared.infrastructure.db import get_db
from shared.infrastructure.events import EventPublisher
from shared.utils.schemas import OrderCreate, ResolvedOrder


router = APIRouter(tags=["orders"])


def get_order_service(
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
    app_settings: Settings = Depends(get_app_settings),
) -> OrderService:
    return OrderService(
        db,
        publisher,
        delete_table_with_order=app_settings.delete_table_with_order,
    )


@router.get("/orders", response_model=list[ResolvedOrder])
def list_orders(
    service: OrderService = Depends(get_order_service),
    _: Account = Depends(current_account),
) -> list[ResolvedOrder]:
    """All orders, oldest first, with table, account and products expanded."""
    return service.list_orders()


@router.get("/order/table/{table_id}", response_model=list[ResolvedOrder])
def list_orders_for_table(
    table_id: int,
    service: OrderService = Depends(get_order_service),
    _: Account = Depends(current_account),
) -> list[ResolvedOrder]:
    return service.list_for_table(table_id)


@router.get("/order/account/{account_id}", response_model=list[ResolvedOrder])
def list_orders_for_account(
    account_id: int,
    service: OrderService = Depends(get_order_service),
    _: Account = Depends(current_account),
) -> list[ResolvedOrder]:
    return service.list_for_account(account_id)


@router.get("/order/checked", response_model=list[ResolvedOrder])
def list_my_orders(
    service: OrderService = Depends(get_order_service),
    account: Account = Depends(current_account),
) -> list[ResolvedOrder]:
    """Orders taken by the caller."""
    return service.list_for_account(account.id)


@router.get("/order/{order_id}", response_model=ResolvedOrder)
def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
    _: Account = Depends(current_account),
) -> ResolvedOrder:
    return service.get_order(order_id)


@router.post("/order", response_model=ResolvedOrder, status_code=status.HTTP_201_CREATED)
def create_order(
    body: OrderCreate,
    service: OrderService = Depends(get_order_service),
    account: Account = Depends(current_account),
) -> ResolvedOrder:
    """
    Create a pending order for the caller.

    Body: {"tableId": 1, "items": [{"productId": 2, "quantity": 3}]}
    Broadcasts orders@new with the resolved order.
    """
    return service.create_order(account.id, body)


@router.patch("/order/{order_id}", response_model=ResolvedOrder)
def toggle_order_status(
    order_id: int,
    service: OrderService = Depends(get_order_service),
    _: Account = Depends(current_account),
) -> ResolvedOrder:
    """Flip pending <-> completed. Broadcasts order@checked."""
    return service.toggle_status(order_id)


@router.delete("/order/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
    _: Account = Depends(current_account),
) -> Response:
    """Delete an order. Broadcasts order@deleted."""
    service.delete_order(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
