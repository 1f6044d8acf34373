"""
Domain Services - Application Layer.

Services contain business logic and orchestrate operations.
They use Repositories for data access and publish broadcast events.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from rest_api.services.domain import OrderService

    # In router
    service = OrderService(db, publisher)
    orders = service.list_for_table(table_id)
"""

from .account_service import AccountService
from .table_service import TableService
from .product_service import ProductService
from .order_resolver import OrderResolver
from .order_service import OrderService

__all__ = [
    "AccountService",
    "TableService",
    "ProductService",
    "OrderResolver",
    "OrderService",
]
