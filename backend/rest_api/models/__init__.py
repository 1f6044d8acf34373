"""
SQLAlchemy ORM Models Package.

- base: Base class, TimestampMixin
- account: Account
- table: DiningTable
- catalog: Product
- order: Order, OrderItem
"""

from .base import Base, TimestampMixin
from .account import Account
from .table import DiningTable
from .catalog import Product
from .order import Order, OrderItem

__all__ = [
    "Base",
    "TimestampMixin",
    "Account",
    "DiningTable",
    "Product",
    "Order",
    "OrderItem",
]
