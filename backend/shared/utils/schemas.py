"""
Shared Pydantic schemas used across the application.

Field names are snake_case in Python and camelCase on the wire
(tableId, productId, createdAt, imageUrl); input accepts either form.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from shared.config.constants import Limits


# =============================================================================
# Common Types
# =============================================================================

Role = Literal["waiter", "admin"]
OrderStatusValue = Literal["pending", "completed"]


class ApiModel(BaseModel):
    """Base for every request/response body."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Account Schemas
# =============================================================================


class RegisterRequest(ApiModel):
    """Register request body."""

    email: EmailStr = Field(max_length=Limits.MAX_EMAIL_LENGTH)
    password: str = Field(min_length=1, max_length=Limits.MAX_PASSWORD_LENGTH)


class LoginRequest(ApiModel):
    """Login request body (also used by admin login)."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=Limits.MAX_PASSWORD_LENGTH)


class AccountOutput(ApiModel):
    """Public account fields. The password hash never leaves the service."""

    id: int
    email: str
    role: Role
    created_at: datetime


class LoginResponse(ApiModel):
    """Login response with JWT token."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds
    account: AccountOutput


# =============================================================================
# Table Schemas
# =============================================================================


class TableCreate(ApiModel):
    number: int = Field(ge=1)


class TableUpdate(ApiModel):
    number: int = Field(ge=1)


class TableOutput(ApiModel):
    id: int
    number: int
    created_at: datetime


# =============================================================================
# Product Schemas
# =============================================================================


class ProductOutput(ApiModel):
    id: int
    name: str
    price: float
    image_url: str
    created_at: datetime


# =============================================================================
# Order Schemas
# =============================================================================


class OrderItemInput(ApiModel):
    """Line item in a create-order request."""

    product_id: int
    quantity: int = Field(ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)


class OrderCreate(ApiModel):
    """
    Create-order request body: {"tableId": 1, "items": [{"productId": 2, "quantity": 3}]}

    The staff member is taken from the bearer token, not the body.
    """

    table_id: int
    items: list[OrderItemInput]


class ResolvedOrderItem(ApiModel):
    """Line item with its product expanded; product is None if it was deleted."""

    product_id: int
    quantity: int
    product: ProductOutput | None = None


class ResolvedOrder(ApiModel):
    """
    Order with table, account and products expanded.

    References that no longer resolve are returned as None; the *_id
    fields are always present.
    """

    id: int
    table_id: int
    account_id: int
    status: OrderStatusValue
    created_at: datetime
    table: TableOutput | None = None
    account: AccountOutput | None = None
    items: list[ResolvedOrderItem] = Field(default_factory=list)
