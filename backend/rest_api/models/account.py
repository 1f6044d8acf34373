"""
Account Model: staff identities (waiters and admins).
"""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.config.constants import Roles, Limits
from .base import Base, IdType, TimestampMixin


class Account(TimestampMixin, Base):
    """
    A staff member able to place and manage orders.
    Accounts are never hard-deleted; admins can flip their role.
    """

    __tablename__ = "account"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    # Stored lower-cased; uniqueness is therefore case-insensitive
    email: Mapped[str] = mapped_column(
        String(Limits.MAX_EMAIL_LENGTH), nullable=False, unique=True, index=True
    )
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Roles.DEFAULT)

    @property
    def is_admin(self) -> bool:
        return self.role == Roles.ADMIN

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email='{self.email}', role='{self.role}')>"
