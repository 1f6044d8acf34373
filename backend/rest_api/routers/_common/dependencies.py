"""
Shared FastAPI dependencies for routers.

Usage:
    @router.post("/table", status_code=201)
    def create_table(
        body: TableCreate,
        db: Session = Depends(get_db),
        admin: Account = Depends(require_admin),
    ):
        ...
"""

from typing import Any

from fastapi import Depends
from sqlalchemy.orm import Session

from rest_api.core.context import get_app_settings
from rest_api.models import Account
from rest_api.services.domain import AccountService
from shared.config.settings import Settings
from shared.infrastructure.db import get_db
from shared.infrastructure.correlation import bind_account
from shared.security.auth import current_user_context, get_account_id


def get_account_service(
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
) -> AccountService:
    return AccountService(db, app_settings)


def current_account_id(ctx: dict[str, Any] = Depends(current_user_context)) -> int:
    """Account id of a verified bearer token, bound to the request for logging."""
    account_id = get_account_id(ctx)
    bind_account(account_id)
    return account_id


def current_account(
    account_id: int = Depends(current_account_id),
    service: AccountService = Depends(get_account_service),
) -> Account:
    """Bearer gate: the token must verify and its account must still exist."""
    return service.get_caller(account_id)


def require_admin(
    account_id: int = Depends(current_account_id),
    service: AccountService = Depends(get_account_service),
) -> Account:
    """Admin gate, checked against the stored role of the caller."""
    return service.require_admin(account_id)
