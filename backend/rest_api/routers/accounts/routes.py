"""
Account router.
Account reads for any authenticated staff member; role toggling for admins.
"""

from fastapi import APIRouter, Depends, Query

from rest_api.models import Account
from rest_api.routers._common import current_account, get_account_service, require_admin
from rest_api.services.domain import AccountService
from shared.utils.schemas import AccountOutput


router = APIRouter(tags=["accounts"])


@router.get("/user", response_model=list[AccountOutput])
def list_accounts(
    service: AccountService = Depends(get_account_service),
    _: Account = Depends(current_account),
) -> list[AccountOutput]:
    return service.list_all()


@router.get("/user/email", response_model=AccountOutput)
def get_account_by_email(
    email: str = Query(..., min_length=1),
    service: AccountService = Depends(get_account_service),
    _: Account = Depends(current_account),
) -> AccountOutput:
    return service.get_by_email(email)


@router.get("/user/{account_id}", response_model=AccountOutput)
def get_account(
    account_id: int,
    service: AccountService = Depends(get_account_service),
    _: Account = Depends(current_account),
) -> AccountOutput:
    return service.get_by_id(account_id)


@router.patch("/user/{account_id}", response_model=AccountOutput)
def toggle_role(
    account_id: int,
    service: AccountService = Depends(get_account_service),
    admin: Account = Depends(require_admin),
) -> AccountOutput:
    """Flip the account between waiter and admin. Takes effect on its next request."""
    return service.toggle_role(account_id, actor_id=admin.id)
