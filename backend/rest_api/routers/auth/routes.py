"""
Authentication router.
Handles registration, login, admin login and the caller's own account.
"""

from fastapi import APIRouter, Depends, Request, status

from rest_api.models import Account
from rest_api.routers._common import current_account, get_account_service
from rest_api.services.domain import AccountService
from shared.security.rate_limit import limiter, LOGIN_RATE_LIMIT
from shared.utils.schemas import AccountOutput, LoginRequest, LoginResponse, RegisterRequest


router = APIRouter(tags=["auth"])


@router.post("/create", response_model=AccountOutput, status_code=status.HTTP_201_CREATED)
@router.post("/user", response_model=AccountOutput, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> AccountOutput:
    """
    Register a staff account.

    New accounts are waiters; an admin promotes them with PATCH /user/{id}.
    """
    return service.register(body.email, body.password)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
def login(
    request: Request,
    body: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    """
    Authenticate a staff member and return a bearer token.

    The token contains:
    - sub: account ID
    - role: role at login time
    - email: account email

    Tokens are signed with the JWT settings of the application context.
    Rate limited per client IP.
    """
    return service.login(body.email, body.password)


@router.post("/admin", response_model=LoginResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
def admin_login(
    request: Request,
    body: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    """Same as /login, but refuses accounts that are not admins (403)."""
    return service.admin_login(body.email, body.password)


@router.get("/me", response_model=AccountOutput)
def me(account: Account = Depends(current_account)) -> AccountOutput:
    """Return the account behind the bearer token."""
    return AccountOutput.model_validate(account)
