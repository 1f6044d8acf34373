"""
Account Service - registration, credential checks and role management.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from rest_api.models import Account
from rest_api.services.base_service import BaseCRUDService
from shared.config.constants import Roles, ROLE_TOGGLE
from shared.config.logging import auth_logger as logger, mask_email
from shared.config.settings import Settings, settings
from shared.infrastructure.db import safe_commit
from shared.security.auth import sign_access_token
from shared.security.password import hash_password, verify_password, needs_rehash
from shared.utils.exceptions import (
    AccountNotFoundError,
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    TokenInvalidError,
)
from shared.utils.schemas import AccountOutput, LoginResponse
from shared.utils.validators import normalize_email


class AccountService(BaseCRUDService[Account, AccountOutput]):
    """Service for staff accounts."""

    def __init__(self, db: Session, config: Settings | None = None):
        super().__init__(
            db=db,
            model=Account,
            output_schema=AccountOutput,
            entity_name="Account",
        )
        self._settings = config or settings

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, email: str, password: str) -> AccountOutput:
        """
        Create a waiter account.

        Raises:
            ConflictError: Email already registered (409).
        """
        email = normalize_email(email)
        if self._repo.exists(email=email):
            raise ConflictError("Email already registered", email=mask_email(email))

        account = self.create(
            {
                "email": email,
                "password_hash": hash_password(password),
                "role": Roles.DEFAULT,
            }
        )
        logger.info("Account registered", account_id=account.id, email=mask_email(email))
        return account

    # =========================================================================
    # Credentials
    # =========================================================================

    def authenticate(self, email: str, password: str) -> Account:
        """
        Check credentials and return the account.

        Unknown email and wrong password fail the same way.

        Raises:
            InvalidCredentialsError: 401 "Invalid credentials".
        """
        email = normalize_email(email)
        account = self._repo.find_one_by(email=email)
        if account is None or not verify_password(password, account.password_hash):
            raise InvalidCredentialsError(email=mask_email(email))

        if needs_rehash(account.password_hash):
            account.password_hash = hash_password(password)
            safe_commit(self._db, "rehash password")
            logger.info("Password hash upgraded", account_id=account.id)

        return account

    def login(self, email: str, password: str) -> LoginResponse:
        """Issue a bearer token for valid credentials."""
        account = self.authenticate(email, password)
        logger.info("Login successful", account_id=account.id, role=account.role)
        return self._token_response(account)

    def admin_login(self, email: str, password: str) -> LoginResponse:
        """
        As login, but only for admins.

        Raises:
            InvalidCredentialsError: Bad credentials.
            ForbiddenError: Valid credentials, account is not an admin.
        """
        account = self.authenticate(email, password)
        if not account.is_admin:
            raise ForbiddenError(account_id=account.id, role=account.role)
        logger.info("Admin login successful", account_id=account.id)
        return self._token_response(account)

    def _token_response(self, account: Account) -> LoginResponse:
        return LoginResponse(
            access_token=sign_access_token(
                account.id, account.email, account.role, config=self._settings
            ),
            expires_in=self._settings.jwt_expire_hours * 60 * 60,
            account=self.to_output(account),
        )

    # =========================================================================
    # Reads
    # =========================================================================

    def get_by_email(self, email: str) -> AccountOutput:
        account = self._repo.find_one_by(email=normalize_email(email))
        if account is None:
            raise NotFoundError("Account", email=mask_email(email))
        return self.to_output(account)

    def get_caller(self, account_id: int) -> Account:
        """
        Load the account behind a verified token.

        Raises:
            TokenInvalidError: The token refers to an account that no longer exists.
        """
        account = self._repo.find_by_id(account_id)
        if account is None:
            raise TokenInvalidError("Invalid token: account no longer exists", account_id=account_id)
        return account

    def require_admin(self, account_id: int) -> Account:
        """
        Admin gate, evaluated against the stored role so toggles apply immediately.

        Raises:
            ForbiddenError: Caller is not an admin.
        """
        account = self.get_caller(account_id)
        if not account.is_admin:
            raise ForbiddenError(account_id=account_id, role=account.role)
        return account

    # =========================================================================
    # Role management
    # =========================================================================

    def toggle_role(self, account_id: int, actor_id: int | None = None) -> AccountOutput:
        """
        Flip an account between waiter and admin.

        Raises:
            AccountNotFoundError: Account does not exist.
        """
        account = self._repo.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)

        old_role = account.role
        account.role = ROLE_TOGGLE.get(account.role, Roles.DEFAULT)
        safe_commit(self._db, "toggle account role")
        self._db.refresh(account)

        logger.info(
            "Account role toggled",
            account_id=account_id,
            old_role=old_role,
            new_role=account.role,
            actor_id=actor_id,
        )
        return self.to_output(account)
