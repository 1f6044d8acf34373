"""
Shared module for common code across the REST API and the WS Gateway.

STRUCTURE:
- shared.security: Authentication and password hashing
  - auth.py: JWT signing/verification, current_user_context
  - password.py: Bcrypt hashing
  - rate_limit.py: Login rate limiting (slowapi)

- shared.infrastructure: Storage and messaging collaborators
  - db.py: SQLAlchemy engine/session factory, safe_commit()
  - correlation.py: Request correlation IDs
  - events/: Broadcast envelope, publishers (Redis pub/sub), subscriber
  - storage/: Product image storage (local disk or S3)

- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Roles, OrderStatus, image rules

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from shared.security.auth import verify_jwt, current_user_context
    from shared.infrastructure.db import safe_commit
    from shared.config.settings import settings
    from shared.config.constants import Roles, OrderStatus
    from shared.utils.exceptions import NotFoundError, ForbiddenError
"""
