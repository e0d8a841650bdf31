"""
Admin Authentication

HTTP Basic credential check for the admin endpoints.

The gate is built once in the app factory from Settings and stored on
app.state; the require_admin dependency only looks it up. Credentials are
compared in constant time.
"""

import logging
import secrets
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

logger = logging.getLogger(__name__)

ADMIN_REALM = "Registration Admin"

# auto_error=False so a missing header gets the same 401 body as bad credentials
security = HTTPBasic(
    auto_error=False,
    realm=ADMIN_REALM,
    description="Admin username and password",
)


@dataclass
class AdminUser:
    """The authenticated administrator."""

    username: str

    def __str__(self) -> str:
        return f"AdminUser(username={self.username})"


def _authentication_required() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": "AUTHENTICATION_REQUIRED",
            "message": "Authentication required",
        },
        headers={"WWW-Authenticate": f'Basic realm="{ADMIN_REALM}"'},
    )


class AdminGate:
    """Validates admin credentials against the configured pair."""

    def __init__(self, username: str, password: str):
        self._username = username.encode("utf-8")
        self._password = password.encode("utf-8")

    def authenticate(self, credentials: HTTPBasicCredentials | None) -> AdminUser:
        """
        Return the admin user for valid credentials.

        Raises:
            HTTPException 401: If credentials are missing or wrong
        """
        if credentials is None:
            raise _authentication_required()

        username_ok = secrets.compare_digest(credentials.username.encode("utf-8"), self._username)
        password_ok = secrets.compare_digest(credentials.password.encode("utf-8"), self._password)

        if not (username_ok and password_ok):
            logger.warning(f"Rejected admin credentials for user '{credentials.username}'")
            raise _authentication_required()

        return AdminUser(username=credentials.username)


async def require_admin(
    request: Request,
    credentials: HTTPBasicCredentials | None = Depends(security),
) -> AdminUser:
    """
    FastAPI dependency that rejects requests without valid admin credentials.

    Usage:
        @router.get("/admin/endpoint")
        async def admin_endpoint(admin: AdminUser = Depends(require_admin)):
            ...
    """
    gate: AdminGate = request.app.state.admin_gate
    admin = gate.authenticate(credentials)
    logger.debug(f"Authenticated admin: {admin.username}")
    return admin


__all__ = [
    "AdminGate",
    "AdminUser",
    "require_admin",
]
