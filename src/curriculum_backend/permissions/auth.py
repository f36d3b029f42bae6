"""
Authentication and request context construction.

An inbound call is turned into a frozen RequestContext once; route
dependencies created by ``require_permission`` then authorize the call
against freshly resolved roles.
"""

import base64
import binascii
import logging
from typing import Annotated, Callable, Optional
from sqlalchemy.orm import Session
from fastapi import Depends, Request
from fastapi.security import HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param

from curriculum_backend.api.exceptions import StorageException, UnauthorizedException
from curriculum_backend.database import get_db
from curriculum_backend.interface.tokens import decrypt_api_key
from curriculum_backend.permissions.core import authorize, resolve_effective_identity
from curriculum_backend.permissions.principal import Identity, RequestContext
from curriculum_backend.repositories.base import NotFoundError, RepositoryError
from curriculum_backend.repositories.user import UserRepository

logger = logging.getLogger(__name__)


class AuthenticationResult:
    """Result of authentication containing the user identity"""

    def __init__(self, user_id: str, username: Optional[str] = None, provider: str = "unknown"):
        self.user_id = user_id
        self.username = username
        self.provider = provider


class AuthenticationService:
    """Service for handling different authentication methods"""

    @staticmethod
    def authenticate_basic(username: str, password: str, db: Session) -> AuthenticationResult:
        """Authenticate using basic auth credentials"""

        try:
            user = UserRepository(db).find_by_login(username)
        except RepositoryError as e:
            raise StorageException(str(e))

        if user is None or user.password is None:
            raise UnauthorizedException("Invalid credentials")

        try:
            stored_password = decrypt_api_key(user.password)
        except Exception as e:
            logger.error(f"Failed to decrypt stored password for {username}: {e}")
            raise UnauthorizedException("Invalid credentials")

        if password != stored_password:
            raise UnauthorizedException("Invalid credentials")

        return AuthenticationResult(user.id, user.username, "basic")


class RequestContextBuilder:
    """Builds the immutable per-request context"""

    @staticmethod
    def build(auth_result: Optional[AuthenticationResult], db: Session) -> RequestContext:
        if auth_result is None:
            raise UnauthorizedException()

        try:
            effective = resolve_effective_identity(auth_result.user_id, db)
        except NotFoundError:
            raise UnauthorizedException("User no longer exists")
        except RepositoryError as e:
            raise StorageException(str(e))

        context = RequestContext(
            identity=Identity(
                user_id=auth_result.user_id,
                username=auth_result.username,
                provider=auth_result.provider
            ),
            effective=effective
        )

        logger.debug(
            f"Request context created: user={auth_result.user_id} "
            f"roles={sorted(effective.roles)} permissions={sorted(effective.permissions)}"
        )
        return context


def parse_authorization_header(request: Request) -> Optional[HTTPBasicCredentials]:
    """Parse the Authorization header; anonymous calls yield None"""

    authorization = request.headers.get("Authorization")
    if not authorization:
        return None

    scheme, param = get_authorization_scheme_param(authorization)

    if not param:
        raise UnauthorizedException("Invalid authorization format")

    if scheme.lower() == "basic":
        try:
            data = base64.b64decode(param).decode("utf-8")
        except (ValueError, UnicodeDecodeError, binascii.Error) as e:
            logger.error(f"Failed to decode Basic auth: {e}")
            raise UnauthorizedException("Invalid Basic auth encoding")

        username, separator, password = data.partition(":")
        if not separator:
            raise UnauthorizedException("Invalid Basic auth format")
        return HTTPBasicCredentials(username=username, password=password)

    raise UnauthorizedException(f"Unsupported auth scheme: {scheme}")


def get_current_context(
    credentials: Annotated[Optional[HTTPBasicCredentials], Depends(parse_authorization_header)],
    db: Session = Depends(get_db)
) -> RequestContext:
    """Main dependency for getting the context of an authenticated caller."""

    auth_result = None
    if credentials is not None:
        auth_result = AuthenticationService.authenticate_basic(
            credentials.username, credentials.password, db
        )

    return RequestContextBuilder.build(auth_result, db)


def require_permission(permission: str) -> Callable[..., RequestContext]:
    """Route dependency that authorizes the caller for ``permission``."""

    def dependency(
        context: Annotated[RequestContext, Depends(get_current_context)],
        db: Session = Depends(get_db)
    ) -> RequestContext:
        return authorize(context, permission, db)

    return dependency
