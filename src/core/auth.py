"""Authentication and caller identity.

This module resolves who is calling, in one of three modes:
    - none: No auth; every request runs as AUTH_DEV_SUBJECT (development mode)
    - psk: Pre-shared bearer tokens, each mapped to a user subject
    - jwt: JWT validation; the "sub" claim is the user subject

The resolved subject is the owner used for every saved prompt operation. It is
never taken from the request body.

Scopes:
    - prompts:read: list and view saved prompts
    - prompts:write: create, update, delete (includes prompts:read)

Usage:
    @router.get("")
    async def list_saved_prompts(
        auth: AuthContext = Depends(require_read),
    ):
        owner = auth.subject
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Set

import jwt
from fastapi import Depends, Header, HTTPException, status
from jwt import PyJWKClient

from src.core.config import settings
from src.core.exceptions import AuthenticationError, AuthorizationError
from src.observability.logging import get_logger

logger = get_logger(__name__)


class Scope(str, Enum):
    """Authorization scopes."""

    READ = "prompts:read"
    WRITE = "prompts:write"


# Scope hierarchy: write includes read
SCOPE_HIERARCHY = {
    Scope.WRITE: {Scope.READ, Scope.WRITE},
    Scope.READ: {Scope.READ},
}


@dataclass
class AuthContext:
    """Authentication context for a request."""

    authenticated: bool
    scopes: Set[Scope]
    token_type: Optional[str] = None  # "psk" or "jwt"
    subject: Optional[str] = None  # Owner identity for saved prompts

    def has_scope(self, scope: Scope) -> bool:
        """Check if context has the given scope (including via hierarchy)."""
        for granted_scope in self.scopes:
            if scope in SCOPE_HIERARCHY.get(granted_scope, {granted_scope}):
                return True
        return False


def _anonymous() -> AuthContext:
    return AuthContext(authenticated=False, scopes=set())


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract token from Authorization header."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def _validate_psk_token(token: str) -> Optional[AuthContext]:
    """Validate a PSK token and return the auth context.

    Args:
        token: The token to validate

    Returns:
        AuthContext if valid, None if not
    """
    subject = settings.psk_tokens_map.get(token)
    if not subject:
        return None

    return AuthContext(
        authenticated=True,
        scopes={Scope.WRITE},
        token_type="psk",
        subject=subject,
    )


def _validate_jwt_token(token: str) -> Optional[AuthContext]:
    """Validate a JWT token and return the auth context.

    Args:
        token: The JWT to validate

    Returns:
        AuthContext if valid, None if not

    Raises:
        HTTPException: If JWT validation is not configured
    """
    public_key = None

    if settings.AUTH_JWT_JWKS_URL:
        try:
            jwks_client = PyJWKClient(settings.AUTH_JWT_JWKS_URL)
            signing_key = jwks_client.get_signing_key_from_jwt(token)
            public_key = signing_key.key
        except jwt.PyJWTError as e:
            logger.warning(f"Failed to get signing key from JWKS: {e}")
            return None
    elif settings.AUTH_JWT_PUBLIC_KEY:
        public_key = settings.AUTH_JWT_PUBLIC_KEY
    else:
        logger.error("JWT mode enabled but no public key or JWKS URL configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": {"code": "CONFIG_ERROR", "message": "JWT validation not configured"}},
        )

    try:
        payload = jwt.decode(
            token,
            public_key,
            algorithms=["RS256", "ES256", "HS256"],
            issuer=settings.AUTH_JWT_ISSUER or None,
            audience=settings.AUTH_JWT_AUDIENCE or None,
            options={"verify_signature": True, "require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.warning("JWT has expired")
        return None
    except jwt.InvalidIssuerError:
        logger.warning("JWT has invalid issuer")
        return None
    except jwt.InvalidAudienceError:
        logger.warning("JWT has invalid audience")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid JWT: {e}")
        return None

    # Scopes can be space-separated string or list
    raw_scopes = payload.get(settings.AUTH_JWT_SCOPE_CLAIM, "")
    if isinstance(raw_scopes, str):
        scope_strings = raw_scopes.split()
    elif isinstance(raw_scopes, list):
        scope_strings = raw_scopes
    else:
        scope_strings = []

    scopes = set()
    for s in scope_strings:
        try:
            scopes.add(Scope(s))
        except ValueError:
            # Ignore unknown scopes
            pass

    if not scopes:
        logger.warning(f"JWT has no valid scopes: {scope_strings}")
        return None

    return AuthContext(
        authenticated=True,
        scopes=scopes,
        token_type="jwt",
        subject=str(payload["sub"]),
    )


def get_auth_context(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> AuthContext:
    """FastAPI dependency to extract and validate auth context.

    Args:
        authorization: Authorization header value

    Returns:
        AuthContext for the request
    """
    if settings.AUTH_MODE == "none":
        return AuthContext(
            authenticated=True,
            scopes={Scope.WRITE},
            token_type=None,
            subject=settings.AUTH_DEV_SUBJECT,
        )

    token = _extract_bearer_token(authorization)
    if not token:
        return _anonymous()

    if settings.AUTH_MODE == "psk":
        return _validate_psk_token(token) or _anonymous()

    if settings.AUTH_MODE == "jwt":
        return _validate_jwt_token(token) or _anonymous()

    logger.error(f"Unknown auth mode: {settings.AUTH_MODE}")
    return _anonymous()


def require_scope(scope: Scope):
    """Create a dependency that requires an identified caller with a scope.

    Args:
        scope: The required scope

    Returns:
        FastAPI dependency function
    """

    def dependency(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if not auth.authenticated or not auth.subject:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail={"error": AuthenticationError().to_dict()},
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not auth.has_scope(scope):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": AuthorizationError(
                        f"Insufficient permissions. Required scope: {scope.value}"
                    ).to_dict()
                },
            )

        return auth

    return dependency


# Convenience dependencies for common scope requirements
require_read = require_scope(Scope.READ)
require_write = require_scope(Scope.WRITE)
