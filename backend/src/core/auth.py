"""Authentication module for Okta JWT validation."""
import logging

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient, PyJWKClientConnectionError

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme (missing/malformed headers come through as None)
security = HTTPBearer(auto_error=False)

# Cache for JWKS client (reuse across requests)
_jwks_clients: dict[str, PyJWKClient] = {}

# Okta access tokens carry the client id in `cid`; other providers use `azp`
CLIENT_ID_CLAIMS = ("cid", "azp", "client_id")


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_jwks_client(settings: Settings) -> PyJWKClient:
    """Get or create a cached JWKS client for the given settings."""
    if settings.okta_jwks_url not in _jwks_clients:
        _jwks_clients[settings.okta_jwks_url] = PyJWKClient(
            settings.okta_jwks_url,
            cache_jwk_set=True,
            lifespan=3600,  # Cache keys for 1 hour
        )
    return _jwks_clients[settings.okta_jwks_url]


def _check_client_id(payload: dict, settings: Settings) -> None:
    """Verify the token was issued to the configured client (skipped if not configured)."""
    if not settings.okta_client_id:
        return
    token_client_id = next(
        (payload[claim] for claim in CLIENT_ID_CLAIMS if claim in payload), None,
    )
    if token_client_id != settings.okta_client_id:
        logger.warning("JWT client id mismatch: %r", token_client_id)
        raise _forbidden("Invalid client id")


def decode_jwt(token: str, settings: Settings) -> dict:
    """
    Decode and validate an access token issued by Okta.

    Checks signature (RS256 against the issuer's JWKS), expiry, issuer,
    audience and client id.

    Raises:
        HTTPException: 403 for any validation failure.
    """
    if not settings.okta_issuer:
        logger.error("OKTA_ISSUER is not configured; rejecting token")
        raise _forbidden("Could not validate credentials")

    try:
        jwks_client = get_jwks_client(settings)
        signing_key = jwks_client.get_signing_key_from_jwt(token)

        payload = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=settings.okta_audience,
            issuer=settings.okta_issuer,
            options={"require": ["exp", "iss", "aud", "sub"]},
        )

    except jwt.ExpiredSignatureError:
        raise _forbidden("Token has expired")
    except jwt.InvalidAudienceError:
        raise _forbidden("Invalid audience")
    except jwt.InvalidIssuerError:
        raise _forbidden("Invalid issuer")
    except PyJWKClientConnectionError as e:
        logger.error("Failed to fetch JWKS from Okta: %s", e, exc_info=True)
        raise _forbidden("Could not validate credentials")
    except jwt.PyJWTError as e:
        # Log full details for debugging (server-side only)
        logger.warning("JWT validation failed: %s", e, exc_info=True)
        raise _forbidden("Invalid token")

    _check_client_id(payload, settings)
    return payload


async def get_current_owner(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Dependency that validates the bearer token and returns the caller's user id.

    The user id is the token's `sub` claim. Any failure is a 403.
    """
    if credentials is None:
        raise _forbidden("Not authenticated")

    payload = decode_jwt(credentials.credentials, settings)

    owner_id = payload.get("sub")
    if not owner_id or not isinstance(owner_id, str):
        raise _forbidden("Invalid token: missing sub claim")

    return owner_id
