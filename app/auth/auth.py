"""JWT bearer authentication against Azure AD / OpenID Connect.

The ``get_current_caller`` dependency validates the token, maps its
``unique_name`` claim to an active employee and hands the core services a
``CallerContext``.
"""

import logging
from datetime import datetime
from typing import Annotated

import jwt
import pytz
import requests
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import settings
from repositories.employee_repository import EmployeeRepository
from schemas.employee import CallerContext

logger = logging.getLogger(__name__)


def get_openid_config() -> dict:
    """Fetch OpenID Connect configuration from the identity provider.

    Raises:
        HTTPException: If the configuration URL is unset or unreachable.
    """
    if not settings.openid_config_url:
        raise HTTPException(status_code=500, detail="OIDC configuration URL not set")
    resp = requests.get(settings.openid_config_url, timeout=10)
    if resp.status_code != 200:
        raise HTTPException(status_code=500, detail="Failed to fetch OpenID config")
    return resp.json()


def get_signing_key(kid: str, jwks: dict):
    """Return the RSA public key whose ``kid`` matches, or None."""
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return jwt.algorithms.RSAAlgorithm.from_jwk(key)
    return None


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing or malformed",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication Token is missing!",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


def decode_token(token: str) -> dict:
    """Verify signature, audience, issuer, app and tenant of a token.

    Returns:
        The decoded claims.

    Raises:
        HTTPException: 401 for invalid tokens, 500 for provider failures.
    """
    openid_config = get_openid_config()
    jwks_uri = openid_config.get("jwks_uri")
    if not jwks_uri:
        raise HTTPException(status_code=500, detail="JWKS URI missing in OIDC config")
    jwks = requests.get(jwks_uri, timeout=10).json()

    kid = jwt.get_unverified_header(token).get("kid")
    if not kid:
        raise HTTPException(status_code=401, detail="Invalid token: Missing Key ID (kid)")

    signing_key = get_signing_key(kid, jwks)
    if not signing_key:
        raise HTTPException(status_code=401, detail="Invalid token: Key not found in JWKS")

    claims = jwt.decode(
        token,
        signing_key,
        algorithms=["RS256"],
        audience=settings.valid_audience,
        issuer=settings.valid_issuer,
    )

    if (settings.client_id and claims.get("appid") != settings.client_id) or (
        settings.tenant_id and claims.get("tid") != settings.tenant_id
    ):
        raise HTTPException(status_code=401, detail="Invalid token: Unauthorized app or tenant")

    tz = pytz.timezone(settings.timezone)
    if datetime.now(tz) > datetime.fromtimestamp(claims["exp"], tz):
        raise HTTPException(status_code=401, detail="Authentication Token Has Expired!")
    return claims


def validate_token(token: str, db: Session) -> CallerContext:
    """Validate a bearer token and resolve the calling employee.

    Raises:
        HTTPException: For any authentication failure.
    """
    try:
        claims = decode_token(token)
        unique_name = claims.get("unique_name")
        if not unique_name:
            raise HTTPException(status_code=401, detail="Invalid Token: unique_name missing")

        employee = EmployeeRepository(db).get_active_by_email(unique_name)
        if employee is None:
            logger.warning("Token for unknown or inactive employee %s", unique_name)
            raise HTTPException(status_code=401, detail="Invalid Token")

        return CallerContext(
            id=employee.id,
            role=employee.role,
            manager_id=employee.manager_id,
            application_name=employee.application_name,
        )
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(status_code=401, detail="Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=f"Token validation failed: {str(e)}") from e
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Authentication error")
        raise HTTPException(status_code=500, detail=f"Authentication error: {str(e)}") from e


def get_current_caller(
    authorization: Annotated[str | None, Header()] = None,
    db: Annotated[Session, Depends(get_db)] = None,
) -> CallerContext:
    """FastAPI dependency required on every protected endpoint."""
    return validate_token(parse_bearer(authorization), db)


CurrentCaller = Annotated[CallerContext, Depends(get_current_caller)]
