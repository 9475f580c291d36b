import logging
from typing import Optional

import httpx
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from .config import (
    CLERK_AUTHORIZED_PARTIES,
    CLERK_CLOCK_SKEW_SECONDS,
    CLERK_ISSUER,
    CLERK_JWKS_URL,
)
from .database import get_db
from .domain.profiles.repository import ProfileRepository
from .models import Profile

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401 by us, not 403 by FastAPI
security = HTTPBearer(auto_error=False)

# Cache for Clerk's JSON Web Key Set
_cached_jwks: Optional[dict] = None


async def get_clerk_jwks() -> Optional[dict]:
    """Fetch the Clerk instance's public keys for session token verification"""
    global _cached_jwks
    if _cached_jwks:
        logger.debug("✅ Using cached Clerk JWKS")
        return _cached_jwks

    if not CLERK_JWKS_URL:
        logger.error("❌ CLERK_JWKS_URL not configured")
        return None

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(CLERK_JWKS_URL, timeout=10.0)
            if response.status_code == 200:
                _cached_jwks = response.json()
                logger.info(f"✅ Fetched {len(_cached_jwks.get('keys', []))} Clerk public keys")
                return _cached_jwks
            logger.error(f"❌ Failed to fetch Clerk JWKS: HTTP {response.status_code}")
    except Exception as e:
        logger.error(f"❌ Error fetching Clerk JWKS: {str(e)}")
    return None


def _find_key(jwks: Optional[dict], kid: str) -> Optional[dict]:
    if not jwks:
        return None
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return key
    return None


async def verify_clerk_token(token: str) -> dict:
    """
    Verify a Clerk session token (RS256 JWT) and return its claims.

    Checks the signature against the instance JWKS, exp/nbf with a small clock
    skew, the issuer when CLERK_ISSUER is set and the authorized party (azp)
    when CLERK_AUTHORIZED_PARTIES is set.
    """
    global _cached_jwks

    try:
        header = jwt.get_unverified_header(token)
    except JWTError as e:
        logger.warning(f"⚠️ Invalid token header: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token format") from e

    kid = header.get("kid")
    alg = header.get("alg")

    if alg != "RS256":
        logger.warning(f"⚠️ Invalid token algorithm: {alg}")
        raise HTTPException(status_code=401, detail="Invalid token algorithm")

    if not kid:
        logger.warning("⚠️ Token missing key ID")
        raise HTTPException(status_code=401, detail="Token missing key ID")

    key = _find_key(await get_clerk_jwks(), kid)
    if key is None:
        logger.warning(f"⚠️ Key ID {kid} not found in JWKS, invalidating cache and retrying")
        # Keys rotate; refetch once before giving up
        _cached_jwks = None
        key = _find_key(await get_clerk_jwks(), kid)
        if key is None:
            logger.error(f"❌ Key ID {kid} not found in JWKS after retry")
            raise HTTPException(status_code=401, detail="Unable to verify token signature")

    try:
        claims = jwt.decode(
            token,
            key,
            algorithms=["RS256"],
            issuer=CLERK_ISSUER,
            options={"verify_aud": False, "leeway": CLERK_CLOCK_SKEW_SECONDS},
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token") from e

    azp = claims.get("azp")
    if CLERK_AUTHORIZED_PARTIES and azp and azp not in CLERK_AUTHORIZED_PARTIES:
        logger.warning(f"⚠️ Token authorized party not allowed: {azp}")
        raise HTTPException(status_code=401, detail="Invalid token authorized party")

    return claims


async def get_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Verified claims of the bearer token on the request"""
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    return await verify_clerk_token(token)


async def get_current_identity(claims: dict = Depends(get_token_claims)) -> str:
    """External identity reference (Clerk user id) of the caller"""
    user_id = claims.get("sub")
    if not user_id:
        logger.error(f"❌ Token missing subject claim. Available claims: {list(claims.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")
    return user_id


async def get_current_profile(
    user_id: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> Profile:
    """Profile of the authenticated caller, 404 until onboarding created one"""
    profile = ProfileRepository.get_by_user_id(db, user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


async def get_current_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    """Authenticated profile with the admin flag set"""
    if not profile.is_admin:
        logger.warning(f"⚠️ Profile {profile.id} attempted to access an admin route")
        raise HTTPException(status_code=403, detail="Admin access required")
    return profile
