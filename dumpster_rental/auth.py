import base64
import json
import logging
import time
from typing import Optional

import httpx
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.x509 import load_pem_x509_certificate
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import FIREBASE_PROJECT_ID
from .database import get_db
from .models import User

logger = logging.getLogger(__name__)

security = HTTPBearer()

GOOGLE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)
CLOCK_SKEW_SECONDS = 60

# Cache for Google's public certificates: {"keys": {...}, "expires_at": epoch}
_cert_cache: dict = {}


def _b64url_decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


async def get_google_public_keys(force_refresh: bool = False) -> Optional[dict]:
    """Fetch Google's x509 certificates used to sign Firebase ID tokens"""
    if not force_refresh and _cert_cache.get("expires_at", 0) > time.time():
        return _cert_cache["keys"]

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(GOOGLE_CERTS_URL)
        if response.status_code != 200:
            logger.error(f"❌ Failed to fetch Google public keys: HTTP {response.status_code}")
            return None

        # Honour Cache-Control max-age so rotated keys are picked up
        max_age = 3600
        for directive in response.headers.get("cache-control", "").split(","):
            directive = directive.strip()
            if directive.startswith("max-age="):
                max_age = int(directive.split("=", 1)[1])

        _cert_cache["keys"] = response.json()
        _cert_cache["expires_at"] = time.time() + max_age
        logger.info(f"✅ Fetched {len(_cert_cache['keys'])} Google public keys")
        return _cert_cache["keys"]
    except Exception as e:
        logger.error(f"❌ Error fetching Google public keys: {str(e)}")
        return None


async def verify_firebase_token(token: str) -> dict:
    """
    Verify a Firebase ID token: RS256 signature against Google's certificates,
    then audience, issuer, expiry and issued-at claims.
    """
    if not FIREBASE_PROJECT_ID:
        logger.error("❌ FIREBASE_PROJECT_ID not configured")
        raise HTTPException(status_code=500, detail="Authentication not configured")

    parts = token.split(".")
    if len(parts) != 3:
        raise HTTPException(status_code=401, detail="Invalid token format")
    header_b64, payload_b64, signature_b64 = parts

    try:
        header = json.loads(_b64url_decode(header_b64))
        claims = json.loads(_b64url_decode(payload_b64))
        signature = _b64url_decode(signature_b64)
    except Exception as e:
        raise HTTPException(status_code=401, detail="Invalid token encoding") from e

    kid = header.get("kid")
    if header.get("alg") != "RS256" or not kid:
        raise HTTPException(status_code=401, detail="Invalid token header")

    public_keys = await get_google_public_keys()
    if not public_keys or kid not in public_keys:
        logger.warning(f"⚠️ Key ID {kid} not in cached keys, refreshing")
        public_keys = await get_google_public_keys(force_refresh=True)
        if not public_keys or kid not in public_keys:
            raise HTTPException(status_code=401, detail="Unable to verify token signature")

    cert = load_pem_x509_certificate(public_keys[kid].encode())
    try:
        cert.public_key().verify(
            signature,
            f"{header_b64}.{payload_b64}".encode(),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
    except Exception as e:
        logger.error(f"❌ Token signature verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token signature") from e

    now = time.time()
    if claims.get("aud") != FIREBASE_PROJECT_ID:
        raise HTTPException(status_code=401, detail="Invalid token audience")
    if claims.get("iss") != f"https://securetoken.google.com/{FIREBASE_PROJECT_ID}":
        raise HTTPException(status_code=401, detail="Invalid token issuer")
    if claims.get("exp", 0) < now:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        )
    if claims.get("iat", 0) > now + CLOCK_SKEW_SECONDS:
        raise HTTPException(status_code=401, detail="Invalid token")
    if not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return claims


def resolve_user(db: Session, claims: dict) -> User:
    """Find, migrate or create the profile row for verified token claims"""
    firebase_uid = claims["sub"]
    email = (claims.get("email") or "").lower()
    name = claims.get("name") or None

    user = db.query(User).filter(User.firebase_uid == firebase_uid).first()
    if user:
        return user

    # Profiles created by an admin for a phone customer carry no uid until first sign-in
    if email:
        existing = db.query(User).filter(User.email == email).first()
        if existing:
            logger.info(f"🔄 Linking profile {existing.id} to Firebase UID on first sign-in")
            existing.firebase_uid = firebase_uid
            if name and not existing.full_name:
                existing.full_name = name
            db.commit()
            db.refresh(existing)
            return existing

    logger.info(f"🆕 Creating profile for {email}")
    user = User(firebase_uid=firebase_uid, email=email, full_name=name, role="client")
    db.add(user)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        if "unique" in str(e).lower() or "duplicate key" in str(e).lower():
            raise HTTPException(
                status_code=409,
                detail="This email is already registered. Please sign in with your existing account.",
            ) from e
        raise
    db.refresh(user)
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from Firebase token"""
    if not credentials:
        raise HTTPException(status_code=401, detail="Unauthorized")

    claims = await verify_firebase_token(credentials.credentials)
    user = resolve_user(db, claims)
    logger.debug(f"✅ User authenticated: {user.id}")
    return user


async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    """Admin dashboard guard: role flag on the caller's profile row"""
    if not user.has_admin_access:
        logger.warning(f"⚠️ User {user.id} attempted to access an admin route")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
