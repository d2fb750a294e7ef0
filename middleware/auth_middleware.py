import logging

import jwt
from fastapi import Request, HTTPException

from config import settings

logger = logging.getLogger(__name__)


def decode_session_token(token: str) -> dict:
    """Verify a Clerk session token (RS256) against the instance's PEM public key."""
    if not settings.CLERK_JWT_PUBLIC_KEY:
        logger.error("CLERK_JWT_PUBLIC_KEY not found in environment variables")
        raise HTTPException(status_code=500, detail="Authentication is not configured")
    try:
        return jwt.decode(
            token,
            settings.CLERK_JWT_PUBLIC_KEY,
            algorithms=["RS256"],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected session token: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid session token")


async def get_current_user(request: Request):
    """
    Dependency that authenticates the request from its Clerk session token.
    Returns the caller's Clerk userId.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")

    claims = decode_session_token(auth_header[len("Bearer "):].strip())
    return {"userId": claims["sub"]}
