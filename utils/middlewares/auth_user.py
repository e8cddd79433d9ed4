import logging
from typing import Dict, Optional

import jwt
from fastapi import HTTPException, Request
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from models.auth_user import AuthUser
from utils import constants

logger = logging.getLogger(__name__)


def parse_cookies(cookie_header: str) -> Dict[str, str]:
    """Parse cookie header string into a dictionary"""
    cookies = {}
    if cookie_header:
        for cookie in cookie_header.split(";"):
            if "=" in cookie:
                key, value = cookie.strip().split("=", 1)
                cookies[key.strip()] = value
    return cookies


def extract_token_from_request(request: Request) -> Optional[str]:
    """Extract the Supabase access token from Authorization header or cookies"""
    token = None

    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1].strip() or None

    if not token:
        cookie_header = request.headers.get("cookie")
        if cookie_header:
            cookies = parse_cookies(cookie_header)
            token = cookies.get(constants.ACCESS_TOKEN_COOKIE_NAME)

    return token


def verify_token(token: str) -> AuthUser:
    """Verify a Supabase-issued JWT and return the user it identifies"""
    if not constants.SUPABASE_JWT_SECRET:
        raise HTTPException(status_code=500, detail="Server misconfiguration")

    try:
        decoded = jwt.decode(
            token,
            constants.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience=constants.SUPABASE_JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = decoded.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    return AuthUser(
        id=user_id,
        email=decoded.get("email", ""),
        role=decoded.get("role"),
        exp=decoded.get("exp"),
    )


# Dependency function for route-level authentication
def get_current_user(request: Request) -> AuthUser:
    """Dependency to get current authenticated user"""
    token = extract_token_from_request(request)

    if not token:
        raise HTTPException(status_code=401, detail="Please sign in")

    return verify_token(token)
