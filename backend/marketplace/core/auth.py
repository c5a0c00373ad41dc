"""
Authentication dependencies for the marketplace backend
Validates Supabase access tokens (JWT) and provides user context
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel

from marketplace.core.config import settings


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)


class TokenUser(BaseModel):
    """User data extracted from a Supabase JWT"""
    id: str
    email: Optional[str] = None
    role: str = "customer"


class AuthConfig:
    """Authentication configuration"""

    @staticmethod
    def get_jwt_secret() -> str:
        """Get the Supabase JWT secret"""
        secret = settings.SUPABASE_JWT_SECRET
        if not secret:
            raise ValueError("SUPABASE_JWT_SECRET is not configured")
        return secret

    @staticmethod
    def get_jwt_algorithm() -> str:
        """Supabase signs access tokens with HS256"""
        return "HS256"


def decode_supabase_token(token: str) -> dict:
    """
    Decode and validate a Supabase access token.

    Supabase JWT structure:
    {
        "sub": "user uuid",
        "email": "buyer@example.com",
        "role": "authenticated",
        "aud": "authenticated",
        "app_metadata": {"role": "admin"},
        "exp": 1234567890
    }
    """
    try:
        return jwt.decode(
            token,
            AuthConfig.get_jwt_secret(),
            algorithms=[AuthConfig.get_jwt_algorithm()],
            options={"verify_aud": False}
        )
    except JWTError as e:
        if "expired" in str(e).lower():
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"}
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"}
        )


def _user_from_payload(payload: dict) -> Optional[TokenUser]:
    user_id = payload.get("sub")
    if not user_id:
        return None

    # Marketplace role lives in app_metadata; "authenticated" is the Postgres role
    app_metadata = payload.get("app_metadata") or {}
    role = app_metadata.get("role") or "customer"

    return TokenUser(id=user_id, email=payload.get("email"), role=role)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from JWT.

    Usage:
        @router.post("/checkout")
        async def checkout(user: TokenUser = Depends(get_current_user)):
            ...
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Debes iniciar sesión para continuar",
            headers={"WWW-Authenticate": "Bearer"}
        )

    user = _user_from_payload(decode_supabase_token(credentials.credentials))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user id",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return user


async def require_admin(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    """CRM endpoints are admin-only"""
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied. Required role: admin, your role: {user.role}"
        )
    return user
