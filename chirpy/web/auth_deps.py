"""
FastAPI dependencies for authentication.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from chirpy.app import ChirpyApp
from chirpy.utils.exceptions import InvalidTokenError


def get_context(request: Request) -> ChirpyApp:
    return request.app.state.context


def get_bearer_token(request: Request) -> Optional[str]:
    """Extract the token from an Authorization: Bearer header"""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip() or None
    return None


def require_bearer_token(request: Request) -> str:
    token = get_bearer_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


def get_current_account_id(
    token: str = Depends(require_bearer_token),
    context: ChirpyApp = Depends(get_context),
) -> int:
    """Dependency: account id from a valid session token"""
    try:
        return context.auth.authenticate(token)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
