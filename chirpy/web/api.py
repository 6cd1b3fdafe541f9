"""
HTTP routes. Each handler decodes the request, calls one core operation
and maps its typed failure to a status code.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel

from chirpy.app import ChirpyApp
from chirpy.models.account import AccountView
from chirpy.models.post import Post
from chirpy.services.profanity import clean_body
from chirpy.utils.exceptions import (
    DuplicateEmailError,
    HashingError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from .auth_deps import get_context, get_current_account_id, require_bearer_token

router = APIRouter(prefix="/api", tags=["api"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


class PostCreate(BaseModel):
    body: str


class Credentials(BaseModel):
    email: str
    password: str


class LoginRequest(Credentials):
    expires_in_seconds: Optional[int] = None


class LoginResponse(BaseModel):
    id: int
    email: str
    token: str
    refresh_token: str


class TokenResponse(BaseModel):
    token: str


@router.get("/healthz", response_class=PlainTextResponse)
def healthz() -> str:
    return "OK"


@router.api_route("/reset", methods=["GET", "POST"], response_class=PlainTextResponse)
def reset_metrics(context: ChirpyApp = Depends(get_context)) -> str:
    context.hits.reset()
    return "Hits reset to 0"


@admin_router.get("/metrics", response_class=HTMLResponse)
def metrics(context: ChirpyApp = Depends(get_context)) -> str:
    return (
        "<html><body><h1>Welcome, Chirpy Admin</h1>"
        f"<p>Chirpy has been visited {context.hits.value} times!</p></body></html>"
    )


@router.post("/chirps", response_model=Post, status_code=status.HTTP_201_CREATED)
def create_chirp(
    payload: PostCreate,
    account_id: int = Depends(get_current_account_id),
    context: ChirpyApp = Depends(get_context),
) -> Post:
    body = payload.body
    if len(body) < context.posts.max_length:
        body = clean_body(body, context.settings.posts.banned_words)
    try:
        return context.posts.create_post(body, author_id=account_id)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/chirps", response_model=List[Post])
def list_chirps(
    author_id: Optional[int] = None,
    sort: str = "asc",
    context: ChirpyApp = Depends(get_context),
) -> List[Post]:
    try:
        return context.posts.list_posts(author_id=author_id, sort=sort)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/chirps/{chirp_id}", response_model=Post)
def get_chirp(chirp_id: int, context: ChirpyApp = Depends(get_context)) -> Post:
    try:
        return context.posts.get_post(chirp_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/users", response_model=AccountView, status_code=status.HTTP_201_CREATED)
def create_user(payload: Credentials, context: ChirpyApp = Depends(get_context)) -> AccountView:
    try:
        return context.auth.register(payload.email, payload.password)
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except HashingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.put("/users", response_model=AccountView)
def update_user(
    payload: Credentials,
    account_id: int = Depends(get_current_account_id),
    context: ChirpyApp = Depends(get_context),
) -> AccountView:
    try:
        return context.auth.update_account(account_id, payload.email, payload.password)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except HashingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, context: ChirpyApp = Depends(get_context)) -> LoginResponse:
    try:
        result = context.auth.login(payload.email, payload.password, payload.expires_in_seconds)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return LoginResponse(
        id=result.account_id,
        email=result.email,
        token=result.session_token,
        refresh_token=result.renewal_token,
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    token: str = Depends(require_bearer_token),
    context: ChirpyApp = Depends(get_context),
) -> TokenResponse:
    try:
        return TokenResponse(token=context.auth.renew(token))
    except InvalidTokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke(
    token: str = Depends(require_bearer_token),
    context: ChirpyApp = Depends(get_context),
) -> Response:
    context.auth.revoke(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
