import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from recipe_discovery.app.api.deps import get_current_user, get_identity_client, security
from recipe_discovery.app.schemas.auth import (
    AuthMessage,
    AuthSession,
    CurrentUser,
    OAuthRedirect,
    SignInRequest,
    SignUpRequest,
)
from recipe_discovery.app.services.identity_client import IdentityClient, IdentityError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _to_http(exc: IdentityError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


@router.post("/sign-in", response_model=AuthSession)
async def sign_in(payload: SignInRequest, identity: IdentityClient = Depends(get_identity_client)):
    try:
        return await identity.sign_in(payload.email, payload.password)
    except IdentityError as exc:
        raise _to_http(exc)


@router.post("/sign-up", response_model=AuthMessage)
async def sign_up(payload: SignUpRequest, identity: IdentityClient = Depends(get_identity_client)):
    try:
        await identity.sign_up(payload.email, payload.password, payload.full_name)
    except IdentityError as exc:
        raise _to_http(exc)
    return AuthMessage(message="Account created! Please check your email to confirm your account.")


@router.get("/oauth/{provider}", response_model=OAuthRedirect)
def oauth_redirect(provider: str, redirect_to: str = "/", identity: IdentityClient = Depends(get_identity_client)):
    try:
        url = identity.oauth_authorize_url(provider, redirect_to)
    except IdentityError as exc:
        raise _to_http(exc)
    return OAuthRedirect(provider=provider, url=url)


@router.post("/sign-out", response_model=AuthMessage)
async def sign_out(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    current_user: CurrentUser = Depends(get_current_user),
    identity: IdentityClient = Depends(get_identity_client),
):
    try:
        await identity.sign_out(credentials.credentials)
    except IdentityError as exc:
        raise _to_http(exc)
    logger.info("User %s signed out", current_user.id)
    return AuthMessage(message="You have been successfully signed out.")
