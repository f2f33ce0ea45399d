"""
Auth endpoints: email/password, third-party redirect sign-in, sign-out.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from fintrack.api.dependencies import drop_store, get_access_token, get_current_user, get_identity
from fintrack.api.response_models import AuthResponse, CredentialsRequest, MeResponse, OAuthStartResponse
from fintrack.auth import AuthSession, CurrentUser, IdentityService
from fintrack.config import OAUTH_DEFAULT_PROVIDER
from fintrack.errors import AuthError

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(session: AuthSession) -> AuthResponse:
    return AuthResponse(
        user_id=session.user_id,
        email=session.email,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        confirmed=session.confirmed,
    )


@router.post("/signin", response_model=AuthResponse)
def sign_in(body: CredentialsRequest, identity: IdentityService = Depends(get_identity)):
    return _auth_response(identity.sign_in(body.email, body.password))


@router.post("/signup", response_model=AuthResponse, status_code=201)
def sign_up(body: CredentialsRequest, identity: IdentityService = Depends(get_identity)):
    return _auth_response(identity.sign_up(body.email, body.password))


@router.get("/oauth", response_model=OAuthStartResponse)
def start_oauth(
    provider: str = Query(OAUTH_DEFAULT_PROVIDER),
    identity: IdentityService = Depends(get_identity),
):
    """URL the browser should be sent to for a third-party sign-in."""
    flow = identity.start_oauth(provider)
    return OAuthStartResponse(provider=provider, url=flow.url, flow_id=flow.flow_id)


@router.get("/callback", response_model=AuthResponse)
def oauth_callback(
    code: Optional[str] = Query(None),
    flow: Optional[str] = Query(None),
    error_description: Optional[str] = Query(None),
    identity: IdentityService = Depends(get_identity),
):
    if not code:
        raise AuthError(error_description or "Código de autorização ausente")
    if not flow:
        raise AuthError("Login expirado, tente novamente")
    return _auth_response(identity.complete_oauth(code, flow))


@router.post("/signout")
def sign_out(
    token: str = Depends(get_access_token),
    user: CurrentUser = Depends(get_current_user),
    identity: IdentityService = Depends(get_identity),
):
    identity.sign_out(token)
    drop_store(user.id)
    return {"message": "Sessão encerrada"}


@router.get("/me", response_model=MeResponse)
def me(
    user: CurrentUser = Depends(get_current_user),
    identity: IdentityService = Depends(get_identity),
):
    profile = identity.profile(user.id)
    return MeResponse(
        user_id=user.id,
        email=user.email,
        profile=profile.to_json() if profile else None,
    )
