from fastapi import APIRouter, Depends
from planmap.schemas.api_schemas import (
    SignupRequest, LoginRequest, TokenResponse, ProfileResponse, ProfilePatch,
)
from planmap.dependencies import get_auth_service, get_current_user_id
from planmap.application.auth_service import AuthService

router = APIRouter()

@router.post("/api/auth/signup", response_model=TokenResponse, status_code=201)
def signup(
    body: SignupRequest,
    auth_svc: AuthService = Depends(get_auth_service),
):
    """
    Create an account (and its profile) and start a session.
    """
    user, token = auth_svc.signup(body.email, body.password, username=body.username)
    return TokenResponse(access_token=token, user_id=user.id)

@router.post("/api/auth/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    auth_svc: AuthService = Depends(get_auth_service),
):
    """
    Exchange e-mail and password for a bearer token.
    """
    user, token = auth_svc.login(body.email, body.password)
    return TokenResponse(access_token=token, user_id=user.id)

@router.get("/api/profile", response_model=ProfileResponse)
def get_profile(
    user_id: str = Depends(get_current_user_id),
    auth_svc: AuthService = Depends(get_auth_service),
):
    return auth_svc.get_profile(user_id)

@router.put("/api/profile", response_model=ProfileResponse)
def update_profile(
    body: ProfilePatch,
    user_id: str = Depends(get_current_user_id),
    auth_svc: AuthService = Depends(get_auth_service),
):
    """
    Update the caller's username and/or avatar.
    """
    return auth_svc.update_profile(user_id, body.model_dump(exclude_unset=True))
