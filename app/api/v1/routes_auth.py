# File: app/api/v1/routes_auth.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_token, get_db
from app.models.token import PersonalAccessToken
from app.schemas.auth import LoginRequest, MessageResponse, TokenResponse
from app.schemas.user import UserCreate
from app.services import auth_service, user_service

router = APIRouter()

REGISTERED = "User created successfully. Please verify your email to activate your account."


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    user_service.create_user(db, payload)
    return MessageResponse(success=REGISTERED)


@router.post("/login", response_model=TokenResponse, summary="Exchange credentials for a bearer token")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """
    Accepts an email address or a username in ``email_or_username``.

    Any failure (unknown account, wrong password, inactive account) returns
    the same 422 response.
    """
    result = auth_service.login(db, identifier=payload.email_or_username, password=payload.password)
    return TokenResponse(token=result.token, expires_at=result.expires_at)


@router.post("/logout", response_model=MessageResponse, summary="Revoke the presented token")
def logout(
    token: PersonalAccessToken = Depends(get_current_token),
    db: Session = Depends(get_db),
):
    auth_service.logout(db, token)
    return MessageResponse(success="Successfully logged out.")
