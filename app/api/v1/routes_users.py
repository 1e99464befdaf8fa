# File: app/api/v1/routes_users.py

import logging

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.core.config import settings
from app.core.exceptions import AppError, InternalError
from app.models.user import User
from app.schemas.pagination import Page
from app.schemas.user import UserCreate, UserCreatedResponse, UserRead, UserSummary, UserUpdate
from app.services import authorization, user_service

logger = logging.getLogger(__name__)

router = APIRouter()

CREATED = "User created successfully. Please verify your email to activate your account."


def _page_path(request: Request) -> str:
    return str(request.url.replace(query=""))


@router.get("", response_model=Page[UserRead], summary="List users")
def list_users(
    request: Request,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.list_users(db, page=page, per_page=settings.page_size, path=_page_path(request))


@router.post(
    "",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    user = user_service.create_user(db, payload)
    return UserCreatedResponse(success=CREATED, user=UserSummary.model_validate(user))


@router.get("/{identifier}", response_model=UserRead, summary="Show a user by id, slug or username")
def show_user(
    identifier: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.get_user_or_404(db, identifier)


@router.patch("/{identifier}", response_model=UserRead, summary="Update a user")
def update_user(
    identifier: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Only the user themself or a staff member may update a record, and only
    staff may send ``is_staff`` at all. The whole request is rejected if any
    check fails.
    """
    target = user_service.get_user_or_404(db, identifier)
    authorization.can_update_user(current_user, target, payload.model_fields_set).enforce()

    try:
        return user_service.update_user(db, target, payload)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Failed to update user id=%s", target.id)
        raise InternalError("An error occurred while updating the user.", details=str(e)) from e


@router.delete("/{identifier}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a user")
def delete_user(
    identifier: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    target = user_service.get_user_or_404(db, identifier)
    authorization.can_delete_user(current_user, target).enforce()
    user_service.delete_user(db, target)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
