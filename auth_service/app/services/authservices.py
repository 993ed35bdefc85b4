import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import status
from sqlalchemy.orm import Session

from shared.core import auth
from shared.core.config import settings
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.models.refresh_token import RefreshToken
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from ..schemas import authschemas

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    # sqlite hands timestamps back without tzinfo
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _user_response(user: Users) -> authschemas.UserResponse:
    return authschemas.UserResponse.model_validate({**user.__dict__, "full_name": user.full_name})


def _issue_tokens(db: Session, user: Users) -> dict:
    access_token = auth.create_access_token(auth.build_token_payload(user))
    refresh = auth.create_refresh_token(db, user)
    return {
        "access_token": access_token,
        "refresh_token": refresh.token,
        "token_type": "bearer",
        "expires_in": settings.JWT_EXPIRE_MINUTES * 60,
    }


def _ensure_can_sign_in(user: Users):
    if not user.is_active:
        return error_response(
            message="User is not active",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INACTIVE),
            http_status=status.HTTP_403_FORBIDDEN
        )

    if user.tenant and not user.tenant.is_active:
        return error_response(
            message="Tenant is not active",
            status_code=str(AppStatusCode.AUTHENTICATION_TENANT_INACTIVE),
            http_status=status.HTTP_403_FORBIDDEN
        )


def login(db: Session, request: authschemas.LoginRequest) -> authschemas.AuthenticationResponse:
    user = db.query(Users).filter(Users.email == request.email.lower()).first()

    if not user or not user.verify_password(request.password):
        logger.info("Failed login for %s", request.email)
        return error_response(
            message="Invalid email or password",
            status_code=str(AppStatusCode.AUTHENTICATION_INVALID_CREDENTIALS),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    _ensure_can_sign_in(user)

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    tokens = _issue_tokens(db, user)
    logger.info("User %s signed in", user.email)
    return {**tokens, "user": _user_response(user)}


def refresh_access_token(db: Session, refresh_token_str: str) -> authschemas.TokenResponse:
    token = (
        db.query(RefreshToken)
        .filter(RefreshToken.token == refresh_token_str, RefreshToken.revoked == False)
        .first()
    )

    if not token or _aware(token.expires_at) < datetime.now(timezone.utc):
        return error_response(
            message="Invalid or expired refresh token",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    user = token.user
    if not user:
        return error_response(
            message="User not found",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    _ensure_can_sign_in(user)

    # rotate: the old refresh token is single-use
    token.revoked = True
    db.commit()

    return _issue_tokens(db, user)


def logout_user(db: Session, user_id: str, refresh_token_str: str) -> authschemas.LogoutResponse:
    token = (
        db.query(RefreshToken)
        .filter(
            RefreshToken.user_id == UUID(user_id),
            RefreshToken.token == refresh_token_str,
            RefreshToken.revoked == False
        )
        .first()
    )

    if not token:
        return error_response(
            message="Refresh token not found",
            status_code=str(AppStatusCode.NOT_FOUND),
            http_status=status.HTTP_404_NOT_FOUND
        )

    token.revoked = True
    db.commit()
    return {"message": "Logged out successfully"}


def get_me(db: Session, current_user: UserToken) -> authschemas.UserResponse:
    user = db.query(Users).filter(Users.id == UUID(current_user.user_id)).first()
    if not user:
        return error_response(
            message="User not found",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    return _user_response(user)
