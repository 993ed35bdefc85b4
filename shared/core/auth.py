import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.models.refresh_token import RefreshToken
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import TENANT_ADMIN_ROLES, UserRole

logger = logging.getLogger(__name__)

# 401 instead of FastAPI's default 403 when the header is missing
security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_minutes: Optional[int] = None):
    payload = data.copy()
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES)
    payload['exp'] = expires

    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def build_token_payload(user: Users) -> dict:
    return {
        "user_id": str(user.id),
        "tenant_id": str(user.tenant_id) if user.tenant_id else None,
        "email": user.email,
        "name": user.full_name,
        "role": user.role.value if isinstance(user.role, UserRole) else user.role,
    }


def create_refresh_token(db: Session, user: Users) -> RefreshToken:
    refresh = RefreshToken(
        user_id=user.id,
        token=secrets.token_urlsafe(64),
        expires_at=datetime.now(timezone.utc) +
        timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
    )
    db.add(refresh)
    db.commit()
    db.refresh(refresh)
    return refresh


def verify_token(token: str) -> UserToken:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return error_response(
            message="Invalid or expired token",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not payload.get("user_id") or not payload.get("role"):
        return error_response(
            message="Invalid token structure",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    return UserToken(**payload)


def validate_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> UserToken:
    if credentials is None or not credentials.credentials:
        return error_response(
            message="Not authenticated",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    user_data = verify_token(credentials.credentials)

    user = db.query(Users).filter(Users.id == _as_uuid(user_data.user_id)).first()

    if not user:
        return error_response(
            message="User not found",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not user.is_active:
        return error_response(
            message="User is not active. Access denied",
            status_code=str(AppStatusCode.AUTHENTICATION_USER_INACTIVE),
            http_status=status.HTTP_403_FORBIDDEN
        )

    if user.tenant and not user.tenant.is_active:
        return error_response(
            message="Tenant is not active. Access denied",
            status_code=str(AppStatusCode.AUTHENTICATION_TENANT_INACTIVE),
            http_status=status.HTTP_403_FORBIDDEN
        )

    user_data.is_active = user.is_active
    return user_data


def allow_tenant_admin(current_user: UserToken = Depends(validate_current_token)):
    if current_user.role not in TENANT_ADMIN_ROLES:
        return error_response(
            message="Access forbidden: tenant admins only",
            status_code=str(AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS),
            http_status=status.HTTP_403_FORBIDDEN
        )

    return current_user


def allow_saas_admin(current_user: UserToken = Depends(validate_current_token)):
    if current_user.role != UserRole.SAAS_ADMIN.value:
        return error_response(
            message="Access forbidden: platform admins only",
            status_code=str(AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS),
            http_status=status.HTTP_403_FORBIDDEN
        )

    return current_user


def _as_uuid(value):
    try:
        return UUID(str(value))
    except ValueError:
        return error_response(
            message="Invalid token structure",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )
