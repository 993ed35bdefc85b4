from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core import auth
from shared.core.database import get_db
from shared.core.schemas import UserToken
from ..schemas import authschemas
from ..services import authservices

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=authschemas.AuthenticationResponse)
def login(
        request: authschemas.LoginRequest,
        db: Session = Depends(get_db)):
    return authservices.login(db, request)


@router.post("/refresh", response_model=authschemas.TokenResponse)
def refresh_token(
        request: authschemas.RefreshRequest,
        db: Session = Depends(get_db)):
    return authservices.refresh_access_token(db, request.refresh_token)


@router.post("/logout", response_model=authschemas.LogoutResponse)
def logout(
        request: authschemas.RefreshRequest,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    return authservices.logout_user(db, current_user.user_id, request.refresh_token)


@router.get("/me", response_model=authschemas.UserResponse)
def me(
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(auth.validate_current_token)):
    return authservices.get_me(db, current_user)
