import uuid

from shared.core.auth import build_token_payload, create_access_token
from shared.core.database import SessionLocal
from shared.models.users import Users


def bearer_for(email: str) -> dict:
    db = SessionLocal()
    try:
        user = db.query(Users).filter(Users.email == email).first()
        token = create_access_token(build_token_payload(user))
    finally:
        db.close()
    return {"Authorization": f"Bearer {token}"}


def unique(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def data_of(response):
    assert response.status_code == 200, response.text
    return response.json()["data"]
