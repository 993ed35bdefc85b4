from typing import Dict, Iterable, Optional
from uuid import UUID

from shared.core.database import SessionLocal
from shared.models.users import Users


def get_user_name(user_id: Optional[UUID]) -> Optional[str]:
    if not user_id:
        return None

    db = SessionLocal()
    try:
        user = db.query(Users).filter(Users.id == user_id).first()
        return user.full_name if user else None
    finally:
        db.close()


def get_user_names_bulk(user_ids: Iterable[UUID]) -> Dict[UUID, str]:
    """Map user id -> full name; unknown ids are left out."""
    ids = {uid for uid in user_ids if uid}
    if not ids:
        return {}

    db = SessionLocal()
    try:
        users = db.query(Users).filter(Users.id.in_(ids)).all()
        return {u.id: u.full_name for u in users}
    finally:
        db.close()
