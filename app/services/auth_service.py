# app/services/auth_service.py
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import create_access_token, verify_password, hash_password
from app.models.user import User
from app.policies.principal import Principal

logger = logging.getLogger(__name__)


def _principal(u: User) -> Principal:
    return Principal(user_id=str(u.id), email=u.email, name=u.name)


def _find_active(db: Session, email: str) -> User | None:
    return db.execute(
        select(User).where(User.email == email.lower(), User.is_active.is_(True))
    ).scalar_one_or_none()


def register(db: Session, name: str, email: str, password: str) -> Principal:
    email = email.lower()
    if db.execute(select(User.id).where(User.email == email)).first():
        raise ValueError("User already exists")

    u = User(name=name, email=email, password_hash=hash_password(password))
    db.add(u)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError("User already exists")
    db.refresh(u)

    logger.info("user registered", extra={"user_id": str(u.id)})
    return _principal(u)


def authenticate(db: Session, email: str, password: str) -> Principal | None:
    u = _find_active(db, email)

    if not u:
        return None

    if not verify_password(password, u.password_hash):
        return None

    return _principal(u)


def issue_token(principal: Principal) -> str:
    return create_access_token(
        subject=principal.user_id,
        claims={"email": principal.email, "name": principal.name},
    )
