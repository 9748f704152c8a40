# hopebot/core/security.py
import logging
import secrets
from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from hopebot.core.config import settings
from hopebot.core.timezone import utcnow
from hopebot.db.session import get_db
from hopebot.models.session import UserSession

logger = logging.getLogger(__name__)

ALGORITHM = settings.SESSION_ALG
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# ================= Passwords =================

def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Constant-time check; malformed hashes count as a mismatch."""
    try:
        return pwd_context.verify(password, hashed)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed")
        return False


# ================= Session cookie =================

def session_lifetime() -> timedelta:
    return timedelta(hours=settings.SESSION_MAX_AGE_HOURS)


def create_session_token(sid: str) -> str:
    """Signed cookie value pointing at a server-side session row."""
    expire = utcnow() + session_lifetime()
    payload = {"sid": sid, "exp": expire}
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Optional[str]:
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None


def start_session(db: Session, response: Response, user_id: int) -> UserSession:
    now = utcnow()
    record = UserSession(
        sid=secrets.token_urlsafe(32),
        user_id=user_id,
        created_at=now,
        expires_at=now + session_lifetime(),
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(record.sid),
        max_age=int(session_lifetime().total_seconds()),
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )
    return record


def load_session(request: Request, db: Session) -> Optional[UserSession]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None

    sid = decode_session_token(token)
    if not sid:
        return None

    record = db.query(UserSession).filter(UserSession.sid == sid).first()
    if record is None:
        return None

    if record.is_expired():
        db.delete(record)
        db.commit()
        return None

    return record


def end_session(request: Request, response: Response, db: Session) -> None:
    record = load_session(request, db)
    if record is not None:
        db.delete(record)
        db.commit()
    response.delete_cookie(settings.SESSION_COOKIE_NAME)


def purge_expired_sessions(db: Session) -> int:
    removed = (
        db.query(UserSession)
        .filter(UserSession.expires_at <= utcnow())
        .delete(synchronize_session=False)
    )
    db.commit()
    return removed


# ================= Dependencies =================

def get_session_user_id(request: Request, db: Session = Depends(get_db)) -> Optional[int]:
    record = load_session(request, db)
    return record.user_id if record else None


def require_user_id(user_id: Optional[int] = Depends(get_session_user_id)) -> int:
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id
