# hopebot/main.py - HopeBot backend
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, Depends, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from hopebot import chat as chat_module
from hopebot.core.config import settings
from hopebot.core.security import (
    end_session,
    get_session_user_id,
    hash_password,
    purge_expired_sessions,
    require_user_id,
    start_session,
    verify_password,
)
from hopebot.core.timezone import format_time, utcnow
from hopebot.db.base import Base
from hopebot.db.session import SessionLocal, engine, get_db
from hopebot.models.message import Message  # noqa: F401  registers the mapper before User relationships resolve
from hopebot.models.resource import Resource
from hopebot.models.user import User
from hopebot.routers import resources as resources_router
from hopebot.schemas.auth import AuthStatus, LoginIn, RegisterIn
from hopebot.schemas.user import AuthResult, UserOut
from hopebot.services import knowledge
from hopebot.services.resources import seed_default_resources

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="HopeBot Backend",
    version=VERSION,
    description="Mental health companion chat API",
)


def _parse_allowed(origins_str: str) -> List[str]:
    out: List[str] = []
    for s in (origins_str or "").split(","):
        s = s.strip()
        if s and s not in ("*", "null"):
            out.append(s)
    return out


app.add_middleware(
    CORSMiddleware,
    allow_origins=_parse_allowed(settings.ALLOWED_ORIGINS),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)


@app.middleware("http")
async def catch_unhandled(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Request error: %s %s", request.method, request.url.path)
        return JSONResponse({"message": "Internal Server Error"}, status_code=500)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        {"message": "Invalid input data", "errors": jsonable_encoder(exc.errors())},
        status_code=400,
    )


@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables initialized")

    db = SessionLocal()
    try:
        seed_default_resources(db)
        removed = purge_expired_sessions(db)
        if removed:
            logger.info("Purged %d expired sessions", removed)
    finally:
        db.close()

    knowledge.load_background_document()


app.include_router(chat_module.router, prefix="/api", tags=["chat"])
app.include_router(resources_router.router)

# ============================================================================
# Helper Functions
# ============================================================================


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username.lower()).first()


# ============================================================================
# Auth endpoints
# ============================================================================

@app.get("/api/auth/status", response_model=AuthStatus, response_model_exclude_none=True)
def auth_status(user_id: Optional[int] = Depends(get_session_user_id)):
    if user_id is None:
        return AuthStatus(authenticated=False)
    return AuthStatus(authenticated=True, userId=user_id)


@app.post("/api/auth/register", response_model=AuthResult, status_code=201)
def register(body: RegisterIn, response: Response, db: Session = Depends(get_db)):
    if get_user_by_email(db, body.email):
        raise HTTPException(status_code=400, detail="Email already in use")

    if get_user_by_username(db, body.username):
        raise HTTPException(status_code=400, detail="Username already taken")

    user = User(
        username=body.username.lower(),
        email=body.email.lower(),
        password=hash_password(body.password),
        created_at=utcnow(),
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email or username already in use")

    start_session(db, response, user.id)
    logger.info("✅ New user registered: id=%s", user.id)

    return AuthResult(message="User created successfully", user=UserOut.model_validate(user))


@app.post("/api/auth/login", response_model=AuthResult)
def login(body: LoginIn, response: Response, db: Session = Depends(get_db)):
    user = get_user_by_email(db, body.email)
    if not user or not verify_password(body.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    start_session(db, response, user.id)
    logger.info("✅ User logged in: id=%s", user.id)

    return AuthResult(message="Login successful", user=UserOut.model_validate(user))


@app.post("/api/auth/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    try:
        end_session(request, response, db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Logout failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to logout")
    return {"message": "Logout successful"}


@app.get("/api/users/me", response_model=UserOut)
def get_me(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ============================================================================
# Health
# ============================================================================

@app.get("/api/health")
def health(db: Session = Depends(get_db)):
    return {
        "ok": True,
        "time": format_time(utcnow()),
        "version": VERSION,
        "features": {
            "language_model": bool(settings.OPENAI_API_KEY),
            "background_document": knowledge.get_background_document() is not None,
        },
        "stats": {
            "resources": db.query(func.count(Resource.id)).scalar(),
        },
    }


@app.get("/")
def root():
    return {
        "service": "HopeBot Backend API",
        "version": VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, log_level="info")
