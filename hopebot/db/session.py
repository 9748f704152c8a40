# hopebot/db/session.py
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from hopebot.core.config import settings

logger = logging.getLogger(__name__)


def process_database_url(url: str) -> str:
    """Normalize hosted Postgres URLs; empty means local SQLite."""
    if not url:
        return "sqlite:///./hopebot.db"

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)

    if url.startswith("postgresql://"):
        local = "localhost" in url or "127.0.0.1" in url
        if not local and "sslmode=" not in url:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}sslmode=require"
        logger.info("Database URL processed (first 50 chars): %s...", url[:50])

    return url


DATABASE_URL = process_database_url(settings.DATABASE_URL)

engine_kwargs = dict(pool_pre_ping=True)
connect_args = {}

if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False
elif DATABASE_URL.startswith("postgresql"):
    engine_kwargs.update({
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
    })

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    **engine_kwargs,
    echo=False
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
