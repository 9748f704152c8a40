# hopebot/core/config.py
import logging
import os
import secrets

try:
    from dotenv import load_dotenv, find_dotenv
    load_dotenv(find_dotenv(usecwd=True))
except ImportError:
    pass

logger = logging.getLogger(__name__)


class Settings:
    ENV = os.getenv("ENV", "development")

    # Signs the session cookie; the session row itself lives in the database
    SESSION_SECRET = os.getenv("SESSION_SECRET")

    if not SESSION_SECRET:
        if ENV != "production":
            SESSION_SECRET = secrets.token_urlsafe(32)
            logger.warning("⚠️ SESSION_SECRET not set, using a temporary secret")
        else:
            raise RuntimeError("SESSION_SECRET environment variable is not set!")

    SESSION_ALG = "HS256"
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "hopebot.sid")
    SESSION_MAX_AGE_HOURS = int(os.getenv("SESSION_MAX_AGE_HOURS", "24"))

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./hopebot.db")
    ALLOWED_ORIGINS = os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:5173,http://localhost:3000",
    )

    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
    OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))
    OPENAI_MAX_TOKENS = int(os.getenv("OPENAI_MAX_TOKENS", "500"))

    if not OPENAI_API_KEY:
        logger.warning("⚠️ OPENAI_API_KEY not set, replies will use the fallback selector")

    MENTAL_HEALTH_DOC_PATH = os.getenv("MENTAL_HEALTH_DOC_PATH", "")
    TIMEZONE = os.getenv("TIMEZONE", "UTC")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "10000"))

    @property
    def secure_cookies(self) -> bool:
        return self.ENV == "production"


settings = Settings()
