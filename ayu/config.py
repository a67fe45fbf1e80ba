import os
from pathlib import Path
from dotenv import load_dotenv
from fastapi.security import HTTPBearer

BASE_DIR = Path(__file__).resolve().parent.parent  # -> project root

# Load .env explicitly from project root
load_dotenv(BASE_DIR / ".env")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    PROJECT_NAME = "AyuVeda Backend"

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ayu.db")
    API_PREFIX = os.getenv("API_PREFIX", "/api/auth")

    JWT_SECRET = os.getenv("JWT_SECRET")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))
    OTP_EXPIRE_MINUTES = int(os.getenv("OTP_EXPIRE_MINUTES", 60))
    OTP_RESEND_COOLDOWN_SECONDS = int(os.getenv("OTP_RESEND_COOLDOWN_SECONDS", 60))
    PROFILE_UPDATE_REQUIRE_TOKEN = _env_flag("PROFILE_UPDATE_REQUIRE_TOKEN")

    EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "console").lower()
    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
    SMTP_USER = os.getenv("SMTP_USER")
    SMTP_PASS = os.getenv("SMTP_PASS")
    FROM_EMAIL = os.getenv("FROM_EMAIL", "no-reply@ayuveda.app")
    GMAIL_CREDENTIALS_PATH = os.getenv("GMAIL_CREDENTIALS_PATH", "credentials/credentials.json")
    GMAIL_TOKEN_PATH = os.getenv("GMAIL_TOKEN_PATH", "credentials/token.json")

    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    GEMINI_API_URL = os.getenv(
        "GEMINI_API_URL",
        "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent",
    )
    GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", 30))

    UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    SEED_DEMO_USER_EMAIL = os.getenv("SEED_DEMO_USER_EMAIL")
    SEED_DEMO_USER_PASSWORD = os.getenv("SEED_DEMO_USER_PASSWORD")

    # Client-side settings
    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
    SESSION_FILE = os.getenv("SESSION_FILE", str(Path.home() / ".ayu" / "session.json"))

    bearer_scheme = HTTPBearer()
    optional_bearer_scheme = HTTPBearer(auto_error=False)
    cors_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]


settings = Settings()
