import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME") or "Push Relay"

    HOST: str = os.getenv("HOST") or "0.0.0.0"
    PORT: int = int(os.getenv("PORT") or 3000)

    LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").upper()

    # One of "sql", "firestore" or "memory". The sql backend falls back to a
    # local sqlite file when DB_URL is not provided.
    STORAGE_BACKEND: str = (os.getenv("STORAGE_BACKEND") or "sql").lower()
    DB_URL: str = os.getenv("DB_URL") or "sqlite:///./dev.db"
    AUTO_CREATE_TABLES: bool = _env_bool("AUTO_CREATE_TABLES", True)

    # Path to the Firebase service account JSON. Only the path is ever logged;
    # when unset the SDK falls back to application default credentials.
    FIREBASE_CREDENTIALS: Optional[str] = (
        os.getenv("FIREBASE_CREDENTIALS") or os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or None
    )

    WEBHOOK_TIMEOUT: float = float(os.getenv("WEBHOOK_TIMEOUT") or 10)


settings = Settings()
