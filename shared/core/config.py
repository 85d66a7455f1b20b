import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", 1440))  # 24 hours default

    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASS: str = os.getenv("DB_PASS", "postgres")
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    AUTH_DB_NAME: str = os.getenv("AUTH_DB_NAME", "lab_auth")
    LAB_DB_NAME: str = os.getenv("LAB_DB_NAME", "lab_assets")

    # Full URLs win over the individual parts when present
    AUTH_DATABASE_URL: str | None = os.getenv("AUTH_DATABASE_URL")
    LAB_DATABASE_URL: str | None = os.getenv("LAB_DATABASE_URL")

    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    SERVICE_HOST: str = os.getenv("SERVICE_HOST", "0.0.0.0")
    AUTH_SERVICE_PORT: int = int(os.getenv("AUTH_SERVICE_PORT", 8001))
    LAB_SERVICE_PORT: int = int(os.getenv("LAB_SERVICE_PORT", 8002))
    RELOAD: bool = os.getenv("RELOAD", "true").lower() == "true"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()


def _postgres_url(db_name: str) -> str:
    return (
        f"postgresql+psycopg2://{settings.DB_USER}:{settings.DB_PASS}"
        f"@{settings.DB_HOST}:{settings.DB_PORT}/{db_name}"
    )


AUTH_DATABASE_URL = settings.AUTH_DATABASE_URL or _postgres_url(settings.AUTH_DB_NAME)

LAB_DATABASE_URL = settings.LAB_DATABASE_URL or _postgres_url(settings.LAB_DB_NAME)
