from typing import List

from pydantic_settings import BaseSettings

VERSION = "0.1.0"


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
    RESET_DB: bool = False

    # admin gate
    ADMIN_EMAIL: str = ""
    ADMIN_PASSWORD: str = ""
    OWNER_EMAIL: str = ""
    AUTH_COOKIE_NAME: str = "zee_admin"
    AUTH_COOKIE_SECURE: bool = False

    # credential recovery mail
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    SMTP_FROM: str = "Zee Ordering <no-reply@example.com>"

    # spreadsheet import
    GOOGLE_SERVICE_ACCOUNT_JSON: str = ""
    GOOGLE_SERVICE_ACCOUNT_JSON_BASE64: str = ""
    GOOGLE_SHEETS_SPREADSHEET_ID: str = ""
    GOOGLE_SHEETS_RANGE: str = "Products!A1:Z"
    IMPORT_BATCH_SIZE: int = 250

    # files and order sheets
    PUBLIC_DIR: str = "./public"
    EXPORT_ITEMS_PER_PAGE: int = 12
    BRAND_NAME: str = "Zee Ordering"
    ORDER_REF_PREFIX: str = "ZeeReOrder"
    CURRENCY: str = "INR"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def auth_configured(self) -> bool:
        return bool(self.ADMIN_EMAIL and self.ADMIN_PASSWORD)

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USER and self.SMTP_PASS)

    @property
    def sheets_configured(self) -> bool:
        return bool(
            self.GOOGLE_SERVICE_ACCOUNT_JSON or self.GOOGLE_SERVICE_ACCOUNT_JSON_BASE64
        )


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency; tests override it with a patched copy."""
    return settings
