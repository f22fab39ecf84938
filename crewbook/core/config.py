from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Key/value store – SQLite file for local use, "sqlite://" for in-memory
    STORAGE_URL: str = "sqlite:///./crewbook.db"

    # Error log mirror in the store keeps only the newest entries
    ERROR_LOG_LIMIT: int = 100

    # Transactions above this amount (Rupiah) raise an info alert
    LARGE_TRANSACTION_THRESHOLD: int = 5_000_000

    # Recorded as created_by on new transactions (no auth in this app)
    CURRENT_USER: str = "current-user"

    # Attendance QR codes expire after this many hours
    QR_VALIDITY_HOURS: int = 24

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
