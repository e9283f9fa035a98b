# dashboard_api/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_DB: str = "transactions_db"
    POSTGRES_HOST: str = "localhost" # 'db' inside docker compose
    POSTGRES_PORT: str = "5432"

    DATABASE_URL: Optional[str] = None

    API_PREFIX: str = "/api/v1"

    # Third-party product list used by /seed-data. A local JSON file path also works.
    SEED_SOURCE_URL: str = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"
    SEED_REQUEST_TIMEOUT_SECONDS: float = 10.0

    COMBINED_DATA_TIMEOUT_SECONDS: float = 10.0

    CORS_ALLOW_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env")

    def get_database_url(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    def get_cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ALLOW_ORIGINS.split(",") if origin.strip()]

settings = Settings()
