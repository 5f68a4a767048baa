import socket

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    APP_NAME: str = "Pooled Users Service"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    # Server identifier shown in the greeting; container runtimes set HOSTNAME
    HOSTNAME: str = Field(default_factory=socket.gethostname)
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False  # echoes SQL when True

    # Database (defaults match a local docker-compose Postgres)
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "svc_user"
    DB_PASSWORD: str = "svc_pass"
    DB_NAME: str = "users_service"
    DB_POOL_SIZE: int = Field(default=10, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=0, ge=0)
    DB_IDLE_TIMEOUT_SECONDS: int = Field(default=60, ge=1)
    STORE_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    CACHE_TTL_SECONDS: int = Field(default=10, ge=1)
    CACHE_SINGLE_FLIGHT: bool = False

    @property
    def database_url(self) -> URL:
        return URL.create(
            "postgresql+asyncpg",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

    @property
    def redis_url(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"


settings = Settings()
