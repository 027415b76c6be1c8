from typing import List, Literal, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.platform.constant.path import ENV_EXAMPLE_FILE, ENV_FILE


_ENV_FILE = ENV_FILE if ENV_FILE.exists() else ENV_EXAMPLE_FILE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Event Catalog Service'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Logging
    LOG_LEVEL: Optional[str] = None  # defaults to DEBUG when DEBUG else INFO
    LOG_JSON: bool = False  # serialized stdout records for the log collector

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # Database
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'catalog'
    POSTGRES_PASSWORD: SecretStr = SecretStr('catalog')
    POSTGRES_DB: str = 'event_catalog'
    POSTGRES_REPLICA_SERVER: Optional[str] = None
    POSTGRES_REPLICA_PORT: Optional[int] = None
    DATABASE_URL: Optional[str] = None  # Full override, e.g. sqlite+aiosqlite:///./catalog.db

    DB_POOL_SIZE_WRITE: int = 5
    DB_POOL_SIZE_READ: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_POOL_PRE_PING: bool = True
    DB_CREATE_TABLES_ON_STARTUP: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    @property
    def DATABASE_READ_URL_ASYNC(self) -> str:
        if self.DATABASE_URL or not self.POSTGRES_REPLICA_SERVER:
            return self.DATABASE_URL_ASYNC
        password = self.POSTGRES_PASSWORD.get_secret_value()
        port = self.POSTGRES_REPLICA_PORT or self.POSTGRES_PORT
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_REPLICA_SERVER}:{port}/{self.POSTGRES_DB}'

    # Security (bearer tokens issued by the identity provider)
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'
    JWT_ISSUER_URI: Optional[str] = None  # e.g. https://idp.example.com/realms/catalog
    JWT_AUDIENCE: Optional[str] = None
    ADMIN_SCOPE: str = 'admin'

    # Blob store (event images)
    BLOB_STORE_BACKEND: Literal['gcs', 'local'] = 'gcs'
    GCP_STORAGE_BUCKET_NAME: str = 'event-catalog-images'
    GCS_ENDPOINT: str = 'https://storage.googleapis.com'
    GCS_ACCESS_TOKEN: Optional[SecretStr] = None
    BLOB_UPLOAD_TIMEOUT_SECONDS: float = 30.0
    BLOB_LOCAL_DIR: str = 'blob_store'

    # Resilient read path
    READ_TIMEOUT_SECONDS: float = 5.0
    READ_RETRY_MAX_ATTEMPTS: int = 3
    READ_RETRY_WAIT_SECONDS: float = 0.5
    READ_RETRY_BACKOFF_MULTIPLIER: float = 2.0
    READ_RETRY_MAX_WAIT_SECONDS: float = 5.0

    CB_FAILURE_RATE_THRESHOLD: float = 50.0  # percent
    CB_SLIDING_WINDOW_SIZE: int = 10
    CB_MINIMUM_CALLS: int = 5
    CB_WAIT_DURATION_OPEN_SECONDS: float = 10.0
    CB_PERMITTED_CALLS_HALF_OPEN: int = 3

    # Write path
    WRITE_DEADLINE_SECONDS: float = 30.0

    # Paging
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100


settings = Settings()  # type: ignore
