"""
Application configuration management
"""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import field_validator


INSECURE_JWT_SECRET = "landing-analytics-dev-secret-change-me"
INSECURE_ADMIN_PASSWORD = "admin123"


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "landing-analytics-api"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./landing_analytics.db"

    @field_validator('DATABASE_URL')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if v.startswith('postgresql://'):
            v = v.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return v
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_ECHO: bool = False

    # JWT
    JWT_SECRET: str = INSECURE_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = 24

    # Admin
    ADMIN_PASSWORD: str = INSECURE_ADMIN_PASSWORD

    # CORS (comma-separated)
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"
    CORS_ALLOW_METHODS: str = "GET,POST,DELETE,OPTIONS"
    CORS_ALLOW_HEADERS: str = "Content-Type,Authorization,fbc,fbp,ttclid,X-GA-Client-ID"

    # Geolocation
    GEOIP_URL: str = "http://ip-api.com/json/{ip}"
    GEOIP_TIMEOUT_SECONDS: float = 3.0

    # Ad platforms
    AD_PLATFORM_TIMEOUT_SECONDS: float = 10.0
    DISPATCH_MAX_PENDING: int = 100
    FACEBOOK_GRAPH_VERSION: str = "v23.0"
    GA4_COLLECT_URL: str = "https://www.google-analytics.com/mp/collect"
    TIKTOK_EVENTS_URL: str = "https://business-api.tiktok.com/open_api/v1.3/pixel/track/"

    # Monitoring
    PROMETHEUS_ENABLED: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    @staticmethod
    def _split(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def cors_origins(self) -> List[str]:
        return self._split(self.CORS_ORIGINS)

    @property
    def cors_allow_methods(self) -> List[str]:
        return self._split(self.CORS_ALLOW_METHODS)

    @property
    def cors_allow_headers(self) -> List[str]:
        return self._split(self.CORS_ALLOW_HEADERS)

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        return self.APP_ENV == "testing"

    def insecure_defaults(self) -> List[str]:
        """Names of secrets still set to their built-in development values"""
        insecure = []
        if self.JWT_SECRET == INSECURE_JWT_SECRET:
            insecure.append("JWT_SECRET")
        if self.ADMIN_PASSWORD == INSECURE_ADMIN_PASSWORD:
            insecure.append("ADMIN_PASSWORD")
        return insecure

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Create global settings instance
settings = Settings()
