"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode
from typing import Annotated, Optional, Dict, Any, List
from enum import Enum
import os

# Later files win: .env.<environment> overrides .env
_ENV_FILES = (".env", f".env.{os.getenv('ENVIRONMENT', 'development').lower()}")


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class DatabaseSettings(BaseSettings):
    """Persistent store configuration"""

    url: str = Field(default="sqlite:///./trekhub.db", description="SQLAlchemy database URL")
    echo: bool = Field(default=False)
    pool_timeout_seconds: int = Field(default=10, ge=1, le=120)
    connect_timeout_seconds: int = Field(default=5, ge=1, le=60)
    statement_timeout_ms: int = Field(default=5000, ge=100, le=120000)

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    model_config = {
        "env_prefix": "DATABASE_",
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class SecuritySettings(BaseSettings):
    """Security and authentication configuration"""

    jwt_secret: str = Field(default="please-change-me")
    jwt_algorithm: str = Field(default="HS256")
    token_expire_minutes: int = Field(default=60, ge=1, le=60 * 24 * 30)
    token_header: str = Field(default="x-auth-token")
    bcrypt_rounds: int = Field(default=12, ge=4, le=16)
    cors_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or list"""
        if isinstance(v, str):
            origin_list = v.split(",")
            return [origin.strip() for origin in origin_list if origin.strip()]
        return v or ["*"]

    model_config = {
        "env_prefix": "SECURITY_",
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class TrekSettings(BaseSettings):
    """Trek listing configuration"""

    default_page_size: int = Field(default=10, ge=1, le=100)
    max_page_size: int = Field(default=100, ge=1, le=1000)

    model_config = {
        "env_prefix": "TREKS_",
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class ClientSettings(BaseSettings):
    """Defaults for the bundled HTTP client"""

    base_url: str = Field(default="http://localhost:5000")
    timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    token_file: Optional[str] = Field(default=None, description="Where the client keeps its token between runs")

    model_config = {
        "env_prefix": "CLIENT_",
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="TrekHub API")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="text", description="json or text")
    log_file: Optional[str] = Field(default=None)

    # Nested Settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    treks: TrekSettings = Field(default_factory=TrekSettings)
    client: ClientSettings = Field(default_factory=ClientSettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
