"""
Configuration Management Module

This module handles all application configuration using environment variables
with sensible defaults. It follows the 12-factor app methodology for configuration.

Usage:
    from supportdesk.config import settings
    print(settings.cache.ttl_seconds)

Environment variables are loaded from .env file (if present) and can be
overridden by system environment variables.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
# This should be called before accessing any environment variables
load_dotenv()


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

RESPONDER_BACKENDS = ("auto", "openai", "huggingface", "none")


def get_env(key: str, default: str = "", required: bool = False) -> str:
    """
    Get an environment variable with optional default and validation.

    Args:
        key: The environment variable name
        default: Default value if not set
        required: If True, raises ValueError when not set

    Returns:
        The environment variable value or default

    Raises:
        ValueError: If required=True and the variable is not set
    """
    value = os.getenv(key, default)
    if required and not value:
        raise ValueError(f"Required environment variable '{key}' is not set")
    return value


def get_env_int(key: str, default: int) -> int:
    """Get an environment variable as integer."""
    return int(get_env(key, str(default)))


def get_env_float(key: str, default: float) -> float:
    """Get an environment variable as float."""
    return float(get_env(key, str(default)))


def get_env_bool(key: str, default: bool) -> bool:
    """Get an environment variable as boolean."""
    value = get_env(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def get_env_list(key: str, default: str) -> List[str]:
    """Get a comma separated environment variable as a list of strings."""
    return [item.strip() for item in get_env(key, default).split(",") if item.strip()]


@dataclass
class SourceConfig:
    """
    Live knowledge source configuration.

    Attributes:
        warranty_url: Page the warranty knowledge text is scraped from
        products_url: Page the featured products list is scraped from
        timeout_seconds: Hard timeout for a single live fetch
        user_agent: User-Agent header sent with live fetches
        enabled: When false, live topics are served from their fallback files only
    """
    warranty_url: str = field(default_factory=lambda: get_env(
        "WARRANTY_SOURCE_URL", "https://www.samsung.com/uk/support/warranty/"))
    products_url: str = field(default_factory=lambda: get_env(
        "PRODUCTS_SOURCE_URL", "https://www.samsung.com/uk/"))
    timeout_seconds: float = field(default_factory=lambda: get_env_float("SOURCE_TIMEOUT_SECONDS", 10.0))
    user_agent: str = field(default_factory=lambda: get_env("SOURCE_USER_AGENT", DEFAULT_USER_AGENT))
    enabled: bool = field(default_factory=lambda: get_env_bool("LIVE_SOURCES_ENABLED", True))

    def validate(self) -> bool:
        """Validate live source settings."""
        if self.timeout_seconds <= 0:
            raise ValueError("SOURCE_TIMEOUT_SECONDS must be positive")
        return True


@dataclass
class CacheConfig:
    """
    Knowledge source cache configuration.

    Attributes:
        ttl_seconds: Maximum age of a cached knowledge text
    """
    ttl_seconds: float = field(default_factory=lambda: get_env_float("KNOWLEDGE_CACHE_TTL_SECONDS", 3600.0))

    def validate(self) -> bool:
        """Validate cache settings."""
        if self.ttl_seconds <= 0:
            raise ValueError("KNOWLEDGE_CACHE_TTL_SECONDS must be positive")
        return True


@dataclass
class DataConfig:
    """
    Static corpus configuration.

    Attributes:
        directory: Directory holding one <topic>.txt file per topic
    """
    directory: str = field(default_factory=lambda: get_env("KNOWLEDGE_DATA_DIR", "./data"))

    @property
    def path(self) -> Path:
        """Get the data directory as a Path object."""
        return Path(self.directory)


@dataclass
class ResponderConfig:
    """
    Optional generative responder configuration.

    Attributes:
        backend: auto, openai, huggingface or none
        openai_api_key: OpenAI API key
        openai_model: Chat model name
        openai_url: Chat completions endpoint
        huggingface_api_key: Optional Hugging Face token (raises rate limits)
        huggingface_url: Inference API endpoint
        temperature: Sampling temperature
        max_tokens: Maximum tokens in a generated reply
        timeout_seconds: Timeout for a single responder call
    """
    backend: str = field(default_factory=lambda: get_env("RESPONDER_BACKEND", "auto").lower())
    openai_api_key: str = field(default_factory=lambda: get_env("OPENAI_API_KEY"))
    openai_model: str = field(default_factory=lambda: get_env("OPENAI_MODEL", "gpt-3.5-turbo"))
    openai_url: str = field(default_factory=lambda: get_env(
        "OPENAI_CHAT_URL", "https://api.openai.com/v1/chat/completions"))
    huggingface_api_key: str = field(default_factory=lambda: get_env("HUGGING_FACE_API_KEY"))
    huggingface_url: str = field(default_factory=lambda: get_env(
        "HUGGING_FACE_API_URL", "https://api-inference.huggingface.co/models/gpt2"))
    temperature: float = field(default_factory=lambda: get_env_float("RESPONDER_TEMPERATURE", 0.7))
    max_tokens: int = field(default_factory=lambda: get_env_int("RESPONDER_MAX_TOKENS", 500))
    timeout_seconds: float = field(default_factory=lambda: get_env_float("RESPONDER_TIMEOUT_SECONDS", 30.0))

    @property
    def has_openai_key(self) -> bool:
        """True when a real (non placeholder) OpenAI key is configured."""
        return bool(self.openai_api_key) and self.openai_api_key != "your_openai_api_key_here"

    def validate(self) -> bool:
        """Validate responder settings."""
        if self.backend not in RESPONDER_BACKENDS:
            raise ValueError(
                f"RESPONDER_BACKEND must be one of {', '.join(RESPONDER_BACKENDS)}"
            )
        if self.backend == "openai" and not self.has_openai_key:
            raise ValueError("OPENAI_API_KEY is required for the openai backend")
        if self.timeout_seconds <= 0:
            raise ValueError("RESPONDER_TIMEOUT_SECONDS must be positive")
        return True


@dataclass
class LoggingConfig:
    """
    Logging configuration.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        file: Optional log file path
    """
    level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    file: Optional[str] = field(default_factory=lambda: get_env("LOG_FILE") or None)


@dataclass
class Settings:
    """
    Main settings container aggregating all configuration sections.

    Example:
        from supportdesk.config import settings

        ttl = settings.cache.ttl_seconds
        data_dir = settings.data.path
    """
    sources: SourceConfig = field(default_factory=SourceConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    data: DataConfig = field(default_factory=DataConfig)
    responder: ResponderConfig = field(default_factory=ResponderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Application-level settings
    app_env: str = field(default_factory=lambda: get_env("APP_ENV", "development"))
    cors_origins: List[str] = field(default_factory=lambda: get_env_list("CORS_ORIGINS", "http://localhost:3000"))
    rate_limit_requests: int = field(default_factory=lambda: get_env_int("RATE_LIMIT_REQUESTS", 60))
    rate_limit_window: int = field(default_factory=lambda: get_env_int("RATE_LIMIT_WINDOW_SECONDS", 60))

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    def validate_all(self) -> bool:
        """
        Validate all configuration sections.

        Returns:
            True if all validations pass

        Raises:
            ValueError: If any validation fails
        """
        self.sources.validate()
        self.cache.validate()
        self.responder.validate()
        return True


# Singleton settings instance
# Import this in other modules: from supportdesk.config import settings
settings = Settings()
