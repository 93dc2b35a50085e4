"""
Configuration management for the track relay.
Handles loading settings from environment variables and .env files.
"""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass
from dotenv import load_dotenv


DEFAULT_CARRIER_URL = "https://www.fedex.com/trackingCal/track"


@dataclass
class RelayConfig:
    """Main configuration class for the track relay."""

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3000
    max_body_bytes: int = 1024 * 1024  # 1 MB
    static_dir: str = "public"

    # === Carrier ===
    carrier_url: str = DEFAULT_CARRIER_URL
    locale: str = "es_MX"
    request_delay_ms: int = 800  # pause between carrier calls
    request_timeout: Optional[float] = None  # seconds, None = aiohttp default

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    @property
    def request_delay_seconds(self) -> float:
        return self.request_delay_ms / 1000

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "RelayConfig":
        """Load configuration from environment variables."""

        # Try to load from .env file
        if env_file:
            load_dotenv(env_file)
        else:
            for env_path in ["config.env", ".env"]:
                if Path(env_path).exists():
                    load_dotenv(env_path)
                    break

        timeout = os.getenv("REQUEST_TIMEOUT", "")

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT") or "3000"),
            max_body_bytes=int(os.getenv("MAX_BODY_BYTES") or str(1024 * 1024)),
            static_dir=os.getenv("STATIC_DIR", "public"),

            carrier_url=os.getenv("FEDEX_TRACK_URL", DEFAULT_CARRIER_URL),
            locale=os.getenv("FEDEX_LOCALE", "es_MX"),
            request_delay_ms=int(os.getenv("REQUEST_DELAY_MS") or "800"),
            request_timeout=float(timeout) if timeout else None,

            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE", ""),
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not 0 < self.port < 65536:
            errors.append(f"PORT must be between 1 and 65535, got {self.port}")
        if self.request_delay_ms < 0:
            errors.append("REQUEST_DELAY_MS cannot be negative")
        if self.max_body_bytes <= 0:
            errors.append("MAX_BODY_BYTES must be positive")
        if self.request_timeout is not None and self.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be positive")
        if not self.carrier_url.startswith(("http://", "https://")):
            errors.append(f"FEDEX_TRACK_URL is not an http(s) URL: {self.carrier_url}")

        return errors


# Global config instance
_config: Optional[RelayConfig] = None


def get_config() -> RelayConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = RelayConfig.from_env()
    return _config


def init_config(env_file: Optional[str] = None) -> RelayConfig:
    """Initialize configuration from environment."""
    global _config
    _config = RelayConfig.from_env(env_file)
    return _config
