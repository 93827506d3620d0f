"""
Settings for the wasignup onboarding service.

Simple, reliable environment variable configuration for the WhatsApp embedded
signup backend. Values are read once when the process starts.
"""

import os
import tomllib
from pathlib import Path

from dotenv import load_dotenv

# Load .env file for local development - look in current working directory
load_dotenv(".env")


def _get_version_from_pyproject() -> str:
    """
    Read version from pyproject.toml file.

    Returns:
        Version string from pyproject.toml, or fallback version
    """
    current_path = Path(__file__)
    for parent in [current_path.parent, *current_path.parents]:
        pyproject_path = parent / "pyproject.toml"
        if pyproject_path.exists():
            try:
                with open(pyproject_path, "rb") as f:
                    pyproject_data = tomllib.load(f)
                    version = pyproject_data.get("project", {}).get("version")
                    if version:
                        return version
            except (OSError, tomllib.TOMLDecodeError):
                continue

    return "0.1.0"


def _get_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _get_list(name: str) -> list[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """Application settings with environment-based configuration."""

    def __init__(self):
        # ================================================================
        # Version & Environment
        # ================================================================
        self.version: str = _get_version_from_pyproject()
        self.port: int = int(os.getenv("PORT", "8081"))
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.log_dir: str = os.getenv("LOG_DIR", "./logs")
        self.environment: str = os.getenv("ENVIRONMENT", "DEV")

        # ================================================================
        # Graph API Configuration
        # ================================================================
        self.api_version: str = os.getenv("API_VERSION", "v23.0")
        self.base_url: str = os.getenv("BASE_URL", "https://graph.facebook.com/")
        self.http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "15"))
        self.http_connect_timeout: float = float(
            os.getenv("HTTP_CONNECT_TIMEOUT", "10")
        )
        self.http_keepalive: float = float(os.getenv("HTTP_KEEPALIVE", "30"))

        # ================================================================
        # Facebook App / OAuth
        # ================================================================
        self.facebook_app_id: str = os.getenv("FACEBOOK_APP_ID", "")
        self.facebook_app_secret: str = os.getenv("FACEBOOK_APP_SECRET", "")
        # Redirect used for token exchange when the request carries none
        self.facebook_redirect_uri: str = os.getenv("FACEBOOK_REDIRECT_URI", "")

        # ================================================================
        # Webhooks
        # ================================================================
        self.webhook_verify_token: str = os.getenv("WEBHOOK_VERIFY_TOKEN", "")
        # Must match the callback registered in the Meta app dashboard
        self.webhook_callback_url: str = os.getenv("WEBHOOK_CALLBACK_URL", "")

        # ================================================================
        # HTTP API
        # ================================================================
        self.client_url: str = os.getenv("CLIENT_URL", "http://localhost:3001")
        self.allowed_origins: list[str] = [
            self.client_url,
            *_get_list("ALLOWED_ORIGINS"),
        ]
        self.onboarding_timeout: float = float(os.getenv("ONBOARDING_TIMEOUT", "60"))

        # Returning the raw token to the frontend is off unless asked for
        self.expose_full_token: bool = _get_bool("EXPOSE_FULL_TOKEN")

        self._validate_settings()

    def _validate_settings(self):
        """Validate settings values."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.log_level.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        self.log_level = self.log_level.upper()

        valid_environments = ["DEV", "PROD"]
        if self.environment.upper() not in valid_environments:
            self.environment = "DEV"
        self.environment = self.environment.upper()

        if self.http_timeout <= 0 or self.onboarding_timeout <= 0:
            raise ValueError("HTTP_TIMEOUT and ONBOARDING_TIMEOUT must be positive")

    def validate_platform_credentials(self):
        """Validate the credentials required to talk to the Graph API."""
        if not self.facebook_app_id:
            raise ValueError("FACEBOOK_APP_ID is required")
        if not self.facebook_app_secret:
            raise ValueError("FACEBOOK_APP_SECRET is required")

    @property
    def has_webhook_callback(self) -> bool:
        return bool(self.webhook_callback_url)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "DEV"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "PROD"


# Process-wide settings, loaded once at import
settings = Settings()
