"""
Configuration module for the PrepChef data layer.

Loads environment variables and reports missing settings.

Missing Supabase credentials are a reportable condition, not a startup crash:
the service still starts and the diagnostics report lists what is missing.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(
        self,
        supabase_url: str | None = None,
        supabase_anon_key: str | None = None,
        environment: str | None = None,
        log_level: str | None = None,
        duplicate_window_ms: int | None = None,
    ) -> None:
        # Supabase Configuration
        self.SUPABASE_URL: str = (
            supabase_url if supabase_url is not None else os.getenv("SUPABASE_URL", "")
        )
        self.SUPABASE_ANON_KEY: str = (
            supabase_anon_key
            if supabase_anon_key is not None
            else os.getenv("SUPABASE_ANON_KEY", "")
        )

        # Application Settings
        self.ENVIRONMENT: str = environment or os.getenv("ENVIRONMENT", "development")
        self.LOG_LEVEL: str = log_level or os.getenv("LOG_LEVEL", "INFO")

        # Window in which an identical save is treated as a duplicate
        self.DUPLICATE_WINDOW_MS: int = (
            duplicate_window_ms
            if duplicate_window_ms is not None
            else _int_env("DUPLICATE_WINDOW_MS", 2000)
        )

    def missing(self) -> List[str]:
        """
        Names of the required settings that are not configured.

        Returns:
            Environment variable names, in a stable order.
        """
        required_settings = {
            "SUPABASE_URL": self.SUPABASE_URL,
            "SUPABASE_ANON_KEY": self.SUPABASE_ANON_KEY,
        }
        return [key for key, value in required_settings.items() if not value]

    def is_configured(self) -> bool:
        """Check that both Supabase secrets are present."""
        return not self.missing()

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"


# Create a singleton instance for the process entry point
settings = Settings()
