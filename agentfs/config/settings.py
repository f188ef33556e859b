"""
Configuration settings for the application.
"""

import os

from dotenv import load_dotenv

from agentfs.exceptions import ConfigurationError

# Load environment variables from .env file
_ = load_dotenv()

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.openai_model: str = self._get_env("OPENAI_MODEL", "gpt-4o-mini")
        self.openai_api_base: str = self._get_env(
            "OPENAI_API_BASE", "https://api.openai.com/v1"
        )
        self.workspace_root: str = os.path.abspath(
            os.path.expanduser(self._get_env("AGENTFS_WORKSPACE_ROOT", os.getcwd()))
        )
        self.allow_outside_workspace: bool = self._get_bool(
            "AGENTFS_ALLOW_OUTSIDE_WORKSPACE", False
        )
        self.max_undo_history: int = self._get_int(
            "AGENTFS_MAX_UNDO_HISTORY", 50, minimum=0
        )
        self.ignore_file: str = self._get_env("AGENTFS_IGNORE_FILE", ".agentignore")
        self.show_diff: bool = self._get_bool("AGENTFS_SHOW_DIFF", True)
        self.max_retries: int = self._get_int("AGENTFS_MAX_RETRIES", 2, minimum=0)
        self.log_level: str = self._get_env("LOG_LEVEL", "INFO").upper()

    @property
    def openai_api_key(self) -> str:
        """The API key is only required once an LLM adapter is built."""
        return self._get_required_env("OPENAI_API_KEY")

    def _get_required_env(self, key: str) -> str:
        """Get a required environment variable, raise error if missing."""
        value = os.getenv(key)
        if not value:
            raise ConfigurationError(f"Required environment variable {key} is not set")
        return value

    def _get_env(self, key: str, default: str) -> str:
        """Get an environment variable with a default value."""
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int, minimum: int | None = None) -> int:
        """Get an integer environment variable, falling back on bad or too-small values."""
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw.strip())
        except ValueError:
            return default
        if minimum is not None and value < minimum:
            return default
        return value

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get a boolean environment variable ('1', 'true', 'on', ...)."""
        raw = os.getenv(key)
        if raw is None:
            return default
        val = raw.strip().lower()
        if val in _TRUE_VALUES:
            return True
        if val in _FALSE_VALUES:
            return False
        return default


# Global settings instance
settings = Settings()
