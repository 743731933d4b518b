"""Configuration management for the Gemini chat client."""

import logging
import os
from typing import Any

import yaml
from dotenv import load_dotenv

from .http_transport import HttpConfig, create_http_config_from_dict

DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")


class Configuration:
    """Manages configuration and environment variables for the client."""

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize configuration from YAML and environment variables.

        Args:
            config_path: Optional YAML file; defaults to the packaged config.yaml.
        """
        self.load_env()  # Load .env for API keys
        self.config_path = config_path or os.path.join(
            os.path.dirname(__file__), "config.yaml"
        )
        self._config = self._load_yaml_config()

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path) as file:
            return yaml.safe_load(file) or {}

    @property
    def gemini_api_key(self) -> str:
        """Get the Gemini API key.

        Environment variables win over the YAML ``llm.api_key`` entry.

        Returns:
            The API key as a string.

        Raises:
            ValueError: If no API key is configured anywhere.
        """
        for env_key in API_KEY_ENV_VARS:
            api_key = os.getenv(env_key)
            if api_key:
                return api_key

        api_key = self.get_llm_config().get("api_key")
        if not api_key:
            raise ValueError(
                f"API key not found: set one of {', '.join(API_KEY_ENV_VARS)} "
                "or llm.api_key in the configuration file"
            )
        return api_key

    def get_config_dict(self) -> dict[str, Any]:
        """Get the full configuration dictionary."""
        return self._config

    def get_llm_config(self) -> dict[str, Any]:
        """Get the model and endpoint configuration.

        Returns:
            LLM configuration dictionary.
        """
        return self._config.get("llm", {}) or {}

    def get_http_config(self) -> HttpConfig:
        """Get HTTP client settings as a validated HttpConfig."""
        return create_http_config_from_dict(self._config)

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration from YAML.

        Returns:
            Logging configuration dictionary.
        """
        return self._config.get("logging", {}) or {}


def setup_logging(config: Configuration) -> None:
    """Configure root logging from the ``logging`` section."""
    logging_config = config.get_logging_config()
    level = str(logging_config.get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=logging_config.get("format", DEFAULT_LOG_FORMAT),
    )
