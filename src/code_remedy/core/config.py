# src/code_remedy/core/config.py

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Define the project root to find the configs directory
try:
    PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent
except Exception:
    PROJECT_ROOT = Path.cwd()

# Checked in order; the first one that is set wins.
API_KEY_ENV_VARS = ("OPEN_AI_SECRET_KEY", "OPENAI_API_KEY")

@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8080

@dataclass
class Config:
    """Main configuration class"""
    config_path: Optional[Path] = None
    api_key: Optional[str] = field(default=None, repr=False)
    api_base: str = "https://api.openai.com/v1"
    timeout: float = 60.0
    max_code_chars: int = 48000
    max_error_chars: int = 8000
    transition_delay: float = 0.3
    server: ServerConfig = field(default_factory=ServerConfig)
    work_dir: Path = field(default_factory=Path.cwd)
    max_file_size: int = 1024 * 1024

    def __post_init__(self):
        """Post-initialization logic to load configs."""
        load_dotenv()

        if self.config_path:
            if not self.config_path.exists():
                raise ConfigurationError(f"Config file not found: {self.config_path}")
            self._load_from_file(self.config_path)
        else:
            config_path = PROJECT_ROOT / "configs/remedy.yaml"
            if not config_path.exists():
                config_path = Path.cwd() / "configs/remedy.yaml"
            if config_path.exists():
                self._load_from_file(config_path)

        self._load_from_env()

    def _load_from_env(self):
        """Load configuration from environment variables."""
        if not self.api_key:
            self.api_key = next((os.getenv(name) for name in API_KEY_ENV_VARS if os.getenv(name)), None)
        if os.getenv("OPENAI_API_BASE"):
            self.api_base = os.environ["OPENAI_API_BASE"]

    def _load_from_file(self, path: Path):
        """Load and validate settings from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing config file {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid config file {path}: expected a mapping at the top level.")

        try:
            self.api_base = str(data.get("api_base", self.api_base))
            self.timeout = float(data.get("timeout", self.timeout))
            self.max_code_chars = int(data.get("max_code_chars", self.max_code_chars))
            self.max_error_chars = int(data.get("max_error_chars", self.max_error_chars))
            self.transition_delay = float(data.get("transition_delay", self.transition_delay))

            server = data.get("server") or {}
            self.server = ServerConfig(
                host=str(server.get("host", self.server.host)),
                port=int(server.get("port", self.server.port)),
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid value in config file {path}: {e}")

        if self.timeout <= 0:
            raise ConfigurationError("'timeout' must be a positive number of seconds.")
        if self.max_code_chars <= 0 or self.max_error_chars <= 0:
            raise ConfigurationError("'max_code_chars' and 'max_error_chars' must be positive.")
        if "://" not in self.api_base:
            self.api_base = f"https://{self.api_base}"

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(
                f"No API key found. Set one of {', '.join(API_KEY_ENV_VARS)} in the environment or .env file."
            )
        return self.api_key
