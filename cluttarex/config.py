"""
Configuration management for Cluttarex.

Provides a hierarchical configuration system with sensible defaults.
Supports both global (~/.config/cluttarex/config.toml) and local
(cluttarex.toml) configurations.
"""
import os
import tomli
import tomli_w
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field, asdict

from .constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT,
)

OUTPUT_FORMATS = ("json", "text", "markdown", "html")


@dataclass
class CluttarexConfig:
    """
    Cluttarex configuration with sensible defaults.

    Configuration hierarchy (highest to lowest priority):
    1. Command-line arguments
    2. Environment variables (CLUTTAREX_*)
    3. Explicit config file (--config)
    4. Local config file (./cluttarex.toml or ./.cluttarexrc)
    5. User config file (~/.config/cluttarex/config.toml)
    6. System defaults
    """

    # Network settings
    timeout: int = field(default=DEFAULT_REQUEST_TIMEOUT)  # Request timeout in seconds
    user_agent: str = field(default=DEFAULT_USER_AGENT)
    verify_ssl: bool = field(default=True)

    # Server settings
    host: str = field(default=DEFAULT_HOST)
    port: int = field(default=DEFAULT_PORT)

    # Display settings
    output_format: str = field(default="json")  # json, text, markdown, html

    # Extraction
    extra_clutter_selectors: List[str] = field(default_factory=list)
    extra_clutter_phrases: List[str] = field(default_factory=list)

    # Advanced
    log_level: str = field(default="WARNING")

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "CluttarexConfig":
        """
        Load configuration from files and environment.

        Args:
            config_file: Specific config file to load (overrides search)

        Returns:
            Merged configuration object
        """
        config = cls()

        user_config_path = Path.home() / ".config" / "cluttarex" / "config.toml"
        if user_config_path.exists():
            config._merge(cls._load_toml(user_config_path))

        # Only the first local config found is used
        local_paths = [
            Path.cwd() / "cluttarex.toml",
            Path.cwd() / ".cluttarexrc",
        ]

        for path in local_paths:
            if path.exists():
                config._merge(cls._load_toml(path))
                break

        if config_file and config_file.exists():
            config._merge(cls._load_toml(config_file))

        config._apply_env_vars()

        return config

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """Load TOML configuration file."""
        with open(path, "rb") as f:
            return tomli.load(f)

    def _merge(self, data: Dict[str, Any]):
        """Merge configuration data into this instance."""
        for key, value in data.items():
            if hasattr(self, key):
                if isinstance(getattr(self, key), list) and isinstance(value, list):
                    getattr(self, key).extend(v for v in value if v not in getattr(self, key))
                else:
                    setattr(self, key, value)

    def _apply_env_vars(self):
        """Apply environment variables with CLUTTAREX_ prefix."""
        prefix = "CLUTTAREX_"
        for key, value in os.environ.items():
            if key.startswith(prefix):
                config_key = key[len(prefix):].lower()
                if hasattr(self, config_key):
                    self.set_from_string(config_key, value)

    def set_from_string(self, key: str, value: str):
        """
        Set a field from its string form, converting to the field's type.

        Lists are comma separated.

        Raises:
            KeyError: If key is not a configuration field
            ValueError: If value cannot be converted
        """
        if not hasattr(self, key):
            raise KeyError(key)
        current_value = getattr(self, key)
        if isinstance(current_value, bool):
            setattr(self, key, value.lower() in ("true", "1", "yes"))
        elif isinstance(current_value, int):
            setattr(self, key, int(value))
        elif isinstance(current_value, list):
            setattr(self, key, [v.strip() for v in value.split(",") if v.strip()])
        else:
            setattr(self, key, value)

    def save(self, path: Optional[Path] = None):
        """
        Save current configuration to TOML file.

        Args:
            path: Path to save to (defaults to user config)
        """
        if path is None:
            path = Path.home() / ".config" / "cluttarex" / "config.toml"

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            tomli_w.dump(asdict(self), f)


# Global configuration instance
_config: Optional[CluttarexConfig] = None


def get_config(reload: bool = False, config_file: Optional[Path] = None) -> CluttarexConfig:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from files
        config_file: Specific config file to load

    Returns:
        Global configuration instance
    """
    global _config
    if _config is None or reload:
        _config = CluttarexConfig.load(config_file)
    return _config


def init_config(config_file: Optional[Path] = None, **kwargs) -> CluttarexConfig:
    """
    Initialize configuration with command-line overrides.

    Args:
        config_file: Specific config file to load
        **kwargs: Configuration overrides; None values are ignored

    Returns:
        Configured instance
    """
    config = get_config(reload=config_file is not None, config_file=config_file)

    for key, value in kwargs.items():
        if hasattr(config, key) and value is not None:
            setattr(config, key, value)

    return config
