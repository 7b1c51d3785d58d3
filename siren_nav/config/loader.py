"""
YAML configuration loader for navigation profiles.

Loads profile definitions from YAML files with:
- Environment variable substitution (for tokens and hosts)
- Validation of step definitions
"""

import os
import re
from pathlib import Path
from typing import Optional

import yaml
import structlog

from siren_nav.core.errors import ConfigError

from .profile import NavigationProfile

logger = structlog.get_logger(__name__)


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variables in text.

    Supports formats:
    - ${VAR_NAME} - required, empty string (and a warning) if missing
    - ${VAR_NAME:-default} - optional with default

    Args:
        text: Text with env var placeholders

    Returns:
        Text with substituted values
    """
    def replace(match):
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)
        else:
            value = os.getenv(var_expr)
            if value is None:
                logger.warning("env_var_not_set", var=var_expr)
                return ""
            return value

    return re.sub(r"\$\{([^}]+)\}", replace, text)


class ConfigLoader:
    """
    Loader for navigation profile files.

    Usage:
        loader = ConfigLoader("/etc/siren-nav")
        profile = loader.load_profile("navigations.yml", "first-order")
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files (defaults to cwd)
        """
        self.config_dir = Path(config_dir) if config_dir else Path.cwd()

    def load_file(self, filename: str) -> dict:
        """
        Load YAML config file.

        Args:
            filename: Config file name (relative to config_dir)

        Returns:
            Parsed config dict
        """
        filepath = self.config_dir / filename

        if not filepath.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        logger.info("loading_config", file=str(filepath))

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()

        content = substitute_env_vars(content)

        try:
            config = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {filepath}: {e}") from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError(f"Top level of {filepath} must be a mapping")
        return config

    def load_profiles(self, filename: str = "navigations.yml") -> list[NavigationProfile]:
        """
        Load all navigation profiles from a file.

        Raises:
            ConfigError: If any profile is invalid
        """
        config = self.load_file(filename)

        profiles = []
        for data in config.get("navigations") or []:
            if not isinstance(data, dict):
                raise ConfigError(f"Navigation must be a mapping, got: {data!r}")
            profile = NavigationProfile.from_dict(data)
            profiles.append(profile)
            logger.debug("profile_loaded", name=profile.name, steps=len(profile.steps))

        return profiles

    def load_profile(self, filename: str, name: str) -> NavigationProfile:
        """Load one named profile."""
        for profile in self.load_profiles(filename):
            if profile.name == name:
                return profile
        raise ConfigError(f"No navigation named '{name}' in {filename}")


def load_profile(config_path: str, name: str) -> NavigationProfile:
    """
    Convenience function to load one profile from a file path.

    Args:
        config_path: Path to the YAML file
        name: Navigation name

    Returns:
        NavigationProfile
    """
    path = Path(config_path)
    loader = ConfigLoader(str(path.parent))
    return loader.load_profile(path.name, name)
