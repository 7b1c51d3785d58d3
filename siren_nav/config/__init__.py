"""
Configuration module for navigation profiles.

Provides:
- YAML profile loading with environment variable substitution
- Declarative step definitions shared with the CLI
"""

from .loader import ConfigLoader, load_profile, substitute_env_vars
from .profile import NavigationProfile, StepSpec, apply_step, build_navigation

__all__ = [
    "ConfigLoader",
    "load_profile",
    "substitute_env_vars",
    "NavigationProfile",
    "StepSpec",
    "apply_step",
    "build_navigation",
]
