"""Environment-driven settings."""

from navkit.environment.settings import NavSettings, RuntimeEnvironment, load_settings

__all__ = ["NavSettings", "RuntimeEnvironment", "load_settings"]
