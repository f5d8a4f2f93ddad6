"""Configuration models with Pydantic validation."""

from sheafy.domain.config.app import AppConfig
from sheafy.domain.config.sheafy import DEFAULT_BUNDLE_NAME, SheafyConfig

__all__ = [
    "AppConfig",
    "SheafyConfig",
    "DEFAULT_BUNDLE_NAME",
]
