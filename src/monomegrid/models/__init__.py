"""Configuration models for monomegrid."""

from .config import DEFAULT_CONFIG_PATH, GridConfig
from .persistence import PydanticPersistence

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "GridConfig",
    "PydanticPersistence",
]
