"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field

from monomegrid.devices.options import ConnectionOptions

from .persistence import PydanticPersistence

CONFIG_DIR = Path.home() / ".monomegrid"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.json"


class GridConfig(BaseModel):
    """Application configuration and settings."""

    connection: ConnectionOptions = Field(
        default_factory=ConnectionOptions,
        description="Options used when connecting to the grids",
    )

    row_name: str = Field(
        default="monome row",
        min_length=1,
        description="Base name of the row device combining all connected grids",
    )

    # Text rendering
    marquee_delay: float = Field(
        default=0.08,
        gt=0,
        description="Seconds per column when scrolling text",
    )
    print_delay: float = Field(
        default=0.5,
        gt=0,
        description="Seconds each letter is shown when printing text",
    )

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "GridConfig":
        """
        Load config from file or return the defaults.

        Args:
            path: Path to config file. If None, uses the default location
                  (~/.monomegrid/config.json).

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH
        return PydanticPersistence.load_json_or_default(path, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        PydanticPersistence.save_json(self, path or DEFAULT_CONFIG_PATH)
