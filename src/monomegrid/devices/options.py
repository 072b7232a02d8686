"""Pydantic-based connection options."""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_VENDOR_ID = 0x0403
DEFAULT_PRODUCT_ID = 0x6001
DEFAULT_POLL_INTERVAL = 0.004


class ConnectionOptions(BaseModel):
    """
    Options used when connecting to grid devices.

    Immutable once created; derive variations with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        gt=0,
        description="Seconds between two reads of the button state",
    )
    settle_delay: float = Field(
        default=1.0,
        ge=0,
        description="Seconds to wait between the probe write and its response",
    )
    read_timeout_ms: int = Field(
        default=20,
        ge=1,
        description="USB read timeout; a timed out read counts as an empty frame",
    )
    write_timeout_ms: int = Field(
        default=1000,
        ge=1,
        description="USB write timeout",
    )
    vendor_id: int = Field(
        default=DEFAULT_VENDOR_ID,
        ge=0,
        le=0xFFFF,
        description="USB vendor id of the grid's serial chip",
    )
    product_id: int = Field(
        default=DEFAULT_PRODUCT_ID,
        ge=0,
        le=0xFFFF,
        description="USB product id of the grid's serial chip",
    )
    flash_on_connect: bool = Field(
        default=False,
        description="Run the worm animation on every newly connected grid",
    )


def poll_interval(seconds: float) -> ConnectionOptions:
    """Shortcut for options that only override the polling cadence."""
    return ConnectionOptions(poll_interval=seconds)
