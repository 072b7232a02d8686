"""
Custom exception hierarchy for monomegrid.

## Exception Hierarchy

```
MonomeGridError (base)
├── DeviceError              one pad could not be set (device, x, y, task, cause)
├── ConnectionClosedError    I/O on a closed connection
├── ReadError                reading a frame failed
├── CloseError               releasing the USB handle failed
├── AggregateError           a batch operation collected several failures
├── USBAccessError           the USB bus is not accessible
├── EndpointOpenError        a bulk endpoint could not be opened
├── UnknownDeviceError       the generation probe was not recognized
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

All custom exceptions inherit from `MonomeGridError`, which provides
`user_message`, `technical_message`, `recoverable` and `recovery_hint`.

### Example: relabeling a pad failure

```python
try:
    device.switch(x, y, True)
except DeviceError as e:
    raise e.with_task(f"switch on {x}/{y} to print letter 'a'") from e
```

See `monomegrid.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .base import MonomeGridError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import (
    AggregateError,
    CloseError,
    ConnectionClosedError,
    DeviceError,
    ReadError,
)
from .handlers import (
    ErrorCollector,
    ErrorContext,
    collect_errors,
    format_error_for_display,
    wrap_pydantic_error,
)
from .usb import EndpointOpenError, UnknownDeviceError, USBAccessError

__all__ = [
    # Device
    "AggregateError",
    "CloseError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    "ConnectionClosedError",
    "DeviceError",
    # USB
    "EndpointOpenError",
    # Handlers
    "ErrorCollector",
    "ErrorContext",
    # Base
    "MonomeGridError",
    "ReadError",
    "USBAccessError",
    "UnknownDeviceError",
    "collect_errors",
    "format_error_for_display",
    "wrap_pydantic_error",
]
